"""
API Router: all endpoint definitions for the startup DCF service.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from startup_dcf_service.api.schemas import (
    DCFRequest,
    FCFProjectionRequest,
    IRRRequest,
    MIRRRequest,
    ScenarioComparisonRequest,
    TerminalValueComparisonRequest,
)
from startup_dcf_service.services.valuation import ValuationService
from startup_dcf_service.utils.json import sanitize_for_json

logger = logging.getLogger(__name__)
router = APIRouter()


def _overrides(assumptions):
    return assumptions.model_dump(exclude_unset=True) if assumptions else None


@router.get(
    "/scenarios",
    summary="List Scenarios",
    description="Lists the five adoption scenarios with their sigmoid adjustments.",
)
def list_scenarios():
    service = ValuationService()
    return sanitize_for_json(service.list_scenarios())


@router.get(
    "/adoption/{scenario}/units",
    summary="Project Units",
    description="Annual unit projections from the adoption curve, optionally split into months.",
    response_description="Annual units (and monthly splits when a monthly growth rate is given).",
)
def project_units(
    scenario: str,
    start_year: int = Query(2025, description="First projection year"),
    years: int = Query(6, ge=0, le=50, description="Number of years to project"),
    monthly_growth_rate: Optional[float] = Query(None, description="Month-over-month growth for the monthly split"),
):
    try:
        service = ValuationService()
        result = service.project_units(scenario, start_year, years, monthly_growth_rate)
        return sanitize_for_json(result)
    except ValueError as e:
        logger.warning(f"Bad Request for units ({scenario}): {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Internal Error projecting units for {scenario}: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.get(
    "/assumptions/defaults",
    summary="Default Assumptions",
    description="Returns the canonical default assumption set.",
)
def default_assumptions():
    service = ValuationService()
    return sanitize_for_json(service.get_default_assumptions())


@router.get(
    "/comparables",
    summary="Comparable Companies",
    description="Comparable consumer-hardware companies with EV/EBITDA statistics, optionally filtered.",
)
def comparables(
    sector: Optional[str] = Query(None, description="Case-insensitive sector substring"),
    min_multiple: Optional[float] = Query(None, description="Minimum EV/EBITDA"),
    max_multiple: Optional[float] = Query(None, description="Maximum EV/EBITDA"),
):
    service = ValuationService()
    return sanitize_for_json(service.get_comparables(sector, min_multiple, max_multiple))


@router.post(
    "/valuation/dcf",
    summary="Calculate DCF",
    description="Full DCF for one adoption scenario. Accepts optional assumption overrides.",
    response_description="Yearly projections, terminal value, enterprise value and implied multiples.",
)
def calculate_dcf(request: DCFRequest):
    try:
        service = ValuationService()
        result = service.calculate_dcf(
            request.scenario,
            _overrides(request.assumptions),
            terminal_method=request.terminal_method,
            exit_multiple=request.exit_multiple,
            projection_years=request.projection_years,
        )
        return sanitize_for_json(result)
    except ValueError as e:
        logger.warning(f"Bad Request for {request.scenario}: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Internal Error valuing {request.scenario}: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.post(
    "/valuation/fcf-projection",
    summary="Project Free Cash Flow",
    description="FCF projection for one scenario with totals, growth rates and a component waterfall.",
)
def project_fcf(request: FCFProjectionRequest):
    try:
        service = ValuationService()
        result = service.project_fcf(request.scenario, _overrides(request.assumptions), request.projection_years)
        return sanitize_for_json(result)
    except ValueError as e:
        logger.warning(f"Bad Request for FCF projection ({request.scenario}): {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Internal Error projecting FCF for {request.scenario}: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.post(
    "/valuation/scenarios",
    summary="Compare Scenarios",
    description="Projects FCF for all five scenarios and reports best, worst and base cases.",
)
def compare_scenarios(request: ScenarioComparisonRequest):
    try:
        service = ValuationService()
        result = service.compare_scenarios(_overrides(request.assumptions), request.projection_years)
        return sanitize_for_json(result)
    except ValueError as e:
        logger.warning(f"Bad Request for scenario comparison: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Internal Error comparing scenarios: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.post(
    "/returns/irr",
    summary="Internal Rate of Return",
    description="Newton-Raphson IRR with bisection fallback. Non-convergence is reported, not raised.",
)
def calculate_irr(request: IRRRequest):
    try:
        service = ValuationService()
        return sanitize_for_json(service.calculate_irr(request.cash_flows, request.initial_guess))
    except ValueError as e:
        logger.warning(f"Bad Request for IRR: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Internal Error calculating IRR: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.post(
    "/returns/mirr",
    summary="Modified Internal Rate of Return",
)
def calculate_mirr(request: MIRRRequest):
    try:
        service = ValuationService()
        result = service.calculate_mirr(request.cash_flows, request.finance_rate, request.reinvest_rate)
        return sanitize_for_json(result)
    except ValueError as e:
        logger.warning(f"Bad Request for MIRR: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Internal Error calculating MIRR: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.post(
    "/terminal-value/compare",
    summary="Compare Terminal Value Methods",
    description="Gordon Growth vs Exit Multiple side by side, with implied multiple and implied growth.",
)
def compare_terminal_values(request: TerminalValueComparisonRequest):
    try:
        service = ValuationService()
        return sanitize_for_json(service.compare_terminal_values(**request.model_dump()))
    except ValueError as e:
        logger.warning(f"Bad Request for terminal value comparison: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Internal Error comparing terminal values: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")
