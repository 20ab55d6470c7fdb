"""
Valuation Service
=================

Thin orchestration layer: prepare ``AllAssumptions`` via the shared
``build_assumptions`` builder, run the engine, and return plain dicts.

All input-preparation and computation logic lives in **startup_dcf** so
there is exactly one source of truth.
"""

import logging
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from startup_dcf import (
    DEFAULT_ASSUMPTIONS,
    SCENARIO_ORDER,
    AllAssumptions,
    build_assumptions,
    calculate_dcf,
    calculate_irr,
    calculate_mirr,
    compare_terminal_value_methods,
    get_annual_projections,
    get_comparable_companies,
    get_comparable_multiple_stats,
    get_fcf_component_breakdown,
    get_monthly_projections,
    get_scenario_params,
    project_fcf_all_scenarios,
    project_fcf_by_scenario,
)

logger = logging.getLogger(__name__)


class ValuationService:
    def __init__(self, base_assumptions: AllAssumptions = DEFAULT_ASSUMPTIONS):
        self.base_assumptions = base_assumptions

    def _assumptions(self, overrides: Optional[Dict[str, Any]]) -> AllAssumptions:
        return build_assumptions(overrides, base=self.base_assumptions)

    def get_default_assumptions(self) -> Dict[str, Any]:
        return asdict(self.base_assumptions)

    def list_scenarios(self) -> List[Dict[str, Any]]:
        return [{"name": name, **asdict(get_scenario_params(name))} for name in SCENARIO_ORDER]

    def project_units(
        self,
        scenario: str,
        start_year: int,
        years: int,
        monthly_growth_rate: Optional[float] = None,
    ) -> Dict[str, Any]:
        annual = get_annual_projections(scenario, start_year, years)
        result: Dict[str, Any] = {
            "scenario": scenario,
            "start_year": start_year,
            "annual_units": annual,
        }
        if monthly_growth_rate is not None:
            result["monthly_units"] = [get_monthly_projections(units, monthly_growth_rate) for units in annual]
        return result

    def calculate_dcf(
        self,
        scenario: str,
        assumptions: Optional[Dict[str, Any]] = None,
        terminal_method: str = "gordon-growth",
        exit_multiple: Optional[float] = None,
        projection_years: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Orchestrates a single-scenario valuation.

        1. Merge overrides over the base assumptions (validated).
        2. Run the engine.
        3. Return results as a dict (API-friendly).
        """
        inputs = self._assumptions(assumptions)
        result = calculate_dcf(
            scenario,
            inputs,
            terminal_method=terminal_method,
            exit_multiple=exit_multiple,
            projection_years=projection_years,
        )
        logger.info(f"DCF {scenario} ({terminal_method}): enterprise value {result.enterprise_value:,.0f}")
        return asdict(result)

    def project_fcf(
        self,
        scenario: str,
        assumptions: Optional[Dict[str, Any]] = None,
        projection_years: Optional[int] = None,
    ) -> Dict[str, Any]:
        result = project_fcf_by_scenario(scenario, self._assumptions(assumptions), projection_years)
        output = asdict(result)
        output["component_breakdown"] = [asdict(row) for row in get_fcf_component_breakdown(result)]
        return output

    def compare_scenarios(
        self,
        assumptions: Optional[Dict[str, Any]] = None,
        projection_years: Optional[int] = None,
    ) -> Dict[str, Any]:
        return asdict(project_fcf_all_scenarios(self._assumptions(assumptions), projection_years))

    def calculate_irr(self, cash_flows: List[float], initial_guess: float = 0.10) -> Dict[str, Any]:
        result = calculate_irr(cash_flows, initial_guess)
        if not result.converged:
            logger.info(f"IRR did not converge for {len(cash_flows)} cash flows")
        return asdict(result)

    def calculate_mirr(self, cash_flows: List[float], finance_rate: float, reinvest_rate: float) -> Dict[str, Any]:
        return {"mirr": calculate_mirr(cash_flows, finance_rate, reinvest_rate)}

    def compare_terminal_values(self, **kwargs) -> Dict[str, Any]:
        return asdict(compare_terminal_value_methods(**kwargs))

    def get_comparables(
        self,
        sector: Optional[str] = None,
        min_multiple: Optional[float] = None,
        max_multiple: Optional[float] = None,
    ) -> Dict[str, Any]:
        companies = get_comparable_companies(sector, min_multiple, max_multiple)
        return {
            "companies": [asdict(c) for c in companies],
            "stats": asdict(get_comparable_multiple_stats(companies)),
        }
