"""
Valuation Engine
================

Orchestrates one scenario end to end:

    adoption curve -> annual units -> financial cascade -> discounting
                   -> terminal value -> enterprise value

API surface area (stable):
- ``calculate_dcf(scenario, assumptions)`` -> ``DCFResult``
- ``calculate_all_scenarios(assumptions)``
- ``project_fcf_by_scenario(scenario, assumptions, projection_years)`` -> ``FCFProjectionResult``
- ``project_fcf_all_scenarios(assumptions, projection_years)`` -> ``FCFScenarioComparison``
- ``get_fcf_component_breakdown(result)``

Every call is a deterministic function of its arguments; nothing is cached or
retained between calls, so scenarios may be evaluated in parallel.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .adoption import DEFAULT_START_YEAR, SCENARIO_LABELS, SCENARIO_ORDER, get_annual_projections
from .assumptions import AllAssumptions, validate_assumptions
from .cascade import CascadeResult, YearlyProjection, project_years
from .errors import InputError
from .terminal import EXIT_MULTIPLE, GORDON_GROWTH, TerminalValueInputs, calculate_terminal_value

logger = logging.getLogger(__name__)

# Order used when presenting DCF results side by side.
DCF_SCENARIO_ORDER = ("min", "downside", "base", "upside", "max")


@dataclass(frozen=True)
class ImpliedMultiples:
    ev_to_revenue: float
    ev_to_ebitda: float


@dataclass(frozen=True)
class DCFResult:
    scenario: str
    projections: Tuple[YearlyProjection, ...]
    terminal_value: float
    terminal_value_pv: float
    terminal_value_method: str
    enterprise_value: float
    equity_value: float  # zero net debt
    implied_multiples: ImpliedMultiples
    assumptions: AllAssumptions


@dataclass(frozen=True)
class FCFProjectionResult:
    scenario: str
    scenario_label: str
    years: Tuple[YearlyProjection, ...]

    total_fcf: float
    total_pv: float
    avg_fcf_margin: float
    fcf_cagr: float

    total_revenue: float
    total_ebitda: float
    total_capex: float
    total_wc_change: float
    total_taxes: float

    fcf_growth_rates: Tuple[float, ...]
    break_even_year: Optional[int]


@dataclass(frozen=True)
class ScenarioSummary:
    scenario: str
    total_fcf: float
    total_pv: float


@dataclass(frozen=True)
class FCFScenarioComparison:
    scenarios: Dict[str, FCFProjectionResult]
    scenario_order: Tuple[str, ...]
    best_case: ScenarioSummary
    worst_case: ScenarioSummary
    base_case: ScenarioSummary


@dataclass(frozen=True)
class FCFComponentBreakdown:
    year: int
    year_label: str
    ebitda: float
    taxes: float
    capex: float
    wc_change: float
    fcf: float


def _run_scenario(
    scenario: str,
    assumptions: AllAssumptions,
    projection_years: Optional[int],
    start_year: int,
) -> CascadeResult:
    validate_assumptions(assumptions)
    years = assumptions.corporate.projection_years if projection_years is None else projection_years
    if years < 1:
        raise InputError("projection_years must be >= 1")

    units = get_annual_projections(scenario, start_year, years)
    return project_years(units, assumptions)


def calculate_dcf(
    scenario: str,
    assumptions: AllAssumptions,
    *,
    terminal_method: str = GORDON_GROWTH,
    exit_multiple: Optional[float] = None,
    projection_years: Optional[int] = None,
    start_year: int = DEFAULT_START_YEAR,
) -> DCFResult:
    """
    Full DCF for one scenario.

    Enterprise value = sum of PV(FCF) + PV(terminal value).  The terminal value
    uses the Gordon Growth model unless ``terminal_method="exit-multiple"``, in
    which case ``exit_multiple`` (or ``assumptions.exit.exit_ebitda_multiple``)
    is applied to final-year EBITDA.
    """
    scenario = scenario.lower()
    cascade = _run_scenario(scenario, assumptions, projection_years, start_year)
    projections = cascade.years
    final_year = projections[-1]
    corporate = assumptions.corporate

    if terminal_method == GORDON_GROWTH:
        tv_inputs = TerminalValueInputs(
            method=GORDON_GROWTH,
            discount_rate=corporate.discount_rate,
            final_year_fcf=final_year.fcf,
            growth_rate=corporate.terminal_growth_rate,
        )
    elif terminal_method == EXIT_MULTIPLE:
        multiple = exit_multiple if exit_multiple is not None else assumptions.exit.exit_ebitda_multiple
        tv_inputs = TerminalValueInputs(
            method=EXIT_MULTIPLE,
            discount_rate=corporate.discount_rate,
            final_year_ebitda=final_year.ebitda,
            exit_multiple=multiple,
        )
    else:
        raise InputError(f"Unknown terminal value method: {terminal_method!r}")

    tv = calculate_terminal_value(tv_inputs, len(projections))
    sum_of_pvs = cascade.totals.cumulative_pv
    enterprise_value = sum_of_pvs + tv.present_value

    implied_multiples = ImpliedMultiples(
        ev_to_revenue=enterprise_value / final_year.revenue if final_year.revenue > 0 else 0.0,
        ev_to_ebitda=enterprise_value / final_year.ebitda if final_year.ebitda > 0 else 0.0,
    )

    logger.debug(
        "DCF %s: EV=%.2f (PV FCF=%.2f, PV TV=%.2f, method=%s)",
        scenario,
        enterprise_value,
        sum_of_pvs,
        tv.present_value,
        terminal_method,
    )

    return DCFResult(
        scenario=scenario,
        projections=projections,
        terminal_value=tv.terminal_value,
        terminal_value_pv=tv.present_value,
        terminal_value_method=terminal_method,
        enterprise_value=enterprise_value,
        equity_value=enterprise_value,
        implied_multiples=implied_multiples,
        assumptions=assumptions,
    )


def calculate_all_scenarios(assumptions: AllAssumptions, **kwargs) -> Dict[str, DCFResult]:
    return {scenario: calculate_dcf(scenario, assumptions, **kwargs) for scenario in DCF_SCENARIO_ORDER}


def _fcf_growth_rates(years: Tuple[YearlyProjection, ...]) -> List[float]:
    rates: List[float] = []
    for previous, current in zip(years, years[1:]):
        if previous.fcf != 0:
            rates.append((current.fcf - previous.fcf) / abs(previous.fcf))
    return rates


def _fcf_cagr(years: Tuple[YearlyProjection, ...]) -> float:
    first_fcf = years[0].fcf
    last_fcf = years[-1].fcf
    if first_fcf > 0 and last_fcf > 0 and len(years) > 1:
        return (last_fcf / first_fcf) ** (1.0 / (len(years) - 1)) - 1.0
    return 0.0


def _break_even_year(years: Tuple[YearlyProjection, ...]) -> Optional[int]:
    for record in years:
        if record.cumulative_fcf > 0:
            return record.year
    return None


def project_fcf_by_scenario(
    scenario: str,
    assumptions: AllAssumptions,
    projection_years: Optional[int] = None,
    start_year: int = DEFAULT_START_YEAR,
) -> FCFProjectionResult:
    """FCF projection for one scenario with component totals and summary metrics."""
    scenario = scenario.lower()
    cascade = _run_scenario(scenario, assumptions, projection_years, start_year)
    years = cascade.years
    totals = cascade.totals

    return FCFProjectionResult(
        scenario=scenario,
        scenario_label=SCENARIO_LABELS.get(scenario, scenario),
        years=years,
        total_fcf=totals.cumulative_fcf,
        total_pv=totals.cumulative_pv,
        avg_fcf_margin=totals.cumulative_fcf / totals.total_revenue * 100.0 if totals.total_revenue > 0 else 0.0,
        fcf_cagr=_fcf_cagr(years),
        total_revenue=totals.total_revenue,
        total_ebitda=totals.total_ebitda,
        total_capex=totals.total_capex,
        total_wc_change=totals.total_wc_change,
        total_taxes=totals.total_taxes,
        fcf_growth_rates=tuple(_fcf_growth_rates(years)),
        break_even_year=_break_even_year(years),
    )


def project_fcf_all_scenarios(
    assumptions: AllAssumptions,
    projection_years: Optional[int] = None,
) -> FCFScenarioComparison:
    scenarios = {
        scenario: project_fcf_by_scenario(scenario, assumptions, projection_years) for scenario in SCENARIO_ORDER
    }

    summaries = [
        ScenarioSummary(scenario=name, total_fcf=result.total_fcf, total_pv=result.total_pv)
        for name, result in scenarios.items()
    ]
    ranked = sorted(summaries, key=lambda s: s.total_fcf, reverse=True)
    base = scenarios["base"]

    logger.debug("Scenario comparison: best=%s worst=%s", ranked[0].scenario, ranked[-1].scenario)

    return FCFScenarioComparison(
        scenarios=scenarios,
        scenario_order=SCENARIO_ORDER,
        best_case=ranked[0],
        worst_case=ranked[-1],
        base_case=ScenarioSummary(scenario="base", total_fcf=base.total_fcf, total_pv=base.total_pv),
    )


def get_fcf_component_breakdown(result: FCFProjectionResult) -> List[FCFComponentBreakdown]:
    """Waterfall rows: cash uses (taxes, CapEx, working-capital build) are negated."""
    return [
        FCFComponentBreakdown(
            year=y.year,
            year_label=y.year_label,
            ebitda=y.ebitda,
            taxes=-y.taxes,
            capex=-y.capex,
            wc_change=-y.working_capital_change,
            fcf=y.fcf,
        )
        for y in result.years
    ]
