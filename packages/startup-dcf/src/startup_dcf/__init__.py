"""
Startup DCF Engine
==================

Pure adoption-curve → P&L → DCF valuation engine with zero external dependencies.

Public API:
- ``sigmoid`` / ``get_scenario_params`` / ``get_annual_projections``: adoption model
- ``AllAssumptions`` / ``DEFAULT_ASSUMPTIONS`` / ``build_assumptions(overrides)``: inputs
- ``project_years`` / ``calculate_fcf``: financial cascade
- ``calculate_npv`` / ``calculate_irr`` / ``calculate_mirr``: discounting and returns
- ``calculate_gordon_growth_tv`` / ``calculate_exit_multiple_tv`` / ``compare_terminal_value_methods``
- ``calculate_dcf(scenario, assumptions)`` / ``project_fcf_all_scenarios(assumptions)``: valuation
"""

from startup_dcf.adoption import (
    BASE_PARAMS,
    DEFAULT_START_YEAR,
    SCENARIO_ORDER,
    SCENARIOS,
    get_annual_projections,
    get_monthly_projections,
    get_revenue_projections,
    get_scenario_params,
    get_sigmoid_value,
    project_units,
    sigmoid,
)
from startup_dcf.assumptions import DEFAULT_ASSUMPTIONS, AllAssumptions, validate_assumptions
from startup_dcf.assumptions_builder import build_assumptions
from startup_dcf.cascade import calculate_fcf, calculate_fcf_series, project_fcf, project_years
from startup_dcf.discounting import (
    calculate_discount_factor,
    calculate_npv,
    calculate_npv_with_effective_date,
    calculate_npv_with_periods,
    calculate_present_value,
)
from startup_dcf.engine import (
    calculate_all_scenarios,
    calculate_dcf,
    get_fcf_component_breakdown,
    project_fcf_all_scenarios,
    project_fcf_by_scenario,
)
from startup_dcf.errors import InputError, UnknownScenarioError
from startup_dcf.irr import (
    calculate_discounted_payback_period,
    calculate_irr,
    calculate_mirr,
    calculate_payback_period,
)
from startup_dcf.terminal import (
    COMPARABLE_COMPANIES,
    calculate_exit_multiple_tv,
    calculate_gordon_growth_tv,
    calculate_implied_growth_rate,
    calculate_implied_multiple,
    calculate_terminal_value,
    compare_terminal_value_methods,
    get_comparable_companies,
    get_comparable_multiple_stats,
    get_terminal_value_breakdown,
)

__all__ = [
    "BASE_PARAMS",
    "COMPARABLE_COMPANIES",
    "DEFAULT_ASSUMPTIONS",
    "DEFAULT_START_YEAR",
    "SCENARIOS",
    "SCENARIO_ORDER",
    "AllAssumptions",
    "InputError",
    "UnknownScenarioError",
    "build_assumptions",
    "calculate_all_scenarios",
    "calculate_dcf",
    "calculate_discount_factor",
    "calculate_discounted_payback_period",
    "calculate_exit_multiple_tv",
    "calculate_fcf",
    "calculate_fcf_series",
    "calculate_gordon_growth_tv",
    "calculate_implied_growth_rate",
    "calculate_implied_multiple",
    "calculate_irr",
    "calculate_mirr",
    "calculate_npv",
    "calculate_npv_with_effective_date",
    "calculate_npv_with_periods",
    "calculate_payback_period",
    "calculate_present_value",
    "calculate_terminal_value",
    "compare_terminal_value_methods",
    "get_annual_projections",
    "get_comparable_companies",
    "get_comparable_multiple_stats",
    "get_fcf_component_breakdown",
    "get_monthly_projections",
    "get_revenue_projections",
    "get_scenario_params",
    "get_sigmoid_value",
    "get_terminal_value_breakdown",
    "project_fcf",
    "project_fcf_all_scenarios",
    "project_fcf_by_scenario",
    "project_units",
    "project_years",
    "sigmoid",
    "validate_assumptions",
]
