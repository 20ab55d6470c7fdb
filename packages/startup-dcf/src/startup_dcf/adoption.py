"""
Adoption Model
==============

Market-adoption forecast for the product launch:

- ``sigmoid``: logistic curve ``L / (1 + e^(-k(x - x0))) + b``
- ``get_scenario_params``: the five named scenarios as adjustments of one
  historically fitted base curve (earlier/steeper for aggressive cases)
- ``project_units``: fixed linear regression from the dimensionless curve
  value to a unit count
- ``get_annual_projections`` / ``get_monthly_projections``: unit forecasts

Negative unit counts are only floored at the annual projection stage; neither
the curve nor the regression is clamped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from math import exp
from types import MappingProxyType
from typing import List, Mapping

from .errors import InputError, UnknownScenarioError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BaseParams:
    L: float  # maximum adoption level
    x0: float  # midpoint year
    k: float  # steepness


@dataclass(frozen=True)
class ScenarioParams:
    x0_shift: float
    k_multiplier: float
    b: float  # vertical offset


@dataclass(frozen=True)
class ResolvedSigmoidParams:
    L: float
    x0: float
    k: float
    b: float


# Fitted on historical adoption data; never mutated.
BASE_PARAMS = BaseParams(L=42.14, x0=2018.97, k=0.48)

SCENARIO_ORDER = ("max", "upside", "base", "downside", "min")

SCENARIOS: Mapping[str, ScenarioParams] = MappingProxyType(
    {
        "max": ScenarioParams(x0_shift=-4, k_multiplier=2.0, b=-3),
        "upside": ScenarioParams(x0_shift=-2, k_multiplier=1.2, b=-2),
        "base": ScenarioParams(x0_shift=0, k_multiplier=1.0, b=-0.66),
        "downside": ScenarioParams(x0_shift=2, k_multiplier=0.8, b=-0.66),
        "min": ScenarioParams(x0_shift=2, k_multiplier=0.25, b=-10.75),
    }
)

SCENARIO_LABELS: Mapping[str, str] = MappingProxyType(
    {
        "max": "Maximum",
        "upside": "Upside",
        "base": "Base",
        "downside": "Downside",
        "min": "Minimum",
    }
)

# Units = slope * sigmoid + intercept
REGRESSION_SLOPE = 571.01
REGRESSION_INTERCEPT = -695.89

DEFAULT_START_YEAR = 2025
MONTHS_PER_YEAR = 12


def sigmoid(x: float, L: float, x0: float, k: float, b: float) -> float:
    exponent = -k * (x - x0)
    # exp() overflows long before the curve stops being representable.
    if exponent > 700:
        return b
    return L / (1.0 + exp(exponent)) + b


def get_scenario_params(
    scenario_name: str,
    *,
    base: BaseParams = BASE_PARAMS,
    scenarios: Mapping[str, ScenarioParams] = SCENARIOS,
) -> ResolvedSigmoidParams:
    """Resolve a named scenario (case-insensitive) against the base curve."""
    scenario = scenarios.get(scenario_name.lower())
    if scenario is None:
        raise UnknownScenarioError(scenario_name, scenarios.keys())

    return ResolvedSigmoidParams(
        L=base.L,
        x0=base.x0 + scenario.x0_shift,
        k=base.k * scenario.k_multiplier,
        b=scenario.b,
    )


def get_sigmoid_value(scenario_name: str, x: float) -> float:
    params = get_scenario_params(scenario_name)
    return sigmoid(x, params.L, params.x0, params.k, params.b)


def project_units(sigmoid_value: float) -> float:
    """Convert a curve value to units. May be negative for low curve values."""
    return REGRESSION_SLOPE * sigmoid_value + REGRESSION_INTERCEPT


def get_annual_projections(scenario: str, start_year: int, years: int) -> List[float]:
    """
    Annual unit forecast for ``years`` consecutive years starting at ``start_year``.

    Each value is the regression output floored at zero.
    """
    if years < 0:
        raise InputError("years must be >= 0")

    params = get_scenario_params(scenario)
    projections: List[float] = []
    for offset in range(years):
        curve_value = sigmoid(start_year + offset, params.L, params.x0, params.k, params.b)
        projections.append(max(0.0, project_units(curve_value)))

    logger.debug("Projected %d years of units for scenario %s from %s", years, scenario, start_year)
    return projections


def get_revenue_projections(scenario: str, start_year: int, years: int, price_per_unit: float = 1000.0) -> List[float]:
    return [units * price_per_unit for units in get_annual_projections(scenario, start_year, years)]


def get_monthly_projections(annual_units: float, monthly_growth_rate: float) -> List[float]:
    """
    Split an annual total into 12 months growing geometrically at
    ``monthly_growth_rate``. The months always sum to ``annual_units``.
    """
    if monthly_growth_rate < -1:
        raise InputError("monthly_growth_rate cannot be less than -100%")

    ratio = 1.0 + monthly_growth_rate
    # Rates too small to move the ratio off 1.0 split evenly.
    if ratio == 1.0:
        return [annual_units / MONTHS_PER_YEAR] * MONTHS_PER_YEAR

    # S = base * (r^12 - 1) / (r - 1)
    first_month = annual_units * (ratio - 1.0) / (ratio**MONTHS_PER_YEAR - 1.0)
    return [first_month * ratio**month for month in range(MONTHS_PER_YEAR)]
