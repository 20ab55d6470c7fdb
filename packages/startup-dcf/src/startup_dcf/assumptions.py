"""
Assumptions
===========

Input contract for the financial cascade.  ``AllAssumptions`` is supplied whole
by the caller and is read-only to the engine; use
``startup_dcf.assumptions_builder.build_assumptions`` to derive variants of
``DEFAULT_ASSUMPTIONS``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from math import isfinite

from .errors import InputError


@dataclass(frozen=True)
class RevenueAssumptions:
    price_per_unit: float = 1000.0
    annual_price_increase: float = 0.0
    discount_rate: float = 0.05  # returns / trade discounts off gross revenue


@dataclass(frozen=True)
class COGSAssumptions:
    unit_cost: float = 200.0
    cost_reduction_per_year: float = 0.05  # scale economies
    shipping_per_unit: float = 25.0


@dataclass(frozen=True)
class MarketingAssumptions:
    base_budget: float = 30000.0
    percent_of_revenue: float = 0.15
    cac_target: float = 100.0


@dataclass(frozen=True)
class GNAAssumptions:
    base_headcount: float = 3
    avg_salary: float = 80000.0
    salary_growth_rate: float = 0.03
    benefits_multiplier: float = 1.3
    office_and_ops: float = 50000.0


@dataclass(frozen=True)
class CapitalAssumptions:
    initial_investment: float = 200000.0
    working_capital_percent: float = 0.10
    capex_year1: float = 50000.0
    capex_growth_rate: float = 0.10


@dataclass(frozen=True)
class CorporateAssumptions:
    tax_rate: float = 0.25
    discount_rate: float = 0.12  # WACC
    terminal_growth_rate: float = 0.03
    projection_years: int = 10


@dataclass(frozen=True)
class ExitAssumptions:
    method: str = "exit-multiple"
    exit_ebitda_multiple: float = 8.0
    exit_revenue_multiple: float = 2.0


@dataclass(frozen=True)
class AllAssumptions:
    revenue: RevenueAssumptions = field(default_factory=RevenueAssumptions)
    cogs: COGSAssumptions = field(default_factory=COGSAssumptions)
    marketing: MarketingAssumptions = field(default_factory=MarketingAssumptions)
    gna: GNAAssumptions = field(default_factory=GNAAssumptions)
    capital: CapitalAssumptions = field(default_factory=CapitalAssumptions)
    corporate: CorporateAssumptions = field(default_factory=CorporateAssumptions)
    exit: ExitAssumptions = field(default_factory=ExitAssumptions)
    version: str = "v1.0"


DEFAULT_ASSUMPTIONS = AllAssumptions()

SECTION_NAMES = ("revenue", "cogs", "marketing", "gna", "capital", "corporate", "exit")

TERMINAL_VALUE_METHODS = ("gordon-growth", "exit-multiple")


def validate_assumptions(assumptions: AllAssumptions) -> None:
    """Reject non-finite numbers before they reach the cascade."""
    for section_name in SECTION_NAMES:
        section = getattr(assumptions, section_name)
        for f in fields(section):
            value = getattr(section, f.name)
            if f.name == "method":
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not isfinite(value):
                raise InputError(f"{section_name}.{f.name} must be a finite number")

    corporate = assumptions.corporate
    if not isinstance(corporate.projection_years, int) or corporate.projection_years < 1:
        raise InputError("corporate.projection_years must be a positive integer")
    if not 0.0 <= corporate.tax_rate <= 1.0:
        raise InputError("corporate.tax_rate must be between 0 and 1")
    if assumptions.exit.method not in TERMINAL_VALUE_METHODS:
        raise InputError(
            f"exit.method must be one of {', '.join(TERMINAL_VALUE_METHODS)}, got {assumptions.exit.method!r}"
        )
