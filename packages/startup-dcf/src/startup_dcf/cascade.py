"""
Financial Cascade
=================

Per-year P&L and free-cash-flow build-up from unit sales:

    revenue -> COGS -> gross profit -> marketing, G&A -> EBITDA (= EBIT)
            -> taxes (positive EBIT only) -> NOPAT -> CapEx, working capital -> FCF

    FCF = NOPAT + depreciation - CapEx - change in working capital

Depreciation is modeled as zero.  The only state carried from one year to the
next is the prior working-capital balance and the running totals; it is
threaded through ``project_year`` as an immutable ``CascadeState`` so the
whole projection is a left fold over the unit sequence.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from math import isfinite
from typing import Iterator, List, Sequence, Tuple

from .assumptions import AllAssumptions
from .discounting import calculate_discount_factor
from .errors import InputError

DEPRECIATION = 0.0


@dataclass(frozen=True)
class FCFInputs:
    ebitda: float
    capex: float
    working_capital_change: float  # an increase reduces FCF
    taxes: float


@dataclass(frozen=True)
class FCFResult:
    fcf: float
    inputs: FCFInputs


@dataclass(frozen=True)
class YearlyProjection:
    year: int  # 1-based
    year_label: str

    units: float
    revenue: float  # net of discounts
    cogs: float
    gross_profit: float
    gross_margin_pct: float

    marketing: float
    gna: float

    ebitda: float
    ebitda_margin_pct: float
    depreciation: float
    ebit: float
    ebit_margin_pct: float

    taxes: float
    tax_rate: float
    nopat: float

    capex: float
    working_capital: float
    working_capital_change: float

    fcf: float
    fcf_margin_pct: float

    discount_factor: float
    present_value: float

    cumulative_fcf: float
    cumulative_pv: float


# The per-year record doubles as the FCF projection row.
FCFYearComponents = YearlyProjection


@dataclass(frozen=True)
class CascadeState:
    previous_working_capital: float = 0.0
    cumulative_fcf: float = 0.0
    cumulative_pv: float = 0.0
    total_revenue: float = 0.0
    total_ebitda: float = 0.0
    total_capex: float = 0.0
    total_wc_change: float = 0.0
    total_taxes: float = 0.0


@dataclass(frozen=True)
class CascadeResult:
    years: Tuple[YearlyProjection, ...]
    totals: CascadeState


def calculate_fcf(inputs: FCFInputs) -> FCFResult:
    """FCF = EBITDA - CapEx - change in working capital - taxes."""
    for label, value in (
        ("EBITDA", inputs.ebitda),
        ("CapEx", inputs.capex),
        ("Working capital change", inputs.working_capital_change),
        ("Taxes", inputs.taxes),
    ):
        if not _is_finite_number(value):
            raise InputError(f"{label} must be a valid number")

    fcf = inputs.ebitda - inputs.capex - inputs.working_capital_change - inputs.taxes
    return FCFResult(fcf=fcf, inputs=inputs)


def calculate_fcf_series(period_inputs: Sequence[FCFInputs]) -> List[FCFResult]:
    return [calculate_fcf(inputs) for inputs in period_inputs]


def project_fcf(base_fcf: float, growth_rate: float, years: int) -> List[float]:
    """Compound ``base_fcf`` forward; the first element is already grown once."""
    if years < 1:
        raise InputError("Years must be at least 1")
    if growth_rate < -1:
        raise InputError("Growth rate cannot be less than -100%")
    return [base_fcf * (1.0 + growth_rate) ** year for year in range(1, years + 1)]


def _is_finite_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and isfinite(value)


def _margin_pct(value: float, revenue: float) -> float:
    return value / revenue * 100.0 if revenue > 0 else 0.0


def calculate_cogs(
    units: float, unit_cost: float, shipping_per_unit: float, cost_reduction_per_year: float, year_index: int
) -> float:
    effective_unit_cost = unit_cost * (1.0 - cost_reduction_per_year) ** year_index
    return units * (effective_unit_cost + shipping_per_unit)


def calculate_marketing(net_revenue: float, base_budget: float, percent_of_revenue: float) -> float:
    return base_budget + net_revenue * percent_of_revenue


def calculate_gna(
    base_headcount: float,
    avg_salary: float,
    salary_growth_rate: float,
    benefits_multiplier: float,
    office_and_ops: float,
    year_index: int,
) -> float:
    effective_salary = avg_salary * (1.0 + salary_growth_rate) ** year_index
    return base_headcount * effective_salary * benefits_multiplier + office_and_ops


def calculate_capex(capex_year1: float, capex_growth_rate: float, year_index: int) -> float:
    return capex_year1 * (1.0 + capex_growth_rate) ** year_index


def project_year(
    year_index: int,
    units: float,
    assumptions: AllAssumptions,
    state: CascadeState,
) -> Tuple[YearlyProjection, CascadeState]:
    """One step of the fold: build year ``year_index`` (0-based) and the next state."""
    if not _is_finite_number(units):
        raise InputError(f"units for year {year_index + 1} must be a finite number")

    revenue_a = assumptions.revenue
    cogs_a = assumptions.cogs
    corporate = assumptions.corporate
    capital = assumptions.capital
    year = year_index + 1

    price = revenue_a.price_per_unit * (1.0 + revenue_a.annual_price_increase) ** year_index
    gross_revenue = units * price
    net_revenue = gross_revenue * (1.0 - revenue_a.discount_rate)

    cogs = calculate_cogs(
        units, cogs_a.unit_cost, cogs_a.shipping_per_unit, cogs_a.cost_reduction_per_year, year_index
    )
    gross_profit = net_revenue - cogs

    marketing = calculate_marketing(
        net_revenue, assumptions.marketing.base_budget, assumptions.marketing.percent_of_revenue
    )
    gna = calculate_gna(
        assumptions.gna.base_headcount,
        assumptions.gna.avg_salary,
        assumptions.gna.salary_growth_rate,
        assumptions.gna.benefits_multiplier,
        assumptions.gna.office_and_ops,
        year_index,
    )

    ebitda = gross_profit - marketing - gna
    ebit = ebitda - DEPRECIATION

    # No tax-loss carryforward.
    taxes = ebit * corporate.tax_rate if ebit > 0 else 0.0
    nopat = ebit - taxes

    capex = calculate_capex(capital.capex_year1, capital.capex_growth_rate, year_index)
    working_capital = net_revenue * capital.working_capital_percent
    working_capital_change = working_capital - state.previous_working_capital

    fcf = nopat + DEPRECIATION - capex - working_capital_change

    discount_factor = calculate_discount_factor(corporate.discount_rate, year)
    present_value = fcf * discount_factor

    next_state = replace(
        state,
        previous_working_capital=working_capital,
        cumulative_fcf=state.cumulative_fcf + fcf,
        cumulative_pv=state.cumulative_pv + present_value,
        total_revenue=state.total_revenue + net_revenue,
        total_ebitda=state.total_ebitda + ebitda,
        total_capex=state.total_capex + capex,
        total_wc_change=state.total_wc_change + working_capital_change,
        total_taxes=state.total_taxes + taxes,
    )

    record = YearlyProjection(
        year=year,
        year_label=f"Year {year}",
        units=units,
        revenue=net_revenue,
        cogs=cogs,
        gross_profit=gross_profit,
        gross_margin_pct=_margin_pct(gross_profit, net_revenue),
        marketing=marketing,
        gna=gna,
        ebitda=ebitda,
        ebitda_margin_pct=_margin_pct(ebitda, net_revenue),
        depreciation=DEPRECIATION,
        ebit=ebit,
        ebit_margin_pct=_margin_pct(ebit, net_revenue),
        taxes=taxes,
        tax_rate=corporate.tax_rate,
        nopat=nopat,
        capex=capex,
        working_capital=working_capital,
        working_capital_change=working_capital_change,
        fcf=fcf,
        fcf_margin_pct=_margin_pct(fcf, net_revenue),
        discount_factor=discount_factor,
        present_value=present_value,
        cumulative_fcf=next_state.cumulative_fcf,
        cumulative_pv=next_state.cumulative_pv,
    )
    return record, next_state


def iter_years(units_by_year: Sequence[float], assumptions: AllAssumptions) -> Iterator[Tuple[YearlyProjection, CascadeState]]:
    state = CascadeState()
    for year_index, units in enumerate(units_by_year):
        record, state = project_year(year_index, units, assumptions, state)
        yield record, state


def project_years(units_by_year: Sequence[float], assumptions: AllAssumptions) -> CascadeResult:
    """Run the cascade over ``units_by_year`` in order."""
    years: List[YearlyProjection] = []
    totals = CascadeState()
    for record, totals in iter_years(units_by_year, assumptions):
        years.append(record)
    return CascadeResult(years=tuple(years), totals=totals)
