"""
Discounting
===========

Discount factors, present values and NPV.

    DF(r, t) = 1 / (1 + r)^t
    NPV      = -I0 + sum_t CF_t * DF(r, t)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Sequence, Tuple

from .errors import InputError

DAYS_PER_YEAR = 365.25


@dataclass(frozen=True)
class PeriodCashFlow:
    period: float
    fcf: float
    discount_factor: float
    present_value: float


@dataclass(frozen=True)
class NPVResult:
    npv: float
    cash_flows: Tuple[PeriodCashFlow, ...]
    discount_rate: float


def _check_rate(rate: float) -> None:
    if rate <= -1:
        raise InputError("Discount rate must be greater than -100%")


def calculate_discount_factor(rate: float, period: float) -> float:
    _check_rate(rate)
    if period < 0:
        raise InputError("Period must be non-negative")
    if period == 0:
        return 1.0
    return 1.0 / (1.0 + rate) ** period


def calculate_present_value(cash_flow: float, rate: float, period: float) -> float:
    return cash_flow * calculate_discount_factor(rate, period)


def calculate_npv(cash_flows: Sequence[float], discount_rate: float, initial_investment: float = 0.0) -> NPVResult:
    """
    NPV of ``cash_flows`` received at periods 1..n.

    ``initial_investment`` is a period-0 outflow given as a positive amount; when
    non-zero it is listed as period 0 in the breakdown.
    """
    _check_rate(discount_rate)

    breakdown: List[PeriodCashFlow] = []
    npv = -initial_investment

    if initial_investment != 0:
        breakdown.append(
            PeriodCashFlow(period=0, fcf=-initial_investment, discount_factor=1.0, present_value=-initial_investment)
        )

    for period, cf in enumerate(cash_flows, start=1):
        discount_factor = calculate_discount_factor(discount_rate, period)
        present_value = cf * discount_factor
        breakdown.append(
            PeriodCashFlow(period=period, fcf=cf, discount_factor=discount_factor, present_value=present_value)
        )
        npv += present_value

    return NPVResult(npv=npv, cash_flows=tuple(breakdown), discount_rate=discount_rate)


def calculate_npv_with_periods(cash_flows_with_periods: Iterable[Tuple[float, float]], discount_rate: float) -> NPVResult:
    """NPV for explicit ``(fcf, period)`` pairs; the breakdown is sorted by period."""
    _check_rate(discount_rate)

    breakdown: List[PeriodCashFlow] = []
    npv = 0.0
    for fcf, period in cash_flows_with_periods:
        discount_factor = calculate_discount_factor(discount_rate, period)
        present_value = fcf * discount_factor
        breakdown.append(
            PeriodCashFlow(period=period, fcf=fcf, discount_factor=discount_factor, present_value=present_value)
        )
        npv += present_value

    breakdown.sort(key=lambda row: row.period)
    return NPVResult(npv=npv, cash_flows=tuple(breakdown), discount_rate=discount_rate)


def calculate_npv_with_effective_date(
    cash_flows: Sequence[float],
    discount_rate: float,
    effective_date: date,
    start_date: date,
) -> float:
    """
    NPV of ``cash_flows`` (index = period, period 0 at ``start_date``) valued
    as of ``effective_date`` instead of period 0.
    """
    _check_rate(discount_rate)
    years_offset = (effective_date - start_date).days / DAYS_PER_YEAR
    return sum(cf / (1.0 + discount_rate) ** (t - years_offset) for t, cf in enumerate(cash_flows))
