"""
Terminal Value
==============

Value of all cash flows beyond the explicit projection horizon.

- Gordon Growth:  TV = FCF_N * (1 + g) / (r - g)
- Exit Multiple:  TV = EBITDA_N * multiple

Both are discounted back over the final projection period.  The comparison
routine also reports the cross-implied metrics (EBITDA multiple implied by the
Gordon TV, perpetual growth implied by the exit TV) so that inconsistent
assumption sets are easy to spot.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from statistics import mean, median
from typing import Optional, Sequence, Tuple

from .discounting import calculate_discount_factor
from .errors import InputError

GORDON_GROWTH = "gordon-growth"
EXIT_MULTIPLE = "exit-multiple"


@dataclass(frozen=True)
class ComparableCompany:
    name: str
    ticker: str
    ev_ebitda_multiple: float
    ev_revenue_multiple: float
    sector: str
    market_cap: float  # USD millions
    description: str


# Sports / consumer-products benchmarks for exit multiple selection.
COMPARABLE_COMPANIES: Tuple[ComparableCompany, ...] = (
    ComparableCompany("Peloton Interactive", "PTON", 12.5, 1.8, "Connected Fitness", 2500,
                      "Connected fitness equipment and subscription services"),
    ComparableCompany("Callaway Golf (Topgolf)", "MODG", 10.2, 2.1, "Sports Equipment", 6800,
                      "Golf equipment and entertainment venues"),
    ComparableCompany("YETI Holdings", "YETI", 14.8, 3.2, "Outdoor/Consumer Products", 4200,
                      "Premium coolers and outdoor products"),
    ComparableCompany("Vista Outdoor", "VSTO", 6.5, 0.9, "Outdoor Products", 2100,
                      "Outdoor sports and recreation products"),
    ComparableCompany("Brunswick Corporation", "BC", 8.3, 1.4, "Marine/Recreation", 5400,
                      "Marine engines, boats, and fitness equipment"),
    ComparableCompany("Acushnet Holdings", "GOLF", 11.6, 2.4, "Golf Equipment", 4100,
                      "Titleist and FootJoy brands"),
    ComparableCompany("Clarus Corporation", "CLAR", 9.8, 1.6, "Outdoor Equipment", 450,
                      "Black Diamond, Sierra, and other outdoor brands"),
    ComparableCompany("Solo Brands", "DTC", 7.2, 1.1, "DTC Consumer Products", 280,
                      "Solo Stove and outdoor lifestyle brands"),
)


@dataclass(frozen=True)
class TerminalValueInputs:
    method: str
    discount_rate: float
    final_year_fcf: Optional[float] = None  # Gordon Growth
    growth_rate: Optional[float] = None  # Gordon Growth
    final_year_ebitda: Optional[float] = None  # Exit Multiple
    exit_multiple: Optional[float] = None  # Exit Multiple


@dataclass(frozen=True)
class TerminalValueResult:
    terminal_value: float
    present_value: float
    method: str


@dataclass(frozen=True)
class GordonGrowthSide:
    terminal_value: float
    present_value: float
    implied_ebitda_multiple: float
    final_year_fcf: float
    growth_rate: float
    discount_rate: float


@dataclass(frozen=True)
class ExitMultipleSide:
    terminal_value: float
    present_value: float
    implied_growth_rate: float
    final_year_ebitda: float
    exit_multiple: float
    discount_rate: float


@dataclass(frozen=True)
class TerminalValueDifference:
    terminal_value: float
    present_value: float
    percent_difference: float


@dataclass(frozen=True)
class TerminalValueComparison:
    gordon_growth: GordonGrowthSide
    exit_multiple: ExitMultipleSide
    difference: TerminalValueDifference


@dataclass(frozen=True)
class GordonDetails:
    final_year_fcf: float
    growth_rate: float
    discount_rate: float
    formula: str
    implied_multiple: Optional[float]


@dataclass(frozen=True)
class ExitMultipleDetails:
    final_year_ebitda: float
    exit_multiple: float
    formula: str
    implied_growth_rate: float
    comparable_companies: Tuple[ComparableCompany, ...]


@dataclass(frozen=True)
class TerminalValueBreakdown:
    method: str
    terminal_value: float
    present_value: float
    percent_of_enterprise_value: float
    gordon_details: Optional[GordonDetails] = None
    exit_multiple_details: Optional[ExitMultipleDetails] = None


@dataclass(frozen=True)
class MultipleStats:
    mean: float
    median: float
    min: float
    max: float


@dataclass(frozen=True)
class ComparableMultipleStats:
    ebitda_multiple: MultipleStats
    revenue_multiple: MultipleStats


def calculate_gordon_growth_tv(final_year_fcf: float, growth_rate: float, discount_rate: float) -> float:
    if growth_rate >= discount_rate:
        raise InputError("Growth rate must be less than discount rate for Gordon Growth model")
    if discount_rate <= 0:
        raise InputError("Discount rate must be positive")
    return final_year_fcf * (1.0 + growth_rate) / (discount_rate - growth_rate)


def calculate_exit_multiple_tv(final_year_ebitda: float, exit_multiple: float) -> float:
    if exit_multiple <= 0:
        raise InputError("Exit multiple must be positive")
    return final_year_ebitda * exit_multiple


def calculate_terminal_value(inputs: TerminalValueInputs, projection_years: int) -> TerminalValueResult:
    """Dispatch on ``inputs.method`` and discount the TV over ``projection_years``."""
    if inputs.method == GORDON_GROWTH:
        if inputs.final_year_fcf is None:
            raise InputError("final_year_fcf required for Gordon Growth method")
        if inputs.growth_rate is None:
            raise InputError("growth_rate required for Gordon Growth method")
        terminal_value = calculate_gordon_growth_tv(inputs.final_year_fcf, inputs.growth_rate, inputs.discount_rate)
    elif inputs.method == EXIT_MULTIPLE:
        if inputs.final_year_ebitda is None:
            raise InputError("final_year_ebitda required for Exit Multiple method")
        if inputs.exit_multiple is None:
            raise InputError("exit_multiple required for Exit Multiple method")
        terminal_value = calculate_exit_multiple_tv(inputs.final_year_ebitda, inputs.exit_multiple)
    else:
        raise InputError(f"Unknown terminal value method: {inputs.method!r}")

    present_value = terminal_value * calculate_discount_factor(inputs.discount_rate, projection_years)
    return TerminalValueResult(terminal_value=terminal_value, present_value=present_value, method=inputs.method)


def calculate_implied_multiple(gordon_tv: float, final_year_ebitda: float) -> float:
    if final_year_ebitda <= 0:
        raise InputError("EBITDA must be positive")
    return gordon_tv / final_year_ebitda


def calculate_implied_growth_rate(exit_multiple_tv: float, final_year_fcf: float, discount_rate: float) -> float:
    """
    Perpetual growth that makes Gordon Growth reproduce ``exit_multiple_tv``.

    When ``TV + FCF == 0`` no finite rate exists: the result is signed
    infinity, or NaN if the numerator is zero as well.
    """
    # TV = FCF(1 + g) / (r - g)  =>  g = (TV*r - FCF) / (TV + FCF)
    numerator = exit_multiple_tv * discount_rate - final_year_fcf
    denominator = exit_multiple_tv + final_year_fcf
    if denominator == 0:
        return math.copysign(math.inf, numerator) if numerator != 0 else math.nan
    return numerator / denominator


def compare_terminal_value_methods(
    final_year_fcf: float,
    final_year_ebitda: float,
    growth_rate: float,
    discount_rate: float,
    exit_multiple: float,
    projection_years: int,
) -> TerminalValueComparison:
    discount_factor = calculate_discount_factor(discount_rate, projection_years)

    gordon_tv = calculate_gordon_growth_tv(final_year_fcf, growth_rate, discount_rate)
    gordon_pv = gordon_tv * discount_factor

    exit_tv = calculate_exit_multiple_tv(final_year_ebitda, exit_multiple)
    exit_pv = exit_tv * discount_factor

    tv_diff = exit_tv - gordon_tv
    pv_diff = exit_pv - gordon_pv
    percent_diff = tv_diff / gordon_tv * 100.0 if gordon_tv != 0 else 0.0

    return TerminalValueComparison(
        gordon_growth=GordonGrowthSide(
            terminal_value=gordon_tv,
            present_value=gordon_pv,
            implied_ebitda_multiple=calculate_implied_multiple(gordon_tv, final_year_ebitda),
            final_year_fcf=final_year_fcf,
            growth_rate=growth_rate,
            discount_rate=discount_rate,
        ),
        exit_multiple=ExitMultipleSide(
            terminal_value=exit_tv,
            present_value=exit_pv,
            implied_growth_rate=calculate_implied_growth_rate(exit_tv, final_year_fcf, discount_rate),
            final_year_ebitda=final_year_ebitda,
            exit_multiple=exit_multiple,
            discount_rate=discount_rate,
        ),
        difference=TerminalValueDifference(
            terminal_value=tv_diff,
            present_value=pv_diff,
            percent_difference=percent_diff,
        ),
    )


def get_terminal_value_breakdown(
    method: str,
    terminal_value: float,
    present_value: float,
    enterprise_value: float,
    final_year_fcf: float,
    final_year_ebitda: float,
    growth_rate: float,
    discount_rate: float,
    exit_multiple: float,
) -> TerminalValueBreakdown:
    """Display-oriented detail of a computed terminal value."""
    percent_of_ev = present_value / enterprise_value * 100.0 if enterprise_value > 0 else 0.0

    if method == GORDON_GROWTH:
        implied_multiple = (
            calculate_implied_multiple(terminal_value, final_year_ebitda) if final_year_ebitda > 0 else None
        )
        return TerminalValueBreakdown(
            method=method,
            terminal_value=terminal_value,
            present_value=present_value,
            percent_of_enterprise_value=percent_of_ev,
            gordon_details=GordonDetails(
                final_year_fcf=final_year_fcf,
                growth_rate=growth_rate,
                discount_rate=discount_rate,
                formula=(
                    f"FCF × (1 + g) / (r - g) = {final_year_fcf:,.0f} × (1 + {growth_rate:.1%}) "
                    f"/ ({discount_rate:.1%} - {growth_rate:.1%})"
                ),
                implied_multiple=implied_multiple,
            ),
        )

    if method == EXIT_MULTIPLE:
        return TerminalValueBreakdown(
            method=method,
            terminal_value=terminal_value,
            present_value=present_value,
            percent_of_enterprise_value=percent_of_ev,
            exit_multiple_details=ExitMultipleDetails(
                final_year_ebitda=final_year_ebitda,
                exit_multiple=exit_multiple,
                formula=f"EBITDA × Multiple = {final_year_ebitda:,.0f} × {exit_multiple:g}x",
                implied_growth_rate=calculate_implied_growth_rate(terminal_value, final_year_fcf, discount_rate),
                comparable_companies=COMPARABLE_COMPANIES,
            ),
        )

    raise InputError(f"Unknown terminal value method: {method!r}")


def get_comparable_companies(
    sector: Optional[str] = None,
    min_multiple: Optional[float] = None,
    max_multiple: Optional[float] = None,
) -> Tuple[ComparableCompany, ...]:
    companies = COMPARABLE_COMPANIES
    if sector:
        companies = tuple(c for c in companies if sector.lower() in c.sector.lower())
    if min_multiple is not None:
        companies = tuple(c for c in companies if c.ev_ebitda_multiple >= min_multiple)
    if max_multiple is not None:
        companies = tuple(c for c in companies if c.ev_ebitda_multiple <= max_multiple)
    return companies


def _stats(values: Sequence[float]) -> MultipleStats:
    return MultipleStats(mean=mean(values), median=median(values), min=min(values), max=max(values))


def get_comparable_multiple_stats(
    companies: Sequence[ComparableCompany] = COMPARABLE_COMPANIES,
) -> ComparableMultipleStats:
    if not companies:
        empty = MultipleStats(mean=0.0, median=0.0, min=0.0, max=0.0)
        return ComparableMultipleStats(ebitda_multiple=empty, revenue_multiple=empty)

    return ComparableMultipleStats(
        ebitda_multiple=_stats([c.ev_ebitda_multiple for c in companies]),
        revenue_multiple=_stats([c.ev_revenue_multiple for c in companies]),
    )
