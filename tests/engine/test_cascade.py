"""
Tests for the financial cascade: per-year P&L, FCF build-up and running totals.
"""

import math

import pytest

from startup_dcf import InputError, build_assumptions, calculate_fcf, calculate_fcf_series, project_fcf, project_years
from startup_dcf.cascade import (
    CascadeState,
    FCFInputs,
    calculate_capex,
    calculate_cogs,
    calculate_gna,
    calculate_marketing,
    project_year,
)


@pytest.fixture
def simple_assumptions():
    return build_assumptions(
        {
            "revenue": {"price_per_unit": 100, "annual_price_increase": 0, "discount_rate": 0},
            "cogs": {"unit_cost": 40, "cost_reduction_per_year": 0, "shipping_per_unit": 0},
            "marketing": {"base_budget": 0, "percent_of_revenue": 0.10},
            "gna": {
                "base_headcount": 1,
                "avg_salary": 1000,
                "salary_growth_rate": 0,
                "benefits_multiplier": 1,
                "office_and_ops": 0,
            },
            "capital": {"working_capital_percent": 0.10, "capex_year1": 500, "capex_growth_rate": 0},
            "corporate": {"tax_rate": 0.25, "discount_rate": 0.10},
        }
    )


# ---------------------------------------------------------------------------
# Year-by-year cascade
# ---------------------------------------------------------------------------


def test_two_year_cascade(simple_assumptions):
    result = project_years([100, 200], simple_assumptions)
    y1, y2 = result.years

    assert y1.year == 1
    assert y1.year_label == "Year 1"
    assert y1.revenue == pytest.approx(10000)
    assert y1.cogs == pytest.approx(4000)
    assert y1.gross_profit == pytest.approx(6000)
    assert y1.gross_margin_pct == pytest.approx(60)
    assert y1.marketing == pytest.approx(1000)
    assert y1.gna == pytest.approx(1000)
    assert y1.ebitda == pytest.approx(4000)
    assert y1.ebit == y1.ebitda
    assert y1.depreciation == 0
    assert y1.taxes == pytest.approx(1000)
    assert y1.nopat == pytest.approx(3000)
    assert y1.capex == pytest.approx(500)
    assert y1.working_capital == pytest.approx(1000)
    assert y1.working_capital_change == pytest.approx(1000)
    assert y1.fcf == pytest.approx(1500)
    assert y1.fcf_margin_pct == pytest.approx(15)
    assert y1.discount_factor == pytest.approx(1 / 1.1)
    assert y1.present_value == pytest.approx(1500 / 1.1)

    assert y2.revenue == pytest.approx(20000)
    assert y2.ebitda == pytest.approx(9000)
    assert y2.taxes == pytest.approx(2250)
    assert y2.working_capital_change == pytest.approx(1000)
    assert y2.fcf == pytest.approx(5250)
    assert y2.present_value == pytest.approx(5250 / 1.21)

    assert y2.cumulative_fcf == pytest.approx(6750)
    assert y2.cumulative_pv == pytest.approx(1500 / 1.1 + 5250 / 1.21)


def test_totals_match_year_sums(simple_assumptions):
    result = project_years([100, 250, 50], simple_assumptions)
    totals = result.totals

    assert totals.cumulative_fcf == pytest.approx(math.fsum(y.fcf for y in result.years))
    assert totals.cumulative_pv == pytest.approx(math.fsum(y.present_value for y in result.years))
    assert totals.total_revenue == pytest.approx(math.fsum(y.revenue for y in result.years))
    assert totals.total_taxes == pytest.approx(math.fsum(y.taxes for y in result.years))
    assert totals.total_wc_change == pytest.approx(result.years[-1].working_capital)


def test_fcf_identity_holds_every_year():
    result = project_years([1000, 5000, 12000, 20000], build_assumptions())
    for y in result.years:
        assert y.fcf == pytest.approx(y.nopat + y.depreciation - y.capex - y.working_capital_change)
        assert y.fcf == pytest.approx(y.ebitda - y.taxes - y.capex - y.working_capital_change)


def test_no_tax_on_losses(simple_assumptions):
    result = project_years([0], simple_assumptions)
    y1 = result.years[0]

    assert y1.revenue == 0
    assert y1.ebitda == pytest.approx(-1000)
    assert y1.taxes == 0
    assert y1.fcf == pytest.approx(-1500)
    assert y1.gross_margin_pct == 0
    assert y1.fcf_margin_pct == 0


def test_shrinking_revenue_releases_working_capital(simple_assumptions):
    result = project_years([200, 100], simple_assumptions)
    assert result.years[1].working_capital_change == pytest.approx(-1000)


def test_empty_units_yield_empty_projection(simple_assumptions):
    result = project_years([], simple_assumptions)
    assert result.years == ()
    assert result.totals == CascadeState()


def test_non_finite_units_rejected(simple_assumptions):
    with pytest.raises(InputError, match="units for year 2"):
        project_years([100, math.nan], simple_assumptions)


def test_project_year_threads_state(simple_assumptions):
    record, state = project_year(0, 100, simple_assumptions, CascadeState())
    assert state.previous_working_capital == pytest.approx(record.working_capital)
    assert state.cumulative_fcf == pytest.approx(record.fcf)

    second, _ = project_year(1, 100, simple_assumptions, state)
    assert second.working_capital_change == pytest.approx(0)


# ---------------------------------------------------------------------------
# Line-item helpers
# ---------------------------------------------------------------------------


def test_cogs_applies_cost_reduction_by_year_index():
    assert calculate_cogs(10, 200, 25, 0.05, 0) == pytest.approx(2250)
    assert calculate_cogs(10, 200, 25, 0.05, 2) == pytest.approx(10 * (200 * 0.95**2 + 25))


def test_marketing_is_fixed_plus_variable():
    assert calculate_marketing(100000, 30000, 0.15) == pytest.approx(45000)


def test_gna_grows_salary_by_year_index():
    assert calculate_gna(3, 80000, 0.03, 1.3, 50000, 0) == pytest.approx(362000)
    assert calculate_gna(3, 80000, 0.03, 1.3, 50000, 1) == pytest.approx(3 * 82400 * 1.3 + 50000)


def test_capex_grows_by_year_index():
    assert calculate_capex(50000, 0.10, 0) == pytest.approx(50000)
    assert calculate_capex(50000, 0.10, 2) == pytest.approx(60500)


def test_price_increase_compounds():
    assumptions = build_assumptions({"revenue": {"annual_price_increase": 0.10, "discount_rate": 0}})
    result = project_years([10, 10], assumptions)
    assert result.years[1].revenue == pytest.approx(result.years[0].revenue * 1.10)


# ---------------------------------------------------------------------------
# Standalone FCF
# ---------------------------------------------------------------------------


def test_calculate_fcf():
    result = calculate_fcf(FCFInputs(ebitda=1000, capex=200, working_capital_change=50, taxes=150))
    assert result.fcf == 600
    assert result.inputs.ebitda == 1000


def test_calculate_fcf_rejects_non_numbers():
    with pytest.raises(InputError, match="EBITDA must be a valid number"):
        calculate_fcf(FCFInputs(ebitda=math.nan, capex=0, working_capital_change=0, taxes=0))
    with pytest.raises(InputError, match="Taxes must be a valid number"):
        calculate_fcf(FCFInputs(ebitda=1, capex=0, working_capital_change=0, taxes="x"))


def test_calculate_fcf_series():
    results = calculate_fcf_series(
        [
            FCFInputs(ebitda=100, capex=10, working_capital_change=0, taxes=20),
            FCFInputs(ebitda=200, capex=10, working_capital_change=10, taxes=40),
        ]
    )
    assert [r.fcf for r in results] == [70, 140]


def test_project_fcf_compounds_from_first_year():
    assert project_fcf(100, 0.10, 3) == pytest.approx([110, 121, 133.1])


def test_project_fcf_rejects_bad_inputs():
    with pytest.raises(InputError, match="Years must be at least 1"):
        project_fcf(100, 0.1, 0)
    with pytest.raises(InputError, match="Growth rate cannot be less than -100%"):
        project_fcf(100, -1.5, 3)


def test_cumulative_fcf_is_running_sum():
    result = project_years([3000, 8000, 15000, 21000, 24000], build_assumptions())
    running = 0.0
    for y in result.years:
        running += y.fcf
        assert y.cumulative_fcf == pytest.approx(running)
