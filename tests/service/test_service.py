"""
Tests for the ValuationService orchestration layer.
"""

import math
from unittest.mock import patch

import pytest

from startup_dcf import DEFAULT_ASSUMPTIONS, InputError, build_assumptions
from startup_dcf_service.services.valuation import ValuationService


def test_valuation_service_initialization():
    service = ValuationService()
    assert service.base_assumptions is DEFAULT_ASSUMPTIONS


def test_calculate_dcf_flow():
    """Overrides go through the shared builder before reaching the engine."""
    service = ValuationService()
    overrides = {"corporate": {"discount_rate": 0.15}}

    with patch("startup_dcf_service.services.valuation.build_assumptions", wraps=build_assumptions) as builder:
        result = service.calculate_dcf("base", overrides)

    builder.assert_called_once_with(overrides, base=DEFAULT_ASSUMPTIONS)
    assert result["scenario"] == "base"
    assert result["assumptions"]["corporate"]["discount_rate"] == 0.15
    assert isinstance(result["projections"], (list, tuple))


def test_custom_base_assumptions():
    base = build_assumptions({"corporate": {"projection_years": 3}})
    service = ValuationService(base)

    assert service.get_default_assumptions()["corporate"]["projection_years"] == 3
    assert len(service.calculate_dcf("upside")["projections"]) == 3


def test_full_service_integration():
    """End-to-end: builder → engine → dict output."""
    service = ValuationService()
    result = service.calculate_dcf("max", terminal_method="exit-multiple", exit_multiple=10)

    final = result["projections"][-1]
    assert result["terminal_value"] == pytest.approx(final["ebitda"] * 10)
    assert result["enterprise_value"] == pytest.approx(
        sum(y["present_value"] for y in result["projections"]) + result["terminal_value_pv"]
    )


def test_invalid_overrides_raise_input_error():
    service = ValuationService()
    with pytest.raises(InputError):
        service.calculate_dcf("base", {"capital": {"capex_year1": "lots"}})


def test_project_fcf_includes_breakdown():
    result = ValuationService().project_fcf("base", projection_years=3)
    assert len(result["years"]) == 3
    assert [row["year"] for row in result["component_breakdown"]] == [1, 2, 3]


def test_compare_scenarios():
    result = ValuationService().compare_scenarios(projection_years=5)
    assert list(result["scenarios"]) == ["max", "upside", "base", "downside", "min"]
    assert result["best_case"]["total_fcf"] >= result["worst_case"]["total_fcf"]


def test_project_units():
    result = ValuationService().project_units("base", 2025, 2, monthly_growth_rate=0.0)
    assert len(result["annual_units"]) == 2
    assert result["monthly_units"][0] == pytest.approx([result["annual_units"][0] / 12] * 12)


def test_irr_not_converged():
    result = ValuationService().calculate_irr([1, 2, 3])
    assert result["converged"] is False
    assert math.isnan(result["irr"])


def test_mirr_and_terminal_comparison():
    service = ValuationService()
    assert service.calculate_mirr([-100, 110], 0.1, 0.1)["mirr"] == pytest.approx(0.10)

    comparison = service.compare_terminal_values(
        final_year_fcf=100,
        final_year_ebitda=150,
        growth_rate=0.02,
        discount_rate=0.10,
        exit_multiple=8,
        projection_years=5,
    )
    assert comparison["gordon_growth"]["implied_ebitda_multiple"] == pytest.approx(8.5)


def test_comparables_with_filter():
    result = ValuationService().get_comparables(sector="golf")
    assert [c["ticker"] for c in result["companies"]] == ["GOLF"]
    assert result["stats"]["ebitda_multiple"]["mean"] == pytest.approx(11.6)
