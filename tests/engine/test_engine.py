import math
import unittest

from startup_dcf import (
    DEFAULT_ASSUMPTIONS,
    SCENARIO_ORDER,
    InputError,
    build_assumptions,
    calculate_all_scenarios,
    calculate_dcf,
    calculate_irr,
    get_annual_projections,
    get_fcf_component_breakdown,
    project_fcf_all_scenarios,
    project_fcf_by_scenario,
)
from startup_dcf.engine import DCF_SCENARIO_ORDER
from startup_dcf.models import DCFResult, FCFProjectionResult


class TestDCFValuation(unittest.TestCase):
    def setUp(self):
        self.assumptions = DEFAULT_ASSUMPTIONS

    def test_enterprise_value_is_sum_of_present_values(self):
        result = calculate_dcf("base", self.assumptions)

        self.assertIsInstance(result, DCFResult)
        sum_pv = math.fsum(y.present_value for y in result.projections)
        self.assertAlmostEqual(result.enterprise_value, sum_pv + result.terminal_value_pv, places=4)
        self.assertEqual(result.equity_value, result.enterprise_value)
        self.assertEqual(result.terminal_value_method, "gordon-growth")
        self.assertEqual(len(result.projections), 10)

    def test_gordon_terminal_value_uses_final_year_fcf(self):
        result = calculate_dcf("base", self.assumptions)
        final = result.projections[-1]
        corporate = self.assumptions.corporate

        expected_tv = final.fcf * (1 + corporate.terminal_growth_rate) / (
            corporate.discount_rate - corporate.terminal_growth_rate
        )
        self.assertAlmostEqual(result.terminal_value, expected_tv, places=4)
        self.assertAlmostEqual(result.terminal_value_pv, expected_tv / (1 + corporate.discount_rate) ** 10, places=4)

    def test_exit_multiple_terminal_value(self):
        result = calculate_dcf("base", self.assumptions, terminal_method="exit-multiple", exit_multiple=6)
        final = result.projections[-1]

        self.assertAlmostEqual(result.terminal_value, final.ebitda * 6, places=4)
        self.assertEqual(result.terminal_value_method, "exit-multiple")

    def test_exit_multiple_defaults_to_assumption(self):
        result = calculate_dcf("base", self.assumptions, terminal_method="exit-multiple")
        final = result.projections[-1]
        self.assertAlmostEqual(result.terminal_value, final.ebitda * 8.0, places=4)

    def test_implied_multiples(self):
        result = calculate_dcf("base", self.assumptions)
        final = result.projections[-1]

        self.assertGreater(final.revenue, 0)
        self.assertAlmostEqual(result.implied_multiples.ev_to_revenue, result.enterprise_value / final.revenue)
        self.assertAlmostEqual(result.implied_multiples.ev_to_ebitda, result.enterprise_value / final.ebitda)

    def test_projection_years_override(self):
        result = calculate_dcf("upside", self.assumptions, projection_years=5)
        self.assertEqual([y.year for y in result.projections], [1, 2, 3, 4, 5])

        from_assumptions = calculate_dcf("upside", build_assumptions({"corporate": {"projection_years": 5}}))
        self.assertAlmostEqual(result.enterprise_value, from_assumptions.enterprise_value, places=6)

    def test_projection_units_follow_adoption_curve(self):
        result = calculate_dcf("downside", self.assumptions, start_year=2030, projection_years=4)
        units = get_annual_projections("downside", 2030, 4)
        self.assertEqual([y.units for y in result.projections], units)

    def test_results_are_deterministic(self):
        first = calculate_dcf("min", self.assumptions)
        second = calculate_dcf("min", self.assumptions)
        self.assertEqual(first, second)

    def test_higher_discount_rate_lowers_value(self):
        low = calculate_dcf("base", build_assumptions({"corporate": {"discount_rate": 0.10}}))
        high = calculate_dcf("base", build_assumptions({"corporate": {"discount_rate": 0.20}}))
        self.assertGreater(low.enterprise_value, high.enterprise_value)

    def test_unknown_scenario(self):
        with self.assertRaises(InputError):
            calculate_dcf("sideways", self.assumptions)

    def test_unknown_terminal_method(self):
        with self.assertRaises(InputError):
            calculate_dcf("base", self.assumptions, terminal_method="liquidation")

    def test_gordon_growth_not_below_discount_rate(self):
        assumptions = build_assumptions({"corporate": {"discount_rate": 0.05, "terminal_growth_rate": 0.05}})
        with self.assertRaises(InputError):
            calculate_dcf("base", assumptions)

    def test_invalid_projection_years(self):
        with self.assertRaises(InputError):
            calculate_dcf("base", self.assumptions, projection_years=0)

    def test_all_scenarios(self):
        results = calculate_all_scenarios(self.assumptions)
        self.assertEqual(tuple(results), DCF_SCENARIO_ORDER)
        for name, result in results.items():
            self.assertEqual(result.scenario, name)
            self.assertGreater(result.enterprise_value, 0)

    def test_investor_irr_from_projection(self):
        assumptions = build_assumptions({"capital": {"initial_investment": 50_000_000}})
        result = calculate_dcf("base", assumptions)
        flows = [-assumptions.capital.initial_investment] + [y.fcf for y in result.projections]
        irr = calculate_irr(flows)
        self.assertTrue(irr.converged)
        self.assertGreater(irr.irr, 0)
        self.assertLess(irr.irr, 1)


class TestFCFProjection(unittest.TestCase):
    def test_projection_totals(self):
        result = project_fcf_by_scenario("base", DEFAULT_ASSUMPTIONS)

        self.assertIsInstance(result, FCFProjectionResult)
        self.assertEqual(result.scenario_label, "Base")
        self.assertAlmostEqual(result.total_fcf, math.fsum(y.fcf for y in result.years), places=4)
        self.assertAlmostEqual(result.total_pv, math.fsum(y.present_value for y in result.years), places=4)
        self.assertAlmostEqual(result.total_revenue, math.fsum(y.revenue for y in result.years), places=4)
        self.assertAlmostEqual(result.avg_fcf_margin, result.total_fcf / result.total_revenue * 100)
        self.assertEqual(len(result.fcf_growth_rates), len(result.years) - 1)

    def test_five_year_base_projection(self):
        result = project_fcf_by_scenario("base", DEFAULT_ASSUMPTIONS, 5)

        self.assertEqual(len(result.years), 5)
        self.assertAlmostEqual(result.total_pv, math.fsum(y.present_value for y in result.years), places=4)
        self.assertAlmostEqual(result.total_revenue, math.fsum(y.revenue for y in result.years), places=4)

    def test_break_even_year(self):
        result = project_fcf_by_scenario("base", DEFAULT_ASSUMPTIONS)
        self.assertEqual(result.break_even_year, 1)

        costly = build_assumptions({"capital": {"capex_year1": 1e12}})
        self.assertIsNone(project_fcf_by_scenario("base", costly, projection_years=3).break_even_year)

    def test_component_breakdown_negates_cash_uses(self):
        result = project_fcf_by_scenario("upside", DEFAULT_ASSUMPTIONS, projection_years=3)
        rows = get_fcf_component_breakdown(result)

        self.assertEqual(len(rows), 3)
        for row, year in zip(rows, result.years):
            self.assertEqual(row.taxes, -year.taxes)
            self.assertEqual(row.capex, -year.capex)
            self.assertEqual(row.wc_change, -year.working_capital_change)
            self.assertAlmostEqual(row.ebitda + row.taxes + row.capex + row.wc_change, row.fcf, places=4)

    def test_scenario_name_is_normalized(self):
        result = project_fcf_by_scenario("BASE", DEFAULT_ASSUMPTIONS, 3)
        self.assertEqual(result.scenario, "base")
        self.assertEqual(result.scenario_label, "Base")
        self.assertEqual(calculate_dcf("Downside", DEFAULT_ASSUMPTIONS).scenario, "downside")

    def test_scenario_comparison(self):
        comparison = project_fcf_all_scenarios(DEFAULT_ASSUMPTIONS)

        self.assertEqual(comparison.scenario_order, SCENARIO_ORDER)
        self.assertEqual(tuple(comparison.scenarios), SCENARIO_ORDER)

        totals = [r.total_fcf for r in comparison.scenarios.values()]
        self.assertEqual(comparison.best_case.total_fcf, max(totals))
        self.assertEqual(comparison.worst_case.total_fcf, min(totals))
        self.assertEqual(comparison.worst_case.scenario, "min")
        self.assertEqual(comparison.base_case.scenario, "base")
        self.assertEqual(comparison.base_case.total_fcf, comparison.scenarios["base"].total_fcf)

    def test_scenario_comparison_respects_horizon(self):
        comparison = project_fcf_all_scenarios(DEFAULT_ASSUMPTIONS, projection_years=4)
        for result in comparison.scenarios.values():
            self.assertEqual(len(result.years), 4)


if __name__ == "__main__":
    unittest.main()
