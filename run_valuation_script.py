import argparse

from startup_dcf import DEFAULT_ASSUMPTIONS, SCENARIO_ORDER, InputError, calculate_dcf, calculate_irr


def summarize(scenario, terminal_method, exit_multiple=None, years=None):
    result = calculate_dcf(
        scenario,
        DEFAULT_ASSUMPTIONS,
        terminal_method=terminal_method,
        exit_multiple=exit_multiple,
        projection_years=years,
    )
    flows = [-DEFAULT_ASSUMPTIONS.capital.initial_investment] + [y.fcf for y in result.projections]
    irr = calculate_irr(flows)

    print(f"\n{scenario.upper()} ({result.terminal_value_method}, {len(result.projections)} years)")
    print(f"Enterprise Value:      {result.enterprise_value:,.0f}")
    print(f"PV of Terminal Value:  {result.terminal_value_pv:,.0f}")
    print(f"EV / Revenue:          {result.implied_multiples.ev_to_revenue:.2f}x")
    print(f"EV / EBITDA:           {result.implied_multiples.ev_to_ebitda:.2f}x")
    if irr.converged:
        print(f"IRR:                   {irr.irr * 100:.2f}%")
    else:
        print("IRR:                   did not converge")
    return result


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run a startup DCF valuation with the default assumptions.")
    parser.add_argument("scenario", type=str, help="Adoption scenario (max, upside, base, downside, min) or 'all'")
    parser.add_argument(
        "--terminal-method",
        "-t",
        choices=["gordon-growth", "exit-multiple"],
        default="gordon-growth",
        help="Terminal value method",
    )
    parser.add_argument("--exit-multiple", type=float, default=None, help="EV/EBITDA multiple for exit-multiple")
    parser.add_argument("--years", type=int, default=None, help="Projection horizon in years")
    args = parser.parse_args(argv)

    scenarios = SCENARIO_ORDER if args.scenario.lower() == "all" else [args.scenario]
    try:
        for scenario in scenarios:
            summarize(scenario, args.terminal_method, args.exit_multiple, args.years)
    except InputError as e:
        print(f"Error valuing {args.scenario}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
