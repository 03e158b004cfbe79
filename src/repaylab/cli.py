"""
Command-line interface for RepayLab.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date

import numpy as np
import pandas as pd

from repaylab import __version__
from repaylab.core.catalog_loader import ScenarioDefinition, load_scenario
from repaylab.core.comparison import compare_scenarios
from repaylab.core.errors import ConfigError
from repaylab.core.schedule import generate_schedule

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_CONFIG_ERROR = 2


class ResultEncoder(json.JSONEncoder):
    """JSON encoder that handles dates, numpy scalars/arrays and pandas objects."""

    def default(self, obj):
        if isinstance(obj, (date, pd.Timestamp)):
            return obj.isoformat()
        elif isinstance(obj, np.ndarray):
            return obj.tolist()
        elif isinstance(obj, np.generic):
            return obj.item()
        elif isinstance(obj, pd.DataFrame):
            return obj.reset_index().to_dict("records")
        elif isinstance(obj, pd.Series):
            return obj.to_dict()
        return super().default(obj)


def _save_json(path: str, data: dict) -> None:
    """Save data as JSON to file path."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, cls=ResultEncoder)


def _emit_json(data: dict, output: str | None) -> None:
    if output:
        _save_json(output, data)
        print(f"Results saved to {output}")
    else:
        json.dump(data, sys.stdout, indent=2, cls=ResultEncoder)
        sys.stdout.write("\n")


def _money(value: float) -> str:
    return f"{value:,.2f}"


def _print_table(df: pd.DataFrame) -> None:
    # Display rounding only; the engine works on raw floats
    print(df.to_string(float_format=_money))


def _scenario_label(defn: ScenarioDefinition) -> str:
    return defn.metadata.get("name") or defn.source


def cmd_schedule(args) -> int:
    """Generate the amortization schedule of a scenario file."""
    defn = load_scenario(args.input)
    result = generate_schedule(defn.loan, defn.rules, defn.rate_changes)

    if args.json or args.output:
        data = result.to_dict()
        if args.yearly:
            data["yearly"] = result.yearly()
        _emit_json(data, args.output)
        return EXIT_OK

    summary = result.summary
    loan = defn.loan
    print(f"Scenario: {_scenario_label(defn)}")
    print(
        f"Loan: {_money(loan.principal)} at {loan.annual_rate:.2f}% over {loan.years:g} years "
        f"({loan.frequency}, {loan.repayment_type}, {loan.strategy})"
    )
    print(f"Regular payment: {_money(summary.regular_payment)}")
    print(f"Total interest:  {_money(summary.total_interest)}")
    print(f"Total paid:      {_money(summary.total_paid)}")
    print(f"Payoff date:     {summary.payoff_date.isoformat()} ({summary.periods} periods)")
    if not summary.paid_off:
        print(f"Remaining balance: {_money(summary.remaining_balance)}")
    print()
    if args.yearly:
        _print_table(result.yearly())
    else:
        df = result.to_frame()
        df["date"] = df["date"].dt.strftime("%Y-%m-%d")
        _print_table(df)
    return EXIT_OK


def cmd_compare(args) -> int:
    """Compare a single loan against the split defined in a scenario file."""
    defn = load_scenario(args.input)
    if defn.split is None:
        raise ConfigError(f"{defn.source}: 'compare' requires a 'split' section")
    comparison = compare_scenarios(defn.loan, defn.split, defn.rules, defn.rate_changes)

    if args.json or args.output:
        _emit_json(comparison.to_dict(), args.output)
        return EXIT_OK

    s = comparison.summary()
    print(f"Scenario: {_scenario_label(defn)}")
    print(f"Amount: {_money(s['total_amount'])}")
    print()
    print("Single loan")
    print(f"  Payment:        {_money(s['single_payment'])}")
    print(f"  Total interest: {_money(s['single_total_interest'])}")
    print(f"  Total paid:     {_money(s['single_total_paid'])}")
    print(f"  Payoff date:    {s['single_payoff_date']}")
    print("Split")
    print(
        f"  Payment:        {_money(s['split_initial_payment'])} "
        f"({_money(s['primary_payment'])} + {_money(s['secondary_payment'])})"
    )
    print(f"  Total interest: {_money(s['split_total_interest'])}")
    print(f"  Total paid:     {_money(s['split_total_paid'])}")
    print(f"  Payoff date:    {s['split_payoff_date']}")
    print("Difference (split - single)")
    print(f"  Interest:       {_money(s['interest_delta'])}")
    print(f"  Total paid:     {_money(s['total_paid_delta'])}")
    print(f"  Months earlier: {s['months_earlier_payoff']:.1f}")
    what_if = s.get("what_if")
    if what_if:
        print("What if the single loan received the split's extra cash")
        print(
            f"  Extra per period: {_money(what_if['extra_per_period'])} "
            f"for {what_if['extra_months']} months"
        )
        print(f"  Total interest:   {_money(what_if['total_interest'])}")
        print(f"  Interest saved:   {_money(what_if['interest_saved'])}")
        print(f"  Payoff date:      {what_if['payoff_date']}")
        print(f"  Months earlier:   {what_if['months_earlier']:.1f}")
    return EXIT_OK


def cmd_validate(args) -> int:
    """Validate a scenario file without printing a schedule."""
    defn = load_scenario(args.input)
    # Rule kinds and strategies are resolved by a dry run
    generate_schedule(defn.loan, defn.rules, defn.rate_changes)
    if defn.split is not None:
        compare_scenarios(defn.loan, defn.split, defn.rules, defn.rate_changes)
    parts = [
        f"{len(defn.rules)} extra repayment rule(s)",
        f"{len(defn.rate_changes)} rate change(s)",
    ]
    if defn.split is not None:
        parts.append("split")
    print(f"✅ {defn.source} is valid: {', '.join(parts)}")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repaylab", description="RepayLab - Loan amortization and scenario engine"
    )

    # Version argument
    parser.add_argument("--version", action="version", version=f"RepayLab {__version__}")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(
        dest="cmd", required=True, help="Available commands"
    )

    # Schedule command
    schedule_parser = subparsers.add_parser(
        "schedule", help="Generate the amortization schedule of a scenario file"
    )
    schedule_parser.add_argument(
        "-i", "--input", required=True, help="Input scenario YAML/JSON file"
    )
    schedule_parser.add_argument(
        "-o", "--output", help="Output results JSON file (implies --json)"
    )
    schedule_parser.add_argument(
        "--yearly", action="store_true", help="Aggregate the schedule per calendar year"
    )
    schedule_parser.add_argument(
        "--json", action="store_true", help="Output in JSON format"
    )
    schedule_parser.set_defaults(func=cmd_schedule)

    # Compare command
    compare_parser = subparsers.add_parser(
        "compare", help="Compare the single loan against the split of a scenario file"
    )
    compare_parser.add_argument(
        "-i", "--input", required=True, help="Input scenario YAML/JSON file"
    )
    compare_parser.add_argument(
        "-o", "--output", help="Output results JSON file (implies --json)"
    )
    compare_parser.add_argument(
        "--json", action="store_true", help="Output in JSON format"
    )
    compare_parser.set_defaults(func=cmd_compare)

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a scenario file")
    validate_parser.add_argument(
        "-i", "--input", required=True, help="Input scenario YAML/JSON file"
    )
    validate_parser.set_defaults(func=cmd_validate)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.func(args)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except OSError as e:
        print(f"Could not read scenario: {e}", file=sys.stderr)
        return EXIT_IO_ERROR


if __name__ == "__main__":
    sys.exit(main())
