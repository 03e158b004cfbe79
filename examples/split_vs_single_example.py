#!/usr/bin/env python3
"""
Split vs Single Loan Example

This example compares funding a purchase with one mortgage against splitting it
into a smaller mortgage plus a short personal loan, and shows what the split's
higher early repayments would achieve if paid into the single mortgage instead.
"""

from datetime import date

from repaylab import (
    ExtraRepaymentRule,
    LoanInput,
    RateChange,
    SplitScenario,
    compare_scenarios,
    cumulative_interest_difference,
    interest_milestones,
)


def main():
    start = date(2026, 1, 1)
    single = LoanInput(principal=480_000, annual_rate=5.85, years=30, start_date=start)
    split = SplitScenario(
        primary=LoanInput(principal=440_000, annual_rate=5.85, years=30, start_date=start),
        secondary=LoanInput(principal=40_000, annual_rate=8.5, years=5, start_date=start),
    )
    rules = [ExtraRepaymentRule(kind="annual", start_month=12, amount=6_000)]
    rate_changes = [RateChange(start_month=36, new_rate=6.25)]

    result = compare_scenarios(single, split, rules=rules, rate_changes=rate_changes)
    summary = result.summary()

    print("🏠 Single mortgage")
    print(f"   Payment:        {summary['single_payment']:,.2f}")
    print(f"   Total interest: {summary['single_total_interest']:,.2f}")
    print(f"   Payoff:         {summary['single_payoff_date']}")

    print("\n🔀 Mortgage + personal loan")
    print(f"   Payment:        {summary['split_initial_payment']:,.2f} (first 5 years)")
    print(f"   Total interest: {summary['split_total_interest']:,.2f}")
    print(f"   Payoff:         {summary['split_payoff_date']}")
    print(f"   Interest delta: {summary['interest_delta']:,.2f}")

    what_if = result.what_if
    print("\n💡 Single mortgage with the split's extra cash")
    print(f"   Extra per month: {what_if.extra_per_period:,.2f} for {what_if.extra_months} months")
    print(f"   Interest saved:  {what_if.interest_saved:,.2f}")
    print(f"   Months earlier:  {what_if.months_earlier:.1f}")

    single_df = result.single.to_frame()
    what_if_df = what_if.result.to_frame()
    diff = cumulative_interest_difference(single_df, what_if_df)
    print("\n📊 Cumulative interest saved by the extra cash (every 5 years):")
    print(diff["difference"].iloc[59::60].round(0).to_string())

    print("\n⏱️  Interest milestones of the single mortgage (period reached):")
    print(interest_milestones(single_df).to_string())


if __name__ == "__main__":
    main()
