"""
Scenario comparison engine.

Compares funding a purchase with one loan (scenario A) against splitting the
same amount over two loans (scenario B), typically a smaller mortgage plus a
shorter personal loan, and quantifies what the split's higher early cash flow
would achieve if it went into the single loan instead.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from .errors import ConfigError
from .results import CombinedPeriod, ComparisonResult, ScheduleResult, WhatIfResult
from .schedule import coerce_rate_changes, coerce_rules, generate_schedule
from .specs import ExtraRepaymentRule, LoanInput, RateChange, SplitScenario
from .utils import periods_to_months

logger = logging.getLogger(__name__)

# Scenarios must fund the same total to within one cent
_AMOUNT_TOLERANCE = 0.01


def _validate_pair(scenario_a: LoanInput, scenario_b: SplitScenario) -> None:
    if not isinstance(scenario_a, LoanInput):
        raise ConfigError(f"scenario_a must be a LoanInput, got {type(scenario_a).__name__}")
    if not isinstance(scenario_b, SplitScenario):
        raise ConfigError(
            f"scenario_b must be a SplitScenario, got {type(scenario_b).__name__}"
        )
    if scenario_a.frequency != scenario_b.primary.frequency:
        raise ConfigError(
            "scenarios must share a repayment frequency "
            f"(got '{scenario_a.frequency}' and '{scenario_b.primary.frequency}')"
        )
    if scenario_a.start_date != scenario_b.primary.start_date:
        raise ConfigError(
            "scenarios must start on the same date "
            f"(got {scenario_a.start_date} and {scenario_b.primary.start_date})"
        )
    if abs(scenario_a.principal - scenario_b.total_principal) > _AMOUNT_TOLERANCE:
        raise ConfigError(
            f"scenarios must fund the same amount: single loan {scenario_a.principal:,.2f} "
            f"vs split {scenario_b.total_principal:,.2f}"
        )


def combine_schedules(
    primary: ScheduleResult, secondary: ScheduleResult
) -> list[CombinedPeriod]:
    """
    Align two schedules by period index and sum them.

    A loan contributes nothing once its schedule has ended, so after the
    shorter loan is paid off the combined payment equals the longer loan's.
    """
    rows = []
    length = max(len(primary.schedule), len(secondary.schedule))
    for idx in range(length):
        p = primary.schedule[idx] if idx < len(primary.schedule) else None
        s = secondary.schedule[idx] if idx < len(secondary.schedule) else None
        primary_payment = p.total_payment if p else 0.0
        secondary_payment = s.total_payment if s else 0.0
        rows.append(
            CombinedPeriod(
                period=idx,
                date=p.date if p else s.date,
                primary_payment=primary_payment,
                secondary_payment=secondary_payment,
                total_payment=primary_payment + secondary_payment,
                interest_charged=(p.interest_charged if p else 0.0)
                + (s.interest_charged if s else 0.0),
                closing_balance=(p.closing_balance if p else 0.0)
                + (s.closing_balance if s else 0.0),
            )
        )
    return rows


def _what_if(
    scenario_a: LoanInput,
    single: ScheduleResult,
    scenario_b: SplitScenario,
    combined_initial_payment: float,
    rules: tuple[ExtraRepaymentRule, ...],
    rate_changes: tuple[RateChange, ...],
) -> WhatIfResult:
    extra = combined_initial_payment - single.summary.regular_payment
    extra_months = int(round(scenario_b.secondary.years * 12))
    extra_rules = rules
    # A secondary term shorter than half a month leaves no whole month to fund
    if extra > 0 and extra_months < 1:
        extra = 0.0
    if extra > 0:
        # A recurring rule at the loan's own frequency adds exactly `extra` per period
        extra_rules = rules + (
            ExtraRepaymentRule(
                kind=scenario_a.frequency,
                start_month=0,
                end_month=extra_months - 1,
                amount=extra,
            ),
        )
    result = generate_schedule(scenario_a, extra_rules, rate_changes)
    ppy = scenario_a.periods_per_year
    return WhatIfResult(
        result=result,
        extra_per_period=max(extra, 0.0),
        extra_months=extra_months,
        total_interest=result.summary.total_interest,
        interest_saved=single.summary.total_interest - result.summary.total_interest,
        months_earlier=periods_to_months(single.summary.periods - result.summary.periods, ppy),
    )


def what_if_single_loan(
    scenario_a: LoanInput,
    scenario_b: SplitScenario,
    rules: Iterable[ExtraRepaymentRule | Mapping] | None = (),
    rate_changes: Iterable[RateChange | Mapping] | None = (),
) -> WhatIfResult:
    """
    Simulate the single loan receiving the split scenario's extra cash flow.

    For the secondary loan's term, the single loan is paid the split
    scenario's initial combined payment instead of its own payment; the
    difference acts as an extra repayment. This quantifies the opportunity
    cost of splitting versus not splitting.

    Raises:
        ConfigError: If the scenarios are invalid or fund different totals
    """
    _validate_pair(scenario_a, scenario_b)
    rules = coerce_rules(rules)
    rate_changes = coerce_rate_changes(rate_changes)
    single = generate_schedule(scenario_a, rules, rate_changes)
    primary = generate_schedule(scenario_b.primary, rules, rate_changes)
    secondary = generate_schedule(scenario_b.secondary)
    combined_initial = primary.summary.regular_payment + secondary.summary.regular_payment
    return _what_if(scenario_a, single, scenario_b, combined_initial, rules, rate_changes)


def compare_scenarios(
    scenario_a: LoanInput,
    scenario_b: SplitScenario,
    rules: Iterable[ExtraRepaymentRule | Mapping] | None = (),
    rate_changes: Iterable[RateChange | Mapping] | None = (),
) -> ComparisonResult:
    """
    Compare a single loan against a split of the same amount over two loans.

    Extra repayment rules and rate changes apply to the single loan and to the
    split's primary loan; the secondary loan runs on its own terms.

    Args:
        scenario_a: The single loan funding the whole amount
        scenario_b: Primary and secondary loans funding the same amount
        rules: Extra repayment rules for the single/primary loan
        rate_changes: Rate changes for the single/primary loan

    Returns:
        ComparisonResult with the three schedules, the period-aligned combined
        rows, combined totals, differentials (B minus A) and the what-if
        counterfactual

    Raises:
        ConfigError: If an input is invalid, the frequencies differ or the
            scenarios fund different totals

    **Example:**
        ```python
        from datetime import date
        from repaylab import LoanInput, SplitScenario, compare_scenarios

        start = date(2026, 1, 1)
        single = LoanInput(principal=480_000, annual_rate=5.85, years=30, start_date=start)
        split = SplitScenario(
            primary=LoanInput(principal=440_000, annual_rate=5.85, years=30, start_date=start),
            secondary=LoanInput(principal=40_000, annual_rate=8.5, years=5, start_date=start),
        )
        result = compare_scenarios(single, split)
        result.interest_delta  # negative: the split saves interest
        ```
    """
    _validate_pair(scenario_a, scenario_b)
    rules = coerce_rules(rules)
    rate_changes = coerce_rate_changes(rate_changes)

    single = generate_schedule(scenario_a, rules, rate_changes)
    primary = generate_schedule(scenario_b.primary, rules, rate_changes)
    secondary = generate_schedule(scenario_b.secondary)
    combined = combine_schedules(primary, secondary)

    combined_initial = primary.summary.regular_payment + secondary.summary.regular_payment
    combined_interest = primary.summary.total_interest + secondary.summary.total_interest
    combined_paid = primary.summary.total_paid + secondary.summary.total_paid
    combined_payoff = max(primary.summary.payoff_date, secondary.summary.payoff_date)
    ppy = scenario_a.periods_per_year

    what_if = _what_if(scenario_a, single, scenario_b, combined_initial, rules, rate_changes)
    logger.debug(
        "Compared single (%.2f interest) vs split (%.2f interest)",
        single.summary.total_interest,
        combined_interest,
    )
    return ComparisonResult(
        scenario_a=scenario_a,
        scenario_b=scenario_b,
        single=single,
        primary=primary,
        secondary=secondary,
        combined=combined,
        combined_initial_payment=combined_initial,
        combined_total_interest=combined_interest,
        combined_total_paid=combined_paid,
        combined_payoff_date=combined_payoff,
        interest_delta=combined_interest - single.summary.total_interest,
        total_paid_delta=combined_paid - single.summary.total_paid,
        months_earlier_payoff=periods_to_months(
            single.summary.periods - len(combined), ppy
        ),
        what_if=what_if,
    )
