"""
Amortization schedule generator.

This module owns the simulation loop. Every period it consults the rate change
resolver, splits the scheduled payment into interest and principal, applies
the net extra repayment of all active rules, emits a ``LoanPeriod`` row and
hands the closing state to the repayment strategy selected for the loan.

The loop threads an immutable :class:`SimulationState` from one period to the
next and is bounded by the scheduled term, so it terminates for any input,
including extra repayment rules that never pay the loan off.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date

from repaylab.strategies.extra import extra_for_period
from repaylab.strategies.payment import periodic_payment, split_payment
from repaylab.strategies.rates import RateChangeResolver

from .errors import ConfigError, warn_once
from .events import Event
from .registry import RepaymentStrategy, get_rule_evaluator, get_strategy
from .results import LoanPeriod, ScheduleResult, ScheduleSummary
from .specs import ExtraRepaymentRule, LoanInput, RateChange
from .state import SimulationState
from .utils import BALANCE_EPSILON, period_dates

logger = logging.getLogger(__name__)


def coerce_rules(
    rules: Iterable[ExtraRepaymentRule | Mapping] | None,
) -> tuple[ExtraRepaymentRule, ...]:
    """Normalize rules (records or mappings) into a validated tuple."""
    if rules is None:
        return ()
    out = []
    for idx, rule in enumerate(rules):
        if isinstance(rule, Mapping):
            rule = ExtraRepaymentRule.from_dict(rule)
        elif not isinstance(rule, ExtraRepaymentRule):
            raise ConfigError(
                f"extra_repayments[{idx}]: expected ExtraRepaymentRule or mapping, "
                f"got {type(rule).__name__}"
            )
        # Fail before simulating if a kind has no evaluator
        get_rule_evaluator(rule.kind)
        out.append(rule)
    return tuple(out)


def coerce_rate_changes(
    rate_changes: Iterable[RateChange | Mapping] | None,
) -> tuple[RateChange, ...]:
    """Normalize rate changes (records or mappings) into a validated tuple."""
    if rate_changes is None:
        return ()
    out = []
    for idx, change in enumerate(rate_changes):
        if isinstance(change, Mapping):
            change = RateChange.from_dict(change)
        elif not isinstance(change, RateChange):
            raise ConfigError(
                f"rate_changes[{idx}]: expected RateChange or mapping, "
                f"got {type(change).__name__}"
            )
        out.append(change)
    return tuple(out)


def simulate_period(
    state: SimulationState,
    loan: LoanInput,
    rules: tuple[ExtraRepaymentRule, ...],
    resolver: RateChangeResolver,
    strategy: RepaymentStrategy,
    when: date,
) -> tuple[LoanPeriod, SimulationState, list[Event]]:
    """
    Simulate one period and return its row, the next state and any events.

    Args:
        state: State at the start of the period
        loan: Loan being simulated
        rules: Validated extra repayment rules
        resolver: Rate change resolver for the loan
        strategy: Repayment strategy selected for the loan
        when: Repayment date of the period

    Returns:
        (row, state at the start of the next period, events)
    """
    ppy = loan.periods_per_year
    events: list[Event] = []

    # 1. Rate change
    state, change = resolver.apply(state, loan, strategy.on_rate_change)
    if change is not None:
        events.append(
            Event(
                state.period,
                when,
                "rate_change",
                f"Rate changed to {change.new_rate:.2f}% (payment {state.payment:,.2f})",
                {"new_rate": change.new_rate, "payment": state.payment},
            )
        )

    # Interest-only repayments follow the balance
    if loan.is_interest_only:
        state = state.evolve(
            payment=periodic_payment(
                state.balance,
                state.annual_rate,
                loan.total_periods - state.period,
                ppy,
                loan.repayment_type,
            )
        )

    # 2-3. Interest and scheduled principal
    interest, principal = split_payment(
        state.balance, state.annual_rate, state.payment, ppy, loan.repayment_type
    )
    if not loan.is_interest_only and state.payment <= interest and state.balance > 0:
        warn_once(
            "NEGATIVE_AMORTIZATION",
            f"loan@{loan.principal:.2f}/{loan.annual_rate}%",
            f"Scheduled payment {state.payment:,.2f} does not cover interest "
            f"{interest:,.2f} at period {state.period}; the balance will not reduce.",
        )

    # 4-5. Extra repayments; surplus beyond the balance is discarded
    extra = extra_for_period(rules, state.period, ppy)
    extra_applied = min(extra, state.balance - principal)

    closing = state.balance - principal - extra_applied
    if closing < BALANCE_EPSILON:
        closing = 0.0

    # 6. Emit the row
    row = LoanPeriod(
        period=state.period,
        date=when,
        opening_balance=state.balance,
        closing_balance=closing,
        principal_paid=principal,
        extra_repayment=extra_applied,
        interest_charged=interest,
        total_payment=principal + extra_applied + interest,
        scheduled_payment=state.payment,
        annual_rate=state.annual_rate,
    )

    # 7. Strategy decides the next payment
    closed = state.evolve(period=state.period + 1, balance=closing)
    next_state = strategy.after_extra(closed, loan, extra_applied)
    if next_state.payment != closed.payment:
        events.append(
            Event(
                state.period,
                when,
                "recompute",
                f"Repayment recomputed to {next_state.payment:,.2f}",
                {"payment": next_state.payment, "previous": closed.payment},
            )
        )
    if closing == 0.0:
        events.append(
            Event(
                state.period,
                when,
                "payoff",
                f"Loan paid off on {when.isoformat()}",
                {"periods": state.period + 1},
            )
        )
    return row, next_state, events


def summarize(
    loan: LoanInput, schedule: list[LoanPeriod], regular_payment: float
) -> ScheduleSummary:
    """Derive the summary of an emitted schedule."""
    total_interest = sum(row.interest_charged for row in schedule)
    total_principal = sum(row.principal_paid for row in schedule)
    total_extra = sum(row.extra_repayment for row in schedule)
    last = schedule[-1] if schedule else None
    return ScheduleSummary(
        regular_payment=regular_payment,
        final_payment=last.scheduled_payment if last else regular_payment,
        total_interest=total_interest,
        total_principal=total_principal,
        total_extra=total_extra,
        total_paid=total_principal + total_extra + total_interest,
        payoff_date=last.date if last else loan.start_date,
        periods=len(schedule),
        scheduled_periods=loan.total_periods,
        paid_off=last is None or last.closing_balance == 0.0,
        remaining_balance=last.closing_balance if last else 0.0,
    )


def generate_schedule(
    loan: LoanInput,
    rules: Iterable[ExtraRepaymentRule | Mapping] | None = (),
    rate_changes: Iterable[RateChange | Mapping] | None = (),
) -> ScheduleResult:
    """
    Simulate a loan period by period and return its schedule and summary.

    The loop runs for at most ``years x periods_per_year`` periods and stops
    early once the balance reaches zero.

    Args:
        loan: The loan to simulate
        rules: Extra repayment rules (records or mappings)
        rate_changes: Scheduled rate changes (records or mappings, any order)

    Returns:
        ScheduleResult with ``schedule`` (list of LoanPeriod), ``summary`` and
        ``events``

    Raises:
        ConfigError: If the loan, a rule or a rate change is invalid. Raised
            before any period is simulated.

    **Example:**
        ```python
        from datetime import date
        from repaylab import LoanInput, generate_schedule

        loan = LoanInput(principal=500_000, annual_rate=6.0, years=30,
                         start_date=date(2026, 1, 1))
        result = generate_schedule(loan)
        result.summary.regular_payment  # ~2997.75
        ```
    """
    if not isinstance(loan, LoanInput):
        raise ConfigError(f"loan must be a LoanInput, got {type(loan).__name__}")
    rules = coerce_rules(rules)
    rate_changes = coerce_rate_changes(rate_changes)
    strategy = get_strategy(loan.strategy)

    ppy = loan.periods_per_year
    total = loan.total_periods
    resolver = RateChangeResolver(rate_changes, ppy)
    opening_rate = resolver.rate_at(0, loan.annual_rate)
    regular_payment = periodic_payment(
        loan.principal, opening_rate, total, ppy, loan.repayment_type
    )
    state = SimulationState(
        period=0,
        balance=loan.principal,
        annual_rate=opening_rate,
        payment=regular_payment,
    )
    dates = period_dates(loan.start_date, total, loan.frequency)

    logger.debug(
        "Simulating %s loan of %.2f at %.4f%% over %d periods (%s, %s)",
        loan.frequency,
        loan.principal,
        opening_rate,
        total,
        loan.repayment_type,
        loan.strategy,
    )

    schedule: list[LoanPeriod] = []
    events: list[Event] = []
    while state.period < total and state.balance > BALANCE_EPSILON:
        row, state, step_events = simulate_period(
            state, loan, rules, resolver, strategy, dates[state.period]
        )
        schedule.append(row)
        events.extend(step_events)

    summary = summarize(loan, schedule, regular_payment)
    logger.debug(
        "Schedule finished after %d/%d periods, paid_off=%s, interest=%.2f",
        summary.periods,
        total,
        summary.paid_off,
        summary.total_interest,
    )
    return ScheduleResult(
        loan=loan,
        schedule=schedule,
        summary=summary,
        events=events,
        rules=rules,
        rate_changes=rate_changes,
    )
