"""
Repayment strategies: what happens to the payment after extra repayments.

Both strategies share the per-period core in
:mod:`repaylab.core.schedule`; they only differ in how the payment evolves
once an extra repayment or a rate change has moved the balance off the
original schedule.
"""

from __future__ import annotations

import logging

from repaylab.core.kinds import K
from repaylab.core.registry import RepaymentStrategy
from repaylab.core.specs import LoanInput
from repaylab.core.state import SimulationState
from repaylab.core.utils import BALANCE_EPSILON

from .payment import periodic_payment

logger = logging.getLogger(__name__)


def reduce_term_step(
    state: SimulationState, loan: LoanInput, extra_applied: float
) -> SimulationState:
    """Keep the payment fixed; extra repayments bring the payoff date forward."""
    return state


def reduce_repayment_step(
    state: SimulationState, loan: LoanInput, extra_applied: float
) -> SimulationState:
    """
    Re-amortize after an extra repayment so the loan still ends on the term.

    The next payment is recomputed on the closing balance over the periods
    left in the original term. Periods without extras keep the payment.
    """
    if extra_applied == 0 or loan.is_interest_only:
        return state
    if state.balance <= BALANCE_EPSILON:
        return state
    remaining = loan.total_periods - state.period
    if remaining < 1:
        return state

    payment = periodic_payment(
        state.balance,
        state.annual_rate,
        remaining,
        loan.periods_per_year,
        loan.repayment_type,
    )
    logger.debug(
        "Reduce-repayment recompute at period %d: %.2f -> %.2f over %d periods",
        state.period,
        state.payment,
        payment,
        remaining,
    )
    return state.evolve(payment=payment)


def reduce_term_rate_payment(current: float, recomputed: float) -> float:
    """Payment never falls on a rate change; a lower rate shortens the term."""
    return max(current, recomputed)


def reduce_repayment_rate_payment(current: float, recomputed: float) -> float:
    """Always take the payment that finishes on the original term."""
    return recomputed


REDUCE_TERM = RepaymentStrategy(
    name=K.STRATEGY_REDUCE_TERM,
    after_extra=reduce_term_step,
    on_rate_change=reduce_term_rate_payment,
)

REDUCE_REPAYMENT = RepaymentStrategy(
    name=K.STRATEGY_REDUCE_REPAYMENT,
    after_extra=reduce_repayment_step,
    on_rate_change=reduce_repayment_rate_payment,
)
