"""
Extra repayment rule evaluator.

Each rule kind has one evaluation function returning the rule's unsigned
contribution for a period. :func:`extra_for_period` resolves every rule
through the kind registry, applies the deposit/withdraw sign and sums.
"""

from __future__ import annotations

from collections.abc import Iterable

from repaylab.core.kinds import EXTRA_PERIODS_PER_YEAR
from repaylab.core.registry import get_rule_evaluator
from repaylab.core.specs import ExtraRepaymentRule
from repaylab.core.utils import first_period_of_month, period_to_month


def evaluate_one_off(rule: ExtraRepaymentRule, period: int, ppy: int) -> float:
    """Full amount on the first period of ``start_month``, zero otherwise."""
    if period == first_period_of_month(rule.start_month, ppy):
        return rule.amount
    return 0.0


def evaluate_recurring(rule: ExtraRepaymentRule, period: int, ppy: int) -> float:
    """
    Spread a weekly/fortnightly/monthly/annual amount over loan periods.

    A weekly $100 on a monthly loan contributes 100 x 52 / 12 each month;
    an annual $1,200 on a monthly loan contributes 100 each month.
    """
    if not rule.active_in_month(period_to_month(period, ppy)):
        return 0.0
    return rule.amount * EXTRA_PERIODS_PER_YEAR[rule.kind] / ppy


def evaluate_custom(rule: ExtraRepaymentRule, period: int, ppy: int) -> float:
    """Full amount on the first period of every ``interval_months``-th month."""
    month = period_to_month(period, ppy)
    if not rule.active_in_month(month):
        return 0.0
    if (month - rule.start_month) % rule.interval_months:
        return 0.0
    if period != first_period_of_month(month, ppy):
        return 0.0
    return rule.amount


def rule_contribution(rule: ExtraRepaymentRule, period: int, ppy: int) -> float:
    """Signed contribution of one rule (deposits positive, withdrawals negative)."""
    if rule.amount <= 0:
        return 0.0
    if rule.end_month is not None and rule.end_month < rule.start_month:
        return 0.0
    evaluate = get_rule_evaluator(rule.kind)
    return rule.sign * evaluate(rule, period, ppy)


def extra_for_period(
    rules: Iterable[ExtraRepaymentRule], period: int, periods_per_year: int
) -> float:
    """
    Net extra amount applied in ``period`` by all rules.

    Args:
        rules: Extra repayment rules, in any order
        period: 0-based period index
        periods_per_year: Loan repayment periods per year (52, 26 or 12)

    Returns:
        Sum of rule contributions; negative when redraws outweigh deposits

    Raises:
        ConfigError: If a rule has a kind without a registered evaluator
    """
    return sum(
        (rule_contribution(rule, period, periods_per_year) for rule in rules), 0.0
    )
