"""
Strategy registry setup for RepayLab.
"""

from repaylab.core.kinds import K
from repaylab.core.registry import ExtraRuleRegistry, StrategyRegistry

from .extra import evaluate_custom, evaluate_one_off, evaluate_recurring
from .repayment import REDUCE_REPAYMENT, REDUCE_TERM


def register_defaults():
    """
    Register the default rule evaluators and repayment strategies.

    Registered Rule Kinds:
        - 'one-off': single amount at the start month
        - 'weekly', 'fortnightly', 'monthly', 'annual': amount spread over
          loan periods at the ratio of periods per year
        - 'custom': single amount every ``interval_months`` months

    Registered Strategies:
        - 'reduce-term': keep the payment, finish earlier
        - 'reduce-repayment': recompute the payment, finish on the term

    Note:
        This function is automatically called when the module is imported.
    """
    ExtraRuleRegistry[K.EXTRA_ONE_OFF] = evaluate_one_off
    ExtraRuleRegistry[K.EXTRA_WEEKLY] = evaluate_recurring
    ExtraRuleRegistry[K.EXTRA_FORTNIGHTLY] = evaluate_recurring
    ExtraRuleRegistry[K.EXTRA_MONTHLY] = evaluate_recurring
    ExtraRuleRegistry[K.EXTRA_ANNUAL] = evaluate_recurring
    ExtraRuleRegistry[K.EXTRA_CUSTOM] = evaluate_custom

    StrategyRegistry[K.STRATEGY_REDUCE_TERM] = REDUCE_TERM
    StrategyRegistry[K.STRATEGY_REDUCE_REPAYMENT] = REDUCE_REPAYMENT
