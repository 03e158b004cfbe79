"""
Strategy implementations for RepayLab.

This module contains the leaf calculators of the engine and the behaviours
selected by kind discriminators.

Strategy Categories:
- Period calculator: scheduled payment and interest/principal split
- Extra repayment evaluators: one function per rule kind
- Rate change resolver: active rate and payment recomputation
- Repayment strategies: reduce-term and reduce-repayment step functions

Registry System:
The module automatically registers the default evaluators and strategies in
the global registries when imported.
"""

from .extra import (
    evaluate_custom,
    evaluate_one_off,
    evaluate_recurring,
    extra_for_period,
    rule_contribution,
)
from .payment import annuity_payment, periodic_payment, split_payment
from .rates import RateChangeResolver
from .registry import register_defaults
from .repayment import (
    REDUCE_REPAYMENT,
    REDUCE_TERM,
    reduce_repayment_step,
    reduce_term_step,
)

# Register all default strategies when module is imported
register_defaults()

__all__ = [
    # Period calculator
    "annuity_payment",
    "periodic_payment",
    "split_payment",
    # Extra repayments
    "extra_for_period",
    "rule_contribution",
    "evaluate_one_off",
    "evaluate_recurring",
    "evaluate_custom",
    # Rate changes
    "RateChangeResolver",
    # Repayment strategies
    "REDUCE_TERM",
    "REDUCE_REPAYMENT",
    "reduce_term_step",
    "reduce_repayment_step",
    # Registry
    "register_defaults",
]
