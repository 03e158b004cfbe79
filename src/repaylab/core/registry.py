"""
Registries mapping kind strings to their implementations.

Extra repayment rule kinds and repayment strategies are closed sets, each
resolved through one lookup table populated by
:func:`repaylab.strategies.registry.register_defaults`. An unknown kind fails
with ``ConfigError`` instead of silently contributing nothing.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, NamedTuple

from .errors import ConfigError

if TYPE_CHECKING:
    from .specs import ExtraRepaymentRule, LoanInput
    from .state import SimulationState

# (rule, period, periods_per_year) -> unsigned contribution for that period
RuleEvaluator = Callable[..., float]


class RepaymentStrategy(NamedTuple):
    """
    Behaviour that differs between reduce-term and reduce-repayment.

    Attributes:
        name: Strategy kind string
        after_extra: (state, loan, extra_applied) -> state, run after every
            period with the closing state of that period
        on_rate_change: (current_payment, recomputed_payment) -> payment in
            force once a rate change takes effect
    """

    name: str
    after_extra: Callable[[SimulationState, LoanInput, float], SimulationState]
    on_rate_change: Callable[[float, float], float]


ExtraRuleRegistry: dict[str, RuleEvaluator] = {}
StrategyRegistry: dict[str, RepaymentStrategy] = {}


def get_rule_evaluator(kind: str) -> RuleEvaluator:
    """Look up the evaluator for an extra repayment kind."""
    try:
        return ExtraRuleRegistry[kind]
    except KeyError:
        raise ConfigError(
            f"No evaluator registered for extra repayment kind '{kind}' "
            f"(registered: {sorted(ExtraRuleRegistry)})"
        ) from None


def get_strategy(name: str) -> RepaymentStrategy:
    """Look up a repayment strategy by name."""
    try:
        return StrategyRegistry[name]
    except KeyError:
        raise ConfigError(
            f"No repayment strategy registered for '{name}' "
            f"(registered: {sorted(StrategyRegistry)})"
        ) from None
