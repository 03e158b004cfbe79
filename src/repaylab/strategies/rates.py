"""
Rate change resolver.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from repaylab.core.specs import LoanInput, RateChange
from repaylab.core.state import SimulationState
from repaylab.core.utils import first_period_of_month

from .payment import periodic_payment

logger = logging.getLogger(__name__)


def _take_recomputed(current: float, recomputed: float) -> float:
    return recomputed


class RateChangeResolver:
    """
    Tracks scheduled rate changes for one loan.

    Changes are sorted by month (stable, so the supplied order breaks ties) and
    mapped to the first period of their month. When several changes share a
    month only the last one supplied takes effect. A change in month 0 sets the
    opening rate of the loan instead of triggering a recomputation.

    **Example:**
        ```python
        resolver = RateChangeResolver([RateChange(24, 6.5)], periods_per_year=12)
        resolver.rate_at(23, 6.0)  # 6.0
        resolver.rate_at(24, 6.0)  # 6.5
        ```
    """

    def __init__(self, rate_changes: Iterable[RateChange], periods_per_year: int):
        self.periods_per_year = periods_per_year
        self.changes: tuple[RateChange, ...] = tuple(
            sorted(rate_changes, key=lambda change: change.start_month)
        )
        self._by_period: dict[int, RateChange] = {}
        for change in self.changes:
            self._by_period[first_period_of_month(change.start_month, periods_per_year)] = change

    def __len__(self) -> int:
        return len(self._by_period)

    def change_at(self, period: int) -> RateChange | None:
        """The change taking effect at ``period``, if any."""
        return self._by_period.get(period)

    def rate_at(self, period: int, base_rate: float) -> float:
        """Annual rate in force during ``period``."""
        rate = base_rate
        for start, change in sorted(self._by_period.items()):
            if start > period:
                break
            rate = change.new_rate
        return rate

    def apply(
        self,
        state: SimulationState,
        loan: LoanInput,
        on_rate_change: Callable[[float, float], float] = _take_recomputed,
    ) -> tuple[SimulationState, RateChange | None]:
        """
        Apply the change taking effect at ``state.period``, if any.

        The Period Calculator is re-invoked on the balance at the start of the
        period over the ``total_periods - period`` periods left in the term;
        ``on_rate_change`` then picks the payment in force from the current and
        the recomputed one.

        Returns:
            (new state, applied change or None)
        """
        if state.period == 0:
            return state, None
        change = self.change_at(state.period)
        if change is None:
            return state, None

        remaining = loan.total_periods - state.period
        recomputed = periodic_payment(
            state.balance,
            change.new_rate,
            remaining,
            loan.periods_per_year,
            loan.repayment_type,
        )
        payment = on_rate_change(state.payment, recomputed)
        logger.debug(
            "Rate change at period %d: %.4f%% -> %.4f%%, payment %.2f -> %.2f",
            state.period,
            state.annual_rate,
            change.new_rate,
            state.payment,
            payment,
        )
        return state.evolve(annual_rate=change.new_rate, payment=payment), change
