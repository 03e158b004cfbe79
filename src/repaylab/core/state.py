"""
Per-step simulation state for the schedule generator.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class SimulationState:
    """
    Immutable snapshot of a loan between two periods.

    The schedule generator threads one of these through its loop, building a
    new record for each period instead of mutating shared variables. Each step
    can therefore be exercised in isolation by handing it a hand-built state.

    Attributes:
        period: Index of the next period to simulate (0-based)
        balance: Outstanding balance at the start of that period
        annual_rate: Annual rate in percent currently in force
        payment: Scheduled repayment currently in force (before extras)
    """

    period: int
    balance: float
    annual_rate: float
    payment: float

    def evolve(self, **changes) -> SimulationState:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)
