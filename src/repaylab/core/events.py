"""
Event classes for tracking simulation occurrences.
"""

from __future__ import annotations

from datetime import date
from typing import Any, NamedTuple


class Event(NamedTuple):
    """
    Period-stamped event record for loan simulations.

    Events provide a structured way to track important occurrences during a
    schedule simulation, such as a rate change taking effect or the loan being
    paid off.

    Attributes:
        period: The 0-based period index when the event occurred
        date: Repayment date of that period
        kind: Event type identifier (e.g., 'rate_change', 'recompute', 'payoff')
        message: Human-readable description of the event
        meta: Optional dictionary with additional event metadata
    """

    period: int
    date: date
    kind: str
    message: str
    meta: dict[str, Any] | None = None
