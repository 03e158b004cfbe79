"""
Utility functions for RepayLab.
"""

from __future__ import annotations

from datetime import date

import numpy as np
import pandas as pd

from .errors import ConfigError
from .kinds import PERIODS_PER_YEAR, K

# Balance below which a loan counts as paid off (half a cent)
BALANCE_EPSILON = 0.005

_DAYS_PER_PERIOD = {
    K.FREQ_WEEKLY: 7,
    K.FREQ_FORTNIGHTLY: 14,
}


def periods_per_year(frequency: str) -> int:
    """
    Return the number of repayment periods per calendar year.

    Args:
        frequency: Repayment frequency ('weekly', 'fortnightly', 'monthly')

    Returns:
        52, 26 or 12

    Raises:
        ConfigError: If the frequency is unknown
    """
    try:
        return PERIODS_PER_YEAR[frequency]
    except (KeyError, TypeError):
        raise ConfigError(
            f"Unknown repayment frequency '{frequency}' "
            f"(expected one of {K.frequencies()})"
        ) from None


def period_to_month(period: int, ppy: int) -> int:
    """Map a 0-based period index to the 0-based month since loan start."""
    return (period * 12) // ppy


def first_period_of_month(month: int, ppy: int) -> int:
    """
    Return the first 0-based period index that falls in ``month``.

    This is the inverse of :func:`period_to_month` for the earliest period of a
    month: ``period_to_month(first_period_of_month(m, ppy), ppy) == m``.
    """
    return -((-month * ppy) // 12)


def periods_to_months(periods: int | float, ppy: int) -> float:
    """Convert a period count into (fractional) months."""
    return periods * 12.0 / ppy


def period_dates(start: date, count: int, frequency: str) -> list[date]:
    """
    Generate repayment dates for ``count`` periods after ``start``.

    The first repayment falls one period after the start date. Weekly and
    fortnightly schedules step by a fixed number of days; monthly schedules
    step by calendar months from the start date, clamping to the last day of
    shorter months (Jan 31 -> Feb 28 -> Mar 31).

    **Example:**
        ```python
        from datetime import date
        from repaylab.core.utils import period_dates

        period_dates(date(2026, 1, 31), 3, "monthly")
        # [date(2026, 2, 28), date(2026, 3, 31), date(2026, 4, 30)]
        ```
    """
    if count <= 0:
        return []

    days = _DAYS_PER_PERIOD.get(frequency)
    if days is not None:
        offsets = np.arange(1, count + 1) * np.timedelta64(days, "D")
        # datetime64[D].tolist() yields datetime.date objects
        return (np.datetime64(start, "D") + offsets).tolist()

    periods_per_year(frequency)  # validates the frequency
    anchor = pd.Timestamp(start)
    return [(anchor + pd.DateOffset(months=k)).date() for k in range(1, count + 1)]
