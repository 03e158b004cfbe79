"""
Error and warning classes for RepayLab.

This module defines the exception and warning types used throughout the engine
for rejecting invalid loan configurations and flagging suspicious ones.
"""

from __future__ import annotations

import warnings


class ConfigError(Exception):
    """
    Configuration error raised before a simulation starts.

    This exception is raised when a loan, an extra repayment rule or a rate
    change is malformed. The engine validates every input up front, so a caller
    either receives a complete schedule or this exception, never a partially
    computed schedule.

    **Common Causes:**
    - Non-positive principal or term
    - Negative interest rate
    - Unknown repayment frequency, repayment type or strategy
    - Unknown extra repayment kind, or a custom rule without an interval
    - Start date that is not a date

    **Example Usage:**
        ```python
        from datetime import date
        from repaylab.core.errors import ConfigError
        from repaylab.core.specs import LoanInput

        try:
            LoanInput(principal=-1, annual_rate=6.0, years=30,
                      start_date=date(2026, 1, 1))
        except ConfigError as e:
            print(f"Configuration error: {e}")
        ```
    """

    pass


class ScenarioFileError(ConfigError):
    """Raised when a scenario file cannot be read, parsed or validated."""


class RepayLabWarning(UserWarning):
    """Warning for RepayLab configuration issues that do not stop a simulation."""


# Tracks (subject, code) pairs already warned about
_warned: set[tuple[str, str]] = set()


def warn_once(code: str, subject: str, msg: str, *, category=RepayLabWarning):
    """Warn once per (subject, code) to avoid spam."""
    key = (subject, code)
    if key not in _warned:
        _warned.add(key)
        warnings.warn(msg, category, stacklevel=3)


def reset_warnings() -> None:
    """Forget which warnings were already emitted."""
    _warned.clear()
