"""
Period calculator: repayment amount and interest/principal split.
"""

from __future__ import annotations

from repaylab.core.errors import ConfigError
from repaylab.core.kinds import K


def annuity_payment(balance: float, periodic_rate: float, periods: int) -> float:
    """
    Return the level payment that amortizes ``balance`` over ``periods``.

    The formula is:

        payment = B * r / (1 - (1 + r)^-n)

    where ``B`` is the balance, ``r`` the periodic rate and ``n`` the number
    of payments. When the rate is zero the payment simplifies to ``B / n``.
    """
    if periods < 1:
        raise ConfigError(f"remaining periods must be >= 1, got {periods}")
    if balance <= 0:
        return 0.0
    if periodic_rate == 0:
        return balance / periods
    return balance * periodic_rate / (1 - (1 + periodic_rate) ** -periods)


def periodic_payment(
    balance: float,
    annual_rate: float,
    remaining_periods: int,
    periods_per_year: int,
    repayment_type: str = K.TYPE_PRINCIPAL_AND_INTEREST,
) -> float:
    """
    Compute the scheduled repayment for the current rate and remaining term.

    Principal-and-interest loans get the annuity payment that clears the
    balance over the remaining periods; interest-only loans get
    ``balance x periodic rate``. The result is never negative.

    Args:
        balance: Outstanding balance at the start of the period
        annual_rate: Annual rate in percent currently in force
        remaining_periods: Periods left in the term (>= 1)
        periods_per_year: 52, 26 or 12
        repayment_type: 'principal-and-interest' or 'interest-only'

    Returns:
        Scheduled repayment per period

    Raises:
        ConfigError: If remaining_periods < 1 or the repayment type is unknown
    """
    if remaining_periods < 1:
        raise ConfigError(f"remaining periods must be >= 1, got {remaining_periods}")
    rate = annual_rate / 100.0 / periods_per_year
    if repayment_type == K.TYPE_INTEREST_ONLY:
        return max(balance * rate, 0.0)
    if repayment_type != K.TYPE_PRINCIPAL_AND_INTEREST:
        raise ConfigError(f"unknown repayment_type '{repayment_type}'")
    return annuity_payment(balance, rate, remaining_periods)


def split_payment(
    balance: float,
    annual_rate: float,
    payment: float,
    periods_per_year: int,
    repayment_type: str = K.TYPE_PRINCIPAL_AND_INTEREST,
) -> tuple[float, float]:
    """
    Split one period's scheduled repayment into interest and principal.

    Principal is clamped to ``[0, balance]``: a payment that does not cover
    the interest repays nothing, and the final payment never overshoots.

    Returns:
        (interest, principal)
    """
    interest = balance * annual_rate / 100.0 / periods_per_year
    if repayment_type == K.TYPE_INTEREST_ONLY:
        return interest, 0.0
    principal = min(max(payment - interest, 0.0), max(balance, 0.0))
    return interest, principal
