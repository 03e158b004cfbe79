"""
Tests for the period calculator math invariants.
"""

import pytest
from repaylab.core.errors import ConfigError
from repaylab.core.kinds import K
from repaylab.strategies.payment import annuity_payment, periodic_payment, split_payment


class TestAnnuityPayment:
    """Level payment that amortizes a balance."""

    def test_known_value(self):
        # 500k at 6% p.a. monthly over 30 years
        assert periodic_payment(500_000, 6.0, 360, 12) == pytest.approx(2997.75, abs=0.01)

    def test_zero_rate(self):
        assert annuity_payment(120_000, 0.0, 120) == pytest.approx(1000.0)

    def test_single_period_repays_with_interest(self):
        assert annuity_payment(1000, 0.01, 1) == pytest.approx(1010.0)

    def test_non_positive_balance(self):
        assert annuity_payment(0, 0.01, 12) == 0.0
        assert annuity_payment(-50, 0.01, 12) == 0.0

    def test_periods_must_be_positive(self):
        with pytest.raises(ConfigError, match="remaining periods"):
            annuity_payment(1000, 0.01, 0)
        with pytest.raises(ConfigError, match="remaining periods"):
            periodic_payment(1000, 5.0, 0, 12)

    def test_payment_amortizes_balance(self):
        balance, rate, periods = 250_000.0, 0.045 / 26, 520
        payment = annuity_payment(balance, rate, periods)
        for _ in range(periods):
            balance = balance * (1 + rate) - payment
        assert balance == pytest.approx(0.0, abs=1e-6)

    def test_higher_rate_higher_payment(self):
        low = periodic_payment(100_000, 4.0, 240, 12)
        high = periodic_payment(100_000, 5.0, 240, 12)
        assert high > low


class TestPeriodicPayment:
    """Repayment type dispatch."""

    def test_interest_only(self):
        payment = periodic_payment(300_000, 6.0, 60, 12, K.TYPE_INTEREST_ONLY)
        assert payment == pytest.approx(1500.0)

    def test_interest_only_weekly(self):
        payment = periodic_payment(520_000, 5.2, 260, 52, K.TYPE_INTEREST_ONLY)
        assert payment == pytest.approx(520.0)

    def test_unknown_repayment_type(self):
        with pytest.raises(ConfigError, match="repayment_type"):
            periodic_payment(1000, 5.0, 12, 12, "balloon")


class TestSplitPayment:
    """Interest/principal split of one period."""

    def test_split(self):
        interest, principal = split_payment(500_000, 6.0, 2997.75, 12)
        assert interest == pytest.approx(2500.0)
        assert principal == pytest.approx(497.75)

    def test_principal_clamped_to_balance(self):
        interest, principal = split_payment(100.0, 6.0, 2997.75, 12)
        assert interest == pytest.approx(0.5)
        assert principal == 100.0

    def test_payment_below_interest(self):
        interest, principal = split_payment(1_000_000, 6.0, 1000.0, 12)
        assert interest == pytest.approx(5000.0)
        assert principal == 0.0

    def test_interest_only_repays_nothing(self):
        interest, principal = split_payment(300_000, 6.0, 1500.0, 12, K.TYPE_INTEREST_ONLY)
        assert interest == pytest.approx(1500.0)
        assert principal == 0.0
