"""
Tests for input records: validation, derived fields and dict aliases.
"""

from datetime import date

import pytest
from repaylab.core.errors import ConfigError, RepayLabWarning
from repaylab.core.kinds import K
from repaylab.core.specs import ExtraRepaymentRule, LoanInput, RateChange, SplitScenario

START = date(2026, 1, 1)


class TestLoanInputValidation:
    """LoanInput rejects malformed loans on construction."""

    @pytest.mark.parametrize("principal", [0, -1, -500_000])
    def test_non_positive_principal(self, principal):
        with pytest.raises(ConfigError, match="principal"):
            LoanInput(principal=principal, annual_rate=6.0, years=30, start_date=START)

    def test_negative_rate(self):
        with pytest.raises(ConfigError, match="annual_rate"):
            LoanInput(principal=1000, annual_rate=-0.5, years=30, start_date=START)

    @pytest.mark.parametrize("years", [0, -5])
    def test_non_positive_term(self, years):
        with pytest.raises(ConfigError, match="years"):
            LoanInput(principal=1000, annual_rate=6.0, years=years, start_date=START)

    def test_term_shorter_than_one_period(self):
        with pytest.raises(ConfigError, match="shorter than one period"):
            LoanInput(principal=1000, annual_rate=6.0, years=0.01, start_date=START)

    def test_unknown_frequency(self):
        with pytest.raises(ConfigError, match="frequency"):
            LoanInput(
                principal=1000, annual_rate=6.0, years=1, start_date=START, frequency="daily"
            )

    def test_unknown_repayment_type(self):
        with pytest.raises(ConfigError, match="repayment_type"):
            LoanInput(
                principal=1000,
                annual_rate=6.0,
                years=1,
                start_date=START,
                repayment_type="balloon",
            )

    def test_unknown_strategy(self):
        with pytest.raises(ConfigError, match="strategy"):
            LoanInput(
                principal=1000, annual_rate=6.0, years=1, start_date=START, strategy="snowball"
            )

    def test_non_numeric_principal(self):
        with pytest.raises(ConfigError, match="must be a number"):
            LoanInput(principal="lots", annual_rate=6.0, years=1, start_date=START)

    def test_start_date_must_be_date(self):
        with pytest.raises(ConfigError, match="start_date"):
            LoanInput(principal=1000, annual_rate=6.0, years=1, start_date="2026-01-01")

    def test_numbers_are_coerced_to_float(self):
        loan = LoanInput(principal=1000, annual_rate=6, years=1, start_date=START)
        assert isinstance(loan.principal, float)
        assert isinstance(loan.annual_rate, float)


class TestLoanInputDerived:
    """Derived fields of LoanInput."""

    @pytest.mark.parametrize(
        "frequency,ppy,total",
        [
            (K.FREQ_WEEKLY, 52, 1560),
            (K.FREQ_FORTNIGHTLY, 26, 780),
            (K.FREQ_MONTHLY, 12, 360),
        ],
    )
    def test_periods(self, frequency, ppy, total):
        loan = LoanInput(
            principal=1000, annual_rate=6.0, years=30, start_date=START, frequency=frequency
        )
        assert loan.periods_per_year == ppy
        assert loan.total_periods == total

    def test_fractional_years_round(self):
        loan = LoanInput(principal=1000, annual_rate=6.0, years=2.5, start_date=START)
        assert loan.total_periods == 30

    def test_periodic_rate(self):
        loan = LoanInput(principal=1000, annual_rate=6.0, years=1, start_date=START)
        assert loan.periodic_rate == pytest.approx(0.005)

    def test_replace_revalidates(self):
        loan = LoanInput(principal=1000, annual_rate=6.0, years=1, start_date=START)
        assert loan.replace(annual_rate=7.0).annual_rate == 7.0
        with pytest.raises(ConfigError):
            loan.replace(principal=0)

    def test_is_hashable(self):
        loan = LoanInput(principal=1000, annual_rate=6.0, years=1, start_date=START)
        assert hash(loan) == hash(loan.replace())


class TestLoanInputFromDict:
    """LoanInput.from_dict accepts canonical keys and calculator aliases."""

    def test_canonical_keys(self):
        loan = LoanInput.from_dict(
            {
                "principal": 500_000,
                "annual_rate": 6.0,
                "years": 30,
                "start_date": "2026-01-01",
                "strategy": "reduce-repayment",
            }
        )
        assert loan.start_date == START
        assert loan.strategy == K.STRATEGY_REDUCE_REPAYMENT
        assert loan.frequency == K.FREQ_MONTHLY

    def test_calculator_aliases(self):
        loan = LoanInput.from_dict(
            {
                "amount": 500_000,
                "annualInterestRate": 6.0,
                "termYears": 30,
                "startDate": "2026-01-01",
                "frequency": "fortnightly",
                "repaymentType": "interestOnly",
                "repaymentStrategy": "reduceRepayment",
            }
        )
        assert loan.principal == 500_000
        assert loan.annual_rate == 6.0
        assert loan.years == 30
        assert loan.frequency == K.FREQ_FORTNIGHTLY
        assert loan.repayment_type == K.TYPE_INTEREST_ONLY
        assert loan.strategy == K.STRATEGY_REDUCE_REPAYMENT

    def test_principal_interest_value_alias(self):
        loan = LoanInput.from_dict(
            {
                "amount": 1000,
                "annualRate": 5,
                "years": 1,
                "start_date": START,
                "type": "principal-interest",
            }
        )
        assert loan.repayment_type == K.TYPE_PRINCIPAL_AND_INTEREST

    def test_canonical_key_wins_on_clash(self):
        with pytest.warns(RepayLabWarning, match="precedence: principal"):
            loan = LoanInput.from_dict(
                {
                    "principal": 1000,
                    "amount": 2000,
                    "annual_rate": 5,
                    "years": 1,
                    "start_date": START,
                }
            )
        assert loan.principal == 1000

    def test_unknown_key(self):
        with pytest.raises(ConfigError, match="unknown field 'ratee'"):
            LoanInput.from_dict(
                {"principal": 1000, "ratee": 5, "years": 1, "start_date": START}
            )

    def test_missing_key(self):
        with pytest.raises(ConfigError, match="missing required field 'years'"):
            LoanInput.from_dict({"principal": 1000, "annual_rate": 5, "start_date": START})

    def test_bad_date(self):
        with pytest.raises(ConfigError, match="invalid ISO date"):
            LoanInput.from_dict(
                {"principal": 1000, "annual_rate": 5, "years": 1, "start_date": "01/02/2026"}
            )

    @pytest.mark.parametrize("frequency", [["monthly"], {"every": "month"}, 12])
    def test_non_string_frequency(self, frequency):
        with pytest.raises(ConfigError, match="Unknown repayment frequency"):
            LoanInput.from_dict(
                {
                    "principal": 1000,
                    "annual_rate": 5,
                    "years": 1,
                    "start_date": START,
                    "frequency": frequency,
                }
            )

    def test_to_dict_round_trip(self):
        loan = LoanInput(principal=1000, annual_rate=5, years=1, start_date=START)
        assert LoanInput.from_dict(loan.to_dict()) == loan


class TestExtraRepaymentRule:
    """Validation and normalization of extra repayment rules."""

    def test_unknown_kind(self):
        with pytest.raises(ConfigError, match="unknown extra repayment kind"):
            ExtraRepaymentRule(kind="daily", start_month=0, amount=10)

    def test_unknown_direction(self):
        with pytest.raises(ConfigError, match="direction"):
            ExtraRepaymentRule(kind="monthly", start_month=0, amount=10, direction="borrow")

    def test_negative_amount(self):
        with pytest.raises(ConfigError, match="amount must be >= 0"):
            ExtraRepaymentRule(kind="monthly", start_month=0, amount=-10)

    def test_negative_start_month(self):
        with pytest.raises(ConfigError, match="start_month"):
            ExtraRepaymentRule(kind="monthly", start_month=-1, amount=10)

    def test_fractional_month(self):
        with pytest.raises(ConfigError, match="whole month"):
            ExtraRepaymentRule(kind="monthly", start_month=1.5, amount=10)

    def test_custom_requires_interval(self):
        with pytest.raises(ConfigError, match="interval_months"):
            ExtraRepaymentRule(kind="custom", start_month=0, amount=10)

    def test_custom_interval_positive(self):
        with pytest.raises(ConfigError, match="interval_months"):
            ExtraRepaymentRule(kind="custom", start_month=0, amount=10, interval_months=0)

    def test_interval_dropped_for_other_kinds(self):
        rule = ExtraRepaymentRule(kind="monthly", start_month=0, amount=10, interval_months=3)
        assert rule.interval_months is None

    def test_one_off_ignores_end_month(self):
        with pytest.warns(RepayLabWarning, match="end_month is ignored"):
            rule = ExtraRepaymentRule(kind="one-off", start_month=5, amount=10, end_month=8)
        assert rule.end_month is None

    def test_window_that_never_activates_warns(self):
        with pytest.warns(RepayLabWarning, match="never contributes"):
            rule = ExtraRepaymentRule(kind="monthly", start_month=10, amount=10, end_month=5)
        assert not rule.active_in_month(7)

    def test_active_in_month(self):
        rule = ExtraRepaymentRule(kind="monthly", start_month=3, amount=10, end_month=5)
        assert [m for m in range(8) if rule.active_in_month(m)] == [3, 4, 5]

    def test_open_ended(self):
        rule = ExtraRepaymentRule(kind="monthly", start_month=3, amount=10)
        assert rule.active_in_month(10_000)

    def test_sign(self):
        assert ExtraRepaymentRule(kind="monthly", start_month=0, amount=1).sign == 1
        withdraw = ExtraRepaymentRule(
            kind="monthly", start_month=0, amount=1, direction="withdraw"
        )
        assert withdraw.sign == -1

    def test_from_dict_aliases(self):
        rule = ExtraRepaymentRule.from_dict(
            {"frequency": "oneOff", "startMonth": 12, "amount": 5000, "type": "withdraw"}
        )
        assert rule.kind == K.EXTRA_ONE_OFF
        assert rule.start_month == 12
        assert rule.direction == K.DIRECTION_WITHDRAW

    def test_from_dict_null_direction_defaults_to_deposit(self):
        rule = ExtraRepaymentRule.from_dict(
            {"kind": "custom", "startMonth": 0, "amount": 100, "intervalMonths": 3, "direction": None}
        )
        assert rule.direction == K.DIRECTION_DEPOSIT
        assert rule.interval_months == 3


class TestRateChange:
    """Validation of rate changes."""

    def test_negative_rate(self):
        with pytest.raises(ConfigError, match="new_rate"):
            RateChange(start_month=12, new_rate=-1)

    def test_negative_month(self):
        with pytest.raises(ConfigError, match="start_month"):
            RateChange(start_month=-1, new_rate=5)

    def test_from_dict_aliases(self):
        change = RateChange.from_dict({"startMonth": 24, "newRate": 6.5})
        assert change == RateChange(start_month=24, new_rate=6.5)


class TestSplitScenario:
    """Validation of split scenarios."""

    def test_frequency_must_match(self):
        primary = LoanInput(principal=1000, annual_rate=5, years=10, start_date=START)
        secondary = LoanInput(
            principal=500, annual_rate=8, years=2, start_date=START, frequency="weekly"
        )
        with pytest.raises(ConfigError, match="share a repayment frequency"):
            SplitScenario(primary=primary, secondary=secondary)

    def test_start_date_must_match(self):
        primary = LoanInput(principal=1000, annual_rate=5, years=10, start_date=START)
        secondary = LoanInput(
            principal=500, annual_rate=8, years=2, start_date=date(2028, 1, 1)
        )
        with pytest.raises(ConfigError, match="start on the same date"):
            SplitScenario(primary=primary, secondary=secondary)

    def test_total_principal(self, split_scenario):
        assert split_scenario.total_principal == 480_000

    def test_from_dict(self):
        split = SplitScenario.from_dict(
            {
                "primary": {"amount": 440_000, "annualRate": 5.85, "years": 30, "startDate": "2026-01-01"},
                "secondary": {"amount": 40_000, "annualRate": 8.5, "years": 5, "startDate": "2026-01-01"},
            }
        )
        assert split.secondary.years == 5

    def test_from_dict_missing_loan(self):
        with pytest.raises(ConfigError, match="missing required field"):
            SplitScenario.from_dict(
                {"primary": {"principal": 1, "annual_rate": 1, "years": 1, "start_date": START}}
            )
