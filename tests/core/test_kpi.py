"""
Tests for KPI utility functions.
"""

import numpy as np
import pandas as pd
import pytest
from repaylab.core.schedule import generate_schedule
from repaylab.core.specs import ExtraRepaymentRule
from repaylab.kpi import (
    cumulative_interest_difference,
    interest_milestones,
    interest_paid_cum,
    interest_saved,
    periods_saved,
    principal_paid_cum,
    yearly_breakdown,
)


class TestKPIUtilities:
    """Test KPI utility functions on a hand-built schedule."""

    @pytest.fixture
    def sample_df(self):
        """Six monthly periods of a small loan."""
        return pd.DataFrame(
            {
                "date": pd.to_datetime(
                    ["2026-11-01", "2026-12-01", "2027-01-01", "2027-02-01", "2027-03-01", "2027-04-01"]
                ),
                "principal_paid": [100.0, 110.0, 120.0, 130.0, 140.0, 150.0],
                "extra_repayment": [0.0, 50.0, 0.0, 0.0, 0.0, 0.0],
                "interest_charged": [40.0, 30.0, 20.0, 10.0, 0.0, 0.0],
                "closing_balance": [900.0, 740.0, 620.0, 490.0, 350.0, 200.0],
            },
            index=pd.RangeIndex(6, name="period"),
        )

    def test_interest_paid_cum(self, sample_df):
        result = interest_paid_cum(sample_df)
        assert result.name == "interest_paid_cum"
        assert list(result) == [40.0, 70.0, 90.0, 100.0, 100.0, 100.0]

    def test_principal_paid_cum(self, sample_df):
        result = principal_paid_cum(sample_df)
        assert list(result) == [100.0, 260.0, 380.0, 510.0, 650.0, 800.0]

    def test_yearly_breakdown(self, sample_df):
        result = yearly_breakdown(sample_df)
        assert list(result.index) == [2026, 2027]
        assert result.loc[2026, "principal"] == 210.0
        assert result.loc[2026, "extra"] == 50.0
        assert result.loc[2026, "interest"] == 70.0
        assert result.loc[2026, "total"] == 330.0
        assert result.loc[2026, "closing_balance"] == 740.0
        assert result.loc[2027, "closing_balance"] == 200.0

    def test_yearly_breakdown_empty(self):
        result = yearly_breakdown(pd.DataFrame(columns=["date"]))
        assert result.empty
        assert "closing_balance" in result.columns

    def test_interest_milestones(self, sample_df):
        result = interest_milestones(sample_df, fractions=(0.25, 0.5, 0.9, 1.0))
        # cumulative: 40, 70, 90, 100
        assert result[0.25] == 0
        assert result[0.5] == 1
        assert result[0.9] == 2
        assert result[1.0] == 3

    def test_interest_milestones_no_interest(self, sample_df):
        df = sample_df.assign(interest_charged=0.0)
        assert interest_milestones(df).isna().all()

    def test_interest_milestones_bad_fraction(self, sample_df):
        with pytest.raises(ValueError, match="fractions"):
            interest_milestones(sample_df, fractions=(0.0,))

    def test_interest_saved_and_periods_saved(self, sample_df):
        variant = sample_df.iloc[:4].assign(interest_charged=[30.0, 20.0, 10.0, 5.0])
        assert interest_saved(sample_df, variant) == pytest.approx(35.0)
        assert periods_saved(sample_df, variant) == 2


class TestScheduleKPIs:
    """KPIs over generated schedules."""

    def test_cumulative_interest_difference(self, home_loan):
        baseline = generate_schedule(home_loan).to_frame()
        variant = generate_schedule(
            home_loan, [ExtraRepaymentRule(kind="one-off", start_month=12, amount=50_000)]
        ).to_frame()

        diff = cumulative_interest_difference(baseline, variant)
        assert len(diff) == len(baseline)
        # Identical until the lump sum, then the gap only grows
        assert diff["difference"].iloc[:13].abs().max() == pytest.approx(0.0)
        assert np.all(np.diff(diff["difference"].to_numpy()) >= -1e-9)
        assert diff["difference"].iloc[-1] == pytest.approx(interest_saved(baseline, variant))
        assert diff["difference_pct"].iloc[-1] == pytest.approx(
            interest_saved(baseline, variant) / baseline["interest_charged"].sum() * 100
        )

    def test_milestones_on_amortizing_loan(self, home_loan):
        df = generate_schedule(home_loan).to_frame()
        milestones = interest_milestones(df)
        # Interest is front-loaded: half of it is paid well before half the term
        assert milestones[0.5] < 180
        assert milestones[1.0] == 359
        assert list(milestones) == sorted(milestones)

    def test_yearly_breakdown_matches_schedule_yearly(self, home_loan):
        result = generate_schedule(home_loan)
        breakdown = yearly_breakdown(result.to_frame())
        yearly = result.yearly()
        assert breakdown["interest"].to_numpy() == pytest.approx(
            yearly["interest_charged"].to_numpy()
        )
        assert breakdown["total"].to_numpy() == pytest.approx(yearly["total_payment"].to_numpy())
