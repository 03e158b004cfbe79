"""
Results and output structures for RepayLab.

The engine emits plain records (``LoanPeriod``, ``ScheduleSummary``,
``CombinedPeriod``) holding raw floats and dates. Rounding and currency
formatting are left to the caller; the ``to_frame`` helpers only reshape the
records into pandas DataFrames for analysis and charting layers.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any

import pandas as pd

from .events import Event
from .specs import ExtraRepaymentRule, LoanInput, RateChange, SplitScenario

SCHEDULE_COLUMNS = [
    "period",
    "date",
    "opening_balance",
    "principal_paid",
    "extra_repayment",
    "interest_charged",
    "total_payment",
    "closing_balance",
    "scheduled_payment",
    "annual_rate",
]


@dataclass(frozen=True)
class LoanPeriod:
    """
    One simulated repayment period.

    Attributes:
        period: 0-based period index
        date: Repayment date
        opening_balance: Balance before this period's repayment
        closing_balance: Balance after this period's repayment
        principal_paid: Principal repaid by the scheduled payment
        extra_repayment: Net extra applied (negative for redraws)
        interest_charged: Interest accrued this period
        total_payment: principal_paid + extra_repayment + interest_charged
        scheduled_payment: Scheduled repayment in force this period
        annual_rate: Annual rate in percent in force this period
    """

    period: int
    date: date
    opening_balance: float
    closing_balance: float
    principal_paid: float
    extra_repayment: float
    interest_charged: float
    total_payment: float
    scheduled_payment: float
    annual_rate: float

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["date"] = self.date.isoformat()
        return out


@dataclass(frozen=True)
class ScheduleSummary:
    """
    Aggregate view of a schedule.

    Attributes:
        regular_payment: Scheduled repayment at the first period (before extras)
        final_payment: Scheduled repayment in force at the last emitted period
        total_interest: Sum of interest charged
        total_principal: Sum of scheduled principal repaid
        total_extra: Sum of net extra repayments
        total_paid: Sum of principal, extras and interest
        payoff_date: Date of the last emitted period
        periods: Number of emitted periods
        scheduled_periods: Term in periods (term x periods per year)
        paid_off: True when the balance reached zero
        remaining_balance: Closing balance of the last emitted period
    """

    regular_payment: float
    final_payment: float
    total_interest: float
    total_principal: float
    total_extra: float
    total_paid: float
    payoff_date: date
    periods: int
    scheduled_periods: int
    paid_off: bool
    remaining_balance: float

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["payoff_date"] = self.payoff_date.isoformat()
        return out


@dataclass(frozen=True)
class ScheduleResult:
    """
    Output of :func:`repaylab.core.schedule.generate_schedule`.

    Holds the inputs alongside the emitted rows, the summary and the events
    raised during the simulation, with helpers to view the schedule as a
    DataFrame or aggregate it per calendar year.
    """

    loan: LoanInput
    schedule: list[LoanPeriod]
    summary: ScheduleSummary
    events: list[Event] = field(default_factory=list)
    rules: tuple[ExtraRepaymentRule, ...] = ()
    rate_changes: tuple[RateChange, ...] = ()

    def __len__(self) -> int:
        return len(self.schedule)

    def to_frame(self) -> pd.DataFrame:
        """
        Return the schedule as a DataFrame indexed by period.

        Columns follow ``SCHEDULE_COLUMNS``; ``date`` holds pandas Timestamps.
        """
        if not self.schedule:
            return pd.DataFrame(columns=SCHEDULE_COLUMNS).set_index("period")
        df = pd.DataFrame([asdict(row) for row in self.schedule], columns=SCHEDULE_COLUMNS)
        df["date"] = pd.to_datetime(df["date"])
        return df.set_index("period")

    def yearly(self) -> pd.DataFrame:
        """
        Aggregate the schedule per calendar year.

        Returns:
            DataFrame indexed by year with summed principal, extra, interest and
            payments plus the closing balance at year end
        """
        df = self.to_frame()
        if df.empty:
            return pd.DataFrame(
                columns=[
                    "principal_paid",
                    "extra_repayment",
                    "interest_charged",
                    "total_payment",
                    "closing_balance",
                ]
            )
        grouped = df.groupby(df["date"].dt.year)
        yearly = grouped[
            ["principal_paid", "extra_repayment", "interest_charged", "total_payment"]
        ].sum()
        yearly["closing_balance"] = grouped["closing_balance"].last()
        yearly.index.name = "year"
        return yearly

    def to_dict(self) -> dict[str, Any]:
        return {
            "loan": self.loan.to_dict(),
            "schedule": [row.to_dict() for row in self.schedule],
            "summary": self.summary.to_dict(),
            "events": [
                {
                    "period": e.period,
                    "date": e.date.isoformat(),
                    "kind": e.kind,
                    "message": e.message,
                    "meta": e.meta or {},
                }
                for e in self.events
            ],
        }


@dataclass(frozen=True)
class CombinedPeriod:
    """One period of two concurrently running loans, aligned by period index."""

    period: int
    date: date
    primary_payment: float
    secondary_payment: float
    total_payment: float
    interest_charged: float
    closing_balance: float

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["date"] = self.date.isoformat()
        return out


@dataclass(frozen=True)
class WhatIfResult:
    """
    Counterfactual: the single loan receives the split scenario's extra cash.

    Attributes:
        result: Schedule of the single loan with the extra cash applied
        extra_per_period: Extra paid per period (combined split payment minus
            the single loan's payment)
        extra_months: Months over which the extra is paid (secondary term)
        total_interest: Total interest of the counterfactual schedule
        interest_saved: Single loan interest minus counterfactual interest
        months_earlier: How much earlier the counterfactual pays off, in months
    """

    result: ScheduleResult
    extra_per_period: float
    extra_months: int
    total_interest: float
    interest_saved: float
    months_earlier: float

    @property
    def payoff_date(self) -> date:
        return self.result.summary.payoff_date

    def to_dict(self) -> dict[str, Any]:
        return {
            "extra_per_period": self.extra_per_period,
            "extra_months": self.extra_months,
            "total_interest": self.total_interest,
            "interest_saved": self.interest_saved,
            "months_earlier": self.months_earlier,
            "payoff_date": self.payoff_date.isoformat(),
            "periods": self.result.summary.periods,
        }


@dataclass(frozen=True)
class ComparisonResult:
    """
    Single loan (scenario A) versus a split of the same amount (scenario B).

    Deltas are expressed as B minus A, so a negative ``interest_delta`` means
    the split costs less interest. ``months_earlier_payoff`` is positive when
    the split scenario finishes first.
    """

    scenario_a: LoanInput
    scenario_b: SplitScenario
    single: ScheduleResult
    primary: ScheduleResult
    secondary: ScheduleResult
    combined: list[CombinedPeriod]
    combined_initial_payment: float
    combined_total_interest: float
    combined_total_paid: float
    combined_payoff_date: date
    interest_delta: float
    total_paid_delta: float
    months_earlier_payoff: float
    what_if: WhatIfResult | None = None

    def to_frame(self) -> pd.DataFrame:
        """Return the period-aligned comparison as a DataFrame indexed by period."""
        single = self.single.to_frame()[["total_payment", "closing_balance"]].rename(
            columns={
                "total_payment": "single_payment",
                "closing_balance": "single_balance",
            }
        )
        combined = pd.DataFrame([asdict(row) for row in self.combined])
        if combined.empty:
            return single
        combined["date"] = pd.to_datetime(combined["date"])
        combined = combined.set_index("period").rename(
            columns={
                "total_payment": "split_payment",
                "closing_balance": "split_balance",
                "interest_charged": "split_interest",
            }
        )
        df = combined.join(single, how="outer")
        return df.fillna(
            {
                "primary_payment": 0.0,
                "secondary_payment": 0.0,
                "split_payment": 0.0,
                "split_interest": 0.0,
                "split_balance": 0.0,
                "single_payment": 0.0,
                "single_balance": 0.0,
            }
        )

    def summary(self) -> dict[str, Any]:
        """Flat summary of both scenarios and their differentials."""
        out = {
            "total_amount": self.scenario_a.principal,
            "single_payment": self.single.summary.regular_payment,
            "single_total_interest": self.single.summary.total_interest,
            "single_total_paid": self.single.summary.total_paid,
            "single_payoff_date": self.single.summary.payoff_date.isoformat(),
            "primary_amount": self.scenario_b.primary.principal,
            "secondary_amount": self.scenario_b.secondary.principal,
            "primary_payment": self.primary.summary.regular_payment,
            "secondary_payment": self.secondary.summary.regular_payment,
            "split_initial_payment": self.combined_initial_payment,
            "split_total_interest": self.combined_total_interest,
            "split_total_paid": self.combined_total_paid,
            "split_payoff_date": self.combined_payoff_date.isoformat(),
            "interest_delta": self.interest_delta,
            "total_paid_delta": self.total_paid_delta,
            "months_earlier_payoff": self.months_earlier_payoff,
        }
        if self.what_if is not None:
            out["what_if"] = self.what_if.to_dict()
        return out

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary(),
            "single": self.single.to_dict(),
            "primary": self.primary.to_dict(),
            "secondary": self.secondary.to_dict(),
            "combined": [row.to_dict() for row in self.combined],
        }
