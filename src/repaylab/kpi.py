"""
KPI calculation utilities for loan schedule analysis.

This module provides standalone functions for computing key indicators from
schedule DataFrames as returned by :meth:`ScheduleResult.to_frame`. All
functions operate on DataFrames with the schedule columns and return pandas
Series, DataFrames or plain numbers.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import pandas as pd


def interest_paid_cum(df: pd.DataFrame, interest_col: str = "interest_charged") -> pd.Series:
    """
    Calculate cumulative interest paid.

    Args:
        df: Schedule DataFrame
        interest_col: Column name for interest charged per period

    Returns:
        Series with cumulative interest paid per period
    """
    return df[interest_col].cumsum().rename("interest_paid_cum")


def principal_paid_cum(
    df: pd.DataFrame,
    principal_col: str = "principal_paid",
    extra_col: str = "extra_repayment",
) -> pd.Series:
    """
    Calculate cumulative principal repaid, scheduled plus extra.

    Args:
        df: Schedule DataFrame
        principal_col: Column name for scheduled principal
        extra_col: Column name for net extra repayments

    Returns:
        Series with cumulative principal repaid per period
    """
    return (df[principal_col] + df[extra_col]).cumsum().rename("principal_paid_cum")


def yearly_breakdown(df: pd.DataFrame, date_col: str = "date") -> pd.DataFrame:
    """
    Aggregate principal, extra and interest per calendar year.

    Args:
        df: Schedule DataFrame
        date_col: Column holding the repayment dates

    Returns:
        DataFrame indexed by year with principal, extra, interest, total paid
        and the closing balance of the last period in the year
    """
    columns = ["principal", "extra", "interest", "total", "closing_balance"]
    if df.empty:
        return pd.DataFrame(columns=columns)

    years = pd.to_datetime(df[date_col]).dt.year
    grouped = df.groupby(years)
    out = pd.DataFrame(
        {
            "principal": grouped["principal_paid"].sum(),
            "extra": grouped["extra_repayment"].sum(),
            "interest": grouped["interest_charged"].sum(),
        }
    )
    out["total"] = out["principal"] + out["extra"] + out["interest"]
    out["closing_balance"] = grouped["closing_balance"].last()
    out.index.name = "year"
    return out[columns]


def interest_milestones(
    df: pd.DataFrame,
    fractions: Sequence[float] = (0.25, 0.5, 0.75, 1.0),
    interest_col: str = "interest_charged",
) -> pd.Series:
    """
    Find the first period in which cumulative interest reaches each fraction.

    Args:
        df: Schedule DataFrame
        fractions: Fractions of total interest (0 < f <= 1)
        interest_col: Column name for interest charged per period

    Returns:
        Series indexed by fraction with the first period label reaching it
        (NaN for all fractions when no interest is charged)

    Raises:
        ValueError: If a fraction lies outside (0, 1]
    """
    for fraction in fractions:
        if not 0 < fraction <= 1:
            raise ValueError(f"fractions must lie in (0, 1], got {fraction}")

    cum = df[interest_col].cumsum()
    total = cum.iloc[-1] if len(cum) else 0.0
    if total <= 0:
        return pd.Series(np.nan, index=list(fractions), name="interest_milestone")

    # Tolerance keeps the 100% milestone on the final period despite rounding
    tol = total * 1e-12
    periods = [cum.index[np.argmax(cum.to_numpy() >= f * total - tol)] for f in fractions]
    return pd.Series(periods, index=list(fractions), name="interest_milestone")


def cumulative_interest_difference(
    baseline: pd.DataFrame,
    variant: pd.DataFrame,
    interest_col: str = "interest_charged",
) -> pd.DataFrame:
    """
    Compare cumulative interest of two schedules aligned by period.

    The shorter schedule's cumulative interest is carried forward once it has
    ended, so the difference converges to the total interest saved.

    Args:
        baseline: Baseline schedule DataFrame
        variant: Variant schedule DataFrame (e.g. with extra repayments)
        interest_col: Column name for interest charged per period

    Returns:
        DataFrame with baseline and variant cumulative interest, the absolute
        difference (baseline - variant) and the difference as a percentage of
        the baseline
    """
    base_cum = baseline[interest_col].cumsum()
    var_cum = variant[interest_col].cumsum()
    index = base_cum.index.union(var_cum.index)
    base_cum = base_cum.reindex(index).ffill().fillna(0.0)
    var_cum = var_cum.reindex(index).ffill().fillna(0.0)

    difference = base_cum - var_cum
    pct = np.where(base_cum > 0, difference / base_cum.where(base_cum > 0, 1.0) * 100.0, 0.0)
    return pd.DataFrame(
        {
            "baseline_interest_cum": base_cum,
            "variant_interest_cum": var_cum,
            "difference": difference,
            "difference_pct": pct,
        },
        index=index,
    )


def interest_saved(
    baseline: pd.DataFrame,
    variant: pd.DataFrame,
    interest_col: str = "interest_charged",
) -> float:
    """Total interest of the baseline minus total interest of the variant."""
    return float(baseline[interest_col].sum() - variant[interest_col].sum())


def periods_saved(baseline: pd.DataFrame, variant: pd.DataFrame) -> int:
    """How many fewer periods the variant needs than the baseline."""
    return len(baseline) - len(variant)
