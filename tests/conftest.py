"""
Shared fixtures for RepayLab tests.
"""

from datetime import date

import pytest
from repaylab.core.errors import reset_warnings
from repaylab.core.specs import LoanInput, SplitScenario

START = date(2026, 1, 1)


@pytest.fixture(autouse=True)
def _fresh_warnings():
    """warn_once state is global; every test starts from a clean slate."""
    reset_warnings()
    yield
    reset_warnings()


@pytest.fixture
def start_date():
    return START


@pytest.fixture
def home_loan():
    """500k at 6% over 30 years, monthly, reduce-term."""
    return LoanInput(principal=500_000, annual_rate=6.0, years=30, start_date=START)


@pytest.fixture
def single_loan():
    """The whole 480k on one mortgage."""
    return LoanInput(principal=480_000, annual_rate=5.85, years=30, start_date=START)


@pytest.fixture
def split_scenario():
    """The same 480k split into a smaller mortgage and a 5 year personal loan."""
    return SplitScenario(
        primary=LoanInput(principal=440_000, annual_rate=5.85, years=30, start_date=START),
        secondary=LoanInput(principal=40_000, annual_rate=8.5, years=5, start_date=START),
    )
