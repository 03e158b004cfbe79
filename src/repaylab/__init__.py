"""
RepayLab - Loan Amortization and Repayment Scenario Engine

RepayLab simulates loans period by period and answers "what if" questions about
them: what extra repayments save, how a rate change moves the payoff date, and
whether splitting a purchase over a mortgage and a shorter personal loan beats
a single loan.

Key Features:
- **Period-by-period schedules**: Weekly, fortnightly or monthly repayments
- **Extra repayments**: One-off, recurring and custom-interval rules, deposits
  as well as redraws
- **Rate changes**: Scheduled rate changes with payment recomputation
- **Strategies**: Reduce-term or reduce-repayment behaviour after extras,
  selected by kind discriminators
- **Scenario comparison**: Single loan vs split loans, with a what-if
  counterfactual for the single loan
- **Explicit**: Raw floats out, no rounding or currency formatting in the engine

Architecture Overview:
- **Specs**: Frozen input records (LoanInput, ExtraRepaymentRule, RateChange,
  SplitScenario) validated on construction
- **Strategies**: Period calculator, rule evaluators, rate resolver and
  repayment strategies registered by kind
- **Schedule Generator**: Folds an immutable SimulationState over the term
- **Comparison Engine**: Runs and aligns the schedules of two scenarios
- **KPIs**: pandas helpers for cumulative and yearly analysis

Quick Start:
    ```python
    from datetime import date
    from repaylab import ExtraRepaymentRule, LoanInput, generate_schedule

    loan = LoanInput(principal=500_000, annual_rate=6.0, years=30,
                     start_date=date(2026, 1, 1))
    lump_sum = ExtraRepaymentRule(kind="one-off", start_month=12, amount=20_000)

    result = generate_schedule(loan, rules=[lump_sum])
    print(result.summary.total_interest, result.summary.payoff_date)
    df = result.to_frame()
    ```

Available Kinds:
    Frequencies: 'weekly', 'fortnightly', 'monthly'
    Repayment types: 'principal-and-interest', 'interest-only'
    Strategies: 'reduce-term', 'reduce-repayment'
    Extra repayment rules: 'one-off', 'weekly', 'fortnightly', 'monthly',
        'annual', 'custom'
"""

# Version information
__version__ = "0.1.0"
__author__ = "RepayLab Team"
__description__ = "Loan amortization and repayment scenario engine"

from .core import (
    BALANCE_EPSILON,
    CombinedPeriod,
    ComparisonResult,
    ConfigError,
    Event,
    ExtraRepaymentRule,
    ExtraRuleRegistry,
    K,
    LoanInput,
    LoanPeriod,
    RateChange,
    RepaymentStrategy,
    RepayLabWarning,
    ScenarioDefinition,
    ScenarioFileError,
    ScheduleResult,
    ScheduleSummary,
    SimulationState,
    SplitScenario,
    StrategyRegistry,
    WhatIfResult,
    combine_schedules,
    compare_scenarios,
    generate_schedule,
    load_scenario,
    what_if_single_loan,
)

# Registers default evaluators and strategies
import repaylab.strategies  # noqa: E402,F401

from .kpi import (
    cumulative_interest_difference,
    interest_milestones,
    interest_paid_cum,
    interest_saved,
    periods_saved,
    principal_paid_cum,
    yearly_breakdown,
)

# Define what gets imported with "from repaylab import *"
__all__ = [
    # Inputs
    "LoanInput",
    "ExtraRepaymentRule",
    "RateChange",
    "SplitScenario",
    "ScenarioDefinition",
    # Outputs
    "LoanPeriod",
    "ScheduleSummary",
    "ScheduleResult",
    "CombinedPeriod",
    "ComparisonResult",
    "WhatIfResult",
    "Event",
    "SimulationState",
    # Engine
    "generate_schedule",
    "compare_scenarios",
    "combine_schedules",
    "what_if_single_loan",
    "load_scenario",
    # Registries
    "ExtraRuleRegistry",
    "StrategyRegistry",
    "RepaymentStrategy",
    # Errors
    "ConfigError",
    "ScenarioFileError",
    "RepayLabWarning",
    # KPI utilities
    "interest_paid_cum",
    "principal_paid_cum",
    "yearly_breakdown",
    "interest_milestones",
    "cumulative_interest_difference",
    "interest_saved",
    "periods_saved",
    # Constants
    "K",
    "BALANCE_EPSILON",
    # Version info
    "__version__",
    "__author__",
    "__description__",
]
