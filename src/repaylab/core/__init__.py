"""
Core module for RepayLab.

This module contains the input and output records of the engine, the schedule
generator and the scenario comparison engine.
"""

from .errors import ConfigError, RepayLabWarning, ScenarioFileError
from .events import Event
from .kinds import EXTRA_PERIODS_PER_YEAR, PERIODS_PER_YEAR, K
from .registry import (
    ExtraRuleRegistry,
    RepaymentStrategy,
    StrategyRegistry,
    get_rule_evaluator,
    get_strategy,
)
from .specs import ExtraRepaymentRule, LoanInput, RateChange, SplitScenario
from .state import SimulationState
from .results import (
    CombinedPeriod,
    ComparisonResult,
    LoanPeriod,
    ScheduleResult,
    ScheduleSummary,
    WhatIfResult,
)
from .schedule import generate_schedule, simulate_period, summarize
from .comparison import combine_schedules, compare_scenarios, what_if_single_loan
from .catalog_loader import ScenarioDefinition, load_scenario
from .utils import (
    BALANCE_EPSILON,
    first_period_of_month,
    period_dates,
    period_to_month,
    periods_per_year,
    periods_to_months,
)

__all__ = [
    # Errors
    "ConfigError",
    "ScenarioFileError",
    "RepayLabWarning",
    # Kinds
    "K",
    "PERIODS_PER_YEAR",
    "EXTRA_PERIODS_PER_YEAR",
    # Events and Results
    "Event",
    "LoanPeriod",
    "ScheduleSummary",
    "ScheduleResult",
    "CombinedPeriod",
    "ComparisonResult",
    "WhatIfResult",
    # Specs
    "LoanInput",
    "ExtraRepaymentRule",
    "RateChange",
    "SplitScenario",
    # State
    "SimulationState",
    # Registries
    "ExtraRuleRegistry",
    "StrategyRegistry",
    "RepaymentStrategy",
    "get_rule_evaluator",
    "get_strategy",
    # Engine
    "generate_schedule",
    "simulate_period",
    "summarize",
    "compare_scenarios",
    "combine_schedules",
    "what_if_single_loan",
    # Scenario files
    "ScenarioDefinition",
    "load_scenario",
    # Utils
    "BALANCE_EPSILON",
    "periods_per_year",
    "period_to_month",
    "first_period_of_month",
    "periods_to_months",
    "period_dates",
]
