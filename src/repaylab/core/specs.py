"""
Input specifications for RepayLab simulations.

This module defines the immutable input records consumed by the engine:
``LoanInput`` (one loan), ``ExtraRepaymentRule`` (additional cash flow against
the loan), ``RateChange`` (a scheduled change of the annual rate) and
``SplitScenario`` (two loans funding one purchase together).

Every record validates itself on construction and raises ``ConfigError`` when
malformed, so the schedule generator never starts on bad input. The
``from_dict`` constructors accept the canonical snake_case keys as well as the
camelCase keys used by the calculator front end.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any

from .errors import ConfigError, warn_once
from .kinds import K
from .utils import periods_per_year

_LOAN_KEY_ALIASES = {
    "amount": "principal",
    "annualInterestRate": "annual_rate",
    "annualRate": "annual_rate",
    "rate": "annual_rate",
    "termYears": "years",
    "term_years": "years",
    "type": "repayment_type",
    "repaymentType": "repayment_type",
    "repaymentStrategy": "strategy",
    "repayment_strategy": "strategy",
    "startDate": "start_date",
}

_RULE_KEY_ALIASES = {
    "frequency": "kind",
    "startMonth": "start_month",
    "endMonth": "end_month",
    "intervalMonths": "interval_months",
    "type": "direction",
}

_RATE_CHANGE_KEY_ALIASES = {
    "startMonth": "start_month",
    "month": "start_month",
    "newRate": "new_rate",
    "rate": "new_rate",
}

_VALUE_ALIASES = {
    "principalAndInterest": K.TYPE_PRINCIPAL_AND_INTEREST,
    "principal-interest": K.TYPE_PRINCIPAL_AND_INTEREST,
    "principal_and_interest": K.TYPE_PRINCIPAL_AND_INTEREST,
    "interestOnly": K.TYPE_INTEREST_ONLY,
    "interest_only": K.TYPE_INTEREST_ONLY,
    "reduceTerm": K.STRATEGY_REDUCE_TERM,
    "reduce_term": K.STRATEGY_REDUCE_TERM,
    "reduceRepayment": K.STRATEGY_REDUCE_REPAYMENT,
    "reduce_repayment": K.STRATEGY_REDUCE_REPAYMENT,
    "one_off": K.EXTRA_ONE_OFF,
    "oneOff": K.EXTRA_ONE_OFF,
}


def _canonical_value(value: Any) -> Any:
    if isinstance(value, str):
        return _VALUE_ALIASES.get(value, value)
    return value


def _normalize_keys(
    data: Mapping[str, Any],
    aliases: dict[str, str],
    allowed: set[str],
    subject: str,
) -> dict[str, Any]:
    """Resolve key aliases; canonical keys win over aliases on conflict."""
    if not isinstance(data, Mapping):
        raise ConfigError(f"{subject}: expected a mapping, got {type(data).__name__}")

    out: dict[str, Any] = {}
    for key, value in data.items():
        if key in allowed:
            out[key] = value
    for key, value in data.items():
        if key in allowed:
            continue
        canonical = aliases.get(key)
        if canonical is None:
            raise ConfigError(f"{subject}: unknown field '{key}'")
        if canonical in out:
            if out[canonical] != value:
                warn_once(
                    "ALIAS_CLASH_" + canonical.upper(),
                    subject,
                    f"[{subject}] '{key}' ignored because '{canonical}' is set "
                    f"(precedence: {canonical}).",
                )
            continue
        out[canonical] = value
    return out


def _number(value: Any, field_name: str, subject: str) -> float:
    if isinstance(value, bool) or value is None:
        raise ConfigError(f"{subject}: {field_name} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigError(
            f"{subject}: {field_name} must be a number, got {value!r}"
        ) from None
    if not math.isfinite(number):
        raise ConfigError(f"{subject}: {field_name} must be finite, got {value!r}")
    return number


def _month(value: Any, field_name: str, subject: str) -> int:
    number = _number(value, field_name, subject)
    if number != int(number):
        raise ConfigError(f"{subject}: {field_name} must be a whole month, got {value!r}")
    if number < 0:
        raise ConfigError(f"{subject}: {field_name} must be >= 0, got {value!r}")
    return int(number)


def _coerce_date(value: Any, subject: str) -> date:
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            raise ConfigError(f"{subject}: invalid ISO date '{value}'") from None
    raise ConfigError(f"{subject}: start_date must be a date, got {value!r}")


@dataclass(frozen=True)
class LoanInput:
    """
    Immutable description of one loan.

    Attributes:
        principal: Amount borrowed (> 0)
        annual_rate: Nominal annual interest rate in percent (>= 0, e.g. 6.0)
        years: Loan term in years (> 0)
        start_date: Drawdown date; the first repayment falls one period later
        frequency: 'weekly', 'fortnightly' or 'monthly'
        repayment_type: 'principal-and-interest' or 'interest-only'
        strategy: 'reduce-term' or 'reduce-repayment'
    """

    principal: float
    annual_rate: float
    years: float
    start_date: date
    frequency: str = K.FREQ_MONTHLY
    repayment_type: str = K.TYPE_PRINCIPAL_AND_INTEREST
    strategy: str = K.STRATEGY_REDUCE_TERM

    def __post_init__(self):
        subject = "loan"
        principal = _number(self.principal, "principal", subject)
        if principal <= 0:
            raise ConfigError(f"{subject}: principal must be > 0, got {self.principal!r}")
        annual_rate = _number(self.annual_rate, "annual_rate", subject)
        if annual_rate < 0:
            raise ConfigError(
                f"{subject}: annual_rate must be >= 0, got {self.annual_rate!r}"
            )
        years = _number(self.years, "years", subject)
        if years <= 0:
            raise ConfigError(f"{subject}: years must be > 0, got {self.years!r}")

        ppy = periods_per_year(self.frequency)
        if round(years * ppy) < 1:
            raise ConfigError(f"{subject}: term of {years} years is shorter than one period")
        if self.repayment_type not in K.repayment_types():
            raise ConfigError(
                f"{subject}: unknown repayment_type '{self.repayment_type}' "
                f"(expected one of {K.repayment_types()})"
            )
        if self.strategy not in K.strategies():
            raise ConfigError(
                f"{subject}: unknown strategy '{self.strategy}' "
                f"(expected one of {K.strategies()})"
            )
        if not isinstance(self.start_date, date):
            raise ConfigError(f"{subject}: start_date must be a date, got {self.start_date!r}")

        object.__setattr__(self, "principal", principal)
        object.__setattr__(self, "annual_rate", annual_rate)
        object.__setattr__(self, "years", years)

    @property
    def periods_per_year(self) -> int:
        return periods_per_year(self.frequency)

    @property
    def total_periods(self) -> int:
        """Scheduled number of repayments (term x periods per year)."""
        return int(round(self.years * self.periods_per_year))

    @property
    def periodic_rate(self) -> float:
        return self.annual_rate / 100.0 / self.periods_per_year

    @property
    def is_interest_only(self) -> bool:
        return self.repayment_type == K.TYPE_INTEREST_ONLY

    def replace(self, **changes) -> LoanInput:
        """Return a copy with the given fields replaced (validated again)."""
        values = asdict(self)
        values.update(changes)
        return LoanInput(**values)

    def to_dict(self) -> dict[str, Any]:
        values = asdict(self)
        values["start_date"] = self.start_date.isoformat()
        return values

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LoanInput:
        """
        Build a loan from a mapping.

        Accepts canonical keys (``principal``, ``annual_rate``, ``years``,
        ``start_date``, ``frequency``, ``repayment_type``, ``strategy``) and the
        front-end aliases (``amount``, ``annualInterestRate``/``annualRate``,
        ``repaymentType``, ``repaymentStrategy``, ``startDate``). Value aliases
        such as ``principalAndInterest`` or ``reduceTerm`` are normalized.

        Raises:
            ConfigError: On unknown keys, missing required keys or bad values
        """
        allowed = {
            "principal",
            "annual_rate",
            "years",
            "start_date",
            "frequency",
            "repayment_type",
            "strategy",
        }
        values = _normalize_keys(data, _LOAN_KEY_ALIASES, allowed, "loan")
        for required in ("principal", "annual_rate", "years", "start_date"):
            if required not in values:
                raise ConfigError(f"loan: missing required field '{required}'")
        values["start_date"] = _coerce_date(values["start_date"], "loan")
        for key in ("frequency", "repayment_type", "strategy"):
            if key in values:
                values[key] = _canonical_value(values[key])
        return cls(**values)


@dataclass(frozen=True)
class ExtraRepaymentRule:
    """
    A stateless rule describing additional cash flow against a loan.

    Months are counted from the loan start (month 0 holds the first
    repayment). The contribution of a rule in a given period depends only on
    the period index, so rules can be evaluated in any order.

    Attributes:
        kind: 'one-off', 'weekly', 'fortnightly', 'monthly', 'annual' or 'custom'
        start_month: First month the rule is active (inclusive)
        amount: Amount per occurrence (>= 0)
        end_month: Last month the rule is active (inclusive); None means
            open-ended for recurring rules and is ignored for one-off rules
        interval_months: Months between occurrences (custom rules only)
        direction: 'deposit' (reduces the balance) or 'withdraw' (redraw)
    """

    kind: str
    start_month: int
    amount: float
    end_month: int | None = None
    interval_months: int | None = None
    direction: str = K.DIRECTION_DEPOSIT

    def __post_init__(self):
        subject = f"extra_repayment[{self.kind}@{self.start_month}]"
        if self.kind not in K.extra_kinds():
            raise ConfigError(
                f"{subject}: unknown extra repayment kind '{self.kind}' "
                f"(expected one of {K.extra_kinds()})"
            )
        if self.direction not in K.directions():
            raise ConfigError(
                f"{subject}: unknown direction '{self.direction}' "
                f"(expected one of {K.directions()})"
            )
        start_month = _month(self.start_month, "start_month", subject)
        amount = _number(self.amount, "amount", subject)
        if amount < 0:
            raise ConfigError(
                f"{subject}: amount must be >= 0 (use direction='withdraw' "
                f"for redraws), got {self.amount!r}"
            )

        end_month = self.end_month
        if self.kind == K.EXTRA_ONE_OFF:
            if end_month is not None:
                warn_once(
                    "ONE_OFF_END_MONTH",
                    subject,
                    f"[{subject}] end_month is ignored for one-off repayments.",
                )
            end_month = None
        elif end_month is not None:
            end_month = _month(end_month, "end_month", subject)
            if end_month < start_month:
                warn_once(
                    "RULE_NEVER_ACTIVE",
                    subject,
                    f"[{subject}] end_month {end_month} is before start_month "
                    f"{start_month}; the rule never contributes.",
                )

        interval = self.interval_months
        if self.kind == K.EXTRA_CUSTOM:
            if interval is None:
                raise ConfigError(f"{subject}: custom rules require interval_months")
            interval = _month(interval, "interval_months", subject)
            if interval < 1:
                raise ConfigError(f"{subject}: interval_months must be >= 1")
        else:
            interval = None

        object.__setattr__(self, "start_month", start_month)
        object.__setattr__(self, "end_month", end_month)
        object.__setattr__(self, "amount", amount)
        object.__setattr__(self, "interval_months", interval)

    @property
    def sign(self) -> int:
        """+1 for deposits, -1 for withdrawals."""
        return -1 if self.direction == K.DIRECTION_WITHDRAW else 1

    def active_in_month(self, month: int) -> bool:
        """True when ``month`` lies inside the rule window."""
        if month < self.start_month:
            return False
        return self.end_month is None or month <= self.end_month

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ExtraRepaymentRule:
        """Build a rule from canonical keys or front-end aliases."""
        allowed = {
            "kind",
            "start_month",
            "end_month",
            "amount",
            "interval_months",
            "direction",
        }
        values = _normalize_keys(data, _RULE_KEY_ALIASES, allowed, "extra_repayment")
        for required in ("kind", "start_month", "amount"):
            if required not in values:
                raise ConfigError(f"extra_repayment: missing required field '{required}'")
        values["kind"] = _canonical_value(values["kind"])
        if values.get("direction") is None:
            values.pop("direction", None)
        return cls(**values)


@dataclass(frozen=True)
class RateChange:
    """
    A scheduled change of the annual interest rate.

    Attributes:
        start_month: Month (since loan start) in which the new rate takes effect
        new_rate: New nominal annual rate in percent (>= 0)
    """

    start_month: int
    new_rate: float

    def __post_init__(self):
        subject = f"rate_change@{self.start_month}"
        start_month = _month(self.start_month, "start_month", subject)
        new_rate = _number(self.new_rate, "new_rate", subject)
        if new_rate < 0:
            raise ConfigError(f"{subject}: new_rate must be >= 0, got {self.new_rate!r}")
        object.__setattr__(self, "start_month", start_month)
        object.__setattr__(self, "new_rate", new_rate)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RateChange:
        values = _normalize_keys(
            data, _RATE_CHANGE_KEY_ALIASES, {"start_month", "new_rate"}, "rate_change"
        )
        for required in ("start_month", "new_rate"):
            if required not in values:
                raise ConfigError(f"rate_change: missing required field '{required}'")
        return cls(**values)


@dataclass(frozen=True)
class SplitScenario:
    """
    Two loans that together fund one purchase.

    Typically a smaller mortgage (``primary``) plus a shorter personal loan
    (``secondary``). Both loans must repay at the same frequency and start on
    the same date so their schedules can be aligned period by period.
    """

    primary: LoanInput
    secondary: LoanInput

    def __post_init__(self):
        if not isinstance(self.primary, LoanInput) or not isinstance(
            self.secondary, LoanInput
        ):
            raise ConfigError("split: primary and secondary must be LoanInput instances")
        if self.primary.frequency != self.secondary.frequency:
            raise ConfigError(
                "split: primary and secondary loans must share a repayment frequency "
                f"(got '{self.primary.frequency}' and '{self.secondary.frequency}')"
            )
        if self.primary.start_date != self.secondary.start_date:
            raise ConfigError(
                "split: primary and secondary loans must start on the same date "
                f"(got {self.primary.start_date} and {self.secondary.start_date})"
            )

    @property
    def total_principal(self) -> float:
        return self.primary.principal + self.secondary.principal

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SplitScenario:
        if not isinstance(data, Mapping):
            raise ConfigError("split: expected a mapping with 'primary' and 'secondary'")
        unknown = set(data) - {"primary", "secondary"}
        if unknown:
            raise ConfigError(f"split: unknown field(s) {sorted(unknown)}")
        try:
            primary, secondary = data["primary"], data["secondary"]
        except KeyError as exc:
            raise ConfigError(f"split: missing required field {exc}") from None
        return cls(
            primary=LoanInput.from_dict(primary),
            secondary=LoanInput.from_dict(secondary),
        )
