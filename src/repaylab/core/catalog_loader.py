"""Utilities for loading loan scenarios from YAML/JSON sources."""

from __future__ import annotations

import json
from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError, ScenarioFileError
from .specs import ExtraRepaymentRule, LoanInput, RateChange, SplitScenario

__all__ = [
    "ScenarioDefinition",
    "load_scenario",
]

_TOP_LEVEL_KEYS = {
    "version",
    "name",
    "defaults",
    "loan",
    "extra_repayments",
    "rate_changes",
    "split",
}


@dataclass(slots=True)
class ScenarioDefinition:
    """
    Structured representation of a scenario file.

    A scenario file describes one loan with optional extra repayment rules and
    rate changes, and optionally a split (primary + secondary loan) to compare
    the loan against.

    **Example (YAML):**
        ```yaml
        name: Home loan
        defaults:
          start_date: 2026-01-01
          frequency: monthly
        loan:
          principal: 480000
          annual_rate: 5.85
          years: 30
        extra_repayments:
          - {kind: one-off, start_month: 12, amount: 20000}
        rate_changes:
          - {start_month: 24, new_rate: 6.35}
        split:
          primary: {principal: 440000, annual_rate: 5.85, years: 30}
          secondary: {principal: 40000, annual_rate: 8.5, years: 5}
        ```
    """

    loan: LoanInput
    rules: list[ExtraRepaymentRule] = field(default_factory=list)
    rate_changes: list[RateChange] = field(default_factory=list)
    split: SplitScenario | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source: str = "<memory>"


def load_scenario(
    source: str | Path | dict[str, Any], *, format: str | None = None
) -> ScenarioDefinition:
    """
    Parse a scenario from a YAML/JSON file or a mapping.

    The optional ``defaults`` section is merged into ``loan`` and into both
    loans of ``split`` (explicit values win), so shared settings such as the
    start date or frequency are written once.

    Raises:
        FileNotFoundError: If ``source`` is a path that does not exist
        ScenarioFileError: If the file cannot be parsed or an entry is invalid
    """
    mapping, label = _read_source(source, format=format)
    unknown = set(mapping) - _TOP_LEVEL_KEYS
    if unknown:
        raise ScenarioFileError(f"{label}: unknown top-level key(s) {sorted(unknown)}")

    defaults = _ensure_dict(mapping.get("defaults"), f"{label}::defaults")
    loan = _build(
        LoanInput.from_dict,
        _merge(defaults, _ensure_dict(mapping.get("loan"), f"{label}::loan")),
        f"{label}::loan",
    )

    rules = [
        _build(ExtraRepaymentRule.from_dict, entry, f"{label}::extra_repayments[{idx}]")
        for idx, entry in enumerate(
            _ensure_list(mapping.get("extra_repayments"), f"{label}::extra_repayments")
        )
    ]
    rate_changes = [
        _build(RateChange.from_dict, entry, f"{label}::rate_changes[{idx}]")
        for idx, entry in enumerate(
            _ensure_list(mapping.get("rate_changes"), f"{label}::rate_changes")
        )
    ]

    split = None
    if mapping.get("split") is not None:
        raw_split = _ensure_dict(mapping["split"], f"{label}::split")
        split = _build(
            SplitScenario.from_dict,
            {
                key: _merge(defaults, _ensure_dict(value, f"{label}::split.{key}"))
                for key, value in raw_split.items()
            },
            f"{label}::split",
        )

    metadata = {
        "version": mapping.get("version", 1),
        "name": mapping.get("name"),
    }
    return ScenarioDefinition(
        loan=loan,
        rules=rules,
        rate_changes=rate_changes,
        split=split,
        metadata=metadata,
        source=label,
    )


def _read_source(
    source: str | Path | dict[str, Any], *, format: str | None
) -> tuple[dict[str, Any], str]:
    if isinstance(source, dict):
        return deepcopy(source), "<mapping>"

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(path)

    fmt = (format or path.suffix.lstrip(".")).lower()
    if fmt not in {"yaml", "yml", "", "json"}:
        raise ScenarioFileError(f"Unsupported scenario format '{fmt}' for {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ScenarioFileError(f"{path} is not valid UTF-8 text: {exc}") from exc
    try:
        data = json.loads(text) if fmt == "json" else yaml.safe_load(text)
    # ValueError covers JSONDecodeError and YAML timestamps that are not calendar dates
    except (yaml.YAMLError, ValueError) as exc:
        raise ScenarioFileError(f"Could not parse {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ScenarioFileError(f"Scenario root must be a mapping (source={path})")
    return data, str(path)


def _build(factory, data: Any, ctx: str):
    try:
        return factory(data)
    except ScenarioFileError:
        raise
    except ConfigError as exc:
        raise ScenarioFileError(f"{ctx}: {exc}") from exc


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = deepcopy(base)
    result.update(deepcopy(override))
    return result


def _ensure_dict(value: Any, ctx: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ScenarioFileError(f"{ctx}: expected a mapping")
    return deepcopy(value)


def _ensure_list(value: Any, ctx: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ScenarioFileError(f"{ctx}: expected a list")
    return list(value)
