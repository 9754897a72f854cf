"""Shared helpers for validation rules: document traversal and range checks."""

from __future__ import annotations

import math
import re
from collections.abc import Iterator, Mapping
from enum import Enum
from typing import Any

from ghost_engine.models.enums import (
    MAX_INTERVAL,
    MAX_INTERVAL_OFFSET,
    MAX_REPEAT_COUNT,
    MAX_SPEECH_RATE,
    MIN_INTERVAL,
    MIN_INTERVAL_OFFSET,
    MIN_REPEAT_COUNT,
    MIN_SHOT_ANNOUNCEMENT_LEAD_TIME,
    MIN_SPEECH_RATE,
    IntervalOffsetType,
    IssueSeverity,
    LimitsType,
    PositionType,
    SplitStepSpeed,
)
from ghost_engine.models.validation import ValidationIssue

TIME_LIMIT_RE = re.compile(r"^[0-5][0-9]:[0-5][0-9]$")


def config_of(node: Mapping[str, Any]) -> Mapping[str, Any]:
    """The node's ``config`` mapping, or an empty one when absent or malformed."""
    config = node.get("config")
    return config if isinstance(config, Mapping) else {}


def iter_patterns(data: Mapping[str, Any]) -> Iterator[tuple[str, Mapping[str, Any]]]:
    """Yield ``(path, pattern)`` for each pattern that is a mapping."""
    if not isinstance(data, Mapping):
        return
    patterns = data.get("patterns")
    if not isinstance(patterns, list):
        return
    for index, pattern in enumerate(patterns):
        if isinstance(pattern, Mapping):
            yield f"patterns[{index}]", pattern


def iter_entries(
    data: Mapping[str, Any],
) -> Iterator[tuple[str, Mapping[str, Any], Mapping[str, Any]]]:
    """Yield ``(path, entry, pattern)`` for each entry that is a mapping."""
    for pattern_path, pattern in iter_patterns(data):
        entries = pattern.get("entries")
        if not isinstance(entries, list):
            continue
        for index, entry in enumerate(entries):
            if isinstance(entry, Mapping):
                yield f"{pattern_path}.entries[{index}]", entry, pattern


def is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def is_valid_position_type(value: Any) -> bool:
    """normal, linked, last, or a positive-integer string."""
    if value is None:
        return True
    if not isinstance(value, str):
        return False
    if value in (PositionType.NORMAL.value, PositionType.LINKED.value, PositionType.LAST.value):
        return True
    return value.isdigit() and int(value) >= 1


def enum_values(enum_cls: type[Enum]) -> list[str]:
    return [member.value for member in enum_cls]


def check_enum(
    rule_id: str,
    config: Mapping[str, Any],
    key: str,
    enum_cls: type[Enum],
    path: str,
) -> list[ValidationIssue]:
    """Issue when ``config[key]`` is present but not one of *enum_cls*'s values."""
    if key not in config or config[key] is None:
        return []
    allowed = enum_values(enum_cls)
    if config[key] in allowed:
        return []
    return [
        ValidationIssue(
            field=f"{path}.{key}",
            message=f"{key} must be one of: {', '.join(allowed)}",
            value=config[key],
            suggestions=tuple(f"Use '{value}'" for value in allowed),
            rule_id=rule_id,
            severity=IssueSeverity.ERROR,
        )
    ]


def check_range(
    rule_id: str,
    config: Mapping[str, Any],
    key: str,
    low: float | None,
    high: float | None,
    path: str,
) -> list[ValidationIssue]:
    """Issues for ``config[key]`` being non-numeric (error) or out of range (warning)."""
    if key not in config or config[key] is None:
        return []
    value = config[key]
    field = f"{path}.{key}"
    if not is_number(value):
        return [
            ValidationIssue(
                field=field,
                message=f"{key} must be a number",
                value=value,
                suggestions=("Use a numeric value",),
                rule_id=rule_id,
                severity=IssueSeverity.ERROR,
            )
        ]
    if (low is not None and value < low) or (high is not None and value > high):
        if low is not None and high is not None:
            hint = f"Use a value between {low} and {high}"
        elif low is not None:
            hint = f"Use a value of at least {low}"
        else:
            hint = f"Use a value of at most {high}"
        return [
            ValidationIssue(
                field=field,
                message=f"{key} is out of range",
                value=value,
                suggestions=(hint,),
                rule_id=rule_id,
                severity=IssueSeverity.WARNING,
            )
        ]
    return []


def check_interval_offset(rule_id: str, config: Mapping[str, Any], path: str) -> list[ValidationIssue]:
    """intervalOffset must be ``{min, max}`` within [-2, 2] with min <= max."""
    offset = config.get("intervalOffset")
    if offset is None:
        return []
    field = f"{path}.intervalOffset"
    if not isinstance(offset, Mapping):
        return [
            ValidationIssue(
                field=field,
                message="intervalOffset must be an object with min and max",
                value=offset,
                suggestions=('Use {"min": 0.0, "max": 0.0}',),
                rule_id=rule_id,
            )
        ]
    issues = []
    for bound in ("min", "max"):
        issues.extend(
            check_range(rule_id, offset, bound, MIN_INTERVAL_OFFSET, MAX_INTERVAL_OFFSET, field)
        )
    low, high = offset.get("min"), offset.get("max")
    if is_number(low) and is_number(high) and low > high:
        issues.append(
            ValidationIssue(
                field=field,
                message="intervalOffset min must not exceed max",
                value=dict(offset),
                suggestions=("Swap min and max",),
                rule_id=rule_id,
                severity=IssueSeverity.WARNING,
            )
        )
    return issues


def check_inheritable(rule_id: str, config: Mapping[str, Any], path: str) -> list[ValidationIssue]:
    """Ranges and vocabularies shared by every level's inheritable fields.

    The lead time is only checked against its floor here; the comparison
    with the resolved interval is inheritance-aware and lives in the shot rule.
    """
    issues = []
    issues.extend(check_range(rule_id, config, "speechRate", MIN_SPEECH_RATE, MAX_SPEECH_RATE, path))
    issues.extend(check_range(rule_id, config, "interval", MIN_INTERVAL, MAX_INTERVAL, path))
    issues.extend(
        check_range(
            rule_id, config, "shotAnnouncementLeadTime", MIN_SHOT_ANNOUNCEMENT_LEAD_TIME, None, path
        )
    )
    issues.extend(check_interval_offset(rule_id, config, path))
    issues.extend(check_enum(rule_id, config, "intervalOffsetType", IntervalOffsetType, path))
    issues.extend(check_enum(rule_id, config, "splitStepSpeed", SplitStepSpeed, path))
    auto_voice = config.get("autoVoiceSplitStep")
    if auto_voice is not None and not isinstance(auto_voice, bool):
        issues.append(
            ValidationIssue(
                field=f"{path}.autoVoiceSplitStep",
                message="autoVoiceSplitStep must be true or false",
                value=auto_voice,
                rule_id=rule_id,
            )
        )
    return issues


def check_repeat_count(rule_id: str, config: Mapping[str, Any], path: str) -> list[ValidationIssue]:
    """repeatCount: integer 1-10, ``{type: fixed, count}`` or ``{type: random, min, max}``."""
    if "repeatCount" not in config or config["repeatCount"] is None:
        return []
    value = config["repeatCount"]
    field = f"{path}.repeatCount"
    hint = f"Use a whole number between {MIN_REPEAT_COUNT} and {MAX_REPEAT_COUNT}"

    if isinstance(value, Mapping):
        if value.get("type") == "random":
            issues = []
            for bound in ("min", "max"):
                bound_value = value.get(bound)
                if not is_number(bound_value) or int(bound_value) != bound_value:
                    issues.append(
                        ValidationIssue(
                            field=f"{field}.{bound}",
                            message=f"random repeatCount needs a whole-number {bound}",
                            value=bound_value,
                            suggestions=(hint,),
                            rule_id=rule_id,
                        )
                    )
                else:
                    issues.extend(
                        check_range(rule_id, value, bound, MIN_REPEAT_COUNT, MAX_REPEAT_COUNT, field)
                    )
            low, high = value.get("min"), value.get("max")
            if is_number(low) and is_number(high) and low > high:
                issues.append(
                    ValidationIssue(
                        field=field,
                        message="random repeatCount min must not exceed max",
                        value=dict(value),
                        suggestions=("Swap min and max",),
                        rule_id=rule_id,
                    )
                )
            return issues
        if value.get("type") in (None, "fixed"):
            value = value.get("count")
        else:
            return [
                ValidationIssue(
                    field=f"{field}.type",
                    message="repeatCount type must be 'fixed' or 'random'",
                    value=value.get("type"),
                    rule_id=rule_id,
                )
            ]

    if not is_number(value) or int(value) != value:
        return [
            ValidationIssue(
                field=field,
                message="repeatCount must be a whole number",
                value=value,
                suggestions=(hint,),
                rule_id=rule_id,
            )
        ]
    if not MIN_REPEAT_COUNT <= value <= MAX_REPEAT_COUNT:
        return [
            ValidationIssue(
                field=field,
                message="repeatCount is out of range",
                value=value,
                suggestions=(hint,),
                rule_id=rule_id,
                severity=IssueSeverity.WARNING,
            )
        ]
    return []


def check_limits(
    rule_id: str,
    limits: Any,
    path: str,
    min_shots: int,
    max_shots: int,
) -> list[ValidationIssue]:
    """A limits object: known type, and a value that fits it."""
    field = f"{path}.limits"
    if not isinstance(limits, Mapping):
        return [
            ValidationIssue(
                field=field,
                message="limits must be an object with a type",
                value=limits,
                suggestions=('Use {"type": "all-shots"}',),
                rule_id=rule_id,
            )
        ]
    limits_type = limits.get("type")
    allowed = enum_values(LimitsType)
    if limits_type not in allowed:
        return [
            ValidationIssue(
                field=f"{field}.type",
                message=f"limits type must be one of: {', '.join(allowed)}",
                value=limits_type,
                suggestions=tuple(f"Use '{value}'" for value in allowed),
                rule_id=rule_id,
            )
        ]

    value = limits.get("value")
    if limits_type == LimitsType.SHOT_LIMIT.value:
        shot_hint = f"Use a whole number between {min_shots} and {max_shots}"
        if not is_number(value) or int(value) != value:
            return [
                ValidationIssue(
                    field=f"{field}.value",
                    message="shot-limit needs a whole-number value",
                    value=value,
                    suggestions=(shot_hint,),
                    rule_id=rule_id,
                )
            ]
        if not min_shots <= value <= max_shots:
            return [
                ValidationIssue(
                    field=f"{field}.value",
                    message=f"shot limit must be between {min_shots} and {max_shots}",
                    value=value,
                    suggestions=(shot_hint,),
                    rule_id=rule_id,
                    severity=IssueSeverity.WARNING,
                )
            ]
    elif limits_type == LimitsType.TIME_LIMIT.value:
        if not isinstance(value, str) or not TIME_LIMIT_RE.match(value):
            return [
                ValidationIssue(
                    field=f"{field}.value",
                    message="time-limit value must be in MM:SS format",
                    value=value,
                    suggestions=('Use a value like "05:00"',),
                    rule_id=rule_id,
                )
            ]
        if value == "00:00":
            return [
                ValidationIssue(
                    field=f"{field}.value",
                    message="time limit must be longer than zero",
                    value=value,
                    suggestions=('Use a value like "05:00"',),
                    rule_id=rule_id,
                    severity=IssueSeverity.WARNING,
                )
            ]
    return []
