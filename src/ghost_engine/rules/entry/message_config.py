"""ENTRY rule: a message has text and a well-formed schedule."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ghost_engine.models.enums import (
    MAX_SPEECH_RATE,
    MIN_SPEECH_RATE,
    EntryType,
    IntervalType,
)
from ghost_engine.models.validation import ValidationIssue
from ghost_engine.rules.base import EntryRule
from ghost_engine.rules.common import (
    TIME_LIMIT_RE,
    check_enum,
    check_range,
    check_repeat_count,
    config_of,
    is_blank,
)


class MessageConfigRule(EntryRule):
    rule_id = "message_config"
    version = "1.0.0"

    def check_entry(
        self, entry: Mapping[str, Any], path: str, pattern: Mapping[str, Any]
    ) -> list[ValidationIssue]:
        if entry.get("type") != EntryType.MESSAGE.value:
            return []
        config = config_of(entry)
        config_path = f"{path}.config"
        issues = []

        if is_blank(config.get("message")):
            issues.append(
                self.issue(
                    f"{config_path}.message",
                    "message text is required",
                    value=config.get("message"),
                    suggestions=["Enter the words to announce"],
                )
            )

        interval = config.get("interval")
        if interval is not None and (
            not isinstance(interval, str) or not TIME_LIMIT_RE.match(interval)
        ):
            issues.append(
                self.issue(
                    f"{config_path}.interval",
                    "message interval must be in MM:SS format",
                    value=interval,
                    suggestions=['Use a value like "00:30"'],
                )
            )

        issues.extend(check_enum(self.rule_id, config, "intervalType", IntervalType, config_path))
        for key in ("countdown", "skipAtEndOfWorkout"):
            value = config.get(key)
            if value is not None and not isinstance(value, bool):
                issues.append(
                    self.issue(f"{config_path}.{key}", f"{key} must be true or false", value=value)
                )
        issues.extend(
            check_range(self.rule_id, config, "speechRate", MIN_SPEECH_RATE, MAX_SPEECH_RATE, config_path)
        )
        issues.extend(check_repeat_count(self.rule_id, config, config_path))
        return issues
