"""ENTRY rule: a message with a non-zero interval must say how it combines with speech."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ghost_engine.models.enums import EntryType
from ghost_engine.models.validation import ValidationIssue
from ghost_engine.rules.base import EntryRule
from ghost_engine.rules.common import config_of
from ghost_engine.timing.time_format import parse_time_limit


class MessageIntervalTypeRule(EntryRule):
    rule_id = "message_interval_type_required"
    version = "1.0.0"

    def check_entry(
        self, entry: Mapping[str, Any], path: str, pattern: Mapping[str, Any]
    ) -> list[ValidationIssue]:
        if entry.get("type") != EntryType.MESSAGE.value:
            return []
        config = config_of(entry)
        if parse_time_limit(config.get("interval")) <= 0 or config.get("intervalType"):
            return []
        return [
            self.issue(
                f"{path}.config.intervalType",
                "a message with a non-zero interval must specify intervalType",
                value=config.get("interval"),
                suggestions=[
                    "Use 'fixed' to wait max(speech, interval)",
                    "Use 'additional' to wait speech + interval",
                ],
            )
        ]
