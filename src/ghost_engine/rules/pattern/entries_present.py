"""PATTERN rule: each pattern has a non-empty list of entry objects."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ghost_engine.models.validation import ValidationIssue
from ghost_engine.rules.base import PatternRule


class PatternEntriesRule(PatternRule):
    rule_id = "pattern_entries"
    version = "1.0.0"

    def check_pattern(
        self, pattern: Mapping[str, Any], path: str, data: Mapping[str, Any]
    ) -> list[ValidationIssue]:
        entries = pattern.get("entries")
        if not isinstance(entries, list) or not entries:
            return [
                self.issue(
                    f"{path}.entries",
                    "pattern must contain at least one entry",
                    value=entries,
                    suggestions=["Add a shot or a message to the pattern"],
                )
            ]
        return [
            self.issue(f"{path}.entries[{index}]", "entry must be an object", value=entry)
            for index, entry in enumerate(entries)
            if not isinstance(entry, Mapping)
        ]
