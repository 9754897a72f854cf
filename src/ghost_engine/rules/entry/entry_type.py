"""ENTRY rule: every entry is a Shot or a Message."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ghost_engine.models.enums import EntryType
from ghost_engine.models.validation import ValidationIssue
from ghost_engine.rules.base import EntryRule

ENTRY_TYPES = (EntryType.SHOT.value, EntryType.MESSAGE.value)


class EntryTypeRule(EntryRule):
    rule_id = "entry_type"
    version = "1.0.0"

    def check_entry(
        self, entry: Mapping[str, Any], path: str, pattern: Mapping[str, Any]
    ) -> list[ValidationIssue]:
        if entry.get("type") in ENTRY_TYPES:
            return []
        return [
            self.issue(
                f"{path}.type",
                "entry type must be Shot or Message",
                value=entry.get("type"),
                suggestions=["Use 'Shot'", "Use 'Message'"],
            )
        ]
