"""ENTRY rule: each entry has an id, a name and a valid positionType."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ghost_engine.models.validation import ValidationIssue
from ghost_engine.rules.base import EntryRule
from ghost_engine.rules.common import is_blank, is_valid_position_type
from ghost_engine.rules.pattern.position_type import POSITION_SUGGESTIONS


class EntryIdentityRule(EntryRule):
    rule_id = "entry_identity"
    version = "1.0.0"

    def check_entry(
        self, entry: Mapping[str, Any], path: str, pattern: Mapping[str, Any]
    ) -> list[ValidationIssue]:
        issues = [
            self.issue(
                f"{path}.{key}",
                f"entry {key} is required",
                value=entry.get(key),
                suggestions=[f"Give the entry a non-empty {key}"],
            )
            for key in ("id", "name")
            if is_blank(entry.get(key))
        ]
        if not is_valid_position_type(entry.get("positionType")):
            issues.append(
                self.issue(
                    f"{path}.positionType",
                    "positionType must be normal, linked, last or a positive whole number",
                    value=entry.get("positionType"),
                    suggestions=POSITION_SUGGESTIONS,
                )
            )
        return issues
