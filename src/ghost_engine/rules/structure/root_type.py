"""STRUCTURE rule: the document is an object whose type is "Workout"."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ghost_engine.models.enums import EntryType, RuleScope
from ghost_engine.models.validation import ValidationIssue
from ghost_engine.rules.base import ValidationRule


class RootTypeRule(ValidationRule):
    rule_id = "root_type"
    version = "1.0.0"
    scope = RuleScope.STRUCTURE

    def check(self, data: Mapping[str, Any]) -> list[ValidationIssue]:
        if not isinstance(data, Mapping):
            return [
                self.issue(
                    "",
                    "Workout document must be a JSON object",
                    value=type(data).__name__,
                )
            ]
        if data.get("type") != EntryType.WORKOUT.value:
            return [
                self.issue(
                    "type",
                    'type must be "Workout"',
                    value=data.get("type"),
                    suggestions=['Set "type": "Workout" on the root object'],
                )
            ]
        return []
