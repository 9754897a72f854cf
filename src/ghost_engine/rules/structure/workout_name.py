"""STRUCTURE rule: the workout has a non-empty name."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ghost_engine.models.enums import RuleScope
from ghost_engine.models.validation import ValidationIssue
from ghost_engine.rules.base import ValidationRule
from ghost_engine.rules.common import is_blank


class WorkoutNameRule(ValidationRule):
    rule_id = "workout_name"
    version = "1.0.0"
    scope = RuleScope.STRUCTURE

    def check(self, data: Mapping[str, Any]) -> list[ValidationIssue]:
        if not isinstance(data, Mapping) or not is_blank(data.get("name")):
            return []
        return [
            self.issue(
                "name",
                "name is required",
                value=data.get("name"),
                suggestions=["Give the workout a short descriptive name"],
            )
        ]
