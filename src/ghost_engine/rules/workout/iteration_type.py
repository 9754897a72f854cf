"""WORKOUT rule: ``config.iterationType`` is present and in-order or shuffle."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ghost_engine.models.enums import IterationType, RuleScope
from ghost_engine.models.validation import ValidationIssue
from ghost_engine.rules.base import ValidationRule
from ghost_engine.rules.common import check_enum


class WorkoutIterationTypeRule(ValidationRule):
    rule_id = "workout_iteration_type"
    version = "1.0.0"
    scope = RuleScope.WORKOUT

    def check(self, data: Mapping[str, Any]) -> list[ValidationIssue]:
        if not isinstance(data, Mapping):
            return []
        config = data.get("config") or {}
        if not isinstance(config, Mapping):
            return []
        if config.get("iterationType") is None:
            return [
                self.issue(
                    "config.iterationType",
                    "workout iterationType is required",
                    suggestions=["Use 'in-order'", "Use 'shuffle'"],
                )
            ]
        return check_enum(self.rule_id, config, "iterationType", IterationType, "config")
