"""WORKOUT rule: ``config.limits`` is present and well formed.

shot-limit values are whole numbers 1-50; time-limit values are "MM:SS".
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ghost_engine.models.enums import MAX_SHOT_LIMIT, MIN_SHOT_LIMIT, RuleScope
from ghost_engine.models.validation import ValidationIssue
from ghost_engine.rules.base import ValidationRule
from ghost_engine.rules.common import check_limits


class WorkoutLimitsRule(ValidationRule):
    rule_id = "workout_limits"
    version = "1.0.0"
    scope = RuleScope.WORKOUT

    def check(self, data: Mapping[str, Any]) -> list[ValidationIssue]:
        if not isinstance(data, Mapping):
            return []
        config = data.get("config") or {}
        if not isinstance(config, Mapping):
            return []
        if config.get("limits") is None:
            return [
                self.issue(
                    "config.limits",
                    "workout limits are required",
                    suggestions=['Use {"type": "all-shots"} to play every shot once'],
                )
            ]
        return check_limits(self.rule_id, config["limits"], "config", MIN_SHOT_LIMIT, MAX_SHOT_LIMIT)
