"""WORKOUT rule: inheritable workout settings are within their documented ranges."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ghost_engine.models.enums import RuleScope
from ghost_engine.models.validation import ValidationIssue
from ghost_engine.rules.base import ValidationRule
from ghost_engine.rules.common import check_inheritable, check_range


class WorkoutConfigRangesRule(ValidationRule):
    rule_id = "workout_config_ranges"
    version = "1.0.0"
    scope = RuleScope.WORKOUT

    def check(self, data: Mapping[str, Any]) -> list[ValidationIssue]:
        if not isinstance(data, Mapping):
            return []
        config = data.get("config") or {}
        if not isinstance(config, Mapping):
            return []
        issues = check_inheritable(self.rule_id, config, "config")
        issues.extend(check_range(self.rule_id, config, "workoutDefaultInterval", 0.0, None, "config"))
        return issues
