"""PATTERN rule: optional pattern iterationType and limits are valid when given.

Pattern limits are never inherited from the workout; absence means no cap.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ghost_engine.models.enums import MAX_SHOT_LIMIT, MIN_SHOT_LIMIT, IterationType
from ghost_engine.models.validation import ValidationIssue
from ghost_engine.rules.base import PatternRule
from ghost_engine.rules.common import check_enum, check_limits, config_of


class PatternIterationLimitsRule(PatternRule):
    rule_id = "pattern_iteration_limits"
    version = "1.0.0"

    def check_pattern(
        self, pattern: Mapping[str, Any], path: str, data: Mapping[str, Any]
    ) -> list[ValidationIssue]:
        config = config_of(pattern)
        config_path = f"{path}.config"
        issues = check_enum(self.rule_id, config, "iterationType", IterationType, config_path)
        if config.get("limits") is not None:
            issues.extend(
                check_limits(
                    self.rule_id, config["limits"], config_path, MIN_SHOT_LIMIT, MAX_SHOT_LIMIT
                )
            )
        return issues
