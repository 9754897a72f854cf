"""PATTERN rule: repeatCount is 1-10, or a random range with min <= max."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ghost_engine.models.validation import ValidationIssue
from ghost_engine.rules.base import PatternRule
from ghost_engine.rules.common import check_repeat_count, config_of


class PatternRepeatCountRule(PatternRule):
    rule_id = "pattern_repeat_count"
    version = "1.0.0"

    def check_pattern(
        self, pattern: Mapping[str, Any], path: str, data: Mapping[str, Any]
    ) -> list[ValidationIssue]:
        return check_repeat_count(self.rule_id, config_of(pattern), f"{path}.config")
