"""PATTERN rule: positionType is normal, linked, last or a positive-integer string."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ghost_engine.models.validation import ValidationIssue
from ghost_engine.rules.base import PatternRule
from ghost_engine.rules.common import is_valid_position_type

POSITION_SUGGESTIONS = (
    "Use 'normal' for free ordering",
    "Use 'linked' to keep it right after the previous item",
    "Use 'last' or a slot number such as '1'",
)


class PatternPositionTypeRule(PatternRule):
    rule_id = "pattern_position_type"
    version = "1.0.0"

    def check_pattern(
        self, pattern: Mapping[str, Any], path: str, data: Mapping[str, Any]
    ) -> list[ValidationIssue]:
        value = pattern.get("positionType")
        if is_valid_position_type(value):
            return []
        return [
            self.issue(
                f"{path}.positionType",
                "positionType must be normal, linked, last or a positive whole number",
                value=value,
                suggestions=POSITION_SUGGESTIONS,
            )
        ]
