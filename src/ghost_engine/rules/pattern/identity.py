"""PATTERN rule: each pattern has a non-empty id and name (and type "Pattern" when given)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ghost_engine.models.enums import EntryType
from ghost_engine.models.validation import ValidationIssue
from ghost_engine.rules.base import PatternRule
from ghost_engine.rules.common import is_blank


class PatternIdentityRule(PatternRule):
    rule_id = "pattern_identity"
    version = "1.0.0"

    def check_pattern(
        self, pattern: Mapping[str, Any], path: str, data: Mapping[str, Any]
    ) -> list[ValidationIssue]:
        issues = []
        pattern_type = pattern.get("type")
        if pattern_type is not None and pattern_type != EntryType.PATTERN.value:
            issues.append(
                self.issue(f"{path}.type", 'pattern type must be "Pattern"', value=pattern_type)
            )
        for key in ("id", "name"):
            if is_blank(pattern.get(key)):
                issues.append(
                    self.issue(
                        f"{path}.{key}",
                        f"pattern {key} is required",
                        value=pattern.get(key),
                        suggestions=[f"Give the pattern a non-empty {key}"],
                    )
                )
        return issues
