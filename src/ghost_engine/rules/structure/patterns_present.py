"""STRUCTURE rule: ``patterns`` is a non-empty list of objects, ``config`` an object."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ghost_engine.models.enums import RuleScope
from ghost_engine.models.validation import ValidationIssue
from ghost_engine.rules.base import ValidationRule


class PatternsPresentRule(ValidationRule):
    rule_id = "patterns_present"
    version = "1.0.0"
    scope = RuleScope.STRUCTURE

    def check(self, data: Mapping[str, Any]) -> list[ValidationIssue]:
        if not isinstance(data, Mapping):
            return []

        issues: list[ValidationIssue] = []
        config = data.get("config")
        if config is not None and not isinstance(config, Mapping):
            issues.append(self.issue("config", "config must be an object", value=config))

        patterns = data.get("patterns")
        if not isinstance(patterns, list) or not patterns:
            issues.append(
                self.issue(
                    "patterns",
                    "at least one pattern is required",
                    value=patterns,
                    suggestions=["Add a pattern with at least one shot"],
                )
            )
            return issues

        for index, pattern in enumerate(patterns):
            if not isinstance(pattern, Mapping):
                issues.append(
                    self.issue(f"patterns[{index}]", "pattern must be an object", value=pattern)
                )
        return issues
