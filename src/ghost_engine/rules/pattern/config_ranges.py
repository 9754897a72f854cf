"""PATTERN rule: inheritable pattern settings are within their documented ranges."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ghost_engine.models.validation import ValidationIssue
from ghost_engine.rules.base import PatternRule
from ghost_engine.rules.common import check_inheritable, config_of


class PatternConfigRangesRule(PatternRule):
    rule_id = "pattern_config_ranges"
    version = "1.0.0"

    def check_pattern(
        self, pattern: Mapping[str, Any], path: str, data: Mapping[str, Any]
    ) -> list[ValidationIssue]:
        issues = []
        raw_config = pattern.get("config")
        if raw_config is not None and not isinstance(raw_config, Mapping):
            issues.append(self.issue(f"{path}.config", "config must be an object", value=raw_config))
        issues.extend(check_inheritable(self.rule_id, config_of(pattern), f"{path}.config"))
        return issues
