"""ENTRY rule: shot settings are within their documented ranges."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ghost_engine.models.enums import EntryType
from ghost_engine.models.validation import ValidationIssue
from ghost_engine.rules.base import EntryRule
from ghost_engine.rules.common import check_inheritable, check_repeat_count, config_of


class ShotConfigRangesRule(EntryRule):
    rule_id = "shot_config_ranges"
    version = "1.0.0"

    def check_entry(
        self, entry: Mapping[str, Any], path: str, pattern: Mapping[str, Any]
    ) -> list[ValidationIssue]:
        if entry.get("type") != EntryType.SHOT.value:
            return []
        config = config_of(entry)
        config_path = f"{path}.config"
        issues = check_inheritable(self.rule_id, config, config_path)
        issues.extend(check_repeat_count(self.rule_id, config, config_path))
        return issues
