"""ENTRY rule: a shot's announcement lead time fits inside its interval.

Both values are resolved through the inheritance chain (shot → pattern →
workout → default), so a lead time set on the workout is checked against an
interval set on the shot.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ghost_engine.config_resolution.resolver import ConfigResolver
from ghost_engine.exceptions import WorkoutStructureError
from ghost_engine.models.enums import DEFAULT_INTERVAL, IssueSeverity, RuleScope
from ghost_engine.models.validation import ValidationIssue
from ghost_engine.models.workout import Shot
from ghost_engine.rules.base import ValidationRule
from ghost_engine.rules.common import iter_patterns
from ghost_engine.serialization.document import load_entry, load_pattern, load_workout_config


class ShotLeadTimeRule(ValidationRule):
    rule_id = "shot_lead_time"
    version = "1.0.0"
    scope = RuleScope.ENTRY

    def __init__(self, resolver: ConfigResolver | None = None) -> None:
        self.resolver = resolver or ConfigResolver()

    def check(self, data: Mapping[str, Any]) -> list[ValidationIssue]:
        try:
            workout_config = load_workout_config(
                data.get("config") if isinstance(data, Mapping) else None
            )
        except WorkoutStructureError:
            return []

        issues: list[ValidationIssue] = []
        for path, raw_pattern in iter_patterns(data):
            try:
                pattern = load_pattern({**raw_pattern, "entries": []}, path)
            except WorkoutStructureError:
                continue
            entries = raw_pattern.get("entries")
            if not isinstance(entries, list):
                continue

            for index, raw_entry in enumerate(entries):
                entry_path = f"{path}.entries[{index}]"
                try:
                    entry = load_entry(raw_entry, entry_path)
                except WorkoutStructureError:
                    continue
                if not isinstance(entry, Shot):
                    continue

                effective = self.resolver.resolve(entry, pattern, workout_config).with_defaults()
                interval = effective.interval if effective.interval is not None else DEFAULT_INTERVAL
                lead = effective.shot_announcement_lead_time
                if lead is not None and lead > interval:
                    issues.append(
                        self.issue(
                            f"{entry_path}.config.shotAnnouncementLeadTime",
                            f"announcement lead time {lead}s is longer than the {interval}s interval",
                            value=lead,
                            suggestions=[
                                f"Use a lead time of at most {interval}",
                                "Or lengthen the interval",
                            ],
                            severity=IssueSeverity.WARNING,
                        )
                    )
        return issues
