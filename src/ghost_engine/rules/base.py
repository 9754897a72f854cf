"""Abstract base classes for workout validation rules."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any

from ghost_engine.models.enums import IssueSeverity, RuleScope
from ghost_engine.models.validation import ValidationIssue
from ghost_engine.rules.common import iter_entries, iter_patterns


class ValidationRule(ABC):
    """Base class for all workout validation rules.

    Each rule checks one aspect of the raw JSON workout document. Rules are
    discovered automatically by the RuleRegistry and run by the
    WorkoutValidator in scope order (structure → workout → pattern → entry).

    Subclasses must define:
        rule_id: unique identifier (e.g. "workout_limits")
        version: semantic version string
        scope: RuleScope tier
        check(): returns every issue found; never raises
    """

    rule_id: str
    version: str
    scope: RuleScope

    def issue(
        self,
        field: str,
        message: str,
        value: Any = None,
        suggestions: Iterable[str] = (),
        severity: IssueSeverity = IssueSeverity.ERROR,
    ) -> ValidationIssue:
        """Build a ValidationIssue stamped with this rule's id."""
        return ValidationIssue(
            field=field,
            message=message,
            value=value,
            suggestions=tuple(suggestions),
            rule_id=self.rule_id,
            severity=severity,
        )

    @abstractmethod
    def check(self, data: Mapping[str, Any]) -> list[ValidationIssue]:
        """Inspect the workout document and return the issues found."""
        ...


class PatternRule(ValidationRule):
    """A rule applied to each pattern mapping in turn."""

    scope = RuleScope.PATTERN

    def check(self, data: Mapping[str, Any]) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        for path, pattern in iter_patterns(data):
            issues.extend(self.check_pattern(pattern, path, data))
        return issues

    @abstractmethod
    def check_pattern(
        self, pattern: Mapping[str, Any], path: str, data: Mapping[str, Any]
    ) -> list[ValidationIssue]:
        ...


class EntryRule(ValidationRule):
    """A rule applied to each entry mapping of each pattern."""

    scope = RuleScope.ENTRY

    def check(self, data: Mapping[str, Any]) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        for path, entry, pattern in iter_entries(data):
            issues.extend(self.check_entry(entry, path, pattern))
        return issues

    @abstractmethod
    def check_entry(
        self, entry: Mapping[str, Any], path: str, pattern: Mapping[str, Any]
    ) -> list[ValidationIssue]:
        ...
