"""WorkoutValidator: runs every registered rule over a workout document."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ghost_engine.exceptions import WorkoutValidationError
from ghost_engine.models.enums import IssueSeverity
from ghost_engine.models.validation import ValidationIssue
from ghost_engine.registry import RuleRegistry

logger = logging.getLogger(__name__)


class WorkoutValidator:
    """Collects every validation issue at once (never fail-fast).

    Usage:
        validator = WorkoutValidator()
        issues = validator.validate(data)
        validator.ensure_valid(data)  # raises WorkoutValidationError
    """

    def __init__(self, registry: RuleRegistry | None = None) -> None:
        self.registry = registry or RuleRegistry()

        # Auto-discover rules if using default registry
        if registry is None:
            self.registry.discover_rules()

    def validate(self, data: Mapping[str, Any] | Any) -> list[ValidationIssue]:
        """Run all rules in scope order and return their findings.

        An empty list means the document is valid.
        """
        issues: list[ValidationIssue] = []
        for rule in self.registry.get_all_rules():
            issues.extend(rule.check(data))

        logger.info(
            "Validation found %d issue(s) (%d error(s))",
            len(issues),
            sum(1 for issue in issues if issue.severity == IssueSeverity.ERROR),
        )
        return issues

    def errors(self, data: Mapping[str, Any] | Any) -> list[ValidationIssue]:
        """Only the error-severity findings."""
        return [issue for issue in self.validate(data) if issue.severity == IssueSeverity.ERROR]

    def ensure_valid(self, data: Mapping[str, Any] | Any) -> None:
        """Raise WorkoutValidationError if any issue at all is found."""
        issues = self.validate(data)
        if issues:
            raise WorkoutValidationError(issues)


def validate_workout(data: Mapping[str, Any] | Any) -> list[ValidationIssue]:
    """Validate with a freshly discovered rule set."""
    return WorkoutValidator().validate(data)
