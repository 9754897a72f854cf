"""Custom exception hierarchy for the ghosting workout engine."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ghost_engine.models.validation import ValidationIssue


class GhostEngineError(Exception):
    """Base exception for all ghost_engine errors."""


class WorkoutStructureError(GhostEngineError):
    """The workout document fails basic shape checks and cannot be walked."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class WorkoutValidationError(GhostEngineError):
    """Validation found issues and the caller asked for a clean document."""

    def __init__(self, issues: tuple[ValidationIssue, ...] | list[ValidationIssue]) -> None:
        self.issues = tuple(issues)
        super().__init__(f"Workout has {len(self.issues)} validation issue(s)")
