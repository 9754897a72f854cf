"""Validation findings returned by the workout validation rules."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

from ghost_engine.models.enums import IssueSeverity


@dataclass(frozen=True)
class ValidationIssue:
    """One problem found in a workout document.

    ``field`` is a dotted/indexed path into the JSON document, e.g.
    ``patterns[0].entries[2].config.interval``.
    """

    field: str
    message: str
    value: Any = None
    suggestions: tuple[str, ...] = dataclasses.field(default_factory=tuple)
    rule_id: str = ""
    severity: IssueSeverity = IssueSeverity.ERROR
