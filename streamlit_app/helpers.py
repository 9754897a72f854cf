"""Utility helpers bridging the Streamlit UI and the ghost engine.

Pure functions for formatting, preview generation and workout file
persistence.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from ghost_engine.engine import TimelineEngine
from ghost_engine.exceptions import WorkoutStructureError
from ghost_engine.models.enums import EventType, IssueSeverity
from ghost_engine.models.timeline import Timeline
from ghost_engine.models.validation import ValidationIssue
from ghost_engine.settings import EngineSettings
from ghost_engine.timing.time_format import format_remaining_time, seconds_to_time_str
from ghost_engine.validator import WorkoutValidator

# ---------------------------------------------------------------------------
# Display constants
# ---------------------------------------------------------------------------

EVENT_COLORS = {
    EventType.TTS.value: "#DCEBFF",
    EventType.SPLIT_STEP.value: "#FFF4CC",
    EventType.BEEP.value: "#DFF5E1",
}

SEVERITY_ICONS = {
    IssueSeverity.ERROR: "❌",
    IssueSeverity.WARNING: "⚠️",
}


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_total_time(seconds: float) -> str:
    """Total workout length for the metrics row, e.g. 367.5 -> '6:07 min'."""
    if seconds <= 0:
        return "--"
    return format_remaining_time(seconds)


def format_issue(issue: ValidationIssue) -> str:
    """One-line markdown for a validation issue."""
    icon = SEVERITY_ICONS.get(issue.severity, "")
    where = f"`{issue.field}`" if issue.field else "document"
    text = f"{icon} {where}: {issue.message}"
    if issue.suggestions:
        text += f" ({issue.suggestions[0]})"
    return text


def style_event_rows(frame: pd.DataFrame) -> pd.DataFrame:
    """Background colour per event type, shaped for ``DataFrame.style.apply``."""
    colors = frame["type"].map(EVENT_COLORS).fillna("")
    return pd.DataFrame(
        {column: [f"background-color: {c}" if c else "" for c in colors] for column in frame.columns},
        index=frame.index,
    )


def add_clock_columns(frame: pd.DataFrame, columns: tuple[str, ...] = ("start_time", "end_time")) -> pd.DataFrame:
    """Copy of a step frame with ``MM:SS.ss`` renderings of the time columns."""
    result = frame.copy()
    for column in columns:
        if column in result:
            result[f"{column}_clock"] = result[column].map(seconds_to_time_str)
    return result


# ---------------------------------------------------------------------------
# Preview generation
# ---------------------------------------------------------------------------


@dataclass
class PreviewResult:
    """Everything the preview page renders for one workout."""

    issues: list[ValidationIssue] = field(default_factory=list)
    timeline: Timeline | None = None
    error: str | None = None

    @property
    def has_errors(self) -> bool:
        return any(issue.severity == IssueSeverity.ERROR for issue in self.issues)


def build_preview(
    data: Any,
    seed: int | None = None,
    locked: bool | None = None,
    settings: EngineSettings | None = None,
    validator: WorkoutValidator | None = None,
) -> PreviewResult:
    """Validate *data* and, unless it is structurally broken, generate its timeline.

    Documents with only warnings (or even errors) still render a best-effort
    timeline; a structural fault yields no timeline and a reason instead.
    """
    validator = validator or WorkoutValidator()
    result = PreviewResult(issues=validator.validate(data))
    engine = TimelineEngine(settings=settings, rng=np.random.default_rng(seed))
    try:
        result.timeline = engine.generate(data, locked=locked)
    except WorkoutStructureError as exc:
        result.error = str(exc)
    return result


# ---------------------------------------------------------------------------
# Workout persistence
# ---------------------------------------------------------------------------

_APP_DIR = Path(__file__).parent


def workouts_dir(settings: EngineSettings | None = None) -> Path:
    """Directory holding workout JSON files (relative settings resolve from the repo root)."""
    settings = settings or EngineSettings()
    path = settings.workouts_dir
    if not path.is_absolute():
        path = _APP_DIR.parent / path
    return path


def list_workouts(settings: EngineSettings | None = None) -> list[str]:
    """Available workout names (without .json extension)."""
    d = workouts_dir(settings)
    if not d.is_dir():
        return []
    return sorted(p.stem for p in d.glob("*.json"))


def load_workout_file(name: str, settings: EngineSettings | None = None) -> dict:
    """Raw JSON mapping of a saved workout."""
    path = workouts_dir(settings) / f"{name}.json"
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def save_workout_file(name: str, data: dict, settings: EngineSettings | None = None) -> Path:
    """Save workout JSON under a sanitised file name. Returns the file path."""
    d = workouts_dir(settings)
    d.mkdir(parents=True, exist_ok=True)
    safe = "".join(c if c.isalnum() or c in "-_ " else "" for c in name).strip()
    if not safe:
        safe = "workout"
    path = d / f"{safe}.json"
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    return path
