"""Environment-variable-based configuration for the timeline engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from ghost_engine.models.enums import DEFAULT_INTERVAL, MAX_SUPERSETS


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, default))
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


DEFAULT_INTERVAL_S: float = _env_float("GHOST_DEFAULT_INTERVAL", DEFAULT_INTERVAL)
MAX_SUPERSETS_CAP: int = _env_int("GHOST_MAX_SUPERSETS", MAX_SUPERSETS)
ANNOUNCE_COMPLETION: bool = _env_bool("GHOST_ANNOUNCE_COMPLETION", False)
COMPLETION_TEXT: str = os.environ.get("GHOST_COMPLETION_TEXT", "Workout complete")
WORKOUTS_DIR: Path = Path(os.environ.get("GHOST_WORKOUTS_DIR", "streamlit_app/workouts"))


@dataclass(frozen=True)
class EngineSettings:
    """Engine knobs. The defaults mirror the module-level environment values."""

    default_interval: float = DEFAULT_INTERVAL_S
    max_supersets: int = MAX_SUPERSETS_CAP
    announce_completion: bool = ANNOUNCE_COMPLETION
    completion_text: str = COMPLETION_TEXT
    workouts_dir: Path = WORKOUTS_DIR

    @classmethod
    def from_env(cls) -> EngineSettings:
        """Re-read the environment (module values are captured at import time)."""
        return cls(
            default_interval=_env_float("GHOST_DEFAULT_INTERVAL", DEFAULT_INTERVAL),
            max_supersets=max(1, _env_int("GHOST_MAX_SUPERSETS", MAX_SUPERSETS)),
            announce_completion=_env_bool("GHOST_ANNOUNCE_COMPLETION", False),
            completion_text=os.environ.get("GHOST_COMPLETION_TEXT", "Workout complete"),
            workouts_dir=Path(os.environ.get("GHOST_WORKOUTS_DIR", "streamlit_app/workouts")),
        )
