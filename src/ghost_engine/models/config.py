"""Configuration records for each level of the workout tree.

Every field defaults to ``None`` meaning "not set at this level"; the
ConfigResolver walks entry → pattern → workout to find the first level that
sets an inheritable field. Non-inheritable fields are only ever read from
their own level.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ghost_engine.models.enums import (
    IntervalOffsetType,
    IntervalType,
    IterationType,
    LimitsType,
    RepeatType,
    SplitStepSpeed,
)

INHERITABLE_FIELDS: tuple[str, ...] = (
    "voice",
    "speech_rate",
    "interval",
    "interval_offset_type",
    "interval_offset",
    "auto_voice_split_step",
    "shot_announcement_lead_time",
    "split_step_speed",
)

NON_INHERITABLE_FIELDS: tuple[str, ...] = ("iteration_type", "limits", "repeat_count")

MESSAGE_FIELDS: tuple[str, ...] = (
    "message",
    "interval",
    "interval_type",
    "countdown",
    "skip_at_end_of_workout",
    "delay",
)


@dataclass(frozen=True)
class IntervalOffset:
    """Bounds (seconds) added to a shot's base interval."""

    min: float = 0.0
    max: float = 0.0


@dataclass(frozen=True)
class Limits:
    """Stopping condition.

    ``value`` is None for all-shots, an int for shot-limit and an
    ``"MM:SS"`` string for time-limit.
    """

    type: LimitsType = LimitsType.ALL_SHOTS
    value: int | str | None = None

    @property
    def is_all_shots(self) -> bool:
        return self.type == LimitsType.ALL_SHOTS


@dataclass(frozen=True)
class RepeatCount:
    """A fixed repeat count, or inclusive bounds for a random draw."""

    type: RepeatType = RepeatType.FIXED
    count: int = 1
    min: int = 1
    max: int = 1


@dataclass(frozen=True)
class BaseConfig:
    """Inheritable fields shared by every level."""

    voice: str | None = None
    speech_rate: float | None = None
    interval: float | None = None
    interval_offset_type: IntervalOffsetType | None = None
    interval_offset: IntervalOffset | None = None
    auto_voice_split_step: bool | None = None
    shot_announcement_lead_time: float | None = None
    split_step_speed: SplitStepSpeed | None = None

    def resolve(self, field_name: str) -> Any:
        """Value set at this level for *field_name*, or None."""
        return getattr(self, field_name, None)


@dataclass(frozen=True)
class WorkoutConfig(BaseConfig):
    """Root of inheritance. Also carries the workout's own ordering and limits."""

    iteration_type: IterationType | None = None
    limits: Limits | None = None
    is_config_locked: bool | None = None
    workout_default_interval: float | None = None


@dataclass(frozen=True)
class PatternConfig(BaseConfig):
    iteration_type: IterationType | None = None
    limits: Limits | None = None
    repeat_count: RepeatCount | None = None


@dataclass(frozen=True)
class ShotConfig(BaseConfig):
    repeat_count: RepeatCount | None = None


@dataclass(frozen=True)
class MessageConfig(BaseConfig):
    """Message schedule. ``interval`` here is an ``"MM:SS"`` string, not seconds."""

    interval: str | None = None  # type: ignore[assignment]
    message: str | None = None
    interval_type: IntervalType | None = None
    skip_at_end_of_workout: bool | None = None
    countdown: bool | None = None
    delay: float | None = None  # legacy additive delay
    repeat_count: RepeatCount | None = None
