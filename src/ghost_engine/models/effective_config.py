"""Effective (resolved) configuration of one node in the workout tree."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

from ghost_engine.models.config import IntervalOffset, Limits, RepeatCount
from ghost_engine.models.enums import (
    DEFAULT_AUTO_VOICE_SPLIT_STEP,
    DEFAULT_INTERVAL_OFFSET_TYPE,
    DEFAULT_SHOT_ANNOUNCEMENT_LEAD_TIME,
    DEFAULT_SPEECH_RATE,
    DEFAULT_VOICE,
    IntervalOffsetType,
    IntervalType,
    IterationType,
    SplitStepSpeed,
)


@dataclass(frozen=True)
class EffectiveConfig:
    """Result of ConfigResolver.resolve().

    Fields nowhere defined stay None until ``with_defaults()`` is applied.
    For messages ``interval`` stays None and the schedule lives in
    ``message_interval``.
    """

    # inheritable
    voice: str | None = None
    speech_rate: float | None = None
    interval: float | None = None
    interval_offset_type: IntervalOffsetType | None = None
    interval_offset: IntervalOffset | None = None
    auto_voice_split_step: bool | None = None
    shot_announcement_lead_time: float | None = None
    split_step_speed: SplitStepSpeed | None = None

    # own level only
    iteration_type: IterationType | None = None
    limits: Limits | None = None
    repeat_count: RepeatCount | None = None
    position_type: str | None = None

    # message passthrough
    message: str | None = None
    message_interval: str | None = None
    interval_type: IntervalType | None = None
    countdown: bool | None = None
    skip_at_end_of_workout: bool | None = None
    delay: float | None = None

    def with_defaults(self) -> EffectiveConfig:
        """Fill unset inheritable fields with the built-in defaults.

        ``split_step_speed`` falls back to auto-scale when
        ``auto_voice_split_step`` is on, otherwise to none. ``interval`` is
        left alone; callers choose between the pattern's applicable
        interval and the workout default.
        """
        auto_voice = (
            self.auto_voice_split_step
            if self.auto_voice_split_step is not None
            else DEFAULT_AUTO_VOICE_SPLIT_STEP
        )
        split_step = self.split_step_speed
        if split_step is None:
            split_step = SplitStepSpeed.AUTO_SCALE if auto_voice else SplitStepSpeed.NONE
        return dataclasses.replace(
            self,
            voice=self.voice if self.voice is not None else DEFAULT_VOICE,
            speech_rate=self.speech_rate if self.speech_rate is not None else DEFAULT_SPEECH_RATE,
            interval_offset_type=(
                self.interval_offset_type
                if self.interval_offset_type is not None
                else DEFAULT_INTERVAL_OFFSET_TYPE
            ),
            interval_offset=self.interval_offset or IntervalOffset(),
            auto_voice_split_step=auto_voice,
            shot_announcement_lead_time=(
                self.shot_announcement_lead_time
                if self.shot_announcement_lead_time is not None
                else DEFAULT_SHOT_ANNOUNCEMENT_LEAD_TIME
            ),
            split_step_speed=split_step,
        )
