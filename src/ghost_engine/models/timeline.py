"""Engine output: sound events, preview steps and aggregate statistics."""

from __future__ import annotations

from dataclasses import dataclass, field

from ghost_engine.models.effective_config import EffectiveConfig
from ghost_engine.models.enums import EntryType, EventType, SkipReason, SplitStepSpeed


@dataclass(frozen=True)
class TimelineEvent:
    """A single timestamped sound/announcement cue.

    ``time`` is seconds from workout start. ``entry_id`` is None only for
    the closing completion announcement.
    """

    type: EventType
    time: float
    entry_id: str | None = None
    entry_name: str | None = None
    text: str | None = None
    speed: SplitStepSpeed | None = None
    is_countdown: bool = False
    config: EffectiveConfig | None = None


@dataclass(frozen=True)
class TimelineStep:
    """One visited entry repetition, as shown in the preview.

    Skipped steps occupy zero time (``start_time == end_time``).
    """

    superset: int
    pattern_id: str
    pattern_name: str
    pattern_repetition: int
    entry_id: str
    entry_name: str
    entry_type: EntryType
    entry_repetition: int
    start_time: float
    end_time: float
    base_interval: float = 0.0
    offset: float = 0.0
    skipped: bool = False
    skip_reason: SkipReason | None = None

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time


@dataclass(frozen=True)
class WorkoutStats:
    """Aggregate statistics. ``total_time`` includes the final half-interval padding."""

    total_time: float = 0.0
    total_shots: int = 0


@dataclass(frozen=True)
class Timeline:
    """Complete result of one TimelineEngine.generate() call."""

    events: tuple[TimelineEvent, ...] = field(default_factory=tuple)
    stats: WorkoutStats = field(default_factory=WorkoutStats)
    steps: tuple[TimelineStep, ...] = field(default_factory=tuple)
    skip_reasons: tuple[SkipReason, ...] = field(default_factory=tuple)
    superset_count: int = 0
    hit_superset_cap: bool = False

    @property
    def executed_steps(self) -> tuple[TimelineStep, ...]:
        return tuple(step for step in self.steps if not step.skipped)

    def events_of_type(self, event_type: EventType) -> tuple[TimelineEvent, ...]:
        return tuple(event for event in self.events if event.type == event_type)
