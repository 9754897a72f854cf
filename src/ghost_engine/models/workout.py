"""Workout document tree: WorkoutDocument → Pattern → Shot | Message."""

from __future__ import annotations

from dataclasses import dataclass, field

from ghost_engine.models.config import (
    MessageConfig,
    PatternConfig,
    ShotConfig,
    WorkoutConfig,
)
from ghost_engine.models.enums import EntryType, PositionType


@dataclass(frozen=True)
class Shot:
    """A single announced drill element."""

    id: str
    name: str
    config: ShotConfig = field(default_factory=ShotConfig)
    position_type: str = PositionType.NORMAL.value

    @property
    def type(self) -> EntryType:
        return EntryType.SHOT


@dataclass(frozen=True)
class Message:
    """A spoken announcement scheduled independently of shot cadence."""

    id: str
    name: str
    config: MessageConfig = field(default_factory=MessageConfig)
    position_type: str = PositionType.NORMAL.value

    @property
    def type(self) -> EntryType:
        return EntryType.MESSAGE


Entry = Shot | Message


@dataclass(frozen=True)
class Pattern:
    """A reusable group of entries with its own ordering, repeat and limits."""

    id: str
    name: str
    entries: tuple[Entry, ...] = field(default_factory=tuple)
    config: PatternConfig = field(default_factory=PatternConfig)
    position_type: str = PositionType.NORMAL.value

    @property
    def type(self) -> EntryType:
        return EntryType.PATTERN

    @property
    def shot_count(self) -> int:
        return sum(1 for entry in self.entries if isinstance(entry, Shot))


@dataclass(frozen=True)
class WorkoutDocument:
    """Root of the workout tree. Immutable input to the engine."""

    name: str
    config: WorkoutConfig = field(default_factory=WorkoutConfig)
    patterns: tuple[Pattern, ...] = field(default_factory=tuple)

    @property
    def type(self) -> EntryType:
        return EntryType.WORKOUT

    def find_pattern_of(self, entry_id: str) -> Pattern | None:
        """Return the pattern that owns the entry with *entry_id*."""
        for pattern in self.patterns:
            if any(entry.id == entry_id for entry in pattern.entries):
                return pattern
        return None
