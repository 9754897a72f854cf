"""Data models for the ghosting workout engine."""

from ghost_engine.models.config import (
    BaseConfig,
    IntervalOffset,
    Limits,
    MessageConfig,
    PatternConfig,
    RepeatCount,
    ShotConfig,
    WorkoutConfig,
)
from ghost_engine.models.effective_config import EffectiveConfig
from ghost_engine.models.enums import (
    EntryType,
    EventType,
    IntervalOffsetType,
    IntervalType,
    IssueSeverity,
    IterationType,
    LimitsType,
    PositionType,
    RepeatType,
    RuleScope,
    SkipReason,
    SplitStepSpeed,
)
from ghost_engine.models.timeline import Timeline, TimelineEvent, TimelineStep, WorkoutStats
from ghost_engine.models.validation import ValidationIssue
from ghost_engine.models.workout import Entry, Message, Pattern, Shot, WorkoutDocument

__all__ = [
    "BaseConfig",
    "EffectiveConfig",
    "Entry",
    "EntryType",
    "EventType",
    "IntervalOffset",
    "IntervalOffsetType",
    "IntervalType",
    "IssueSeverity",
    "IterationType",
    "Limits",
    "LimitsType",
    "Message",
    "MessageConfig",
    "Pattern",
    "PatternConfig",
    "PositionType",
    "RepeatCount",
    "RepeatType",
    "RuleScope",
    "Shot",
    "ShotConfig",
    "SkipReason",
    "SplitStepSpeed",
    "Timeline",
    "TimelineEvent",
    "TimelineStep",
    "ValidationIssue",
    "WorkoutConfig",
    "WorkoutDocument",
    "WorkoutStats",
]
