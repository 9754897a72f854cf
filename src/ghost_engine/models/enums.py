"""Enumerations and tuning constants for the ghosting workout engine.

Enum values are the exact strings used in the workout JSON document, so
``IterationType("shuffle")`` round-trips with the authoring UI.
"""

from enum import Enum


class EntryType(str, Enum):
    """Node types in the workout tree."""

    WORKOUT = "Workout"
    PATTERN = "Pattern"
    SHOT = "Shot"
    MESSAGE = "Message"


class IterationType(str, Enum):
    """How siblings are ordered each time their parent is visited."""

    IN_ORDER = "in-order"
    SHUFFLE = "shuffle"


class LimitsType(str, Enum):
    """Stopping condition for a workout or a pattern repetition."""

    ALL_SHOTS = "all-shots"
    SHOT_LIMIT = "shot-limit"
    TIME_LIMIT = "time-limit"


class IntervalOffsetType(str, Enum):
    """Whether a shot interval offset is the fixed minimum or a random draw."""

    FIXED = "fixed"
    RANDOM = "random"


class IntervalType(str, Enum):
    """How a message's configured interval combines with its spoken duration."""

    FIXED = "fixed"            # max(tts, interval)
    ADDITIONAL = "additional"  # tts + interval


class SplitStepSpeed(str, Enum):
    """Split-step cue timing before the shot beep."""

    NONE = "none"
    SLOW = "slow"
    MEDIUM = "medium"
    FAST = "fast"
    RANDOM = "random"
    AUTO_SCALE = "auto-scale"


class PositionType(str, Enum):
    """Named ordering constraints. Numeric slot anchors are plain strings ("1", "2", ...)."""

    NORMAL = "normal"
    LINKED = "linked"
    LAST = "last"


class RepeatType(str, Enum):
    FIXED = "fixed"
    RANDOM = "random"


class EventType(str, Enum):
    """Sound events produced by the timeline engine."""

    TTS = "tts"
    BEEP = "beep"
    SPLIT_STEP = "splitStep"


class SkipReason(str, Enum):
    """Why a visited entry repetition did not execute."""

    PATTERN_SKIPPED = "pattern skipped"
    PATTERN_SHOT_LIMIT = "pattern shot limit"
    PATTERN_TIME_LIMIT = "pattern time limit"
    WORKOUT_SHOT_LIMIT = "workout shot limit"
    WORKOUT_TIME_LIMIT = "workout time limit"
    END_OF_WORKOUT = "skipped at end of workout"


class IssueSeverity(str, Enum):
    """Severity of a validation finding."""

    ERROR = "error"      # structure, presence or vocabulary problem
    WARNING = "warning"  # out-of-range value the engine can default around


class RuleScope(int, Enum):
    """Validation rule tiers, evaluated lowest value first."""

    STRUCTURE = 0
    WORKOUT = 1
    PATTERN = 2
    ENTRY = 3


# ---------------------------------------------------------------------------
# Built-in defaults for inheritable fields
# ---------------------------------------------------------------------------
DEFAULT_VOICE = "Default"
DEFAULT_SPEECH_RATE = 1.0
DEFAULT_INTERVAL = 5.0
DEFAULT_INTERVAL_OFFSET_TYPE = IntervalOffsetType.FIXED
DEFAULT_SHOT_ANNOUNCEMENT_LEAD_TIME = 2.5
DEFAULT_AUTO_VOICE_SPLIT_STEP = True

# ---------------------------------------------------------------------------
# Documented ranges
# ---------------------------------------------------------------------------
MIN_SPEECH_RATE = 0.5
MAX_SPEECH_RATE = 1.5
MIN_INTERVAL = 3.0
MAX_INTERVAL = 8.0
MIN_INTERVAL_OFFSET = -2.0
MAX_INTERVAL_OFFSET = 2.0
MIN_SHOT_ANNOUNCEMENT_LEAD_TIME = 2.5
MIN_REPEAT_COUNT = 1
MAX_REPEAT_COUNT = 10
MIN_SHOT_LIMIT = 1
MAX_SHOT_LIMIT = 50

# ---------------------------------------------------------------------------
# Text-to-speech duration heuristic (empirical tuning values)
# ---------------------------------------------------------------------------
TTS_WORDS_PER_MINUTE = 120
TTS_PUNCTUATION_PAUSE_S = 0.2
TTS_MIN_DURATION_S = 0.8
TTS_MIN_SECONDS_PER_WORD = 0.4
TTS_PUNCTUATION_CHARS = ".,;:!?"

# Message duration when arithmetic yields NaN or a negative number
MESSAGE_DURATION_FALLBACK_S = 1.0

# Countdown announcements cover at most the final N whole seconds of a message
MAX_COUNTDOWN_SECONDS = 10

# ---------------------------------------------------------------------------
# Split step: seconds before the beep, by speed
# ---------------------------------------------------------------------------
SPLIT_STEP_INTERVALS = {
    SplitStepSpeed.SLOW: 0.50625,
    SplitStepSpeed.MEDIUM: 0.5,
    SplitStepSpeed.FAST: 0.49375,
}
SPLIT_STEP_FALLBACK_INTERVAL = 0.5
AUTO_SCALE_FAST_BELOW_S = 4.0
AUTO_SCALE_SLOW_ABOVE_S = 6.0

# Superset loop cap; guarantees termination for pathological limit settings
MAX_SUPERSETS = 100
