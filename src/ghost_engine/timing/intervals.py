"""Per-repetition draws: shot interval offsets, split-step timing, repeat counts.

All randomness comes from an injected ``numpy.random.Generator`` so callers
can pin results with a seed.
"""

from __future__ import annotations

import numpy as np

from ghost_engine.models.config import IntervalOffset, RepeatCount
from ghost_engine.models.enums import (
    AUTO_SCALE_FAST_BELOW_S,
    AUTO_SCALE_SLOW_ABOVE_S,
    SPLIT_STEP_FALLBACK_INTERVAL,
    SPLIT_STEP_INTERVALS,
    IntervalOffsetType,
    RepeatType,
    SplitStepSpeed,
)

_RANDOM_SPEEDS = (SplitStepSpeed.SLOW, SplitStepSpeed.MEDIUM, SplitStepSpeed.FAST)


def draw_interval_offset(
    offset: IntervalOffset | None,
    offset_type: IntervalOffsetType | None,
    rng: np.random.Generator,
) -> float:
    """Offset added to a shot's base interval.

    fixed → ``offset.min``; random → uniform in ``[min, max]``; unset → 0.
    Reversed random bounds are swapped.
    """
    if offset is None or offset_type is None:
        return 0.0
    if offset_type == IntervalOffsetType.RANDOM:
        low, high = sorted((offset.min, offset.max))
        if low == high:
            return float(low)
        return float(rng.uniform(low, high))
    return float(offset.min)


def pick_split_step(
    speed: SplitStepSpeed | None,
    interval: float,
    rng: np.random.Generator,
) -> tuple[SplitStepSpeed, float] | None:
    """Concrete speed and lead (seconds before the beep) for a split-step cue.

    Returns None when no split step should be emitted.
    """
    if speed is None or speed == SplitStepSpeed.NONE:
        return None
    if speed == SplitStepSpeed.AUTO_SCALE:
        if interval < AUTO_SCALE_FAST_BELOW_S:
            actual = SplitStepSpeed.FAST
        elif interval > AUTO_SCALE_SLOW_ABOVE_S:
            actual = SplitStepSpeed.SLOW
        else:
            actual = SplitStepSpeed.MEDIUM
    elif speed == SplitStepSpeed.RANDOM:
        actual = _RANDOM_SPEEDS[int(rng.integers(0, len(_RANDOM_SPEEDS)))]
    else:
        actual = speed
    return actual, SPLIT_STEP_INTERVALS.get(actual, SPLIT_STEP_FALLBACK_INTERVAL)


def draw_repeat_count(repeat: RepeatCount | None, rng: np.random.Generator) -> int:
    """Concrete repetition count for one visit; anything invalid counts as 1."""
    if repeat is None:
        return 1
    if repeat.type == RepeatType.RANDOM:
        low, high = repeat.min, repeat.max
        if low is None or high is None or low > high:
            return 1
        count = int(rng.integers(low, high + 1))
    else:
        count = repeat.count
    return count if count and count >= 1 else 1
