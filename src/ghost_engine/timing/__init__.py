"""Pure time, duration and per-repetition draw functions."""

from ghost_engine.timing.consistency import check_timing_consistency
from ghost_engine.timing.intervals import (
    draw_interval_offset,
    draw_repeat_count,
    pick_split_step,
)
from ghost_engine.timing.speech import calculate_message_duration, estimate_tts_duration
from ghost_engine.timing.time_format import (
    format_remaining_time,
    format_time,
    format_time_precise,
    parse_duration,
    parse_time_limit,
    seconds_to_time_str,
    time_str_to_seconds,
)

__all__ = [
    "calculate_message_duration",
    "check_timing_consistency",
    "draw_interval_offset",
    "draw_repeat_count",
    "estimate_tts_duration",
    "format_remaining_time",
    "format_time",
    "format_time_precise",
    "parse_duration",
    "parse_time_limit",
    "pick_split_step",
    "seconds_to_time_str",
    "time_str_to_seconds",
]
