"""Conversions between seconds and the clock strings used in workout documents.

Every parser here is total: malformed input yields ``0`` rather than raising,
so a single bad field never aborts a timeline render.
"""

from __future__ import annotations

import math
import re
from typing import Any

_TIME_STR_RE = re.compile(r"^\s*(\d+):(\d{1,2}(?:\.\d+)?)\s*$")
_DURATION_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)s\s*$")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def seconds_to_time_str(seconds: float) -> str:
    """Format seconds as ``MM:SS.ss``.

    Negative (or NaN) input clamps to ``"00:00.00"``. Minutes are not capped,
    so 3661.75 s renders as ``"61:01.75"``.
    """
    if seconds is None or math.isnan(seconds) or seconds < 0:
        seconds = 0.0
    hundredths = int(round(seconds * 100))
    minutes, rem = divmod(hundredths, 6000)
    return f"{minutes:02d}:{rem / 100:05.2f}"


def time_str_to_seconds(time_str: Any) -> float:
    """Parse ``MM:SS`` or ``MM:SS.ss`` into seconds; malformed input yields 0."""
    if not isinstance(time_str, str):
        return 0.0
    match = _TIME_STR_RE.match(time_str)
    if match is None:
        return 0.0
    return int(match.group(1)) * 60 + float(match.group(2))


def _leading_int(text: str) -> int:
    match = _LEADING_INT_RE.match(text)
    return int(match.group(1)) if match else 0


def parse_time_limit(time_limit: Any) -> float:
    """Parse a ``"MM:SS"`` limit/interval string into whole seconds.

    Non-strings, or strings without exactly one colon, yield 0. Each part
    contributes its leading integer (``"01:05.5"`` → 65).
    """
    if not isinstance(time_limit, str):
        return 0.0
    parts = time_limit.split(":")
    if len(parts) != 2:
        return 0.0
    return float(_leading_int(parts[0]) * 60 + _leading_int(parts[1]))


def parse_duration(duration_str: Any) -> float:
    """Parse a seconds string like ``"2.5s"``; malformed input yields 0."""
    if not isinstance(duration_str, str):
        return 0.0
    match = _DURATION_RE.match(duration_str)
    if match is None:
        return 0.0
    return float(match.group(1))


def format_time(seconds: float) -> str:
    """``MM:SS`` with whole seconds truncated."""
    seconds = max(0.0, seconds)
    return f"{int(seconds // 60):02d}:{int(seconds % 60):02d}"


def format_time_precise(seconds: float) -> str:
    """``MM:SS``, or ``MM:SS.s`` when the value has a fractional part."""
    seconds = max(0.0, seconds)
    minutes = int(seconds // 60)
    total_secs = seconds % 60
    whole_secs = int(total_secs)
    fraction = total_secs - whole_secs
    if fraction > 0.001:
        tenths = min(9, int(round(fraction * 10)))
        return f"{minutes:02d}:{whole_secs:02d}.{tenths}"
    return f"{minutes:02d}:{whole_secs:02d}"


def format_remaining_time(seconds: float) -> str:
    """``"M:SS min"`` for a minute or more, otherwise ``"N.Ns"``."""
    if seconds >= 60:
        return f"{int(seconds // 60)}:{int(seconds % 60):02d} min"
    return f"{seconds:.1f}s"
