"""Spoken-duration estimates for announcements and messages."""

from __future__ import annotations

import math

from ghost_engine.models.effective_config import EffectiveConfig
from ghost_engine.models.enums import (
    DEFAULT_SPEECH_RATE,
    MESSAGE_DURATION_FALLBACK_S,
    TTS_MIN_DURATION_S,
    TTS_MIN_SECONDS_PER_WORD,
    TTS_PUNCTUATION_CHARS,
    TTS_PUNCTUATION_PAUSE_S,
    TTS_WORDS_PER_MINUTE,
    IntervalType,
)
from ghost_engine.timing.time_format import parse_time_limit


def _usable_rate(speech_rate: float | None) -> float:
    if speech_rate is None or math.isnan(speech_rate) or speech_rate <= 0:
        return DEFAULT_SPEECH_RATE
    return speech_rate


def estimate_tts_duration(text: str | None, speech_rate: float | None = 1.0) -> float:
    """Estimate how long a text-to-speech voice takes to say *text*.

    words / 120 wpm, floored at max(0.8 s, 0.4 s per word), plus 0.2 s per
    punctuation mark, all divided by the speech rate. Empty or whitespace
    text takes no time. A non-positive rate is treated as 1.0.

    The constants are empirical; determinism is the only contract.
    """
    if not text or not text.strip():
        return 0.0

    words = len(text.split())
    pauses = sum(1 for ch in text if ch in TTS_PUNCTUATION_CHARS) * TTS_PUNCTUATION_PAUSE_S

    duration = words / TTS_WORDS_PER_MINUTE * 60
    duration = max(duration, TTS_MIN_DURATION_S, words * TTS_MIN_SECONDS_PER_WORD)

    return (duration + pauses) / _usable_rate(speech_rate)


def calculate_message_duration(config: EffectiveConfig) -> float:
    """Total time a message occupies on the timeline.

    ``additional``: spoken duration + configured interval.
    ``fixed`` (default): the longer of the two.
    A legacy ``delay`` is added in both cases. NaN or negative results fall
    back to the spoken duration, or 1 s when there is none.
    """
    configured = parse_time_limit(config.message_interval)
    if math.isnan(configured) or configured < 0:
        configured = 0.0

    tts_duration = estimate_tts_duration(config.message, config.speech_rate)
    delay = config.delay or 0.0

    if config.interval_type == IntervalType.ADDITIONAL:
        duration = tts_duration + configured + delay
    else:
        duration = max(tts_duration, configured) + delay

    if math.isnan(duration) or duration < 0:
        duration = tts_duration if tts_duration > 0 else MESSAGE_DURATION_FALLBACK_S
    return duration
