"""TimelineEngine: walks the workout tree and produces timed sound events."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from ghost_engine.config_resolution.resolver import ConfigResolver
from ghost_engine.models.config import Limits, RepeatCount
from ghost_engine.models.effective_config import EffectiveConfig
from ghost_engine.models.enums import (
    MAX_COUNTDOWN_SECONDS,
    EventType,
    LimitsType,
    RepeatType,
    SkipReason,
)
from ghost_engine.models.timeline import Timeline, TimelineEvent, TimelineStep, WorkoutStats
from ghost_engine.models.workout import Entry, Message, Pattern, Shot, WorkoutDocument
from ghost_engine.ordering.siblings import order_siblings
from ghost_engine.serialization.document import load_workout
from ghost_engine.settings import EngineSettings
from ghost_engine.timing.intervals import draw_interval_offset, draw_repeat_count, pick_split_step
from ghost_engine.timing.speech import calculate_message_duration, estimate_tts_duration
from ghost_engine.timing.time_format import parse_time_limit

logger = logging.getLogger(__name__)


def _valid_interval(value: float | None) -> bool:
    return value is not None and not math.isnan(value) and value > 0


@dataclass(frozen=True)
class _Limit:
    """A stopping condition with its value already parsed.

    Invalid shot counts or time strings (non-positive after parsing) make the
    limit open, i.e. behave like all-shots.
    """

    type: LimitsType = LimitsType.ALL_SHOTS
    shots: int = 0
    seconds: float = 0.0

    @classmethod
    def from_limits(cls, limits: Limits | None) -> _Limit:
        if limits is None:
            return cls()
        if limits.type == LimitsType.SHOT_LIMIT:
            try:
                shots = int(limits.value)  # type: ignore[arg-type]
            except (TypeError, ValueError):
                return cls()
            return cls(LimitsType.SHOT_LIMIT, shots=shots) if shots >= 1 else cls()
        if limits.type == LimitsType.TIME_LIMIT:
            seconds = parse_time_limit(limits.value)
            return cls(LimitsType.TIME_LIMIT, seconds=seconds) if seconds > 0 else cls()
        return cls()

    @property
    def is_open(self) -> bool:
        return self.type == LimitsType.ALL_SHOTS

    def reached(self, shots: int, elapsed: float) -> bool:
        """True once nothing more may be scheduled."""
        if self.type == LimitsType.SHOT_LIMIT:
            return shots >= self.shots
        if self.type == LimitsType.TIME_LIMIT:
            return elapsed >= self.seconds
        return False

    def would_exceed(self, shots: int, elapsed: float, interval: float) -> bool:
        """True if one more shot of *interval* seconds would break the limit."""
        if self.type == LimitsType.SHOT_LIMIT:
            return shots + 1 > self.shots
        if self.type == LimitsType.TIME_LIMIT:
            return elapsed + interval > self.seconds
        return False


@dataclass
class _WalkState:
    """Counters threaded through one generate() call."""

    current_time: float = 0.0
    current_time_without_padding: float = 0.0
    total_shots_executed: int = 0
    last_applicable_interval: float | None = None
    limit_reason: SkipReason | None = None
    events: list[TimelineEvent] = field(default_factory=list)
    steps: list[TimelineStep] = field(default_factory=list)

    def advance(self, seconds: float) -> None:
        self.current_time += seconds
        self.current_time_without_padding += seconds


@dataclass
class _PatternRun:
    """Per-repetition counters; a fresh one starts every pattern repetition."""

    limit: _Limit
    shots: int = 0
    elapsed: float = 0.0
    capped: SkipReason | None = None


@dataclass(frozen=True)
class _WalkContext:
    document: WorkoutDocument
    locked: bool
    default_interval: float
    workout_limit: _Limit


@dataclass(frozen=True)
class _Visit:
    superset: int
    pattern: Pattern
    pattern_repetition: int
    entry: Entry
    entry_repetition: int


class TimelineEngine:
    """Computes the execution timeline and statistics of a workout.

    The walk is: supersets → patterns (ordered, repeated) → entries
    (ordered, repeated). Shots advance the clock by their interval, messages
    by their spoken/configured duration. Limits are checked against the
    unpadded clock; the final half-interval padding only appears in the
    statistics. Events and statistics come out of the same walk, so they
    always agree.

    Usage:
        engine = TimelineEngine(rng=np.random.default_rng(7))
        timeline = engine.generate(document)
        timeline.stats.total_shots
    """

    def __init__(
        self,
        settings: EngineSettings | None = None,
        rng: np.random.Generator | None = None,
        resolver: ConfigResolver | None = None,
    ) -> None:
        self.settings = settings or EngineSettings()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.resolver = resolver or ConfigResolver()

    def generate(
        self,
        document: WorkoutDocument | Mapping[str, Any] | str,
        locked: bool | None = None,
    ) -> Timeline:
        """Walk *document* and return its events, steps and statistics.

        Args:
            document: A loaded WorkoutDocument, or the raw JSON (mapping or text).
            locked: Force every shot to the workout default interval with no
                offset. None defers to the document's ``isConfigLocked``.

        Raises:
            WorkoutStructureError: if raw input fails basic shape checks.
        """
        if not isinstance(document, WorkoutDocument):
            document = load_workout(document)

        ctx = _WalkContext(
            document=document,
            locked=locked if locked is not None else bool(document.config.is_config_locked),
            default_interval=self._default_interval(document),
            workout_limit=_Limit.from_limits(document.config.limits),
        )
        state = _WalkState()

        superset = 0
        hit_cap = False
        while True:
            before = (state.total_shots_executed, state.current_time_without_padding)
            self._walk_superset(ctx, state, superset)
            superset += 1
            logger.debug(
                "Superset %d done: %d shot(s), %.2fs elapsed",
                superset,
                state.total_shots_executed,
                state.current_time_without_padding,
            )

            if ctx.workout_limit.is_open or state.limit_reason is not None:
                break
            if ctx.workout_limit.reached(
                state.total_shots_executed, state.current_time_without_padding
            ):
                break
            if superset >= self.settings.max_supersets:
                hit_cap = True
                logger.warning(
                    "Workout '%s' hit the %d-superset cap before its limit",
                    document.name,
                    self.settings.max_supersets,
                )
                break
            if before == (state.total_shots_executed, state.current_time_without_padding):
                logger.warning(
                    "Workout '%s' made no progress in superset %d; stopping",
                    document.name,
                    superset,
                )
                break

        if self.settings.announce_completion and state.total_shots_executed > 0:
            state.events.append(
                TimelineEvent(
                    type=EventType.TTS,
                    time=state.current_time,
                    text=self.settings.completion_text,
                    config=self.resolver.resolve(document.config).with_defaults(),
                )
            )

        stats = self._stats(ctx, state)
        reasons: list[SkipReason] = []
        for step in state.steps:
            if step.skip_reason is not None and step.skip_reason not in reasons:
                reasons.append(step.skip_reason)

        logger.info(
            "Generated timeline for '%s': %d shot(s), %.2fs, %d event(s), %d superset(s)",
            document.name,
            stats.total_shots,
            stats.total_time,
            len(state.events),
            superset,
        )
        return Timeline(
            events=tuple(sorted(state.events, key=lambda event: event.time)),
            stats=stats,
            steps=tuple(state.steps),
            skip_reasons=tuple(reasons),
            superset_count=superset,
            hit_superset_cap=hit_cap,
        )

    def calculate_stats(
        self,
        document: WorkoutDocument | Mapping[str, Any] | str,
        locked: bool | None = None,
    ) -> WorkoutStats:
        """Total time and shots; identical to ``generate(...).stats``."""
        return self.generate(document, locked=locked).stats

    # ------------------------------------------------------------------
    # Walk
    # ------------------------------------------------------------------

    def _walk_superset(self, ctx: _WalkContext, state: _WalkState, superset: int) -> None:
        document = ctx.document
        patterns = order_siblings(document.patterns, document.config.iteration_type, self.rng)

        for p_index, pattern in enumerate(patterns):
            pattern_cfg = self.resolver.resolve_pattern(pattern, document).with_defaults()
            applicable = self._applicable_interval(ctx, pattern_cfg)
            repeats = draw_repeat_count(pattern_cfg.repeat_count, self.rng)

            for repetition in range(repeats):
                if state.limit_reason is not None or ctx.workout_limit.reached(
                    state.total_shots_executed, state.current_time_without_padding
                ):
                    self._skip_pattern_repetition(state, superset, pattern, repetition)
                    continue

                if repetition < repeats - 1:
                    following = pattern
                elif p_index < len(patterns) - 1:
                    following = patterns[p_index + 1]
                else:
                    following = None

                state.last_applicable_interval = applicable
                self._walk_pattern_repetition(
                    ctx,
                    state,
                    superset,
                    pattern,
                    pattern_cfg,
                    applicable,
                    repetition,
                    following,
                )

    def _walk_pattern_repetition(
        self,
        ctx: _WalkContext,
        state: _WalkState,
        superset: int,
        pattern: Pattern,
        pattern_cfg: EffectiveConfig,
        applicable: float,
        repetition: int,
        following: Pattern | None,
    ) -> None:
        """Run one pattern repetition; *following* is the pattern visited next
        in this superset, or None when this repetition closes it.
        """
        entries = order_siblings(pattern.entries, pattern_cfg.iteration_type, self.rng)
        run = _PatternRun(limit=_Limit.from_limits(pattern_cfg.limits))

        for e_index, entry in enumerate(entries):
            cfg = self.resolver.resolve_entry(entry, pattern, ctx.document).with_defaults()
            repeats = draw_repeat_count(cfg.repeat_count, self.rng)
            if e_index + 1 < len(entries):
                upcoming: tuple[Entry, Pattern] | None = (entries[e_index + 1], pattern)
            else:
                upcoming = self._first_entry_after(ctx, following)

            for entry_repetition in range(repeats):
                visit = _Visit(superset, pattern, repetition, entry, entry_repetition)
                last_repeat = entry_repetition == repeats - 1
                if isinstance(entry, Shot):
                    self._run_shot(ctx, state, run, visit, cfg, applicable)
                else:
                    self._run_message(
                        ctx,
                        state,
                        run,
                        visit,
                        cfg,
                        upcoming=upcoming if last_repeat else (entry, pattern),
                        closes_superset=following is None
                        and e_index == len(entries) - 1
                        and last_repeat,
                    )

    def _run_shot(
        self,
        ctx: _WalkContext,
        state: _WalkState,
        run: _PatternRun,
        visit: _Visit,
        cfg: EffectiveConfig,
        applicable: float,
    ) -> None:
        if state.limit_reason is not None:
            self._record_skip(state, visit, state.limit_reason)
            return

        base, offset = self._shot_interval(ctx, cfg, applicable)
        interval = max(0.0, base + offset)

        if run.capped is None and run.limit.would_exceed(run.shots, run.elapsed, interval):
            run.capped = (
                SkipReason.PATTERN_SHOT_LIMIT
                if run.limit.type == LimitsType.SHOT_LIMIT
                else SkipReason.PATTERN_TIME_LIMIT
            )
        if run.capped is not None:
            self._record_skip(state, visit, run.capped)
            return

        if ctx.workout_limit.would_exceed(
            state.total_shots_executed, state.current_time_without_padding, interval
        ):
            state.limit_reason = (
                SkipReason.WORKOUT_SHOT_LIMIT
                if ctx.workout_limit.type == LimitsType.SHOT_LIMIT
                else SkipReason.WORKOUT_TIME_LIMIT
            )
            self._record_skip(state, visit, state.limit_reason)
            return

        start = state.current_time
        state.advance(interval)
        state.total_shots_executed += 1
        run.shots += 1
        run.elapsed += interval
        end = state.current_time

        self._record(state, visit, start, end, base_interval=base, offset=offset)
        self._emit_shot_events(state, visit.entry, cfg, start, end, interval)

    def _run_message(
        self,
        ctx: _WalkContext,
        state: _WalkState,
        run: _PatternRun,
        visit: _Visit,
        cfg: EffectiveConfig,
        upcoming: tuple[Entry, Pattern] | None,
        closes_superset: bool,
    ) -> None:
        if state.limit_reason is not None:
            self._record_skip(state, visit, state.limit_reason)
            return

        duration = calculate_message_duration(cfg)
        if cfg.skip_at_end_of_workout and self._is_closing_message(
            ctx, state, duration, upcoming, closes_superset
        ):
            self._record_skip(state, visit, SkipReason.END_OF_WORKOUT)
            return

        start = state.current_time
        state.advance(duration)
        run.elapsed += duration
        end = state.current_time

        self._record(state, visit, start, end)
        self._emit_message_events(state, visit.entry, cfg, start, end, duration)

    def _is_closing_message(
        self,
        ctx: _WalkContext,
        state: _WalkState,
        duration: float,
        upcoming: tuple[Entry, Pattern] | None,
        closes_superset: bool,
    ) -> bool:
        """True if nothing would execute after this message.

        *upcoming* is the entry visited next with its parent pattern; for the
        last entry of a superset it is the first entry of the next superset.
        """
        limit = ctx.workout_limit
        if closes_superset and limit.is_open:
            return True
        shots = state.total_shots_executed
        elapsed = state.current_time_without_padding + duration

        if upcoming is not None and isinstance(upcoming[0], Shot):
            entry, parent = upcoming
            return limit.would_exceed(shots, elapsed, self._nominal_interval(ctx, entry, parent))
        if closes_superset:
            return limit.reached(shots, elapsed)
        return False

    def _first_entry_after(
        self, ctx: _WalkContext, following: Pattern | None
    ) -> tuple[Entry, Pattern] | None:
        """First entry (document order) of the pattern visited next."""
        pattern = following
        if pattern is None:
            if ctx.workout_limit.is_open or not ctx.document.patterns:
                return None
            pattern = ctx.document.patterns[0]
        if not pattern.entries:
            return None
        return pattern.entries[0], pattern

    def _nominal_interval(self, ctx: _WalkContext, entry: Shot, pattern: Pattern) -> float:
        """Shortest interval *entry* can take, without drawing from the generator."""
        if ctx.locked:
            return ctx.default_interval
        pattern_cfg = self.resolver.resolve_pattern(pattern, ctx.document).with_defaults()
        cfg = self.resolver.resolve_entry(entry, pattern, ctx.document).with_defaults()
        base = cfg.interval if cfg.interval is not None else self._applicable_interval(ctx, pattern_cfg)
        if not _valid_interval(base):
            base = ctx.default_interval
        offset = 0.0
        if cfg.interval_offset is not None and cfg.interval_offset_type is not None:
            offset = min(cfg.interval_offset.min, cfg.interval_offset.max)
        return max(0.0, float(base) + offset)  # type: ignore[arg-type]

    def _skip_pattern_repetition(
        self, state: _WalkState, superset: int, pattern: Pattern, repetition: int
    ) -> None:
        """Record every entry of a pattern repetition the workout limit cut off."""
        for entry in pattern.entries:
            for entry_repetition in range(_display_repeats(entry.config.repeat_count)):
                visit = _Visit(superset, pattern, repetition, entry, entry_repetition)
                self._record_skip(state, visit, SkipReason.PATTERN_SKIPPED)

    # ------------------------------------------------------------------
    # Intervals
    # ------------------------------------------------------------------

    def _default_interval(self, document: WorkoutDocument) -> float:
        config = document.config
        for candidate in (config.workout_default_interval, config.interval):
            if _valid_interval(candidate):
                return float(candidate)  # type: ignore[arg-type]
        return self.settings.default_interval

    def _applicable_interval(self, ctx: _WalkContext, pattern_cfg: EffectiveConfig) -> float:
        if ctx.locked or not _valid_interval(pattern_cfg.interval):
            return ctx.default_interval
        return float(pattern_cfg.interval)  # type: ignore[arg-type]

    def _shot_interval(
        self, ctx: _WalkContext, cfg: EffectiveConfig, applicable: float
    ) -> tuple[float, float]:
        """(base interval, offset) for one shot repetition."""
        if ctx.locked:
            return ctx.default_interval, 0.0
        base = cfg.interval if cfg.interval is not None else applicable
        if not _valid_interval(base):
            base = ctx.default_interval
        offset = draw_interval_offset(cfg.interval_offset, cfg.interval_offset_type, self.rng)
        return float(base), offset  # type: ignore[arg-type]

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def _emit_shot_events(
        self,
        state: _WalkState,
        entry: Entry,
        cfg: EffectiveConfig,
        start: float,
        end: float,
        interval: float,
    ) -> None:
        lead = cfg.shot_announcement_lead_time or 0.0
        if lead > 0:
            state.events.append(
                TimelineEvent(
                    type=EventType.TTS,
                    time=max(start, end - lead),
                    entry_id=entry.id,
                    entry_name=entry.name,
                    text=entry.name,
                    config=cfg,
                )
            )

        split_step = pick_split_step(cfg.split_step_speed, interval, self.rng)
        if split_step is not None:
            speed, lead_s = split_step
            state.events.append(
                TimelineEvent(
                    type=EventType.SPLIT_STEP,
                    time=end - lead_s,
                    entry_id=entry.id,
                    entry_name=entry.name,
                    speed=speed,
                    config=cfg,
                )
            )

        state.events.append(
            TimelineEvent(
                type=EventType.BEEP,
                time=end,
                entry_id=entry.id,
                entry_name=entry.name,
                config=cfg,
            )
        )

    def _emit_message_events(
        self,
        state: _WalkState,
        entry: Entry,
        cfg: EffectiveConfig,
        start: float,
        end: float,
        duration: float,
    ) -> None:
        state.events.append(
            TimelineEvent(
                type=EventType.TTS,
                time=start,
                entry_id=entry.id,
                entry_name=entry.name,
                text=cfg.message,
                config=cfg,
            )
        )
        if not cfg.countdown:
            return

        remaining = duration - estimate_tts_duration(cfg.message, cfg.speech_rate)
        if remaining <= 0:
            return
        count_from = math.floor(min(MAX_COUNTDOWN_SECONDS, remaining))
        for event_type in (EventType.TTS, EventType.BEEP):
            for second in range(count_from, 0, -1):
                state.events.append(
                    TimelineEvent(
                        type=event_type,
                        time=end - second,
                        entry_id=entry.id,
                        entry_name=entry.name,
                        text=str(second) if event_type == EventType.TTS else None,
                        is_countdown=True,
                        config=cfg,
                    )
                )

    def _record(
        self,
        state: _WalkState,
        visit: _Visit,
        start: float,
        end: float,
        base_interval: float = 0.0,
        offset: float = 0.0,
        skip_reason: SkipReason | None = None,
    ) -> None:
        state.steps.append(
            TimelineStep(
                superset=visit.superset,
                pattern_id=visit.pattern.id,
                pattern_name=visit.pattern.name,
                pattern_repetition=visit.pattern_repetition,
                entry_id=visit.entry.id,
                entry_name=visit.entry.name,
                entry_type=visit.entry.type,
                entry_repetition=visit.entry_repetition,
                start_time=start,
                end_time=end,
                base_interval=base_interval,
                offset=offset,
                skipped=skip_reason is not None,
                skip_reason=skip_reason,
            )
        )

    def _record_skip(self, state: _WalkState, visit: _Visit, reason: SkipReason) -> None:
        self._record(state, visit, state.current_time, state.current_time, skip_reason=reason)

    def _stats(self, ctx: _WalkContext, state: _WalkState) -> WorkoutStats:
        total_time = state.current_time
        if state.total_shots_executed > 0:
            final_interval = (
                ctx.default_interval
                if ctx.locked or state.last_applicable_interval is None
                else state.last_applicable_interval
            )
            total_time += final_interval / 2
        return WorkoutStats(total_time=total_time, total_shots=state.total_shots_executed)


def _display_repeats(repeat: RepeatCount | None) -> int:
    """Repetitions shown for a skipped entry, without drawing from the generator."""
    if repeat is None:
        return 1
    count = repeat.min if repeat.type == RepeatType.RANDOM else repeat.count
    return count if count and count >= 1 else 1
