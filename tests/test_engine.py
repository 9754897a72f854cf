"""Tests for TimelineEngine: timeline walk, limits, events and statistics."""

from __future__ import annotations

import json
import logging
from typing import Callable

import numpy as np
import pytest

from ghost_engine.engine import TimelineEngine
from ghost_engine.exceptions import WorkoutStructureError
from ghost_engine.models.enums import EventType, SkipReason, SplitStepSpeed
from ghost_engine.serialization.document import load_workout
from ghost_engine.serialization.timeline import timeline_to_dict
from ghost_engine.settings import EngineSettings
from ghost_engine.timing.consistency import check_timing_consistency


class TestSingleShot:
    def test_one_shot_stats_include_half_interval_padding(
        self, engine: TimelineEngine, single_shot_workout: dict
    ) -> None:
        timeline = engine.generate(single_shot_workout)
        assert timeline.stats.total_shots == 1
        assert timeline.stats.total_time == pytest.approx(7.5)

    def test_announcement_then_beep(
        self, engine: TimelineEngine, single_shot_workout: dict
    ) -> None:
        timeline = engine.generate(single_shot_workout)
        assert [(e.type, e.time) for e in timeline.events] == [
            (EventType.TTS, pytest.approx(2.5)),
            (EventType.BEEP, pytest.approx(5.0)),
        ]
        assert timeline.events[0].text == "Front left"
        assert timeline.events[0].entry_id == "shot-1"

    def test_all_shots_runs_a_single_superset(
        self, engine: TimelineEngine, single_shot_workout: dict
    ) -> None:
        timeline = engine.generate(single_shot_workout)
        assert timeline.superset_count == 1
        assert timeline.hit_superset_cap is False
        assert timeline.skip_reasons == ()

    def test_auto_scale_split_step_before_beep(
        self, engine: TimelineEngine, single_shot_workout: dict
    ) -> None:
        single_shot_workout["patterns"][0]["entries"][0]["config"]["splitStepSpeed"] = "auto-scale"
        timeline = engine.generate(single_shot_workout)
        split_steps = timeline.events_of_type(EventType.SPLIT_STEP)
        assert len(split_steps) == 1
        assert split_steps[0].speed == SplitStepSpeed.MEDIUM
        assert split_steps[0].time == pytest.approx(4.5)

    def test_lead_time_longer_than_interval_clamps_to_shot_start(
        self, engine: TimelineEngine, single_shot_workout: dict
    ) -> None:
        config = single_shot_workout["patterns"][0]["entries"][0]["config"]
        config["interval"] = 3.0
        config["shotAnnouncementLeadTime"] = 4.0
        timeline = engine.generate(single_shot_workout)
        assert timeline.events_of_type(EventType.TTS)[0].time == pytest.approx(0.0)

    def test_accepts_json_text(self, engine: TimelineEngine, single_shot_workout: dict) -> None:
        timeline = engine.generate(json.dumps(single_shot_workout))
        assert timeline.stats.total_shots == 1

    def test_accepts_loaded_document(
        self, engine: TimelineEngine, single_shot_workout: dict
    ) -> None:
        timeline = engine.generate(load_workout(single_shot_workout))
        assert timeline.stats.total_time == pytest.approx(7.5)

    def test_calculate_stats_matches_generate(self, single_shot_workout: dict) -> None:
        stats = TimelineEngine(rng=np.random.default_rng(1)).calculate_stats(single_shot_workout)
        timeline = TimelineEngine(rng=np.random.default_rng(1)).generate(single_shot_workout)
        assert stats == timeline.stats


class TestWorkoutLimits:
    def test_time_limit_stops_before_overrun(
        self,
        engine: TimelineEngine,
        workout_factory: Callable[..., dict],
        pattern_factory: Callable[..., dict],
        shot_factory: Callable[..., dict],
    ) -> None:
        shots = [shot_factory(f"Shot {i}", interval=5.0, splitStepSpeed="none") for i in range(3)]
        data = workout_factory(
            [pattern_factory(shots)], limits={"type": "time-limit", "value": "00:10"}
        )
        timeline = engine.generate(data)
        assert timeline.stats.total_shots == 2
        assert timeline.stats.total_time == pytest.approx(12.5)
        assert SkipReason.WORKOUT_TIME_LIMIT in timeline.skip_reasons

    def test_shot_limit_is_exact_across_supersets(
        self,
        engine: TimelineEngine,
        workout_factory: Callable[..., dict],
        pattern_factory: Callable[..., dict],
        shot_factory: Callable[..., dict],
    ) -> None:
        pattern = pattern_factory([shot_factory("A"), shot_factory("B")])
        data = workout_factory([pattern], limits={"type": "shot-limit", "value": 5})
        timeline = engine.generate(data)
        assert timeline.stats.total_shots == 5
        assert timeline.superset_count == 3
        assert len(timeline.events_of_type(EventType.BEEP)) == 5
        assert timeline.skip_reasons == (SkipReason.WORKOUT_SHOT_LIMIT,)

    def test_shot_limit_stops_inside_a_long_pattern(
        self,
        engine: TimelineEngine,
        workout_factory: Callable[..., dict],
        pattern_factory: Callable[..., dict],
        shot_factory: Callable[..., dict],
    ) -> None:
        pattern = pattern_factory([shot_factory(f"Shot {i}") for i in range(10)])
        data = workout_factory([pattern], limits={"type": "shot-limit", "value": 5})
        timeline = engine.generate(data)
        announced = [event.text for event in timeline.events_of_type(EventType.TTS)]
        assert announced == [f"Shot {i}" for i in range(5)]
        assert len(timeline.events_of_type(EventType.BEEP)) == 5

    def test_later_pattern_repetitions_are_skipped(
        self,
        engine: TimelineEngine,
        workout_factory: Callable[..., dict],
        pattern_factory: Callable[..., dict],
        shot_factory: Callable[..., dict],
    ) -> None:
        pattern = pattern_factory([shot_factory("A", interval=5.0)], repeatCount=3)
        data = workout_factory([pattern], limits={"type": "time-limit", "value": "00:10"})
        timeline = engine.generate(data)
        assert timeline.stats.total_shots == 2
        skipped = [step for step in timeline.steps if step.skipped]
        assert len(skipped) == 1
        assert skipped[0].pattern_repetition == 2
        assert skipped[0].skip_reason == SkipReason.PATTERN_SKIPPED

    def test_invalid_limit_value_behaves_like_all_shots(
        self,
        engine: TimelineEngine,
        workout_factory: Callable[..., dict],
        pattern_factory: Callable[..., dict],
        shot_factory: Callable[..., dict],
    ) -> None:
        pattern = pattern_factory([shot_factory("A"), shot_factory("B")])
        data = workout_factory([pattern], limits={"type": "time-limit", "value": "soon"})
        timeline = engine.generate(data)
        assert timeline.stats.total_shots == 2
        assert timeline.superset_count == 1

    def test_superset_cap_stops_runaway_limits(
        self,
        workout_factory: Callable[..., dict],
        pattern_factory: Callable[..., dict],
        shot_factory: Callable[..., dict],
    ) -> None:
        engine = TimelineEngine(settings=EngineSettings(max_supersets=3, announce_completion=False))
        data = workout_factory(
            [pattern_factory([shot_factory("A")])], limits={"type": "shot-limit", "value": 50}
        )
        timeline = engine.generate(data)
        assert timeline.hit_superset_cap is True
        assert timeline.superset_count == 3
        assert timeline.stats.total_shots == 3

    def test_stops_when_a_superset_makes_no_progress(
        self,
        engine: TimelineEngine,
        workout_factory: Callable[..., dict],
        pattern_factory: Callable[..., dict],
        shot_factory: Callable[..., dict],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        pattern = pattern_factory(
            [shot_factory("A", interval=5.0)],
            limits={"type": "time-limit", "value": "00:01"},
        )
        data = workout_factory([pattern], limits={"type": "shot-limit", "value": 5})
        with caplog.at_level(logging.WARNING, logger="ghost_engine.engine"):
            timeline = engine.generate(data)
        assert timeline.stats.total_shots == 0
        assert timeline.stats.total_time == 0.0
        assert timeline.superset_count == 1
        assert "no progress" in caplog.text


class TestPatternLimits:
    def test_pattern_shot_limit_caps_each_repetition(
        self,
        engine: TimelineEngine,
        workout_factory: Callable[..., dict],
        pattern_factory: Callable[..., dict],
        shot_factory: Callable[..., dict],
    ) -> None:
        pattern = pattern_factory(
            [shot_factory("A"), shot_factory("B"), shot_factory("C")],
            repeatCount=2,
            limits={"type": "shot-limit", "value": 2},
        )
        timeline = engine.generate(workout_factory([pattern]))
        assert timeline.stats.total_shots == 4
        skipped = [step for step in timeline.steps if step.skipped]
        assert [step.entry_name for step in skipped] == ["C", "C"]
        assert timeline.skip_reasons == (SkipReason.PATTERN_SHOT_LIMIT,)

    def test_pattern_time_limit(
        self,
        engine: TimelineEngine,
        workout_factory: Callable[..., dict],
        pattern_factory: Callable[..., dict],
        shot_factory: Callable[..., dict],
    ) -> None:
        pattern = pattern_factory(
            [shot_factory("A", interval=5.0), shot_factory("B", interval=5.0)],
            limits={"type": "time-limit", "value": "00:08"},
        )
        timeline = engine.generate(workout_factory([pattern]))
        assert timeline.stats.total_shots == 1
        assert timeline.skip_reasons == (SkipReason.PATTERN_TIME_LIMIT,)

    def test_pattern_limit_does_not_stop_other_patterns(
        self,
        engine: TimelineEngine,
        workout_factory: Callable[..., dict],
        pattern_factory: Callable[..., dict],
        shot_factory: Callable[..., dict],
    ) -> None:
        capped = pattern_factory(
            [shot_factory("A"), shot_factory("B")],
            limits={"type": "shot-limit", "value": 1},
        )
        free = pattern_factory([shot_factory("C"), shot_factory("D")])
        timeline = engine.generate(workout_factory([capped, free]))
        assert [step.entry_name for step in timeline.executed_steps] == ["A", "C", "D"]


class TestMessages:
    def test_message_duration_is_speech_estimate_when_interval_is_zero(
        self,
        engine: TimelineEngine,
        workout_factory: Callable[..., dict],
        pattern_factory: Callable[..., dict],
        message_factory: Callable[..., dict],
    ) -> None:
        message = message_factory("Hi", interval="00:00", intervalType="fixed")
        timeline = engine.generate(workout_factory([pattern_factory([message])]))
        step = timeline.executed_steps[0]
        assert step.duration == pytest.approx(0.8)
        assert timeline.stats.total_shots == 0
        assert timeline.stats.total_time == pytest.approx(0.8)

    def test_additional_interval_adds_to_speech(
        self,
        engine: TimelineEngine,
        workout_factory: Callable[..., dict],
        pattern_factory: Callable[..., dict],
        message_factory: Callable[..., dict],
    ) -> None:
        message = message_factory("Hi", interval="00:10", intervalType="additional")
        timeline = engine.generate(workout_factory([pattern_factory([message])]))
        assert timeline.executed_steps[0].duration == pytest.approx(10.8)

    def test_skip_at_end_message_closing_the_workout_is_dropped(
        self,
        engine: TimelineEngine,
        workout_factory: Callable[..., dict],
        pattern_factory: Callable[..., dict],
        shot_factory: Callable[..., dict],
        message_factory: Callable[..., dict],
    ) -> None:
        shot = shot_factory("A", interval=5.0, splitStepSpeed="none")
        message = message_factory(
            "Well done", interval="00:03", intervalType="fixed", skipAtEndOfWorkout=True
        )
        timeline = engine.generate(workout_factory([pattern_factory([shot, message])]))
        assert timeline.stats.total_time == pytest.approx(7.5)
        assert all(event.entry_name != "Well done" for event in timeline.events)
        assert timeline.skip_reasons == (SkipReason.END_OF_WORKOUT,)

    def test_skip_at_end_message_in_the_middle_still_plays(
        self,
        engine: TimelineEngine,
        workout_factory: Callable[..., dict],
        pattern_factory: Callable[..., dict],
        shot_factory: Callable[..., dict],
        message_factory: Callable[..., dict],
    ) -> None:
        message = message_factory(
            "Next up", interval="00:03", intervalType="fixed", skipAtEndOfWorkout=True
        )
        shot = shot_factory("A", interval=5.0)
        timeline = engine.generate(workout_factory([pattern_factory([message, shot])]))
        assert [step.entry_name for step in timeline.executed_steps] == ["Next up", "A"]

    def test_skip_at_end_message_before_time_limit_is_dropped(
        self,
        engine: TimelineEngine,
        workout_factory: Callable[..., dict],
        pattern_factory: Callable[..., dict],
        shot_factory: Callable[..., dict],
        message_factory: Callable[..., dict],
    ) -> None:
        shots = [shot_factory("A", interval=5.0), shot_factory("B", interval=5.0)]
        message = message_factory(
            "Rest", interval="00:03", intervalType="fixed", skipAtEndOfWorkout=True
        )
        data = workout_factory(
            [pattern_factory(shots + [message])],
            limits={"type": "time-limit", "value": "00:10"},
        )
        timeline = engine.generate(data)
        assert timeline.stats.total_shots == 2
        assert SkipReason.END_OF_WORKOUT in timeline.skip_reasons
        assert all(event.entry_name != "Rest" for event in timeline.events)

    def test_skip_at_end_message_closing_a_superset_is_dropped_when_no_shot_fits(
        self,
        engine: TimelineEngine,
        workout_factory: Callable[..., dict],
        pattern_factory: Callable[..., dict],
        shot_factory: Callable[..., dict],
        message_factory: Callable[..., dict],
    ) -> None:
        shots = [shot_factory("A", interval=5.0), shot_factory("B", interval=5.0)]
        message = message_factory(
            "Rest", interval="00:01", intervalType="fixed", skipAtEndOfWorkout=True
        )
        data = workout_factory(
            [pattern_factory(shots + [message])],
            limits={"type": "time-limit", "value": "00:12"},
        )
        timeline = engine.generate(data)
        assert [step.entry_name for step in timeline.executed_steps] == ["A", "B"]
        assert timeline.stats.total_time == pytest.approx(12.5)
        assert SkipReason.END_OF_WORKOUT in timeline.skip_reasons

    def test_skip_at_end_message_closing_a_superset_plays_while_shots_remain(
        self,
        engine: TimelineEngine,
        workout_factory: Callable[..., dict],
        pattern_factory: Callable[..., dict],
        shot_factory: Callable[..., dict],
        message_factory: Callable[..., dict],
    ) -> None:
        message = message_factory(
            "Rest", interval="00:01", intervalType="fixed", skipAtEndOfWorkout=True
        )
        data = workout_factory(
            [pattern_factory([shot_factory("A"), message])],
            limits={"type": "shot-limit", "value": 3},
        )
        timeline = engine.generate(data)
        assert [step.entry_name for step in timeline.executed_steps] == [
            "A",
            "Rest",
            "A",
            "Rest",
            "A",
        ]

    def test_skip_at_end_message_before_an_unreachable_pattern_is_dropped(
        self,
        engine: TimelineEngine,
        workout_factory: Callable[..., dict],
        pattern_factory: Callable[..., dict],
        shot_factory: Callable[..., dict],
        message_factory: Callable[..., dict],
    ) -> None:
        message = message_factory(
            "Switch", interval="00:02", intervalType="fixed", skipAtEndOfWorkout=True
        )
        first = pattern_factory([shot_factory("A"), message], name="First")
        second = pattern_factory([shot_factory("B")], name="Second")
        data = workout_factory([first, second], limits={"type": "shot-limit", "value": 1})
        timeline = engine.generate(data)
        assert [step.entry_name for step in timeline.executed_steps] == ["A"]
        assert all(event.entry_name != "Switch" for event in timeline.events)
        assert SkipReason.END_OF_WORKOUT in timeline.skip_reasons

    def test_skip_at_end_message_before_a_reachable_pattern_plays(
        self,
        engine: TimelineEngine,
        workout_factory: Callable[..., dict],
        pattern_factory: Callable[..., dict],
        shot_factory: Callable[..., dict],
        message_factory: Callable[..., dict],
    ) -> None:
        message = message_factory(
            "Switch", interval="00:02", intervalType="fixed", skipAtEndOfWorkout=True
        )
        first = pattern_factory([shot_factory("A"), message], name="First")
        second = pattern_factory([shot_factory("B")], name="Second")
        data = workout_factory([first, second], limits={"type": "shot-limit", "value": 2})
        timeline = engine.generate(data)
        assert [step.entry_name for step in timeline.executed_steps] == ["A", "Switch", "B"]

    def test_countdown_announces_final_seconds(
        self,
        engine: TimelineEngine,
        workout_factory: Callable[..., dict],
        pattern_factory: Callable[..., dict],
        message_factory: Callable[..., dict],
    ) -> None:
        message = message_factory("Rest", interval="00:05", intervalType="fixed", countdown=True)
        timeline = engine.generate(workout_factory([pattern_factory([message])]))
        countdown = [event for event in timeline.events if event.is_countdown]
        spoken = [event for event in countdown if event.type == EventType.TTS]
        beeps = [event for event in countdown if event.type == EventType.BEEP]
        assert [event.text for event in spoken] == ["4", "3", "2", "1"]
        assert [event.time for event in spoken] == pytest.approx([1.0, 2.0, 3.0, 4.0])
        assert [event.time for event in beeps] == pytest.approx([1.0, 2.0, 3.0, 4.0])
        assert len(timeline.events) == 9

    def test_legacy_delay_is_added(
        self,
        engine: TimelineEngine,
        workout_factory: Callable[..., dict],
        pattern_factory: Callable[..., dict],
        message_factory: Callable[..., dict],
    ) -> None:
        message = message_factory("Hi", interval="00:02", intervalType="fixed", delay=1.0)
        timeline = engine.generate(workout_factory([pattern_factory([message])]))
        assert timeline.executed_steps[0].duration == pytest.approx(3.0)


class TestIntervals:
    def _two_shot_workout(
        self,
        workout_factory: Callable[..., dict],
        pattern_factory: Callable[..., dict],
        shot_factory: Callable[..., dict],
        **config: object,
    ) -> dict:
        shots = [
            shot_factory(
                name,
                interval=7.0,
                intervalOffsetType="fixed",
                intervalOffset={"min": 1.0, "max": 1.0},
                splitStepSpeed="none",
            )
            for name in ("A", "B")
        ]
        return workout_factory(
            [pattern_factory(shots)], workoutDefaultInterval=4.0, interval=6.0, **config
        )

    def test_unlocked_uses_shot_interval_and_offset(
        self,
        engine: TimelineEngine,
        workout_factory: Callable[..., dict],
        pattern_factory: Callable[..., dict],
        shot_factory: Callable[..., dict],
    ) -> None:
        data = self._two_shot_workout(workout_factory, pattern_factory, shot_factory)
        timeline = engine.generate(data)
        assert [e.time for e in timeline.events_of_type(EventType.BEEP)] == pytest.approx([8.0, 16.0])
        assert timeline.executed_steps[0].base_interval == 7.0
        assert timeline.executed_steps[0].offset == 1.0
        assert timeline.stats.total_time == pytest.approx(19.0)

    def test_locked_forces_workout_default_interval(
        self,
        engine: TimelineEngine,
        workout_factory: Callable[..., dict],
        pattern_factory: Callable[..., dict],
        shot_factory: Callable[..., dict],
    ) -> None:
        data = self._two_shot_workout(workout_factory, pattern_factory, shot_factory)
        timeline = engine.generate(data, locked=True)
        assert [e.time for e in timeline.events_of_type(EventType.BEEP)] == pytest.approx([4.0, 8.0])
        assert all(step.offset == 0.0 for step in timeline.executed_steps)
        assert timeline.stats.total_time == pytest.approx(10.0)

    def test_document_lock_flag_is_honoured(
        self,
        engine: TimelineEngine,
        workout_factory: Callable[..., dict],
        pattern_factory: Callable[..., dict],
        shot_factory: Callable[..., dict],
    ) -> None:
        data = self._two_shot_workout(
            workout_factory, pattern_factory, shot_factory, isConfigLocked=True
        )
        assert engine.generate(data).stats.total_time == pytest.approx(10.0)
        assert engine.generate(data, locked=False).stats.total_time == pytest.approx(19.0)

    def test_entry_repeat_count(
        self,
        engine: TimelineEngine,
        workout_factory: Callable[..., dict],
        pattern_factory: Callable[..., dict],
        shot_factory: Callable[..., dict],
    ) -> None:
        pattern = pattern_factory([shot_factory("A", repeatCount=3)], repeatCount=2)
        timeline = engine.generate(workout_factory([pattern]))
        assert timeline.stats.total_shots == 6
        assert [step.entry_repetition for step in timeline.steps] == [0, 1, 2, 0, 1, 2]


class TestCompletionAnnouncement:
    def test_off_by_default(self, single_shot_workout: dict) -> None:
        timeline = TimelineEngine(settings=EngineSettings(announce_completion=False)).generate(
            single_shot_workout
        )
        assert all(event.entry_id is not None for event in timeline.events)

    def test_announces_after_last_shot(self, single_shot_workout: dict) -> None:
        settings = EngineSettings(announce_completion=True, completion_text="Done")
        timeline = TimelineEngine(settings=settings).generate(single_shot_workout)
        last = timeline.events[-1]
        assert last.type == EventType.TTS
        assert last.text == "Done"
        assert last.entry_id is None
        assert last.time == pytest.approx(5.0)

    def test_not_announced_without_shots(
        self,
        workout_factory: Callable[..., dict],
        pattern_factory: Callable[..., dict],
        message_factory: Callable[..., dict],
    ) -> None:
        settings = EngineSettings(announce_completion=True)
        data = workout_factory([pattern_factory([message_factory("Hi")])])
        timeline = TimelineEngine(settings=settings).generate(data)
        assert len(timeline.events) == 1


class TestRandomisedWorkout:
    def test_same_seed_gives_same_timeline(self, valid_workout: dict) -> None:
        first = TimelineEngine(rng=np.random.default_rng(7)).generate(valid_workout)
        second = TimelineEngine(rng=np.random.default_rng(7)).generate(valid_workout)
        assert timeline_to_dict(first) == timeline_to_dict(second)

    def test_events_are_time_ordered(self, engine: TimelineEngine, valid_workout: dict) -> None:
        times = [event.time for event in engine.generate(valid_workout).events]
        assert times == sorted(times)

    def test_events_and_stats_agree(self, engine: TimelineEngine, valid_workout: dict) -> None:
        timeline = engine.generate(valid_workout)
        beeps = [e for e in timeline.events_of_type(EventType.BEEP) if not e.is_countdown]
        assert len(beeps) == timeline.stats.total_shots

    def test_no_shot_lands_after_the_time_limit(
        self, engine: TimelineEngine, valid_workout: dict
    ) -> None:
        timeline = engine.generate(valid_workout)
        assert timeline.stats.total_shots > 0
        assert all(event.time <= 120.0 + 1e-9 for event in timeline.events_of_type(EventType.BEEP))

    def test_steps_never_overlap(self, engine: TimelineEngine, valid_workout: dict) -> None:
        assert check_timing_consistency(engine.generate(valid_workout).steps) == []

    def test_linked_shot_follows_its_leader(self, valid_workout: dict) -> None:
        for seed in range(10):
            timeline = TimelineEngine(rng=np.random.default_rng(seed)).generate(valid_workout)
            names = [step.entry_name for step in timeline.executed_steps]
            for index, name in enumerate(names):
                if name == "Back left":
                    assert names[index - 1] == "Front right"

    def test_anchored_pattern_opens_every_superset(self, valid_workout: dict) -> None:
        valid_workout["config"]["iterationType"] = "shuffle"
        timeline = TimelineEngine(rng=np.random.default_rng(3)).generate(valid_workout)
        firsts = {}
        for step in timeline.steps:
            firsts.setdefault(step.superset, step.pattern_name)
        assert set(firsts.values()) == {"Warm up"}


class TestInvalidInput:
    def test_patterns_must_be_a_list(self, engine: TimelineEngine) -> None:
        with pytest.raises(WorkoutStructureError):
            engine.generate({"type": "Workout", "name": "Broken", "patterns": "none"})

    def test_malformed_json_text(self, engine: TimelineEngine) -> None:
        with pytest.raises(WorkoutStructureError):
            engine.generate("{not json")

    def test_empty_workout_has_zero_stats(self, engine: TimelineEngine) -> None:
        timeline = engine.generate({"type": "Workout", "name": "Empty", "patterns": []})
        assert timeline.stats.total_shots == 0
        assert timeline.stats.total_time == 0.0
        assert timeline.events == ()
