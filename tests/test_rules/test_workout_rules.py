"""Tests for the workout-level validation rules."""

from __future__ import annotations

import pytest

from ghost_engine.models.enums import IssueSeverity
from ghost_engine.rules.workout.config_ranges import WorkoutConfigRangesRule
from ghost_engine.rules.workout.iteration_type import WorkoutIterationTypeRule
from ghost_engine.rules.workout.limits import WorkoutLimitsRule


class TestWorkoutLimits:
    def test_valid(self, valid_workout: dict) -> None:
        assert WorkoutLimitsRule().check(valid_workout) == []

    def test_missing(self, valid_workout: dict) -> None:
        del valid_workout["config"]["limits"]
        issues = WorkoutLimitsRule().check(valid_workout)
        assert [issue.field for issue in issues] == ["config.limits"]
        assert issues[0].severity == IssueSeverity.ERROR

    def test_missing_config_reports_missing_limits(self, valid_workout: dict) -> None:
        del valid_workout["config"]
        assert [issue.field for issue in WorkoutLimitsRule().check(valid_workout)] == ["config.limits"]

    def test_unknown_type(self, valid_workout: dict) -> None:
        valid_workout["config"]["limits"] = {"type": "forever"}
        issues = WorkoutLimitsRule().check(valid_workout)
        assert issues[0].field == "config.limits.type"

    def test_shot_limit_out_of_range_is_a_warning(self, valid_workout: dict) -> None:
        valid_workout["config"]["limits"] = {"type": "shot-limit", "value": 60}
        issues = WorkoutLimitsRule().check(valid_workout)
        assert issues[0].severity == IssueSeverity.WARNING
        assert issues[0].value == 60

    def test_shot_limit_must_be_whole(self, valid_workout: dict) -> None:
        valid_workout["config"]["limits"] = {"type": "shot-limit", "value": "ten"}
        issues = WorkoutLimitsRule().check(valid_workout)
        assert issues[0].severity == IssueSeverity.ERROR

    @pytest.mark.parametrize("value", ["5 min", "5:00", "05:60", 300])
    def test_time_limit_format(self, valid_workout: dict, value: object) -> None:
        valid_workout["config"]["limits"] = {"type": "time-limit", "value": value}
        issues = WorkoutLimitsRule().check(valid_workout)
        assert issues[0].field == "config.limits.value"
        assert issues[0].severity == IssueSeverity.ERROR

    def test_zero_time_limit_is_a_warning(self, valid_workout: dict) -> None:
        valid_workout["config"]["limits"] = {"type": "time-limit", "value": "00:00"}
        issues = WorkoutLimitsRule().check(valid_workout)
        assert issues[0].severity == IssueSeverity.WARNING


class TestWorkoutIterationType:
    def test_valid(self, valid_workout: dict) -> None:
        assert WorkoutIterationTypeRule().check(valid_workout) == []

    def test_required(self, valid_workout: dict) -> None:
        del valid_workout["config"]["iterationType"]
        issues = WorkoutIterationTypeRule().check(valid_workout)
        assert [issue.field for issue in issues] == ["config.iterationType"]

    def test_unknown_value(self, valid_workout: dict) -> None:
        valid_workout["config"]["iterationType"] = "random"
        issues = WorkoutIterationTypeRule().check(valid_workout)
        assert issues[0].value == "random"
        assert "Use 'shuffle'" in issues[0].suggestions


class TestWorkoutConfigRanges:
    def test_valid(self, valid_workout: dict) -> None:
        assert WorkoutConfigRangesRule().check(valid_workout) == []

    def test_out_of_range_speech_rate_is_a_warning(self, valid_workout: dict) -> None:
        valid_workout["config"]["speechRate"] = 3.0
        issues = WorkoutConfigRangesRule().check(valid_workout)
        assert [issue.field for issue in issues] == ["config.speechRate"]
        assert issues[0].severity == IssueSeverity.WARNING
        assert issues[0].suggestions == ("Use a value between 0.5 and 1.5",)

    def test_non_numeric_interval_is_an_error(self, valid_workout: dict) -> None:
        valid_workout["config"]["interval"] = "slow"
        issues = WorkoutConfigRangesRule().check(valid_workout)
        assert issues[0].severity == IssueSeverity.ERROR

    def test_boolean_is_not_a_number(self, valid_workout: dict) -> None:
        valid_workout["config"]["interval"] = True
        issues = WorkoutConfigRangesRule().check(valid_workout)
        assert issues[0].field == "config.interval"

    def test_lead_time_floor(self, valid_workout: dict) -> None:
        valid_workout["config"]["shotAnnouncementLeadTime"] = 1.0
        issues = WorkoutConfigRangesRule().check(valid_workout)
        assert issues[0].field == "config.shotAnnouncementLeadTime"

    def test_offset_bounds(self, valid_workout: dict) -> None:
        valid_workout["config"]["intervalOffset"] = {"min": 1.0, "max": -1.0}
        issues = WorkoutConfigRangesRule().check(valid_workout)
        assert [issue.message for issue in issues] == ["intervalOffset min must not exceed max"]

    def test_unknown_split_step_speed(self, valid_workout: dict) -> None:
        valid_workout["config"]["splitStepSpeed"] = "turbo"
        issues = WorkoutConfigRangesRule().check(valid_workout)
        assert issues[0].field == "config.splitStepSpeed"
        assert issues[0].severity == IssueSeverity.ERROR
