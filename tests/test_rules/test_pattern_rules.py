"""Tests for the pattern-level validation rules."""

from __future__ import annotations

import pytest

from ghost_engine.models.enums import IssueSeverity
from ghost_engine.rules.pattern.config_ranges import PatternConfigRangesRule
from ghost_engine.rules.pattern.entries_present import PatternEntriesRule
from ghost_engine.rules.pattern.identity import PatternIdentityRule
from ghost_engine.rules.pattern.iteration_limits import PatternIterationLimitsRule
from ghost_engine.rules.pattern.position_type import PatternPositionTypeRule
from ghost_engine.rules.pattern.repeat_count import PatternRepeatCountRule


class TestPatternIdentity:
    def test_valid(self, valid_workout: dict) -> None:
        assert PatternIdentityRule().check(valid_workout) == []

    def test_missing_id_and_name(self, valid_workout: dict) -> None:
        del valid_workout["patterns"][1]["id"]
        valid_workout["patterns"][1]["name"] = ""
        fields = [issue.field for issue in PatternIdentityRule().check(valid_workout)]
        assert fields == ["patterns[1].id", "patterns[1].name"]

    def test_wrong_type(self, valid_workout: dict) -> None:
        valid_workout["patterns"][0]["type"] = "Shot"
        issues = PatternIdentityRule().check(valid_workout)
        assert issues[0].field == "patterns[0].type"


class TestPatternPositionType:
    def test_valid(self, valid_workout: dict) -> None:
        assert PatternPositionTypeRule().check(valid_workout) == []

    @pytest.mark.parametrize("value", ["first", "0", "-1", 2])
    def test_invalid(self, valid_workout: dict, value: object) -> None:
        valid_workout["patterns"][1]["positionType"] = value
        issues = PatternPositionTypeRule().check(valid_workout)
        assert [issue.field for issue in issues] == ["patterns[1].positionType"]
        assert len(issues[0].suggestions) == 3

    def test_missing_is_fine(self, valid_workout: dict) -> None:
        del valid_workout["patterns"][1]["positionType"]
        assert PatternPositionTypeRule().check(valid_workout) == []


class TestPatternRepeatCount:
    def test_valid(self, valid_workout: dict) -> None:
        assert PatternRepeatCountRule().check(valid_workout) == []

    def test_out_of_range_is_a_warning(self, valid_workout: dict) -> None:
        valid_workout["patterns"][0]["config"]["repeatCount"] = 0
        issues = PatternRepeatCountRule().check(valid_workout)
        assert issues[0].severity == IssueSeverity.WARNING

    def test_fraction_is_an_error(self, valid_workout: dict) -> None:
        valid_workout["patterns"][0]["config"]["repeatCount"] = 2.5
        issues = PatternRepeatCountRule().check(valid_workout)
        assert issues[0].severity == IssueSeverity.ERROR

    def test_random_min_above_max(self, valid_workout: dict) -> None:
        valid_workout["patterns"][1]["config"]["repeatCount"] = {"type": "random", "min": 4, "max": 2}
        issues = PatternRepeatCountRule().check(valid_workout)
        assert [issue.field for issue in issues] == ["patterns[1].config.repeatCount"]

    def test_fixed_mapping(self, valid_workout: dict) -> None:
        valid_workout["patterns"][1]["config"]["repeatCount"] = {"type": "fixed", "count": 3}
        assert PatternRepeatCountRule().check(valid_workout) == []

    def test_unknown_mapping_type(self, valid_workout: dict) -> None:
        valid_workout["patterns"][1]["config"]["repeatCount"] = {"type": "sometimes"}
        issues = PatternRepeatCountRule().check(valid_workout)
        assert issues[0].field == "patterns[1].config.repeatCount.type"


class TestPatternIterationLimits:
    def test_valid(self, valid_workout: dict) -> None:
        assert PatternIterationLimitsRule().check(valid_workout) == []

    def test_limits_are_optional(self, valid_workout: dict) -> None:
        assert "limits" not in valid_workout["patterns"][1]["config"]
        assert PatternIterationLimitsRule().check(valid_workout) == []

    def test_bad_limits(self, valid_workout: dict) -> None:
        valid_workout["patterns"][1]["config"]["limits"] = {"type": "shot-limit", "value": 0}
        issues = PatternIterationLimitsRule().check(valid_workout)
        assert issues[0].field == "patterns[1].config.limits.value"

    def test_bad_iteration_type(self, valid_workout: dict) -> None:
        valid_workout["patterns"][1]["config"]["iterationType"] = "backwards"
        issues = PatternIterationLimitsRule().check(valid_workout)
        assert issues[0].field == "patterns[1].config.iterationType"


class TestPatternConfigRanges:
    def test_valid(self, valid_workout: dict) -> None:
        assert PatternConfigRangesRule().check(valid_workout) == []

    def test_non_object_config(self, valid_workout: dict) -> None:
        valid_workout["patterns"][0]["config"] = []
        issues = PatternConfigRangesRule().check(valid_workout)
        assert [issue.field for issue in issues] == ["patterns[0].config"]

    def test_offset_out_of_range(self, valid_workout: dict) -> None:
        valid_workout["patterns"][1]["config"]["intervalOffset"] = {"min": -3.0, "max": 0.5}
        issues = PatternConfigRangesRule().check(valid_workout)
        assert issues[0].field == "patterns[1].config.intervalOffset.min"
        assert issues[0].severity == IssueSeverity.WARNING


class TestPatternEntries:
    def test_valid(self, valid_workout: dict) -> None:
        assert PatternEntriesRule().check(valid_workout) == []

    def test_empty(self, valid_workout: dict) -> None:
        valid_workout["patterns"][0]["entries"] = []
        issues = PatternEntriesRule().check(valid_workout)
        assert [issue.field for issue in issues] == ["patterns[0].entries"]

    def test_non_object_entry(self, valid_workout: dict) -> None:
        valid_workout["patterns"][1]["entries"].append(42)
        issues = PatternEntriesRule().check(valid_workout)
        assert [issue.field for issue in issues] == ["patterns[1].entries[3]"]
