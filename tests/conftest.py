"""Shared test fixtures: raw workout documents, seeded generators, engines."""

from __future__ import annotations

import itertools
from typing import Any, Callable

import numpy as np
import pytest

from ghost_engine.engine import TimelineEngine
from ghost_engine.settings import EngineSettings

_ids = itertools.count(1)


def _node(node_type: str, name: str, node_id: str | None, position_type: str, config: dict) -> dict:
    return {
        "type": node_type,
        "id": node_id or f"{node_type.lower()}-{next(_ids)}",
        "name": name,
        "positionType": position_type,
        "config": config,
    }


@pytest.fixture
def shot_factory() -> Callable[..., dict]:
    """Factory for raw Shot mappings; keyword arguments become config keys.

    Usage:
        shot = shot_factory("Front left", interval=5.0)
    """

    def factory(
        name: str = "Front left",
        id: str | None = None,
        position_type: str = "normal",
        **config: Any,
    ) -> dict:
        return _node("Shot", name, id, position_type, config)

    return factory


@pytest.fixture
def message_factory() -> Callable[..., dict]:
    """Factory for raw Message mappings.

    Usage:
        msg = message_factory("Rest", interval="00:10", intervalType="additional")
    """

    def factory(
        message: str = "Rest",
        name: str | None = None,
        id: str | None = None,
        position_type: str = "normal",
        **config: Any,
    ) -> dict:
        config = {"message": message, **config}
        return _node("Message", name or message, id, position_type, config)

    return factory


@pytest.fixture
def pattern_factory() -> Callable[..., dict]:
    """Factory for raw Pattern mappings.

    Usage:
        pattern = pattern_factory([shot], repeatCount=2)
    """

    def factory(
        entries: list[dict],
        name: str = "Corners",
        id: str | None = None,
        position_type: str = "normal",
        **config: Any,
    ) -> dict:
        node = _node("Pattern", name, id, position_type, config)
        node["entries"] = entries
        return node

    return factory


@pytest.fixture
def workout_factory() -> Callable[..., dict]:
    """Factory for raw Workout documents with in-order iteration and all-shots limits.

    Usage:
        data = workout_factory([pattern], limits={"type": "shot-limit", "value": 5})
    """

    def factory(patterns: list[dict], name: str = "Ghosting", **config: Any) -> dict:
        config.setdefault("iterationType", "in-order")
        config.setdefault("limits", {"type": "all-shots"})
        return {"type": "Workout", "name": name, "config": config, "patterns": patterns}

    return factory


@pytest.fixture
def single_shot_workout(
    workout_factory: Callable[..., dict],
    pattern_factory: Callable[..., dict],
    shot_factory: Callable[..., dict],
) -> dict:
    """One pattern with one 5 s shot announced 2.5 s ahead; no split step."""
    shot = shot_factory(
        "Front left",
        id="shot-1",
        interval=5.0,
        shotAnnouncementLeadTime=2.5,
        splitStepSpeed="none",
    )
    pattern = pattern_factory([shot], id="pattern-1", repeatCount=1)
    return workout_factory([pattern])


@pytest.fixture
def valid_workout(
    workout_factory: Callable[..., dict],
    pattern_factory: Callable[..., dict],
    shot_factory: Callable[..., dict],
    message_factory: Callable[..., dict],
) -> dict:
    """A document that passes every validation rule."""
    warmup = pattern_factory(
        [message_factory("Get ready", id="msg-ready", interval="00:05", intervalType="fixed")],
        name="Warm up",
        id="pattern-warmup",
        position_type="1",
    )
    corners = pattern_factory(
        [
            shot_factory("Front left", id="shot-fl"),
            shot_factory("Front right", id="shot-fr"),
            shot_factory("Back left", id="shot-bl", position_type="linked", interval=6.0),
        ],
        name="Corners",
        id="pattern-corners",
        iterationType="shuffle",
        repeatCount={"type": "random", "min": 1, "max": 3},
        intervalOffsetType="random",
        intervalOffset={"min": -0.5, "max": 0.5},
    )
    return workout_factory(
        [warmup, corners],
        name="Corner Drill",
        interval=5.0,
        speechRate=1.0,
        shotAnnouncementLeadTime=2.5,
        splitStepSpeed="auto-scale",
        limits={"type": "time-limit", "value": "02:00"},
    )


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)


@pytest.fixture
def engine(rng: np.random.Generator) -> TimelineEngine:
    """Engine with a seeded generator and completion announcement off."""
    return TimelineEngine(settings=EngineSettings(announce_completion=False), rng=rng)
