"""Ghosting workout engine: validation, config inheritance and timeline generation."""

from ghost_engine.config_resolution.resolver import ConfigResolver
from ghost_engine.engine import TimelineEngine
from ghost_engine.exceptions import GhostEngineError, WorkoutStructureError, WorkoutValidationError
from ghost_engine.ordering.siblings import order_siblings
from ghost_engine.serialization.document import load_workout
from ghost_engine.settings import EngineSettings
from ghost_engine.validator import WorkoutValidator, validate_workout

__all__ = [
    "ConfigResolver",
    "EngineSettings",
    "GhostEngineError",
    "TimelineEngine",
    "WorkoutStructureError",
    "WorkoutValidationError",
    "WorkoutValidator",
    "load_workout",
    "order_siblings",
    "validate_workout",
]
