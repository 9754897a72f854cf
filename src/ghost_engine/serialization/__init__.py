"""Serialization module: workout documents in and out, timelines out."""

from ghost_engine.serialization.document import (
    dump_workout,
    dumps_workout,
    export_workout,
    load_workout,
    new_message,
    new_pattern,
    new_shot,
    new_workout,
)
from ghost_engine.serialization.timeline import (
    event_to_dict,
    steps_to_frame,
    timeline_to_dict,
    timeline_to_frame,
)

__all__ = [
    "dump_workout",
    "dumps_workout",
    "event_to_dict",
    "export_workout",
    "load_workout",
    "new_message",
    "new_pattern",
    "new_shot",
    "new_workout",
    "steps_to_frame",
    "timeline_to_dict",
    "timeline_to_frame",
]
