"""Timeline export: JSON-ready dicts and a pandas DataFrame of events.

All functions are pure (no I/O).
"""

from __future__ import annotations

import pandas as pd

from ghost_engine.models.timeline import Timeline, TimelineEvent, TimelineStep
from ghost_engine.timing.time_format import seconds_to_time_str

EVENT_COLUMNS = [
    "time",
    "clock",
    "type",
    "entry_id",
    "entry_name",
    "text",
    "speed",
    "is_countdown",
]

STEP_COLUMNS = [
    "superset",
    "pattern_name",
    "pattern_repetition",
    "entry_name",
    "entry_type",
    "entry_repetition",
    "start_time",
    "end_time",
    "duration",
    "offset",
    "skipped",
    "skip_reason",
]


def event_to_dict(event: TimelineEvent) -> dict:
    """One event as a JSON-ready dict (the effective config is left out)."""
    result: dict = {"type": event.type.value, "time": round(event.time, 5)}
    if event.entry_id is not None:
        result["entryId"] = event.entry_id
    if event.entry_name is not None:
        result["entryName"] = event.entry_name
    if event.text is not None:
        result["text"] = event.text
    if event.speed is not None:
        result["speed"] = event.speed.value
    if event.is_countdown:
        result["isCountdown"] = True
    return result


def timeline_to_dict(timeline: Timeline) -> dict:
    """``{"events": [...], "stats": {"totalTime", "totalShots"}}`` plus run details."""
    return {
        "events": [event_to_dict(event) for event in timeline.events],
        "stats": {
            "totalTime": timeline.stats.total_time,
            "totalShots": timeline.stats.total_shots,
        },
        "supersets": timeline.superset_count,
        "hitSupersetCap": timeline.hit_superset_cap,
        "skipReasons": [reason.value for reason in timeline.skip_reasons],
    }


def timeline_to_frame(timeline: Timeline) -> pd.DataFrame:
    """One row per event, in time order."""
    rows = [
        {
            "time": event.time,
            "clock": seconds_to_time_str(event.time),
            "type": event.type.value,
            "entry_id": event.entry_id,
            "entry_name": event.entry_name,
            "text": event.text,
            "speed": event.speed.value if event.speed is not None else None,
            "is_countdown": event.is_countdown,
        }
        for event in timeline.events
    ]
    return pd.DataFrame(rows, columns=EVENT_COLUMNS)


def _step_row(step: TimelineStep) -> dict:
    return {
        "superset": step.superset + 1,
        "pattern_name": step.pattern_name,
        "pattern_repetition": step.pattern_repetition + 1,
        "entry_name": step.entry_name,
        "entry_type": step.entry_type.value,
        "entry_repetition": step.entry_repetition + 1,
        "start_time": step.start_time,
        "end_time": step.end_time,
        "duration": step.duration,
        "offset": step.offset,
        "skipped": step.skipped,
        "skip_reason": step.skip_reason.value if step.skip_reason is not None else None,
    }


def steps_to_frame(timeline: Timeline) -> pd.DataFrame:
    """One row per visited entry repetition; counters are 1-based for display."""
    return pd.DataFrame([_step_row(step) for step in timeline.steps], columns=STEP_COLUMNS)
