"""Workout document JSON ⇄ typed model conversion.

``load_workout`` is lenient about values (numeric strings are coerced, out of
vocabulary enums become None so the validator can report them) but strict
about shape: anything the engine cannot walk raises WorkoutStructureError.
"""

from __future__ import annotations

import json
import logging
import math
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from enum import Enum
from typing import Any, TypeVar

from ghost_engine.exceptions import WorkoutStructureError
from ghost_engine.models.config import (
    BaseConfig,
    IntervalOffset,
    Limits,
    MessageConfig,
    PatternConfig,
    RepeatCount,
    ShotConfig,
    WorkoutConfig,
)
from ghost_engine.models.enums import (
    DEFAULT_AUTO_VOICE_SPLIT_STEP,
    DEFAULT_INTERVAL,
    DEFAULT_INTERVAL_OFFSET_TYPE,
    DEFAULT_SHOT_ANNOUNCEMENT_LEAD_TIME,
    DEFAULT_SPEECH_RATE,
    DEFAULT_VOICE,
    EntryType,
    IntervalOffsetType,
    IntervalType,
    IterationType,
    LimitsType,
    PositionType,
    RepeatType,
    SplitStepSpeed,
)
from ghost_engine.models.workout import Entry, Message, Pattern, Shot, WorkoutDocument
from ghost_engine.timing.time_format import format_time

logger = logging.getLogger(__name__)

FORMAT_VERSION = "1.0"
EXPORTED_BY = "ghost_engine"

E = TypeVar("E", bound=Enum)

# snake_case model field → camelCase document key
_INHERITABLE_KEYS = {
    "voice": "voice",
    "speech_rate": "speechRate",
    "interval": "interval",
    "interval_offset_type": "intervalOffsetType",
    "interval_offset": "intervalOffset",
    "auto_voice_split_step": "autoVoiceSplitStep",
    "shot_announcement_lead_time": "shotAnnouncementLeadTime",
    "split_step_speed": "splitStepSpeed",
}


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------


def _float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(result) else result


def _int(value: Any) -> int | None:
    result = _float(value)
    if result is None or math.isinf(result):
        return None
    return int(result)


def _bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return None


def _enum(enum_cls: type[E], value: Any) -> E | None:
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None


def _str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _interval_offset(value: Any) -> IntervalOffset | None:
    if not isinstance(value, Mapping):
        return None
    low = _float(value.get("min")) or 0.0
    high = _float(value.get("max"))
    return IntervalOffset(min=low, max=high if high is not None else low)


def _limits(value: Any) -> Limits | None:
    if not isinstance(value, Mapping):
        return None
    limits_type = _enum(LimitsType, value.get("type"))
    if limits_type is None:
        return None
    raw = value.get("value")
    if limits_type == LimitsType.SHOT_LIMIT:
        parsed: int | str | None = _int(raw)
    elif limits_type == LimitsType.TIME_LIMIT:
        parsed = _str(raw)
    else:
        parsed = None
    return Limits(type=limits_type, value=parsed)


def _repeat_count(value: Any) -> RepeatCount | None:
    if isinstance(value, Mapping):
        if _enum(RepeatType, value.get("type")) == RepeatType.RANDOM:
            low = _int(value.get("min"))
            high = _int(value.get("max"))
            low = low if low is not None else 1
            high = high if high is not None else low
            return RepeatCount(type=RepeatType.RANDOM, count=low, min=low, max=high)
        count = _int(value.get("count"))
        return RepeatCount(count=count) if count is not None else None
    count = _int(value)
    return RepeatCount(count=count, min=count, max=count) if count is not None else None


def _inheritable(config: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "voice": _str(config.get("voice")),
        "speech_rate": _float(config.get("speechRate")),
        "interval": _float(config.get("interval")),
        "interval_offset_type": _enum(IntervalOffsetType, config.get("intervalOffsetType")),
        "interval_offset": _interval_offset(config.get("intervalOffset")),
        "auto_voice_split_step": _bool(config.get("autoVoiceSplitStep")),
        "shot_announcement_lead_time": _float(config.get("shotAnnouncementLeadTime")),
        "split_step_speed": _enum(SplitStepSpeed, config.get("splitStepSpeed")),
    }


def _config_mapping(raw: Any, path: str) -> Mapping[str, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise WorkoutStructureError(f"{path} must be an object", field=path)
    return raw


def _position_type(raw: Mapping[str, Any]) -> str:
    value = raw.get("positionType")
    if value is None or value == "":
        return PositionType.NORMAL.value
    return str(value)


def _message_interval(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    seconds = _float(value)
    return format_time(seconds) if seconds is not None else None


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def load_entry(raw: Any, path: str) -> Entry | None:
    """Typed Shot or Message from its JSON mapping; None for an unknown type."""
    if not isinstance(raw, Mapping):
        raise WorkoutStructureError(f"{path} must be an object", field=path)
    config = _config_mapping(raw.get("config"), f"{path}.config")
    entry_id = str(raw.get("id") or "")
    name = str(raw.get("name") or "")
    position_type = _position_type(raw)

    entry_type = raw.get("type")
    if entry_type == EntryType.SHOT.value:
        return Shot(
            id=entry_id,
            name=name,
            position_type=position_type,
            config=ShotConfig(
                **_inheritable(config),
                repeat_count=_repeat_count(config.get("repeatCount")),
            ),
        )
    if entry_type == EntryType.MESSAGE.value:
        inheritable = _inheritable(config)
        inheritable.pop("interval")
        return Message(
            id=entry_id,
            name=name,
            position_type=position_type,
            config=MessageConfig(
                **inheritable,
                interval=_message_interval(config.get("interval")),
                message=_str(config.get("message")),
                interval_type=_enum(IntervalType, config.get("intervalType")),
                skip_at_end_of_workout=_bool(config.get("skipAtEndOfWorkout")),
                countdown=_bool(config.get("countdown")),
                delay=_float(config.get("delay")),
                repeat_count=_repeat_count(config.get("repeatCount")),
            ),
        )
    logger.warning("Dropping %s: unknown entry type %r", path, entry_type)
    return None


def load_pattern(raw: Any, path: str) -> Pattern:
    """Typed Pattern from its JSON mapping. *path* prefixes error fields."""
    if not isinstance(raw, Mapping):
        raise WorkoutStructureError(f"{path} must be an object", field=path)
    config = _config_mapping(raw.get("config"), f"{path}.config")

    raw_entries = raw.get("entries", [])
    if raw_entries is None:
        raw_entries = []
    if not isinstance(raw_entries, list):
        raise WorkoutStructureError(f"{path}.entries must be a list", field=f"{path}.entries")

    entries = [
        load_entry(entry, f"{path}.entries[{index}]") for index, entry in enumerate(raw_entries)
    ]
    return Pattern(
        id=str(raw.get("id") or ""),
        name=str(raw.get("name") or ""),
        position_type=_position_type(raw),
        entries=tuple(entry for entry in entries if entry is not None),
        config=PatternConfig(
            **_inheritable(config),
            iteration_type=_enum(IterationType, config.get("iterationType")),
            limits=_limits(config.get("limits")),
            repeat_count=_repeat_count(config.get("repeatCount")),
        ),
    )


def load_workout_config(raw: Any) -> WorkoutConfig:
    """Typed WorkoutConfig from the root `config` mapping (None gives an empty config)."""
    config = _config_mapping(raw, "config")
    return WorkoutConfig(
        **_inheritable(config),
        iteration_type=_enum(IterationType, config.get("iterationType")),
        limits=_limits(config.get("limits")),
        is_config_locked=_bool(config.get("isConfigLocked")),
        workout_default_interval=_float(config.get("workoutDefaultInterval")),
    )


def load_workout(data: Mapping[str, Any] | str | bytes) -> WorkoutDocument:
    """Build a WorkoutDocument from a JSON mapping or JSON text.

    Unknown keys (including an export ``_metadata`` envelope) are ignored.
    Entries of unknown type are dropped with a warning.

    Raises:
        WorkoutStructureError: malformed JSON, a non-object root, missing or
            non-list ``patterns``, or a non-object config/pattern/entry.
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as exc:
            raise WorkoutStructureError(f"Invalid workout JSON: {exc.msg}") from exc

    if not isinstance(data, Mapping):
        raise WorkoutStructureError("Workout document must be an object")

    patterns = data.get("patterns")
    if not isinstance(patterns, list):
        raise WorkoutStructureError("Workout document needs a 'patterns' list", field="patterns")

    return WorkoutDocument(
        name=str(data.get("name") or ""),
        config=load_workout_config(data.get("config")),
        patterns=tuple(
            load_pattern(pattern, f"patterns[{index}]") for index, pattern in enumerate(patterns)
        ),
    )


# ---------------------------------------------------------------------------
# Dumping
# ---------------------------------------------------------------------------


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _dump_limits(limits: Limits) -> dict[str, Any]:
    result: dict[str, Any] = {"type": limits.type.value}
    if limits.value is not None:
        result["value"] = limits.value
    return result


def _dump_repeat_count(repeat: RepeatCount) -> int | dict[str, Any]:
    if repeat.type == RepeatType.RANDOM:
        return {"type": RepeatType.RANDOM.value, "min": repeat.min, "max": repeat.max}
    return repeat.count


def _dump_config(config: BaseConfig) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for attr, key in _INHERITABLE_KEYS.items():
        value = getattr(config, attr)
        if value is None:
            continue
        if isinstance(value, IntervalOffset):
            value = {"min": value.min, "max": value.max}
        result[key] = _plain(value)

    extra = {
        "iterationType": getattr(config, "iteration_type", None),
        "limits": getattr(config, "limits", None),
        "repeatCount": getattr(config, "repeat_count", None),
        "isConfigLocked": getattr(config, "is_config_locked", None),
        "workoutDefaultInterval": getattr(config, "workout_default_interval", None),
        "message": getattr(config, "message", None),
        "intervalType": getattr(config, "interval_type", None),
        "skipAtEndOfWorkout": getattr(config, "skip_at_end_of_workout", None),
        "countdown": getattr(config, "countdown", None),
        "delay": getattr(config, "delay", None),
    }
    for key, value in extra.items():
        if value is None:
            continue
        if isinstance(value, Limits):
            result[key] = _dump_limits(value)
        elif isinstance(value, RepeatCount):
            result[key] = _dump_repeat_count(value)
        else:
            result[key] = _plain(value)
    return result


def _dump_entry(entry: Entry) -> dict[str, Any]:
    return {
        "type": entry.type.value,
        "id": entry.id,
        "name": entry.name,
        "positionType": entry.position_type,
        "config": _dump_config(entry.config),
    }


def dump_workout(document: WorkoutDocument) -> dict[str, Any]:
    """Serialize a WorkoutDocument to the JSON document shape (unset fields omitted)."""
    return {
        "type": EntryType.WORKOUT.value,
        "name": document.name,
        "config": _dump_config(document.config),
        "patterns": [
            {
                "type": EntryType.PATTERN.value,
                "id": pattern.id,
                "name": pattern.name,
                "positionType": pattern.position_type,
                "config": _dump_config(pattern.config),
                "entries": [_dump_entry(entry) for entry in pattern.entries],
            }
            for pattern in document.patterns
        ],
    }


def export_workout(
    document: WorkoutDocument,
    format_version: str = FORMAT_VERSION,
    exported_at: datetime | None = None,
) -> dict[str, Any]:
    """``dump_workout`` plus the ``_metadata`` export envelope."""
    exported_at = exported_at or datetime.now(timezone.utc)
    payload = dump_workout(document)
    payload["_metadata"] = {
        "exportedAt": exported_at.isoformat(),
        "formatVersion": format_version,
        "exportedBy": EXPORTED_BY,
    }
    return payload


def dumps_workout(document: WorkoutDocument, indent: int | None = 2) -> str:
    """JSON text of ``dump_workout``."""
    return json.dumps(dump_workout(document), indent=indent)


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def new_shot(name: str, **config: Any) -> Shot:
    """A shot with default timing; *config* overrides ShotConfig fields."""
    return Shot(id=_new_id("shot"), name=name, config=ShotConfig(**config))


def new_message(text: str, interval: str = "00:00", name: str | None = None, **config: Any) -> Message:
    """A message saying *text* with a fixed ``MM:SS`` interval."""
    config.setdefault("interval_type", IntervalType.FIXED)
    return Message(
        id=_new_id("message"),
        name=name or text,
        config=MessageConfig(message=text, interval=interval, **config),
    )


def new_pattern(name: str, entries: tuple[Entry, ...] | list[Entry] = (), **config: Any) -> Pattern:
    """An in-order pattern repeated once unless *config* says otherwise."""
    config.setdefault("iteration_type", IterationType.IN_ORDER)
    config.setdefault("repeat_count", RepeatCount())
    return Pattern(
        id=_new_id("pattern"),
        name=name,
        entries=tuple(entries),
        config=PatternConfig(**config),
    )


def new_workout(
    name: str, patterns: tuple[Pattern, ...] | list[Pattern] = (), **config: Any
) -> WorkoutDocument:
    """A workout whose config carries every inheritable default explicitly."""
    defaults: dict[str, Any] = {
        "voice": DEFAULT_VOICE,
        "speech_rate": DEFAULT_SPEECH_RATE,
        "interval": DEFAULT_INTERVAL,
        "interval_offset_type": DEFAULT_INTERVAL_OFFSET_TYPE,
        "interval_offset": IntervalOffset(),
        "auto_voice_split_step": DEFAULT_AUTO_VOICE_SPLIT_STEP,
        "shot_announcement_lead_time": DEFAULT_SHOT_ANNOUNCEMENT_LEAD_TIME,
        "split_step_speed": SplitStepSpeed.AUTO_SCALE,
        "iteration_type": IterationType.IN_ORDER,
        "limits": Limits(),
    }
    defaults.update(config)
    return WorkoutDocument(name=name, config=WorkoutConfig(**defaults), patterns=tuple(patterns))
