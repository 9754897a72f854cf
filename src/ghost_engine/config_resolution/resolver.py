"""Configuration resolver: three-level inheritance of workout settings."""

from __future__ import annotations

from typing import Any

from ghost_engine.models.config import INHERITABLE_FIELDS, BaseConfig, WorkoutConfig
from ghost_engine.models.effective_config import EffectiveConfig
from ghost_engine.models.workout import Message, Pattern, Shot, WorkoutDocument

Node = Pattern | Shot | Message


def _config_of(node: Any) -> BaseConfig | None:
    if node is None:
        return None
    if isinstance(node, BaseConfig):
        return node
    return getattr(node, "config", None)


class ConfigResolver:
    """Computes the effective configuration of a pattern or entry.

    Inheritable fields resolve target → parent → workout; the first level
    that sets a field wins. Non-inheritable fields (iteration type, limits,
    repeat count) and message fields come only from the target itself.
    Fields defined nowhere stay None; ``EffectiveConfig.with_defaults()``
    applies the built-in defaults.

    Usage:
        resolver = ConfigResolver()
        effective = resolver.resolve(shot, pattern, document.config)
    """

    def resolve(
        self,
        target: Node,
        parent: Pattern | WorkoutDocument | BaseConfig | None = None,
        workout_config: WorkoutConfig | None = None,
    ) -> EffectiveConfig:
        own = _config_of(target)
        chain = [c for c in (own, _config_of(parent), workout_config) if c is not None]

        values: dict[str, Any] = {}
        for field_name in INHERITABLE_FIELDS:
            levels = chain
            if field_name == "interval" and isinstance(target, Message):
                # A message's interval is its own "MM:SS" schedule, not a shot cadence.
                levels = []
            values[field_name] = next(
                (v for v in (c.resolve(field_name) for c in levels) if v is not None),
                None,
            )

        values["iteration_type"] = getattr(own, "iteration_type", None)
        values["limits"] = getattr(own, "limits", None)
        values["repeat_count"] = getattr(own, "repeat_count", None)
        values["position_type"] = getattr(target, "position_type", None)

        if isinstance(target, Message):
            values["message"] = own.message
            values["message_interval"] = own.interval
            values["interval_type"] = own.interval_type
            values["countdown"] = own.countdown
            values["skip_at_end_of_workout"] = own.skip_at_end_of_workout
            values["delay"] = own.delay

        return EffectiveConfig(**values)

    def resolve_pattern(self, pattern: Pattern, document: WorkoutDocument) -> EffectiveConfig:
        """Effective config of a pattern (parent and root are both the workout)."""
        return self.resolve(pattern, document.config, document.config)

    def resolve_entry(
        self, entry: Shot | Message, pattern: Pattern, document: WorkoutDocument
    ) -> EffectiveConfig:
        """Effective config of an entry inside *pattern*."""
        return self.resolve(entry, pattern, document.config)
