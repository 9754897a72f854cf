"""Sibling ordering: in-order passthrough or link-preserving shuffle."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

import numpy as np

from ghost_engine.models.enums import IterationType, PositionType

logger = logging.getLogger(__name__)

T = TypeVar("T")


def position_of(item: Any) -> str:
    """positionType of a model object or a raw JSON mapping ("normal" if unset)."""
    if isinstance(item, Mapping):
        value = item.get("positionType")
    else:
        value = getattr(item, "position_type", None)
    return str(value) if value else PositionType.NORMAL.value


def anchored_slot(position_type: str) -> int | None:
    """0-based slot for a positive-integer positionType, else None."""
    if position_type.isdigit() and int(position_type) >= 1:
        return int(position_type) - 1
    return None


def group_linked(items: Sequence[T]) -> list[list[T]]:
    """Split siblings into contiguous groups; a linked item joins the preceding group."""
    groups: list[list[T]] = []
    for item in items:
        if position_of(item) == PositionType.LINKED.value and groups:
            groups[-1].append(item)
        else:
            groups.append([item])
    return groups


def _fits(slots: list[Any], start: int, length: int) -> bool:
    if start < 0 or start + length > len(slots):
        return False
    return all(slots[start + i] is None for i in range(length))


def _place(slots: list[Any], start: int, group: list[Any]) -> None:
    for offset, item in enumerate(group):
        slots[start + offset] = (item,)


def order_siblings(
    items: Sequence[T],
    mode: IterationType | str | None,
    rng: np.random.Generator | None = None,
) -> list[T]:
    """Execution order of *items* for one visit of their parent.

    ``in-order`` (or anything unrecognised) returns the document order.
    ``shuffle`` keeps linked groups contiguous and internally ordered, pins
    integer-anchored groups to their 1-based slot, pins ``last`` groups to
    the trailing slots, and Fisher-Yates shuffles the single normal items.
    An anchored group whose slots are out of range or already taken joins
    the free groups. The result is always a permutation of *items*.
    """
    items = list(items)
    try:
        mode = IterationType(mode)
    except ValueError:
        mode = IterationType.IN_ORDER
    if mode != IterationType.SHUFFLE or len(items) < 2:
        return items

    rng = rng if rng is not None else np.random.default_rng()
    groups = group_linked(items)
    # Each slot holds a 1-tuple so that None items are still distinguishable from empty slots.
    slots: list[tuple[T] | None] = [None] * len(items)
    free: list[list[T]] = []

    anchored: list[tuple[int, list[T]]] = []
    trailing: list[list[T]] = []
    for group in groups:
        leader = position_of(group[0])
        slot = anchored_slot(leader)
        if slot is not None:
            anchored.append((slot, group))
        elif leader == PositionType.LAST.value:
            trailing.append(group)
        else:
            free.append(group)

    for slot, group in anchored:
        if _fits(slots, slot, len(group)):
            _place(slots, slot, group)
        else:
            logger.debug("Anchored group at slot %d does not fit; shuffling it freely", slot + 1)
            free.append(group)

    for group in trailing:
        start = len(slots) - len(group)
        if _fits(slots, start, len(group)):
            _place(slots, start, group)
        else:
            logger.debug("Trailing group of %d item(s) collides; shuffling it freely", len(group))
            free.append(group)

    linked_groups = [g for g in free if len(g) > 1]
    normal_groups = [g for g in free if len(g) == 1]

    for i in range(len(normal_groups) - 1, 0, -1):
        j = int(rng.integers(0, i + 1))
        normal_groups[i], normal_groups[j] = normal_groups[j], normal_groups[i]

    for group in linked_groups + normal_groups:
        start = next(
            (s for s in range(len(slots) - len(group) + 1) if _fits(slots, s, len(group))),
            None,
        )
        if start is not None:
            _place(slots, start, group)
            continue
        logger.debug("No contiguous run for a group of %d item(s); splitting it", len(group))
        for item in group:
            open_slot = slots.index(None)
            slots[open_slot] = (item,)

    return [slot[0] for slot in slots if slot is not None]
