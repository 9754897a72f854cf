"""Sanity check over generated preview steps."""

from __future__ import annotations

from collections.abc import Sequence

from ghost_engine.models.timeline import TimelineStep

_TOLERANCE_S = 1e-6


def check_timing_consistency(steps: Sequence[TimelineStep]) -> list[str]:
    """Describe every pair of consecutive executed steps that overlap or run backwards."""
    problems: list[str] = []
    executed = [step for step in steps if not step.skipped]

    for step in executed:
        if step.end_time + _TOLERANCE_S < step.start_time:
            problems.append(
                f"{step.entry_name} ends at {step.end_time:.2f}s before it starts at "
                f"{step.start_time:.2f}s"
            )

    for previous, current in zip(executed, executed[1:]):
        if current.start_time + _TOLERANCE_S < previous.end_time:
            problems.append(
                f"{current.entry_name} starts at {current.start_time:.2f}s, before "
                f"{previous.entry_name} ends at {previous.end_time:.2f}s"
            )
    return problems
