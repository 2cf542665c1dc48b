"""Removal of elapsed phases and cancellation truncation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from subscription_scheduler.core.domain.instants import resolve_instant

if TYPE_CHECKING:
    from subscription_scheduler.core.domain.types import Instant, PhaseUpdate


def has_elapsed(phase: PhaseUpdate, reference_time: int) -> bool:
    """Return True if the phase ends at or before the reference time."""
    if phase.end_date is None:
        return False
    return resolve_instant(phase.end_date, reference_time) <= reference_time


def remove_past_phases(
    phases: Sequence[PhaseUpdate],
    reference_time: int,
) -> list[PhaseUpdate]:
    """Drop phases that have wholly elapsed; a phase straddling the reference is kept."""
    return [phase for phase in phases if not has_elapsed(phase, reference_time)]


def truncate_at(
    phases: Sequence[PhaseUpdate],
    cancel_at: Instant,
    reference_time: int,
) -> list[PhaseUpdate]:
    """
    End the timeline at ``cancel_at``.

    Phases starting at or after the cancellation are dropped and the phase
    covering it is cut short, so the result is never open-ended.
    """
    cancel_ts = resolve_instant(cancel_at, reference_time)

    truncated: list[PhaseUpdate] = []
    for phase in phases:
        if resolve_instant(phase.start_date, reference_time) >= cancel_ts:
            continue
        if phase.end_date is None or resolve_instant(phase.end_date, reference_time) > cancel_ts:
            phase = phase.model_copy(update={"end_date": cancel_at})
        truncated.append(phase)

    return truncated
