"""
Boundary extraction.

Collects every instant at which the new timeline must be split: the edges
of existing phases and the effective instants of property updates.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from subscription_scheduler.core.domain.errors import PastUpdateError
from subscription_scheduler.core.domain.instants import resolve_instant

if TYPE_CHECKING:
    from subscription_scheduler.core.domain.types import Instant, Phase, PhaseUpdate, PropertyUpdate


def assert_not_in_past(value: Instant, reference_time: int, *, what: str) -> None:
    """Reject an instant strictly before the reference time."""
    if resolve_instant(value, reference_time) < reference_time:
        raise PastUpdateError(
            f"Cannot schedule {what} at {value}: it is before the reference time {reference_time}"
        )


def extract_bounds(
    existing_phases: Sequence[Phase | PhaseUpdate],
    property_updates: Sequence[PropertyUpdate],
    reference_time: int,
    *,
    cancel_at: Instant | None = None,
) -> list[Instant]:
    """
    Return the ascending, deduplicated instants that become phase edges.

    Updates are checked against the reference time here, before any phase is
    built. Identical raw values collapse to one bound; distinct raw values
    resolving to the same instant (``"now"`` and the reference second) are
    both kept and rejected later by the synthesizer.
    """

    for update in property_updates:
        assert_not_in_past(update.scheduled_at, reference_time, what="property update")

    if cancel_at is not None:
        assert_not_in_past(cancel_at, reference_time, what="cancellation")
        if resolve_instant(cancel_at, reference_time) == reference_time:
            raise PastUpdateError("Cannot schedule a cancellation at the reference time")

    bounds: set[Instant] = set()
    for phase in existing_phases:
        bounds.add(phase.start_date)
        if phase.end_date is not None:
            bounds.add(phase.end_date)

    for update in property_updates:
        bounds.add(update.scheduled_at)

    if cancel_at is not None:
        bounds.add(cancel_at)

    return sorted(bounds, key=lambda bound: resolve_instant(bound, reference_time))
