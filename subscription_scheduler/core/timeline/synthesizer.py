"""
Phase synthesis.

Turns the extracted bounds into a skeleton of contiguous phases, each
seeded from the existing phase in effect at its start (its basis phase).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from subscription_scheduler.core.domain.errors import DuplicateBoundaryError, NoBasisPhaseError
from subscription_scheduler.core.domain.instants import resolve_instant

if TYPE_CHECKING:
    from subscription_scheduler.core.domain.types import Instant, PhaseUpdate, PropertyUpdate


def _by_start(phases: Sequence[PhaseUpdate], reference_time: int) -> list[PhaseUpdate]:
    return sorted(phases, key=lambda phase: resolve_instant(phase.start_date, reference_time))


def find_basis_phase(
    existing_phases: Sequence[PhaseUpdate],
    at: Instant,
    reference_time: int,
) -> PhaseUpdate:
    """
    Return the existing phase with the greatest start at or before ``at``.

    Falls back to the earliest existing phase when ``at`` precedes all of
    them. Ties on start go to the phase listed last.
    """
    if not existing_phases:
        raise NoBasisPhaseError("No existing phase to base the new phase on")

    ordered = _by_start(existing_phases, reference_time)
    at_ts = resolve_instant(at, reference_time)

    basis: PhaseUpdate | None = None
    for phase in ordered:
        if resolve_instant(phase.start_date, reference_time) <= at_ts:
            basis = phase

    return basis if basis is not None else ordered[0]


def _needs_trailing_phase(
    existing_phases: Sequence[PhaseUpdate],
    bounds: Sequence[Instant],
    property_updates: Sequence[PropertyUpdate],
    reference_time: int,
) -> bool:
    last_ts = resolve_instant(bounds[-1], reference_time)

    # A change effective at the last bound must keep applying afterwards.
    if any(
        resolve_instant(update.scheduled_at, reference_time) == last_ts
        for update in property_updates
    ):
        return True

    # An indefinitely running timeline stays indefinite.
    return _by_start(existing_phases, reference_time)[-1].end_date is None


def synthesize_phases(
    existing_phases: Sequence[PhaseUpdate],
    bounds: Sequence[Instant],
    property_updates: Sequence[PropertyUpdate],
    reference_time: int,
) -> list[PhaseUpdate]:
    """
    Build one phase per adjacent bound pair, plus an open-ended trailing phase
    when the timeline must continue past the last bound.

    Each phase copies every attribute of its basis phase and only replaces
    ``start_date`` and ``end_date``.
    """

    if not existing_phases:
        raise NoBasisPhaseError("No existing phase to base the new phases on")

    resolved = [resolve_instant(bound, reference_time) for bound in bounds]
    for current, following, raw in zip(resolved, resolved[1:], bounds):
        if current == following:
            raise DuplicateBoundaryError(f"Duplicate phase boundary: {raw} ({current})")

    phases: list[PhaseUpdate] = []
    for start, end in zip(bounds, bounds[1:]):
        basis = find_basis_phase(existing_phases, start, reference_time)
        phases.append(basis.model_copy(update={"start_date": start, "end_date": end}))

    if bounds and _needs_trailing_phase(existing_phases, bounds, property_updates, reference_time):
        last = bounds[-1]
        basis = find_basis_phase(existing_phases, last, reference_time)
        phases.append(basis.model_copy(update={"start_date": last, "end_date": None}))

    return phases
