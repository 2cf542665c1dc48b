"""
Timeline invariant checks.

These assertions run on the final timeline and exist for their failure
signal only: a timeline that fails them must not be submitted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from subscription_scheduler.core.domain.errors import ContinuityError, PastPhaseError
from subscription_scheduler.core.domain.instants import resolve_instant
from subscription_scheduler.core.timeline.pruner import has_elapsed

if TYPE_CHECKING:
    from subscription_scheduler.core.domain.types import PhaseUpdate


def assert_phases_are_continuous(phases: Sequence[PhaseUpdate], reference_time: int) -> None:
    """Require ``end[i] == start[i+1]`` for every adjacent pair."""
    for previous, phase in zip(phases, phases[1:]):
        if previous.end_date is None:
            raise ContinuityError(
                f"Schedule continuity error: open-ended phase starting at {previous.start_date} "
                f"is followed by a phase starting at {phase.start_date}"
            )
        if phase.start_date is None or resolve_instant(
            previous.end_date, reference_time
        ) != resolve_instant(phase.start_date, reference_time):
            raise ContinuityError(
                f"Schedule continuity error: there is a gap between "
                f"{previous.end_date} and {phase.start_date}"
            )


def assert_has_no_past_phases(phases: Sequence[PhaseUpdate], reference_time: int) -> None:
    """Require every phase to end strictly after the reference time, or never."""
    for phase in phases:
        if has_elapsed(phase, reference_time):
            raise PastPhaseError(
                f'Phase ending at "{phase.end_date}" ends now or in the past '
                f"(reference time {reference_time})"
            )
