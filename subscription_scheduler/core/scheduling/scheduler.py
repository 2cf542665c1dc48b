"""Subscription schedule reconciliation entry point."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping, Sequence

from subscription_scheduler.core.conversion.phase_conversion import convert_phase_to_update
from subscription_scheduler.core.domain.errors import NothingToScheduleError, SchedulingError
from subscription_scheduler.core.domain.instants import resolve_instant, sample_reference_time
from subscription_scheduler.core.domain.types import Phase, PhaseUpdate, PropertyUpdate
from subscription_scheduler.core.events.event_bus import NullEventBus
from subscription_scheduler.core.events.events import (
    BoundsExtractedEvent,
    PhasesMergedEvent,
    PhasesPrunedEvent,
    ScheduleComputedEvent,
    ScheduleRejectedEvent,
)
from subscription_scheduler.core.scheduling.scheduler_config import SchedulerConfig
from subscription_scheduler.core.timeline.bounds import extract_bounds
from subscription_scheduler.core.timeline.merger import merge_adjacent_phases
from subscription_scheduler.core.timeline.properties import materialize_phases
from subscription_scheduler.core.timeline.pruner import remove_past_phases, truncate_at
from subscription_scheduler.core.timeline.synthesizer import synthesize_phases
from subscription_scheduler.core.timeline.validator import (
    assert_has_no_past_phases,
    assert_phases_are_continuous,
)

if TYPE_CHECKING:
    from subscription_scheduler.core.domain.types import Instant
    from subscription_scheduler.core.events.event_bus import EventBus

LOGGER = logging.getLogger(__name__)

PhaseInput = Phase | PhaseUpdate | Mapping[str, Any]
PropertyUpdateInput = PropertyUpdate | Mapping[str, Any]


def ingest_phases(existing_phases: Sequence[PhaseInput] | None) -> list[PhaseUpdate]:
    """Validate raw phases and convert them to the write model.

    Raises UnsupportedPhaseError for any phase without exactly one item.
    """
    phases: list[PhaseUpdate] = []
    for raw in existing_phases or ():
        phase = raw if isinstance(raw, (Phase, PhaseUpdate)) else Phase.model_validate(raw)
        phases.append(convert_phase_to_update(phase))
    return phases


def ingest_property_updates(
    property_updates: Sequence[PropertyUpdateInput] | None,
    reference_time: int,
) -> list[PropertyUpdate]:
    """Validate raw updates and sort them chronologically, keeping declaration order on ties."""
    updates = [
        raw if isinstance(raw, PropertyUpdate) else PropertyUpdate.model_validate(raw)
        for raw in property_updates or ()
    ]
    return sorted(updates, key=lambda update: resolve_instant(update.scheduled_at, reference_time))


class PhaseScheduler:
    """Computes replacement schedule timelines.

    The scheduler holds no state between calls. Each call samples the
    reference time at most once and threads it through every stage.
    """

    def __init__(
        self,
        config: SchedulerConfig | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self.config = config if config is not None else SchedulerConfig()
        self._event_bus = event_bus if event_bus is not None else NullEventBus()

    def schedule(
        self,
        existing_phases: Sequence[PhaseInput] | None,
        property_updates: Sequence[PropertyUpdateInput] | None,
        reference_time: int | None = None,
        *,
        cancel_at: Instant | None = None,
    ) -> list[PhaseUpdate]:
        """
        Schedule property changes on top of an existing timeline.

        Existing phases are preserved where still valid, new phases are
        created at every change, adjacent identical phases are merged and
        elapsed phases are dropped.

        Returns phase update parameters ready for the schedule update call.
        Raises a SchedulingError subclass on any violation; nothing is
        returned in that case.
        """
        reference = sample_reference_time() if reference_time is None else int(reference_time)

        try:
            return self._schedule(existing_phases, property_updates, reference, cancel_at)
        except SchedulingError as exc:
            LOGGER.warning(
                "Schedule rejected",
                extra={"code": exc.code, "reason": str(exc), "reference_time": reference},
            )
            self._event_bus.emit(
                ScheduleRejectedEvent(reference_time=reference, code=exc.code, message=str(exc))
            )
            raise

    def _schedule(
        self,
        existing_phases: Sequence[PhaseInput] | None,
        property_updates: Sequence[PropertyUpdateInput] | None,
        reference: int,
        cancel_at: Instant | None,
    ) -> list[PhaseUpdate]:
        existing = ingest_phases(existing_phases)
        updates = ingest_property_updates(property_updates, reference)

        # No updates to apply: the existing timeline is only converted.
        if not updates and cancel_at is None:
            if not existing:
                raise NothingToScheduleError("Nothing to schedule and no existing phases")
            self._emit_computed(reference, existing, updates, existing, cancel_at, passthrough=True)
            return existing

        # ------------------------------------------------------------------
        # 1. Bounds and phase skeleton
        # ------------------------------------------------------------------

        bounds = extract_bounds(existing, updates, reference, cancel_at=cancel_at)
        self._event_bus.emit(
            BoundsExtractedEvent(
                reference_time=reference,
                bounds=tuple(resolve_instant(bound, reference) for bound in bounds),
            )
        )

        skeleton = synthesize_phases(existing, bounds, updates, reference)

        # ------------------------------------------------------------------
        # 2. Property application
        # ------------------------------------------------------------------

        phases = materialize_phases(skeleton, updates, reference)
        if cancel_at is not None:
            phases = truncate_at(phases, cancel_at, reference)
            if not phases:
                raise NothingToScheduleError(
                    f"Cancellation at {cancel_at} precedes every phase; nothing left to schedule"
                )

        # ------------------------------------------------------------------
        # 3. Pruning and merging
        # ------------------------------------------------------------------

        current = remove_past_phases(phases, reference)
        self._event_bus.emit(
            PhasesPrunedEvent(
                reference_time=reference,
                kept=len(current),
                removed=len(phases) - len(current),
            )
        )

        final = merge_adjacent_phases(current, self.config.material_fields)
        self._event_bus.emit(
            PhasesMergedEvent(
                before=len(current),
                after=len(final),
                material_fields=tuple(self.config.material_fields),
            )
        )

        # ------------------------------------------------------------------
        # 4. Invariants
        # ------------------------------------------------------------------

        assert_phases_are_continuous(final, reference)
        assert_has_no_past_phases(final, reference)

        self._emit_computed(reference, existing, updates, final, cancel_at, passthrough=False)
        return final

    def _emit_computed(
        self,
        reference: int,
        existing: list[PhaseUpdate],
        updates: list[PropertyUpdate],
        final: list[PhaseUpdate],
        cancel_at: Instant | None,
        *,
        passthrough: bool,
    ) -> None:
        LOGGER.info(
            "Schedule computed",
            extra={
                "reference_time": reference,
                "existing_phases": len(existing),
                "property_updates": len(updates),
                "phases": len(final),
                "passthrough": passthrough,
            },
        )
        self._event_bus.emit(
            ScheduleComputedEvent(
                reference_time=reference,
                existing_phases=len(existing),
                property_updates=len(updates),
                phases=len(final),
                passthrough=passthrough,
                cancel_at=None if cancel_at is None else resolve_instant(cancel_at, reference),
            )
        )


def schedule_updates(
    existing_phases: Sequence[PhaseInput] | None,
    property_updates: Sequence[PropertyUpdateInput] | None,
    reference_time: int | None = None,
    *,
    cancel_at: Instant | None = None,
    config: SchedulerConfig | None = None,
    event_bus: EventBus | None = None,
) -> list[PhaseUpdate]:
    """Functional form of ``PhaseScheduler.schedule``."""
    scheduler = PhaseScheduler(config=config, event_bus=event_bus)
    return scheduler.schedule(
        existing_phases,
        property_updates,
        reference_time,
        cancel_at=cancel_at,
    )
