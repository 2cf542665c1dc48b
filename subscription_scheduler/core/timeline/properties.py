"""Property compilation and phase materialization.

Property updates are folded chronologically into a running state; each
synthesized phase receives the state in effect at its start.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Sequence

from subscription_scheduler.core.conversion.phase_conversion import require_single_item
from subscription_scheduler.core.domain.instants import resolve_instant

if TYPE_CHECKING:
    from subscription_scheduler.core.domain.types import PhaseUpdate, PropertyUpdate


@dataclass(frozen=True, slots=True)
class CompiledProperties:
    """Cumulative property overrides; None means "inherit from the basis phase"."""

    quantity: int | None = None
    price: str | None = None
    coupon: str | None = None
    proration_behavior: str | None = None

    def fold(self, update: PropertyUpdate) -> CompiledProperties:
        """Return a new state with every field set on ``update`` overriding this one."""
        overrides = {
            field: getattr(update, field)
            for field in ("quantity", "price", "coupon", "proration_behavior")
            if getattr(update, field) is not None
        }
        return replace(self, **overrides)

    @property
    def is_empty(self) -> bool:
        return self == CompiledProperties()


def compile_property_updates(
    property_updates: Sequence[PropertyUpdate],
    initial: CompiledProperties | None = None,
) -> CompiledProperties:
    """Fold updates in order; later ones win field by field."""
    compiled = initial if initial is not None else CompiledProperties()
    for update in property_updates:
        compiled = compiled.fold(update)
    return compiled


def apply_properties(phase: PhaseUpdate, compiled: CompiledProperties) -> PhaseUpdate:
    """Return a copy of ``phase`` with the compiled overrides applied."""
    item = require_single_item(phase)

    item_overrides: dict[str, object] = {}
    if compiled.price is not None:
        item_overrides["plan"] = compiled.price
        item_overrides["price"] = compiled.price
    if compiled.quantity is not None:
        item_overrides["quantity"] = compiled.quantity

    phase_overrides: dict[str, object] = {
        "items": [item.model_copy(update=item_overrides)],
    }
    if compiled.proration_behavior is not None:
        phase_overrides["proration_behavior"] = compiled.proration_behavior

    return phase.model_copy(update=phase_overrides)


def materialize_phases(
    phases: Sequence[PhaseUpdate],
    property_updates: Sequence[PropertyUpdate],
    reference_time: int,
) -> list[PhaseUpdate]:
    """
    Apply the cumulative property state onto each phase.

    ``phases`` must be in ascending start order and ``property_updates``
    sorted by ``scheduled_at`` (stable, so declaration order decides ties).
    A change scheduled at T only takes effect from the phase starting at T.
    """

    compiled = CompiledProperties()
    materialized: list[PhaseUpdate] = []

    for phase in phases:
        start_ts = resolve_instant(phase.start_date, reference_time)
        starting_here = [
            update
            for update in property_updates
            if resolve_instant(update.scheduled_at, reference_time) == start_ts
        ]
        compiled = compile_property_updates(starting_here, initial=compiled)
        materialized.append(apply_properties(phase, compiled))

    return materialized
