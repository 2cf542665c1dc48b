"""
Adjacent phase merging.

Consecutive phases whose material properties are identical collapse into
one. Only the compared fields matter; every other attribute of the later
phase is discarded in favor of the earlier one.
"""

from __future__ import annotations

from typing import Any, Sequence

from subscription_scheduler.core.conversion.phase_conversion import require_single_item
from subscription_scheduler.core.domain.types import PhaseUpdate

# Material fields read from the phase's line item; any other name is read
# from the phase itself.
ITEM_FIELDS: frozenset[str] = frozenset({"plan", "price", "quantity"})

DEFAULT_MATERIAL_FIELDS: tuple[str, ...] = ("plan", "price", "quantity")


def material_key(phase: PhaseUpdate, material_fields: Sequence[str]) -> tuple[Any, ...]:
    """Return the values that decide whether two adjacent phases are identical."""
    item = require_single_item(phase)
    return tuple(
        getattr(item, field) if field in ITEM_FIELDS else getattr(phase, field, None)
        for field in material_fields
    )


def merge_adjacent_phases(
    phases: Sequence[PhaseUpdate],
    material_fields: Sequence[str] = DEFAULT_MATERIAL_FIELDS,
) -> list[PhaseUpdate]:
    """
    Merge each phase into the preceding kept phase when their material keys match.

    The surviving phase is a new copy extended to the later phase's end
    (open-ended if the later phase is). Input phases are never modified.
    """

    merged: list[PhaseUpdate] = []
    previous_key: tuple[Any, ...] | None = None

    for phase in phases:
        key = material_key(phase, material_fields)
        if merged and key == previous_key:
            merged[-1] = merged[-1].model_copy(update={"end_date": phase.end_date})
        else:
            merged.append(phase)
            previous_key = key

    return merged
