"""
Scheduling event models.

These events describe facts observed while a timeline is being computed.
They are consumed by loggers and recorders; the computation never depends
on them.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BoundsExtractedEvent:
    reference_time: int
    bounds: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class PhasesPrunedEvent:
    reference_time: int

    kept: int
    removed: int


@dataclass(frozen=True, slots=True)
class PhasesMergedEvent:
    before: int
    after: int

    material_fields: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ScheduleComputedEvent:
    reference_time: int

    existing_phases: int
    property_updates: int
    phases: int

    # True when no updates were supplied and the timeline was only converted.
    passthrough: bool
    cancel_at: int | None = None


@dataclass(frozen=True, slots=True)
class ScheduleRejectedEvent:
    reference_time: int

    code: str
    message: str
