from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from subscription_scheduler.core.domain.instants import format_instant

if TYPE_CHECKING:
    from subscription_scheduler.core.domain.types import PhaseUpdate


def format_phases(phases: Sequence[PhaseUpdate], reference_time: int) -> list[str]:
    """Render a timeline as human-readable lines, one header per phase."""
    lines: list[str] = []

    if not phases:
        lines.append("(empty timeline)")
        return lines

    for index, phase in enumerate(phases):
        start = format_instant(phase.start_date, reference_time)
        end = format_instant(phase.end_date, reference_time)
        header = f"Phase #{index} {start} -> {end}"
        if phase.proration_behavior:
            header += f" [{phase.proration_behavior}]"
        lines.append(header)

        for item in phase.items:
            lines.append(f"  {item.plan or item.price} x {item.quantity}")

    return lines


def print_phases(phases: Sequence[PhaseUpdate], reference_time: int) -> None:
    for line in format_phases(phases, reference_time):
        print(line)
