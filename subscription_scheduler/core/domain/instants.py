"""Helpers for schedule instants.

An instant is either an absolute epoch second or the ``"now"`` sentinel.
Every comparison in the scheduler goes through ``resolve_instant`` so the
sentinel is resolved against a single reference time per invocation.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from subscription_scheduler.core.domain.types import Instant

NOW: Final[str] = "now"


def sample_reference_time() -> int:
    """Return the current wall-clock time in whole epoch seconds."""
    return int(time.time())


def resolve_instant(value: Instant, reference_time: int) -> int:
    """Return ``value`` as epoch seconds, mapping ``"now"`` to ``reference_time``."""
    if value == NOW:
        return reference_time
    return int(value)


def format_instant(value: Instant | None, reference_time: int) -> str:
    """Render an instant as an ISO-8601 UTC timestamp, ``∞`` when absent."""
    if value is None:
        return "∞"
    resolved = resolve_instant(value, reference_time)
    return datetime.fromtimestamp(resolved, tz=timezone.utc).isoformat()
