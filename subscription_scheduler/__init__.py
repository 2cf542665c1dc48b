"""Public API for the subscription_scheduler package.

Only symbols imported here are considered part of the stable,
supported external interface.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# ----------------------------------------------------------------------
# Scheduling API
# ----------------------------------------------------------------------
from subscription_scheduler.core.scheduling.scheduler import (
    PhaseScheduler,
    schedule_updates,
)
from subscription_scheduler.core.scheduling.scheduler_config import SchedulerConfig

# ----------------------------------------------------------------------
# Schedule models
# ----------------------------------------------------------------------
from subscription_scheduler.core.domain.types import (
    Instant,
    Phase,
    PhaseItem,
    PhaseItemUpdate,
    PhaseUpdate,
    PropertyUpdate,
)

# ----------------------------------------------------------------------
# Errors
# ----------------------------------------------------------------------
from subscription_scheduler.core.domain.errors import (
    ContinuityError,
    DuplicateBoundaryError,
    NoBasisPhaseError,
    NothingToScheduleError,
    PastPhaseError,
    PastUpdateError,
    SchedulingError,
    SchedulingErrorCode,
    UnsupportedPhaseError,
)

# ----------------------------------------------------------------------
# Collaborators
# ----------------------------------------------------------------------
from subscription_scheduler.core.conversion.phase_conversion import (
    convert_item_to_update,
    convert_phase_to_update,
)
from subscription_scheduler.core.events.event_bus import EventBus, NullEventBus
from subscription_scheduler.reporting.timeline_printer import format_phases, print_phases

# ----------------------------------------------------------------------
# Public API definition
# ----------------------------------------------------------------------

__all__ = [
    # Scheduling
    "schedule_updates",
    "PhaseScheduler",
    "SchedulerConfig",

    # Models
    "Instant",
    "Phase",
    "PhaseItem",
    "PhaseUpdate",
    "PhaseItemUpdate",
    "PropertyUpdate",

    # Errors
    "SchedulingError",
    "SchedulingErrorCode",
    "PastUpdateError",
    "DuplicateBoundaryError",
    "UnsupportedPhaseError",
    "NoBasisPhaseError",
    "ContinuityError",
    "PastPhaseError",
    "NothingToScheduleError",

    # Collaborators
    "convert_phase_to_update",
    "convert_item_to_update",
    "format_phases",
    "print_phases",
    "EventBus",
    "NullEventBus",

    # Version
    "__version__",
]

# ----------------------------------------------------------------------
# Package version
# ----------------------------------------------------------------------

try:
    __version__ = version("subscription-scheduler")
except PackageNotFoundError:
    __version__ = "0.0.0"
