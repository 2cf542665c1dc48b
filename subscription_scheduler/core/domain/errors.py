"""Scheduling error taxonomy.

Every failure aborts the whole computation; no partial timeline is ever
returned. Each error carries a stable string ``code`` for callers that map
failures to their own responses.
"""

from __future__ import annotations


class SchedulingErrorCode:
    PAST_UPDATE = "PAST_UPDATE"
    DUPLICATE_BOUNDARY = "DUPLICATE_BOUNDARY"
    UNSUPPORTED_PHASE = "UNSUPPORTED_PHASE"
    NO_BASIS_PHASE = "NO_BASIS_PHASE"
    CONTINUITY = "CONTINUITY"
    PAST_PHASE = "PAST_PHASE"
    NOTHING_TO_SCHEDULE = "NOTHING_TO_SCHEDULE"


class SchedulingError(Exception):
    """Base class for all scheduling failures."""

    code: str = "SCHEDULING_ERROR"


class PastUpdateError(SchedulingError):
    """A property update (or cancellation) is scheduled before the reference time."""

    code = SchedulingErrorCode.PAST_UPDATE


class DuplicateBoundaryError(SchedulingError):
    """Two distinct boundary values resolve to the same instant."""

    code = SchedulingErrorCode.DUPLICATE_BOUNDARY


class UnsupportedPhaseError(SchedulingError):
    """A phase does not carry exactly one line item."""

    code = SchedulingErrorCode.UNSUPPORTED_PHASE


class NoBasisPhaseError(SchedulingError):
    """No existing phase is available to base a new phase on."""

    code = SchedulingErrorCode.NO_BASIS_PHASE


class ContinuityError(SchedulingError):
    """The timeline has a gap or an overlap between adjacent phases."""

    code = SchedulingErrorCode.CONTINUITY


class PastPhaseError(SchedulingError):
    """The timeline still contains a phase ending at or before the reference time."""

    code = SchedulingErrorCode.PAST_PHASE


class NothingToScheduleError(SchedulingError):
    """No phase would remain to submit: no input at all, or a cancellation before every phase."""

    code = SchedulingErrorCode.NOTHING_TO_SCHEDULE
