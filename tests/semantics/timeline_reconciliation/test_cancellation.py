"""
Semantic test: scheduling a cancellation.

Invariant:
With a cancellation instant the timeline ends exactly there; nothing is
scheduled after it and the last phase is never open-ended.
"""

from __future__ import annotations

import pytest

from subscription_scheduler import NothingToScheduleError, schedule_updates

DAY = 86400


def test_cancellation_without_updates_ends_open_timeline(make_phase, reference_time) -> None:
    started_at = reference_time - 5 * DAY
    cancel_at = reference_time + 3 * DAY

    phases = schedule_updates(
        [make_phase(started_at, None, quantity=4)],
        [],
        reference_time,
        cancel_at=cancel_at,
    )

    assert [(p.start_date, p.end_date, p.item.quantity) for p in phases] == [(started_at, cancel_at, 4)]


def test_updates_after_cancellation_are_discarded(make_phase, reference_time) -> None:
    started_at = reference_time - 5 * DAY
    ends_at = reference_time + 30 * DAY
    cancel_at = reference_time + 10 * DAY

    phases = schedule_updates(
        [make_phase(started_at, ends_at, quantity=4)],
        [
            {"quantity": 5, "scheduled_at": reference_time + DAY},
            {"quantity": 9, "scheduled_at": reference_time + 20 * DAY},
        ],
        reference_time,
        cancel_at=cancel_at,
    )

    assert [(p.start_date, p.end_date, p.item.quantity) for p in phases] == [
        (started_at, reference_time + DAY, 4),
        (reference_time + DAY, cancel_at, 5),
    ]


def test_cancellation_before_every_phase_leaves_nothing_to_schedule(make_phase, reference_time) -> None:
    existing = [make_phase(reference_time + 10 * DAY, reference_time + 40 * DAY, quantity=1)]

    with pytest.raises(NothingToScheduleError):
        schedule_updates(existing, [], reference_time, cancel_at=reference_time + 5 * DAY)

    with pytest.raises(NothingToScheduleError):
        schedule_updates(existing, [], reference_time, cancel_at=reference_time + 10 * DAY)
