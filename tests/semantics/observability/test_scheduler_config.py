"""
Semantic test: scheduler configuration.

Invariant:
The item identifier and quantity are always compared when merging; extra
phase-level fields may be declared material and then prevent merges of
phases that differ on them. Invalid configurations are rejected up front.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from subscription_scheduler import SchedulerConfig, schedule_updates

DAY = 86400


def test_default_material_fields() -> None:
    assert SchedulerConfig().material_fields == ("plan", "price", "quantity")


def test_from_json_obj_accepts_phase_level_fields() -> None:
    config = SchedulerConfig.from_json_obj(
        {"material_fields": ["plan", "price", "quantity", "proration_behavior", "coupon"]}
    )

    assert config.material_fields == ("plan", "price", "quantity", "proration_behavior", "coupon")


@pytest.mark.parametrize(
    "config_obj",
    [
        {"material_fields": ["plan", "price"]},
        {"material_fields": ["plan", "price", "quantity", "colour"]},
        {"material_fields": ["plan", "price", "quantity", "coupon", "coupon"]},
        {"material_fields": ["plan", "price", "quantity"], "merge": False},
    ],
)
def test_invalid_configurations_are_rejected(config_obj) -> None:
    with pytest.raises(ValidationError):
        SchedulerConfig.from_json_obj(config_obj)


def test_material_proration_behavior_keeps_phases_apart(make_phase, reference_time) -> None:
    existing = [make_phase(reference_time - DAY, None, quantity=1)]
    updates = [{"scheduled_at": reference_time + DAY, "proration_behavior": "none"}]

    default = schedule_updates(existing, updates, reference_time)
    strict = schedule_updates(
        existing,
        updates,
        reference_time,
        config=SchedulerConfig(material_fields=("plan", "price", "quantity", "proration_behavior")),
    )

    assert [(p.start_date, p.end_date) for p in default] == [(reference_time - DAY, None)]
    assert default[0].proration_behavior == "always_invoice"

    assert [(p.start_date, p.end_date, p.proration_behavior) for p in strict] == [
        (reference_time - DAY, reference_time + DAY, "always_invoice"),
        (reference_time + DAY, None, "none"),
    ]
