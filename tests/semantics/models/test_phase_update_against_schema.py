"""Schema conformance tests for phase update parameters.

Scheduled phases are submitted to the billing platform as-is, so every
payload the scheduler produces must satisfy the phase update JSON Schema,
and the Pydantic write model must be at least as strict as the schema for
the inputs it types.
"""

# pylint: disable=line-too-long,missing-function-docstring
# pylint: disable=redefined-outer-name,global-statement
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from jsonschema import ValidationError as JsonSchemaValidationError
from jsonschema import validate as jsonschema_validate
from pydantic import ValidationError as PydanticValidationError
from referencing import Registry, Resource
from referencing.jsonschema import DRAFT202012

from subscription_scheduler import schedule_updates
from subscription_scheduler.core.domain.types import PhaseUpdate

SCHEMA_REGISTRY = Registry()

DAY = 86400


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def load_schema(name: str) -> dict:
    """
    Load JSON schema from the package schema directory.
    """
    global SCHEMA_REGISTRY

    root = Path(__file__).parent.parent.parent.parent
    schema_path = root / "subscription_scheduler" / "core" / "schemas" / name

    with schema_path.open("r", encoding="utf-8") as f:
        schema = json.load(f)

    schema_id = schema.get("$id")
    if isinstance(schema_id, str) and schema_id:
        resource = Resource.from_contents(schema, default_specification=DRAFT202012)
        SCHEMA_REGISTRY = SCHEMA_REGISTRY.with_resource(schema_id, resource)

    return schema


def assert_pydantic_then_schema_ok(data: dict[str, Any], schema: dict[str, Any]) -> dict:
    """
    Validate with Pydantic first, then validate the dumped payload with JSON Schema.
    """
    instance = PhaseUpdate.model_validate(data).payload()
    jsonschema_validate(instance=instance, schema=schema, registry=SCHEMA_REGISTRY)
    return instance


def assert_schema_invalid_but_pydantic_rejects(data: dict[str, Any], schema: dict[str, Any]) -> None:
    """
    If the schema rejects an input, the write model must reject it too.
    """
    with pytest.raises(JsonSchemaValidationError):
        jsonschema_validate(instance=data, schema=schema, registry=SCHEMA_REGISTRY)

    with pytest.raises(PydanticValidationError):
        PhaseUpdate.model_validate(data)


def mk_phase_update(**overrides) -> dict[str, Any]:
    phase = {
        "start_date": 1738767600,
        "end_date": 1741186800,
        "items": [{"price": "price_1", "quantity": 2}],
        "proration_behavior": "none",
    }
    phase.update(overrides)
    return phase


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="module", autouse=True)
def _load_common_schema() -> None:
    load_schema("common.schema.json")


@pytest.fixture(scope="module")
def phase_update_schema() -> dict:
    return load_schema("phase_update.schema.json")


# ---------------------------------------------------------------------------
# Write model
# ---------------------------------------------------------------------------

def test_phase_update_valid_minimal(phase_update_schema):
    assert_pydantic_then_schema_ok(mk_phase_update(), phase_update_schema)


def test_phase_update_open_ended_and_now(phase_update_schema):
    instance = assert_pydantic_then_schema_ok(
        mk_phase_update(start_date="now", end_date=None), phase_update_schema
    )

    assert "end_date" not in instance


def test_phase_update_rejects_expanded_coupon(phase_update_schema):
    assert_schema_invalid_but_pydantic_rejects(
        mk_phase_update(coupon={"id": "co_1", "percent_off": 10}), phase_update_schema
    )


def test_phase_update_rejects_negative_quantity(phase_update_schema):
    assert_schema_invalid_but_pydantic_rejects(
        mk_phase_update(items=[{"price": "price_1", "quantity": -1}]), phase_update_schema
    )


def test_phase_update_rejects_unknown_proration_behavior(phase_update_schema):
    assert_schema_invalid_but_pydantic_rejects(
        mk_phase_update(proration_behavior="sometimes"), phase_update_schema
    )


def test_phase_update_rejects_unknown_instant_sentinel(phase_update_schema):
    assert_schema_invalid_but_pydantic_rejects(mk_phase_update(start_date="later"), phase_update_schema)


def test_schema_rejects_multi_item_phases(phase_update_schema):
    data = mk_phase_update(items=[{"price": "price_1", "quantity": 1}, {"price": "price_2", "quantity": 1}])

    with pytest.raises(JsonSchemaValidationError):
        jsonschema_validate(instance=data, schema=phase_update_schema, registry=SCHEMA_REGISTRY)


def test_schema_rejects_read_only_tax_reason(phase_update_schema):
    data = mk_phase_update(automatic_tax={"enabled": False, "disabled_reason": None})

    with pytest.raises(JsonSchemaValidationError):
        jsonschema_validate(instance=data, schema=phase_update_schema, registry=SCHEMA_REGISTRY)


# ---------------------------------------------------------------------------
# Scheduler output
# ---------------------------------------------------------------------------

def test_scheduled_payloads_conform(phase_update_schema, make_phase, reference_time):
    existing = [
        make_phase(
            reference_time - 10 * DAY,
            reference_time + 20 * DAY,
            quantity=1,
            coupon={"id": "co_1"},
            default_tax_rates=[{"id": "txr_1"}],
            automatic_tax={"enabled": True, "disabled_reason": None, "liability": None},
        ),
        make_phase(reference_time + 20 * DAY, None, quantity=3),
    ]

    phases = schedule_updates(
        existing,
        [
            {"scheduled_at": "now", "quantity": 2, "proration_behavior": "none"},
            {"scheduled_at": reference_time + 5 * DAY, "price": "price_2"},
        ],
        reference_time,
    )

    assert phases
    for phase in phases:
        jsonschema_validate(instance=phase.payload(), schema=phase_update_schema, registry=SCHEMA_REGISTRY)
