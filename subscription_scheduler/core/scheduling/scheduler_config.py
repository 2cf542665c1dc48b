"""Scheduler configuration model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from subscription_scheduler.core.timeline.merger import DEFAULT_MATERIAL_FIELDS

# Phase-level fields that may additionally be declared material for merging.
PHASE_MATERIAL_FIELDS: frozenset[str] = frozenset(
    {
        "proration_behavior",
        "coupon",
        "collection_method",
        "default_tax_rates",
        "discounts",
        "metadata",
    }
)


class SchedulerConfig(BaseModel):
    """Structured scheduler configuration.

    ``material_fields`` lists the properties compared when deciding whether
    two adjacent phases are identical and can be merged. The item identifier
    and quantity are always material; phase-level fields may be added.
    """

    material_fields: tuple[str, ...] = Field(default=DEFAULT_MATERIAL_FIELDS)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @classmethod
    def from_json_obj(cls, config_obj: dict[str, Any]) -> SchedulerConfig:
        """Create a SchedulerConfig instance from a JSON-compatible object."""
        return cls.model_validate(config_obj)

    @model_validator(mode="after")
    def validate_material_fields(self) -> SchedulerConfig:
        missing = [field for field in DEFAULT_MATERIAL_FIELDS if field not in self.material_fields]
        if missing:
            raise ValueError(f"material_fields must include {', '.join(missing)}")

        allowed = set(DEFAULT_MATERIAL_FIELDS) | PHASE_MATERIAL_FIELDS
        unknown = [field for field in self.material_fields if field not in allowed]
        if unknown:
            raise ValueError(f"Unknown material fields: {', '.join(unknown)}")

        if len(set(self.material_fields)) != len(self.material_fields):
            raise ValueError("material_fields must not contain duplicates")
        return self
