"""Core schedule data models.

This module defines the canonical Pydantic models for subscription schedule
phases as they are read from the billing platform (``Phase``, ``PhaseItem``),
as they are written back (``PhaseUpdate``, ``PhaseItemUpdate``), and the
property changes requested by callers (``PropertyUpdate``).

All models are frozen. Pipeline stages never mutate a phase in place; they
build new ones with ``model_copy(update=...)``. Fields the scheduler does not
reason about are kept as extra attributes and copied verbatim.
"""

# pylint: disable=line-too-long,missing-class-docstring
from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Common types
# ---------------------------------------------------------------------------

# Epoch seconds, or the "now" sentinel resolved against the reference time.
Instant = int | Literal["now"]

ProrationBehavior = Literal["always_invoice", "create_prorations", "none"]


class ExpandedObject(BaseModel):
    """An expanded billing-platform object; only its ``id`` is ever needed."""

    id: str = Field(..., min_length=1)

    model_config = ConfigDict(extra="allow", frozen=True)


IdOrObject = str | ExpandedObject


# ---------------------------------------------------------------------------
# Read model (phases as returned by the billing platform)
# ---------------------------------------------------------------------------


class PhaseItem(BaseModel):
    plan: IdOrObject | None = None
    price: IdOrObject | None = None
    quantity: int | None = Field(default=None, ge=0)

    billing_thresholds: dict[str, Any] | None = None
    discounts: list[Any] | None = None
    metadata: dict[str, str] | None = None
    tax_rates: list[IdOrObject] | None = None

    model_config = ConfigDict(extra="allow", frozen=True)


class Phase(BaseModel):
    """
    A schedule phase covering ``[start_date, end_date)``.

    ``end_date`` is None for a phase that continues indefinitely. Only
    single-item phases are supported; the check happens when phases are
    ingested, see ``conversion.require_single_item``.
    """

    start_date: Instant
    end_date: Instant | None = None
    items: list[PhaseItem]

    proration_behavior: ProrationBehavior | None = None
    coupon: IdOrObject | None = None
    add_invoice_items: list[dict[str, Any]] | None = None
    application_fee_percent: float | None = None
    automatic_tax: dict[str, Any] | None = None
    billing_cycle_anchor: str | None = None
    billing_thresholds: dict[str, Any] | None = None
    collection_method: str | None = None
    default_payment_method: IdOrObject | None = None
    default_tax_rates: list[IdOrObject] | None = None
    discounts: list[Any] | None = None
    invoice_settings: dict[str, Any] | None = None
    metadata: dict[str, str] | None = None
    on_behalf_of: IdOrObject | None = None
    transfer_data: dict[str, Any] | None = None
    trial_end: Instant | None = None

    model_config = ConfigDict(extra="allow", frozen=True)


# ---------------------------------------------------------------------------
# Write model (phases as submitted to the schedule update call)
# ---------------------------------------------------------------------------


class PhaseItemUpdate(BaseModel):
    plan: str | None = None
    price: str | None = None
    quantity: int | None = Field(default=None, ge=0)

    billing_thresholds: dict[str, Any] | None = None
    discounts: list[Any] | None = None
    metadata: dict[str, str] | None = None
    tax_rates: list[str] | None = None

    model_config = ConfigDict(extra="allow", frozen=True)


class PhaseUpdate(BaseModel):
    """
    Phase parameters for the billing platform's schedule update call.

    Every nested object is reduced to its id and unset values are None, so
    ``model_dump(mode="json", exclude_none=True)`` is the request payload.
    """

    start_date: Instant | None = None
    end_date: Instant | None = None
    items: list[PhaseItemUpdate]

    proration_behavior: ProrationBehavior | None = None
    coupon: str | None = None
    add_invoice_items: list[dict[str, Any]] | None = None
    application_fee_percent: float | None = None
    automatic_tax: dict[str, Any] | None = None
    billing_cycle_anchor: str | None = None
    billing_thresholds: dict[str, Any] | None = None
    collection_method: str | None = None
    default_payment_method: str | None = None
    default_tax_rates: list[str] | None = None
    discounts: list[Any] | None = None
    invoice_settings: dict[str, Any] | None = None
    metadata: dict[str, str] | None = None
    on_behalf_of: str | None = None
    transfer_data: dict[str, Any] | None = None
    trial_end: Instant | None = None

    model_config = ConfigDict(extra="allow", frozen=True)

    @property
    def item(self) -> PhaseItemUpdate:
        """The single priced line item of this phase."""
        return self.items[0]

    def payload(self) -> dict[str, Any]:
        """Return the JSON-compatible request payload for this phase."""
        return self.model_dump(mode="json", exclude_none=True)


# ---------------------------------------------------------------------------
# Property updates
# ---------------------------------------------------------------------------


class PropertyUpdate(BaseModel):
    """
    A set of property overrides effective from ``scheduled_at`` onwards.

    ``price`` accepts either a price or a legacy plan identifier and is
    applied to both item fields.
    """

    scheduled_at: Instant
    quantity: int | None = Field(default=None, ge=0)
    price: str | None = Field(default=None, min_length=1)
    coupon: str | None = Field(default=None, min_length=1)
    proration_behavior: ProrationBehavior | None = None

    model_config = ConfigDict(extra="forbid", frozen=True)
