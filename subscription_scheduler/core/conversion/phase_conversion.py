"""Read-model to write-model phase conversion.

The schedule update call requires every phase to be resent in full, so a
phase read from the billing platform must be translated into update
parameters: expanded objects are reduced to their ids and null values
become absent.
"""

from __future__ import annotations

from typing import Any

from subscription_scheduler.core.domain.errors import UnsupportedPhaseError
from subscription_scheduler.core.domain.types import (
    Phase,
    PhaseItem,
    PhaseItemUpdate,
    PhaseUpdate,
)


def require_single_item(phase: Phase | PhaseUpdate) -> PhaseItem | PhaseItemUpdate:
    """Return the only line item of ``phase``, rejecting multi-item phases."""
    if len(phase.items) != 1:
        raise UnsupportedPhaseError(
            f"Phase starting at {phase.start_date} has {len(phase.items)} items; "
            "only single-item phases are supported"
        )
    return phase.items[0]


def _drop_none(value: Any) -> Any:
    """Recursively remove null entries from dumped mappings."""
    if isinstance(value, dict):
        return {key: _drop_none(item) for key, item in value.items() if item is not None}
    if isinstance(value, list):
        return [_drop_none(item) for item in value]
    return value


def _id_of(value: Any) -> Any:
    if isinstance(value, dict):
        return value.get("id")
    return value


def _ids_of(values: list[Any] | None) -> list[Any] | None:
    if values is None:
        return None
    return [_id_of(value) for value in values]


def _discount_params(discounts: list[Any] | None) -> list[Any] | None:
    """Keep discount ids, reducing expanded coupon/discount/promotion objects."""
    if discounts is None:
        return None

    params: list[Any] = []
    for discount in discounts:
        if isinstance(discount, str):
            params.append(discount)
        elif isinstance(discount, dict):
            reduced = {
                key: _id_of(discount[key])
                for key in ("coupon", "discount", "promotion_code")
                if discount.get(key) is not None
            }
            if reduced:
                params.append(reduced)
    return params


def _invoice_settings_params(settings: dict[str, Any]) -> dict[str, Any]:
    params = dict(settings)
    if "account_tax_ids" in params:
        params["account_tax_ids"] = _ids_of(params["account_tax_ids"])
    issuer = params.get("issuer")
    if isinstance(issuer, dict) and "account" in issuer:
        params["issuer"] = {**issuer, "account": _id_of(issuer["account"])}
    return params


def _automatic_tax_params(automatic_tax: dict[str, Any]) -> dict[str, Any]:
    # disabled_reason is read-only and rejected by the update call.
    params = {k: v for k, v in automatic_tax.items() if k != "disabled_reason"}
    liability = params.get("liability")
    if isinstance(liability, dict) and "account" in liability:
        params["liability"] = {**liability, "account": _id_of(liability["account"])}
    return params


def _add_invoice_item_params(item: dict[str, Any]) -> dict[str, Any]:
    params = dict(item)
    if "price" in params:
        params["price"] = _id_of(params["price"])
    if "tax_rates" in params:
        params["tax_rates"] = _ids_of(params["tax_rates"])
    if "discounts" in params:
        params["discounts"] = _discount_params(params["discounts"])
    return params


def convert_item_to_update(item: PhaseItem | PhaseItemUpdate) -> PhaseItemUpdate:
    """Translate a phase line item into item update parameters."""
    if isinstance(item, PhaseItemUpdate):
        return item

    data = _drop_none(item.model_dump())

    data["plan"] = _id_of(data.get("plan"))
    data["price"] = _id_of(data.get("price"))
    data["tax_rates"] = _ids_of(data.get("tax_rates"))
    data["discounts"] = _discount_params(data.get("discounts"))

    return PhaseItemUpdate.model_validate(data)


def convert_phase_to_update(phase: Phase | PhaseUpdate) -> PhaseUpdate:
    """
    Translate a phase into phase update parameters.

    Raises UnsupportedPhaseError when the phase does not carry exactly one
    line item. Phases already in the write model are returned as-is.
    """
    item = require_single_item(phase)
    if isinstance(phase, PhaseUpdate):
        return phase

    data = _drop_none(phase.model_dump(exclude={"items"}))

    for field in ("coupon", "default_payment_method", "on_behalf_of"):
        if field in data:
            data[field] = _id_of(data[field])

    if "default_tax_rates" in data:
        data["default_tax_rates"] = _ids_of(data["default_tax_rates"])
    if "discounts" in data:
        data["discounts"] = _discount_params(data["discounts"])
    if "invoice_settings" in data:
        data["invoice_settings"] = _invoice_settings_params(data["invoice_settings"])
    if "automatic_tax" in data:
        data["automatic_tax"] = _automatic_tax_params(data["automatic_tax"])
    if "add_invoice_items" in data:
        data["add_invoice_items"] = [
            _add_invoice_item_params(invoice_item) for invoice_item in data["add_invoice_items"]
        ]
    if "transfer_data" in data and "destination" in data["transfer_data"]:
        data["transfer_data"] = {
            **data["transfer_data"],
            "destination": _id_of(data["transfer_data"]["destination"]),
        }

    data["items"] = [convert_item_to_update(item)]
    return PhaseUpdate.model_validate(data)
