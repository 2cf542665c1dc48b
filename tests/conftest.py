"""Shared builders for schedule semantics tests."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from subscription_scheduler.core.domain.types import Phase

# 2025-02-05T15:00:00Z
REFERENCE_TIME = 1738767600
DAY = 86400
END_OF_DAY = 1738799999  # 2025-02-05T23:59:59Z


def phase_dict(
    start_date: int | str,
    end_date: int | str | None,
    quantity: int,
    plan: str = "price1",
    **overrides: Any,
) -> dict[str, Any]:
    """Build a read-model phase shaped like a billing platform response."""
    phase: dict[str, Any] = {
        "add_invoice_items": [],
        "application_fee_percent": None,
        "automatic_tax": {"disabled_reason": None, "enabled": False, "liability": None},
        "billing_cycle_anchor": None,
        "billing_thresholds": None,
        "collection_method": "charge_automatically",
        "coupon": None,
        "currency": "usd",
        "default_payment_method": None,
        "default_tax_rates": [],
        "description": None,
        "discounts": [],
        "invoice_settings": {"account_tax_ids": None, "days_until_due": None, "issuer": None},
        "metadata": {},
        "on_behalf_of": None,
        "proration_behavior": "always_invoice",
        "transfer_data": None,
        "trial_end": None,
        "start_date": start_date,
        "end_date": end_date,
        "items": [
            {
                "billing_thresholds": None,
                "discounts": [],
                "metadata": {},
                "plan": plan,
                "price": plan,
                "quantity": quantity,
                "tax_rates": [],
            }
        ],
    }
    phase.update(overrides)
    return phase


@pytest.fixture
def reference_time() -> int:
    return REFERENCE_TIME


@pytest.fixture
def make_phase() -> Callable[..., Phase]:
    def _make(
        start_date: int | str,
        end_date: int | str | None,
        quantity: int,
        plan: str = "price1",
        **overrides: Any,
    ) -> Phase:
        return Phase.model_validate(phase_dict(start_date, end_date, quantity, plan, **overrides))

    return _make
