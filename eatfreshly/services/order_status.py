"""Order status transition helpers."""

from __future__ import annotations

from datetime import datetime

from eatfreshly.core.errors import ValidationFailed
from eatfreshly.models.order import Order

ORDER_STATUSES: list[str] = [
    "pending",
    "confirmed",
    "preparing",
    "ready",
    "out_for_delivery",
    "delivered",
    "cancelled",
]

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"confirmed", "preparing", "cancelled"},
    "confirmed": {"preparing", "cancelled"},
    "preparing": {"ready", "out_for_delivery", "cancelled"},
    "ready": {"out_for_delivery", "delivered"},
    "out_for_delivery": {"delivered"},
    "delivered": set(),
    "cancelled": set(),
}

# Storefront labels accepted from the back office.
DISPLAY_LABELS: dict[str, str] = {
    "placed": "pending",
    "preparing": "preparing",
    "out for delivery": "ready",
    "delivered": "delivered",
    "cancelled": "cancelled",
}

CUSTOMER_CANCELLABLE: frozenset[str] = frozenset({"pending", "confirmed"})
ACTIVE_STATUSES: frozenset[str] = frozenset({"pending", "confirmed", "preparing"})


def normalize_status(value: str) -> str:
    """Map a backend value or display label to the backend status."""
    candidate = str(value or "").strip().lower()
    if candidate in ALLOWED_TRANSITIONS:
        return candidate
    if candidate in DISPLAY_LABELS:
        return DISPLAY_LABELS[candidate]
    raise ValidationFailed(f"Invalid order status: {value}")


def can_transition(current: str, new: str) -> bool:
    """Return whether order can move from current to new status."""
    return new in ALLOWED_TRANSITIONS.get(current, set())


def set_status(order: Order, new_status: str, now: datetime) -> None:
    """Set status and update corresponding timestamps."""
    order.status = new_status
    order.status_updated_at = now

    if new_status == "confirmed":
        order.confirmed_at = now
    elif new_status == "delivered":
        order.delivered_at = now
    elif new_status == "cancelled":
        order.cancelled_at = now
