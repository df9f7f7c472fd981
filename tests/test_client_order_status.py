import pytest

from eatfreshly.client.formatting import format_currency, format_timestamp
from eatfreshly.client.order_status import (
    can_cancel,
    is_completed,
    map_order_status,
    status_color,
    status_icon,
    to_backend_status,
    tracking_progress,
    tracking_step,
)


@pytest.mark.parametrize(
    ("backend", "label"),
    [
        ("pending", "Placed"),
        ("confirmed", "Placed"),
        ("preparing", "Preparing"),
        ("ready", "Out for Delivery"),
        ("out_for_delivery", "Out for Delivery"),
        ("delivered", "Delivered"),
        ("cancelled", "Cancelled"),
    ],
)
def test_map_order_status(backend: str, label: str) -> None:
    assert map_order_status(backend) == label


def test_labels_and_unknown_values_pass_through() -> None:
    assert map_order_status("Preparing") == "Preparing"
    assert map_order_status("refund_requested") == "refund_requested"
    assert to_backend_status("Out for Delivery") == "ready"
    assert map_order_status(to_backend_status("Out for Delivery")) == "Out for Delivery"
    assert to_backend_status("Confirmed") == "confirmed"


def test_tracking_helpers() -> None:
    assert tracking_step("pending") == 0
    assert tracking_step("ready") == 2
    assert tracking_step("cancelled") == -1
    assert tracking_progress("preparing") == 50
    assert tracking_progress("delivered") == 100
    assert tracking_progress("cancelled") == 0
    assert is_completed("delivered")
    assert is_completed("cancelled")
    assert not is_completed("out_for_delivery")


def test_can_cancel_and_decorations() -> None:
    assert can_cancel("pending")
    assert can_cancel("preparing")
    assert not can_cancel("out_for_delivery")
    assert status_color("delivered") == "green"
    assert status_color("mystery") == "gray"
    assert status_icon("cancelled") == "cancel"
    assert status_icon("mystery") == "help"


def test_formatting() -> None:
    assert format_currency(1234.5) == "₹1,234.50"
    assert format_currency("0.005") == "₹0.01"
    assert format_currency(None) == "₹0.00"
    assert format_timestamp("2026-10-19T14:05:00Z") == "19 Oct 2026, 14:05"
    assert format_timestamp(None) == "-"
