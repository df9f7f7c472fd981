"""Display mapping for server order statuses.

The server owns the order lifecycle; these helpers only translate whatever
status string it returns into the five tracking labels. Unknown strings are
passed through unchanged.
"""

BACKEND_TO_DISPLAY: dict[str, str] = {
    "pending": "Placed",
    "confirmed": "Placed",
    "preparing": "Preparing",
    "ready": "Out for Delivery",
    "out_for_delivery": "Out for Delivery",
    "delivered": "Delivered",
    "cancelled": "Cancelled",
}

DISPLAY_TO_BACKEND: dict[str, str] = {
    "Placed": "pending",
    "Preparing": "preparing",
    "Out for Delivery": "ready",
    "Delivered": "delivered",
    "Cancelled": "cancelled",
}

TRACKING_STEPS: list[str] = ["Placed", "Preparing", "Out for Delivery", "Delivered"]

STATUS_COLORS: dict[str, str] = {
    "Placed": "blue",
    "Preparing": "orange",
    "Out for Delivery": "violet",
    "Delivered": "green",
    "Cancelled": "red",
}

STATUS_ICONS: dict[str, str] = {
    "Placed": "receipt",
    "Preparing": "restaurant",
    "Out for Delivery": "local_shipping",
    "Delivered": "check_circle",
    "Cancelled": "cancel",
}

STEP_PROGRESS: dict[str, int] = {"Placed": 25, "Preparing": 50, "Out for Delivery": 75, "Delivered": 100}


def map_order_status(status: str) -> str:
    """Backend status -> display label; labels and unknown values come back as-is."""
    return BACKEND_TO_DISPLAY.get(status, status)


def to_backend_status(label: str) -> str:
    return DISPLAY_TO_BACKEND.get(label, label.lower())


def tracking_step(status: str) -> int:
    """Index of the highlighted tracking step, -1 for cancelled or unknown."""
    label = map_order_status(status)
    return TRACKING_STEPS.index(label) if label in TRACKING_STEPS else -1


def is_completed(status: str) -> bool:
    return map_order_status(status) in {"Delivered", "Cancelled"}


def can_cancel(status: str) -> bool:
    return map_order_status(status) in {"Placed", "Preparing"}


def status_color(status: str) -> str:
    return STATUS_COLORS.get(map_order_status(status), "gray")


def status_icon(status: str) -> str:
    return STATUS_ICONS.get(map_order_status(status), "help")


def tracking_progress(status: str) -> int:
    return STEP_PROGRESS.get(map_order_status(status), 0)
