"""Display formatting shared by the Streamlit pages."""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

CURRENCY_SYMBOL = "₹"


def format_currency(amount: float | Decimal | str | None, symbol: str = CURRENCY_SYMBOL) -> str:
    value = Decimal(str(amount or 0)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{symbol}{value:,.2f}"


def format_timestamp(value: str | None) -> str:
    """ISO timestamp from the API -> ``19 Oct 2026, 14:05``."""
    if not value:
        return "-"
    return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%d %b %Y, %H:%M")
