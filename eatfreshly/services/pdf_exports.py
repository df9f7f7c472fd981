"""PDF exports for the back-office orders report."""

from __future__ import annotations

from collections import Counter, defaultdict
from datetime import date
from decimal import Decimal
from io import BytesIO
import re
from typing import Any, Iterable

from eatfreshly.utils.pdf_fonts import currency_symbol, register_pdf_font


def _reportlab():
    from reportlab.lib import colors
    from reportlab.lib.pagesizes import A4
    from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
    from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

    return {
        "colors": colors,
        "A4": A4,
        "ParagraphStyle": ParagraphStyle,
        "getSampleStyleSheet": getSampleStyleSheet,
        "Paragraph": Paragraph,
        "SimpleDocTemplate": SimpleDocTemplate,
        "Spacer": Spacer,
        "Table": Table,
        "TableStyle": TableStyle,
    }


def sanitize_filename(value: str, max_length: int = 80) -> str:
    """Return a filesystem-friendly filename fragment."""
    normalized = re.sub(r"[\\/:*?\"<>|]+", "_", (value or "").strip())
    normalized = re.sub(r"\s+", "_", normalized)
    normalized = re.sub(r"_+", "_", normalized).strip("._")
    return (normalized or "report")[:max_length]


def _format_amount(value: Decimal | int | float | str | None, symbol: str) -> str:
    return f"{symbol} {Decimal(str(value or 0)):.2f}"


def group_orders_by_day(orders: Iterable[dict[str, Any]]) -> dict[str, list[dict[str, Any]]]:
    """Group order rows by the ``YYYY-MM-DD`` prefix of ``created_at``."""
    grouped: dict[str, list[dict[str, Any]]] = defaultdict(list)
    for order in orders:
        grouped[str(order.get("created_at") or "")[:10] or "unknown"].append(order)
    return dict(sorted(grouped.items()))


def _build_styles() -> dict[str, Any]:
    font_name = register_pdf_font()
    rl = _reportlab()
    styles = rl["getSampleStyleSheet"]()
    return {
        "font_name": font_name,
        "symbol": currency_symbol(font_name),
        "title": rl["ParagraphStyle"]("PdfTitle", parent=styles["Title"], fontName=font_name),
        "heading": rl["ParagraphStyle"]("PdfHeading2", parent=styles["Heading2"], fontName=font_name),
        "normal": rl["ParagraphStyle"]("PdfNormal", parent=styles["Normal"], fontName=font_name),
    }


def _table(rows: list[list[str]], widths: list[int], styles: dict[str, Any]) -> Any:
    rl = _reportlab()
    table = rl["Table"](rows, colWidths=widths, repeatRows=1)
    table.setStyle(
        rl["TableStyle"](
            [
                ("BACKGROUND", (0, 0), (-1, 0), rl["colors"].lightgrey),
                ("GRID", (0, 0), (-1, -1), 0.5, rl["colors"].black),
                ("FONTNAME", (0, 0), (-1, -1), styles["font_name"]),
                ("FONTSIZE", (0, 0), (-1, -1), 8),
            ]
        )
    )
    return table


def render_orders_report(orders: Iterable[dict[str, Any]], meta: dict[str, Any]) -> bytes:
    """Render an orders report: status summary, then one table per day.

    ``orders`` are rows as produced by the orders export (order_number,
    created_at, customer_name, status, payment_method, total_price, items).
    """
    rows = list(orders)
    styles = _build_styles()
    symbol = styles["symbol"]
    rl = _reportlab()

    delivered_revenue = sum(
        (Decimal(str(order.get("total_price") or 0)) for order in rows if order.get("status") == "delivered"),
        Decimal("0"),
    )
    story: list[Any] = [
        rl["Paragraph"](f"EatFreshly orders report - {meta.get('today', date.today().isoformat())}", styles["title"]),
        rl["Paragraph"](f"Period: {meta.get('period', 'all time')}", styles["normal"]),
        rl["Paragraph"](f"Generated: {meta.get('generated_at', '-')}", styles["normal"]),
        rl["Paragraph"](
            f"Orders: {len(rows)} | Delivered revenue: {_format_amount(delivered_revenue, symbol)}",
            styles["normal"],
        ),
        rl["Spacer"](1, 10),
    ]

    if not rows:
        story.append(rl["Paragraph"]("No orders in this period.", styles["normal"]))
    else:
        status_counts = Counter(str(order.get("status") or "-") for order in rows)
        story.append(rl["Paragraph"]("Status summary", styles["heading"]))
        story.append(
            _table(
                [["Status", "Orders"], *[[status, str(count)] for status, count in sorted(status_counts.items())]],
                [300, 100],
                styles,
            )
        )
        story.append(rl["Spacer"](1, 10))

        for day, day_orders in group_orders_by_day(rows).items():
            story.append(rl["Paragraph"](day, styles["heading"]))
            table_rows = [["Order", "Customer", "Status", "Payment", "Items", "Total"]]
            for order in day_orders:
                items = order.get("items") or []
                item_count = sum(int(item.get("quantity") or 0) for item in items)
                table_rows.append(
                    [
                        str(order.get("order_number") or "-"),
                        str(order.get("customer_name") or order.get("customer_email") or "-"),
                        str(order.get("status") or "-"),
                        str(order.get("payment_method") or "-"),
                        str(item_count),
                        _format_amount(order.get("total_price"), symbol),
                    ]
                )
            story.append(_table(table_rows, [95, 110, 75, 90, 40, 80], styles))
            story.append(rl["Spacer"](1, 8))

    buffer = BytesIO()
    rl["SimpleDocTemplate"](buffer, pagesize=rl["A4"]).build(story)
    return buffer.getvalue()
