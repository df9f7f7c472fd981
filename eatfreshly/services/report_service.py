"""Back-office reports and data exports."""

from __future__ import annotations

import csv
from collections import Counter, defaultdict
from datetime import date, datetime, timedelta
from io import StringIO
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from eatfreshly.core.errors import ValidationFailed
from eatfreshly.models import MenuItem, Order, User
from eatfreshly.services.pdf_exports import render_orders_report
from eatfreshly.utils.time import as_utc, date_range_window, utcnow

EXPORT_TYPES: tuple[str, ...] = ("orders", "users", "menu")
GROUP_FORMATS: dict[str, str] = {"day": "%Y-%m-%d", "week": "%Y-W%U", "month": "%Y-%m"}

EXPORT_COLUMNS: dict[str, list[str]] = {
    "orders": [
        "order_number", "created_at", "customer_name", "customer_email", "status", "payment_method",
        "payment_status", "items", "subtotal", "discount_amount", "promo_code", "total_price",
    ],
    "users": ["id", "name", "email", "phone", "role", "is_active", "created_at", "last_login_at"],
    "menu": [
        "id", "name", "category", "price", "discounted_price", "is_available", "is_signature",
        "is_vegetarian", "is_vegan", "is_gluten_free", "preparation_time",
    ],
}


def _orders_in_range(db: Session, start_date: date | None, end_date: date | None) -> list[Order]:
    start, end = date_range_window(start_date, end_date)
    stmt = select(Order)
    if start is not None:
        stmt = stmt.where(Order.created_at >= start)
    if end is not None:
        stmt = stmt.where(Order.created_at < end)
    return list(db.scalars(stmt.order_by(Order.created_at.asc(), Order.id.asc())).all())


def _item_totals(orders: list[Order]) -> list[dict[str, Any]]:
    totals: dict[Any, dict[str, Any]] = {}
    for order in orders:
        for item in order.items:
            key = item.menu_item_id if item.menu_item_id is not None else item.name
            row = totals.setdefault(
                key,
                {"menu_item_id": item.menu_item_id, "name": item.name, "category": item.category, "quantity": 0, "revenue": 0.0},
            )
            row["quantity"] += item.quantity
            row["revenue"] += float(item.unit_price) * item.quantity
    return sorted(totals.values(), key=lambda row: row["quantity"], reverse=True)


def sales_report(
    db: Session,
    *,
    start_date: date | None = None,
    end_date: date | None = None,
    group_by: str = "day",
) -> dict[str, Any]:
    """Delivered orders grouped by day, week or month, plus top items."""
    if group_by not in GROUP_FORMATS:
        raise ValidationFailed("group_by must be one of: day, week, month")
    delivered = [o for o in _orders_in_range(db, start_date, end_date) if o.status == "delivered"]

    buckets: dict[str, list[float]] = defaultdict(list)
    for order in delivered:
        buckets[as_utc(order.created_at).strftime(GROUP_FORMATS[group_by])].append(float(order.total_price))
    sales_data = [
        {
            "period": period,
            "total_orders": len(values),
            "total_revenue": round(sum(values), 2),
            "average_order_value": round(sum(values) / len(values), 2),
        }
        for period, values in sorted(buckets.items())
    ]
    total_revenue = sum(float(order.total_price) for order in delivered)
    return {
        "summary": {
            "total_orders": len(delivered),
            "total_revenue": round(total_revenue, 2),
            "average_order_value": round(total_revenue / len(delivered), 2) if delivered else 0.0,
            "start_date": start_date.isoformat() if start_date else None,
            "end_date": end_date.isoformat() if end_date else None,
            "group_by": group_by,
        },
        "sales_data": sales_data,
        "top_items": [_rounded(row) for row in _item_totals(delivered)[:10]],
    }


def _rounded(row: dict[str, Any]) -> dict[str, Any]:
    return {**row, "revenue": round(row["revenue"], 2)}


def _recent_delivered(db: Session, days: int) -> list[Order]:
    start = (utcnow() - timedelta(days=days)).date()
    return [o for o in _orders_in_range(db, start, None) if o.status == "delivered"]


def top_items_report(db: Session, *, days: int = 30, limit: int = 10) -> list[dict[str, Any]]:
    return [_rounded(row) for row in _item_totals(_recent_delivered(db, days))[:limit]]


def category_performance(db: Session, *, days: int = 30) -> list[dict[str, Any]]:
    categories: dict[str, dict[str, Any]] = {}
    for order in _recent_delivered(db, days):
        seen: set[str] = set()
        for item in order.items:
            name = item.category or "Uncategorized"
            row = categories.setdefault(name, {"category": name, "revenue": 0.0, "quantity": 0, "orders": 0})
            row["revenue"] += float(item.unit_price) * item.quantity
            row["quantity"] += item.quantity
            if name not in seen:
                row["orders"] += 1
                seen.add(name)
    return sorted(
        ({**row, "revenue": round(row["revenue"], 2)} for row in categories.values()),
        key=lambda row: row["revenue"],
        reverse=True,
    )


def user_growth(db: Session, *, days: int = 30) -> list[dict[str, Any]]:
    since = utcnow() - timedelta(days=days)
    counts: Counter[str] = Counter()
    for user in db.scalars(select(User).where(User.role == "customer", User.created_at >= since)).all():
        counts[as_utc(user.created_at).date().isoformat()] += 1
    return [{"date": day, "new_customers": count} for day, count in sorted(counts.items())]


def order_stats(db: Session, *, start_date: date | None = None, end_date: date | None = None) -> dict[str, Any]:
    orders = _orders_in_range(db, start_date, end_date)
    delivered = [o for o in orders if o.status == "delivered"]
    revenue = sum(float(o.total_price) for o in delivered)
    return {
        "total_orders": len(orders),
        "delivered_orders": len(delivered),
        "cancelled_orders": sum(1 for o in orders if o.status == "cancelled"),
        "total_revenue": round(revenue, 2),
        "average_order_value": round(revenue / len(delivered), 2) if delivered else 0.0,
        "by_status": dict(Counter(o.status for o in orders)),
        "by_payment_method": dict(Counter(o.payment_method for o in orders)),
    }


def _iso(value: datetime | None) -> str | None:
    return as_utc(value).isoformat() if value is not None else None


def order_row(order: Order) -> dict[str, Any]:
    return {
        "order_number": order.order_number,
        "created_at": _iso(order.created_at),
        "customer_name": order.user.name if order.user else None,
        "customer_email": order.user.email if order.user else None,
        "status": order.status,
        "payment_method": order.payment_method,
        "payment_status": order.payment_status,
        "items": [
            {"name": item.name, "category": item.category, "quantity": item.quantity, "unit_price": float(item.unit_price)}
            for item in order.items
        ],
        "subtotal": float(order.subtotal),
        "discount_amount": float(order.discount_amount),
        "promo_code": order.promo_code,
        "total_price": float(order.total_price),
        "delivery_address": order.delivery_address,
    }


def export_rows(
    db: Session,
    export_type: str,
    *,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[dict[str, Any]]:
    if export_type == "orders":
        return [order_row(order) for order in reversed(_orders_in_range(db, start_date, end_date))]
    if export_type == "users":
        return [
            {
                "id": user.id,
                "name": user.name,
                "email": user.email,
                "phone": user.phone,
                "role": user.role,
                "is_active": user.is_active,
                "created_at": _iso(user.created_at),
                "last_login_at": _iso(user.last_login_at),
            }
            for user in db.scalars(select(User).order_by(User.id)).all()
        ]
    if export_type == "menu":
        return [
            {
                "id": item.id,
                "name": item.name,
                "category": item.category,
                "price": float(item.price),
                "discounted_price": float(item.discounted_price) if item.discounted_price is not None else None,
                "is_available": item.is_available,
                "is_signature": item.is_signature,
                "is_vegetarian": item.is_vegetarian,
                "is_vegan": item.is_vegan,
                "is_gluten_free": item.is_gluten_free,
                "preparation_time": item.preparation_time,
            }
            for item in db.scalars(select(MenuItem).order_by(MenuItem.id)).all()
        ]
    raise ValidationFailed("Invalid export type")


def rows_to_csv(export_type: str, rows: list[dict[str, Any]]) -> str:
    output = StringIO()
    writer = csv.writer(output)
    columns = EXPORT_COLUMNS[export_type]
    writer.writerow(columns)
    for row in rows:
        values = []
        for column in columns:
            value = row.get(column)
            if column == "items":
                value = "; ".join(f"{item['name']} x{item['quantity']}" for item in value or [])
            values.append("" if value is None else value)
        writer.writerow(values)
    return output.getvalue()


def orders_pdf(db: Session, *, start_date: date | None = None, end_date: date | None = None) -> bytes:
    rows = [order_row(order) for order in _orders_in_range(db, start_date, end_date)]
    now = utcnow()
    period = f"{start_date or '...'} to {end_date or '...'}" if start_date or end_date else "all time"
    return render_orders_report(
        rows,
        {"today": now.date().isoformat(), "generated_at": now.strftime("%Y-%m-%d %H:%M UTC"), "period": period},
    )
