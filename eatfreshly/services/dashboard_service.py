"""Back-office dashboard metrics, charts, predictions and activity feed.

Aggregations run in Python over the rows of the requested window so they
behave the same on SQLite and PostgreSQL.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from eatfreshly.models import MenuItem, Order, Review, User
from eatfreshly.services.order_status import ACTIVE_STATUSES
from eatfreshly.utils.time import as_utc, month_window, today_window, utcnow

REVENUE_STATUSES: frozenset[str] = frozenset({"delivered"})
FORECAST_GROWTH_RATE: float = 0.05
FORECAST_CONFIDENCE: int = 75


def _orders_since(db: Session, start: datetime, end: datetime | None = None) -> list[Order]:
    stmt = select(Order).where(Order.created_at >= start)
    if end is not None:
        stmt = stmt.where(Order.created_at < end)
    return list(db.scalars(stmt.order_by(Order.created_at.asc(), Order.id.asc())).all())


def _revenue(orders: list[Order]) -> float:
    return float(sum((Decimal(o.total_price) for o in orders if o.status in REVENUE_STATUSES), Decimal("0")))


def dashboard_metrics(db: Session, now: datetime | None = None) -> dict[str, Any]:
    now = now or utcnow()
    today_start, today_end = today_window(now)
    month_start, month_end = month_window(now)
    today_orders = _orders_since(db, today_start, today_end)
    month_orders = _orders_since(db, month_start, month_end)

    return {
        "today_orders": len(today_orders),
        "today_revenue": _revenue(today_orders),
        "month_orders": len(month_orders),
        "month_revenue": _revenue(month_orders),
        "month_new_customers": db.scalar(
            select(func.count(User.id)).where(User.role == "customer", User.created_at >= month_start)
        )
        or 0,
        "total_customers": db.scalar(select(func.count(User.id)).where(User.role == "customer")) or 0,
        "total_menu_items": db.scalar(select(func.count(MenuItem.id))) or 0,
        "active_menu_items": db.scalar(select(func.count(MenuItem.id)).where(MenuItem.is_available.is_(True))) or 0,
        "pending_orders": db.scalar(select(func.count(Order.id)).where(Order.status.in_(ACTIVE_STATUSES))) or 0,
    }


def chart_data(db: Session, days: int = 7, now: datetime | None = None) -> dict[str, Any]:
    """Daily delivered revenue, status distribution and top categories over ``days``."""
    now = now or utcnow()
    start = (now - timedelta(days=days - 1)).replace(hour=0, minute=0, second=0, microsecond=0)
    orders = _orders_since(db, start)

    revenue_by_day: dict[str, dict[str, float]] = {}
    for offset in range(days):
        key = (start + timedelta(days=offset)).date().isoformat()
        revenue_by_day[key] = {"revenue": 0.0, "orders": 0}
    status_counts: dict[str, int] = defaultdict(int)
    categories: dict[str, dict[str, Any]] = {}

    for order in orders:
        status_counts[order.status] += 1
        if order.status in REVENUE_STATUSES:
            bucket = revenue_by_day.setdefault(as_utc(order.created_at).date().isoformat(), {"revenue": 0.0, "orders": 0})
            bucket["revenue"] += float(order.total_price)
            bucket["orders"] += 1
        for item in order.items:
            name = item.category or "Uncategorized"
            stat = categories.setdefault(name, {"category": name, "revenue": 0.0, "quantity": 0, "orders": 0})
            stat["revenue"] += float(item.unit_price) * item.quantity
            stat["quantity"] += item.quantity
            stat["orders"] += 1

    return {
        "period": f"{days} days",
        "revenue_trend": [
            {"date": day, "revenue": round(values["revenue"], 2), "orders": int(values["orders"])}
            for day, values in sorted(revenue_by_day.items())
        ],
        "status_distribution": [
            {"status": status, "count": count} for status, count in sorted(status_counts.items())
        ],
        "category_data": sorted(categories.values(), key=lambda stat: stat["revenue"], reverse=True)[:5],
    }


def calculate_sales_trend(quantities: list[int]) -> float:
    """Least-squares slope over sale index, squashed to a multiplier >= 0.1."""
    n = len(quantities)
    if n < 2:
        return 1.0
    sum_x = sum(range(n))
    sum_y = sum(quantities)
    sum_xy = sum(index * quantity for index, quantity in enumerate(quantities))
    sum_xx = sum(index * index for index in range(n))
    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_xx - sum_x * sum_x)
    return max(0.1, 1 + slope * 0.1)


def calculate_confidence(quantities: list[int]) -> float:
    """Lower variance relative to the mean gives higher confidence, within 0.3..0.95."""
    if len(quantities) < 3:
        return 0.5
    mean = sum(quantities) / len(quantities)
    variance = sum((quantity - mean) ** 2 for quantity in quantities) / len(quantities)
    return max(0.3, min(0.95, 1 - variance / (mean + 1)))


def _round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def predict_top_items(db: Session, now: datetime | None = None, limit: int = 10) -> list[dict[str, Any]]:
    now = now or utcnow()
    orders = [o for o in _orders_since(db, now - timedelta(days=30)) if o.status in REVENUE_STATUSES]
    sales: dict[Any, dict[str, Any]] = {}
    for order in orders:
        for item in order.items:
            key = item.menu_item_id if item.menu_item_id is not None else item.name
            entry = sales.setdefault(
                key,
                {
                    "menu_item_id": item.menu_item_id,
                    "name": item.name,
                    "category": item.category,
                    "quantities": [],
                    "revenue": 0.0,
                },
            )
            entry["quantities"].append(item.quantity)
            entry["revenue"] += float(item.unit_price) * item.quantity

    predictions = []
    for entry in sales.values():
        trend = calculate_sales_trend(entry["quantities"])
        current = sum(entry["quantities"])
        predictions.append(
            {
                "menu_item_id": entry["menu_item_id"],
                "name": entry["name"],
                "category": entry["category"],
                "current_sales": current,
                "predicted_sales": max(0, _round_half_up(current * trend)),
                "revenue": round(entry["revenue"], 2),
                "trend_factor": round(trend, 4),
                "trend": "increasing" if trend > 1 else "decreasing" if trend < 1 else "stable",
                "confidence": _round_half_up(calculate_confidence(entry["quantities"]) * 100),
            }
        )
    predictions.sort(key=lambda row: row["predicted_sales"], reverse=True)
    return predictions[:limit]


def predict_popular_categories(db: Session, now: datetime | None = None) -> list[dict[str, Any]]:
    now = now or utcnow()
    orders = [o for o in _orders_since(db, now - timedelta(days=7)) if o.status in REVENUE_STATUSES]
    categories: dict[str, dict[str, Any]] = {}
    for order in orders:
        for item in order.items:
            name = item.category or "Uncategorized"
            stat = categories.setdefault(name, {"category": name, "revenue": 0.0, "quantity": 0, "orders": 0})
            stat["quantity"] += item.quantity
            stat["revenue"] += float(item.unit_price) * item.quantity
            stat["orders"] += 1
    return sorted(categories.values(), key=lambda stat: stat["quantity"], reverse=True)


def sales_forecast(db: Session, now: datetime | None = None) -> dict[str, Any]:
    """Average delivered revenue per active day over 30 days, grown by 5%."""
    now = now or utcnow()
    orders = [o for o in _orders_since(db, now - timedelta(days=30)) if o.status in REVENUE_STATUSES]
    daily: dict[str, float] = defaultdict(float)
    for order in orders:
        daily[as_utc(order.created_at).date().isoformat()] += float(order.total_price)
    average = sum(daily.values()) / len(daily) if daily else 0.0
    growth = 1 + FORECAST_GROWTH_RATE
    return {
        "average_daily_sales": round(average, 2),
        "next_week": round(average * 7 * growth, 2),
        "next_month": round(average * 30 * growth, 2),
        "growth_rate": FORECAST_GROWTH_RATE,
        "confidence": FORECAST_CONFIDENCE,
    }


def predictions(db: Session, now: datetime | None = None) -> dict[str, Any]:
    return {
        "top_items": predict_top_items(db, now),
        "popular_categories": predict_popular_categories(db, now),
        "sales_forecast": sales_forecast(db, now),
    }


def recent_activities(db: Session, limit: int = 10) -> list[dict[str, Any]]:
    """Latest orders, registrations and reviews merged newest first."""
    activities: list[tuple[datetime, dict[str, Any]]] = []
    for order in db.scalars(select(Order).order_by(Order.created_at.desc(), Order.id.desc()).limit(limit)).all():
        stamp = as_utc(order.created_at)
        activities.append(
            (
                stamp,
                {
                    "type": "order",
                    "message": f"Order {order.order_number} is {order.status} ({float(order.total_price):.2f})",
                    "timestamp": stamp.isoformat(),
                    "reference_id": order.id,
                },
            )
        )
    users = db.scalars(
        select(User).where(User.role == "customer").order_by(User.created_at.desc(), User.id.desc()).limit(5)
    ).all()
    for user in users:
        stamp = as_utc(user.created_at)
        activities.append(
            (
                stamp,
                {
                    "type": "user",
                    "message": f"New customer {user.name} registered",
                    "timestamp": stamp.isoformat(),
                    "reference_id": user.id,
                },
            )
        )
    for review in db.scalars(select(Review).order_by(Review.created_at.desc(), Review.id.desc()).limit(5)).all():
        stamp = as_utc(review.created_at)
        activities.append(
            (
                stamp,
                {
                    "type": "review",
                    "message": f"New {review.rating}-star review",
                    "timestamp": stamp.isoformat(),
                    "reference_id": review.id,
                },
            )
        )
    activities.sort(key=lambda pair: pair[0], reverse=True)
    return [activity for _, activity in activities[:limit]]
