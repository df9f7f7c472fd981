"""Order placement, lookup, cancellation and back-office status changes."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from eatfreshly.core.errors import NotFoundError, ValidationFailed
from eatfreshly.models import Order, OrderItem, Promotion, User
from eatfreshly.models.order import PAYMENT_METHODS
from eatfreshly.schemas.order import OrderRead
from eatfreshly.services import cart_service, email_service, promotion_service
from eatfreshly.services.audit_service import order_snapshot, record_admin_action
from eatfreshly.services.order_status import (
    CUSTOMER_CANCELLABLE,
    can_transition,
    normalize_status,
    set_status,
)
from eatfreshly.services.payment import PaymentProviderError, get_payment_service
from eatfreshly.utils.time import date_range_window, utcnow

logger = logging.getLogger(__name__)

HOSTED_PAYMENT_METHOD: str = "Stripe"


@dataclass
class CartQuote:
    """Server-side price of the current cart."""

    subtotal: Decimal
    discount: Decimal
    total: Decimal
    promotion: Promotion | None


def generate_order_number(now: datetime | None = None) -> str:
    now = now or utcnow()
    return f"EF{int(now.timestamp() * 1000)}{random.randint(0, 999)}"


def estimate_delivery_time(now: datetime) -> datetime:
    return now + timedelta(minutes=random.randint(30, 59))


def _unique_order_number(db: Session, now: datetime) -> str:
    while True:
        candidate = generate_order_number(now)
        if db.scalar(select(Order.id).where(Order.order_number == candidate).limit(1)) is None:
            return candidate


def quote_cart(db: Session, user: User, promo_code: str | None = None) -> CartQuote:
    """Price the cart; rejects an empty cart or any unavailable dish."""
    cart = cart_service.get_or_create_cart(db, user)
    if not cart.items:
        raise ValidationFailed("Cart is empty")
    subtotal = Decimal("0.00")
    for line in cart.items:
        if line.menu_item is None or not line.menu_item.is_available:
            name = line.menu_item.name if line.menu_item is not None else "An item"
            raise ValidationFailed(f"{name} is no longer available")
        subtotal += Decimal(line.menu_item.price) * line.quantity
    subtotal = promotion_service.money(subtotal)

    promotion = None
    discount = Decimal("0.00")
    if promo_code and promo_code.strip():
        promotion, discount, _ = promotion_service.validate_code(db, promo_code, subtotal)
    return CartQuote(subtotal=subtotal, discount=discount, total=subtotal - discount, promotion=promotion)


def place_order(
    db: Session,
    user: User,
    *,
    delivery_address: dict[str, Any],
    payment_method: str,
    special_instructions: str | None = None,
    promo_code: str | None = None,
    payment_status: str = "pending",
    payment_intent_id: str | None = None,
) -> Order:
    """Turn the user's cart into an order, clear the cart and send the confirmation email."""
    if payment_method not in PAYMENT_METHODS:
        raise ValidationFailed(f"Payment method must be one of: {', '.join(PAYMENT_METHODS)}")

    quote = quote_cart(db, user, promo_code)
    now = utcnow()
    cart = cart_service.get_or_create_cart(db, user)
    order = Order(
        order_number=_unique_order_number(db, now),
        user_id=user.id,
        status="pending",
        subtotal=quote.subtotal,
        discount_amount=quote.discount,
        promo_code=quote.promotion.promo_code if quote.promotion is not None else None,
        total_price=quote.total,
        delivery_address=delivery_address,
        payment_method=payment_method,
        payment_status=payment_status,
        payment_intent_id=payment_intent_id,
        special_instructions=special_instructions,
        estimated_delivery_time=estimate_delivery_time(now),
        created_at=now,
        status_updated_at=now,
        items=[
            OrderItem(
                menu_item_id=line.menu_item.id,
                name=line.menu_item.name,
                category=line.menu_item.category,
                unit_price=line.menu_item.price,
                quantity=line.quantity,
            )
            for line in cart.items
        ],
    )
    db.add(order)
    if quote.promotion is not None:
        promotion_service.redeem(quote.promotion)
    cart_service.clear_cart(db, user, commit=False)
    db.commit()
    db.refresh(order)
    logger.info(
        "[ORDERS] Placed %s user=%s total=%s method=%s",
        order.order_number,
        user.id,
        order.total_price,
        payment_method,
    )

    email_service.send_order_confirmation(db, order)
    return order


def list_user_orders(
    db: Session,
    user: User,
    *,
    offset: int,
    limit: int,
    status: str | None = None,
) -> tuple[list[Order], int]:
    stmt = select(Order).where(Order.user_id == user.id)
    if status:
        stmt = stmt.where(Order.status == normalize_status(status))
    total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
    orders = db.scalars(stmt.order_by(Order.created_at.desc(), Order.id.desc()).offset(offset).limit(limit)).all()
    return list(orders), total


def find_order(db: Session, reference: str | int) -> Order | None:
    """Look an order up by numeric id or by order number."""
    text = str(reference).strip()
    if text.upper().startswith("EF"):
        return db.scalar(select(Order).where(Order.order_number == text.upper()).limit(1))
    if text.isdigit():
        return db.get(Order, int(text))
    return None


def get_order_for_user(db: Session, user: User, reference: str | int) -> Order:
    """Return the order if the user may see it; 404 otherwise to avoid leaking ids."""
    order = find_order(db, reference)
    if order is None or (user.role != "admin" and order.user_id != user.id):
        raise NotFoundError("Order not found")
    return order


def _refund_if_paid(order: Order) -> None:
    if order.payment_status != "paid" or not order.payment_intent_id:
        return
    try:
        result = get_payment_service().refund_payment(order.payment_intent_id)
    except PaymentProviderError as exc:
        logger.error("[PAYMENTS] Refund for %s failed: %s", order.order_number, exc)
        return
    if result.success:
        order.payment_status = "refunded"
        logger.info("[PAYMENTS] Refunded %s (%s)", order.order_number, result.refund_id)
    else:
        logger.error("[PAYMENTS] Refund for %s rejected: %s", order.order_number, result.error_message)


def cancel_order(db: Session, user: User, reference: str | int) -> Order:
    order = get_order_for_user(db, user, reference)
    if order.status not in CUSTOMER_CANCELLABLE:
        raise ValidationFailed("Order cannot be cancelled at this stage")
    set_status(order, "cancelled", utcnow())
    _refund_if_paid(order)
    db.commit()
    db.refresh(order)
    logger.info("[ORDERS] %s cancelled by customer %s", order.order_number, user.id)
    return order


def admin_list_orders(
    db: Session,
    *,
    offset: int,
    limit: int,
    status: str | None = None,
    payment_status: str | None = None,
    search: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> tuple[list[Order], int]:
    stmt = select(Order).join(User, Order.user_id == User.id)
    if status:
        stmt = stmt.where(Order.status == normalize_status(status))
    if payment_status:
        stmt = stmt.where(Order.payment_status == payment_status)
    if search:
        pattern = f"%{search.strip().lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(Order.order_number).like(pattern),
                func.lower(User.name).like(pattern),
                func.lower(User.email).like(pattern),
            )
        )
    window_start, window_end = date_range_window(start_date, end_date)
    if window_start is not None:
        stmt = stmt.where(Order.created_at >= window_start)
    if window_end is not None:
        stmt = stmt.where(Order.created_at < window_end)
    total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
    orders = db.scalars(stmt.order_by(Order.created_at.desc(), Order.id.desc()).offset(offset).limit(limit)).all()
    return list(orders), total


def admin_update_status(db: Session, actor: User, order_id: int, status_value: str) -> Order:
    """Move an order along the lifecycle; illegal moves are a 400."""
    order = db.get(Order, order_id)
    if order is None:
        raise NotFoundError("Order not found")
    new_status = normalize_status(status_value)
    if not can_transition(order.status, new_status):
        raise ValidationFailed(f"Cannot change order status from {order.status} to {new_status}")

    before = order_snapshot(order)
    set_status(order, new_status, utcnow())
    if new_status == "cancelled":
        _refund_if_paid(order)
    record_admin_action(db, actor, "order_status_changed", order, before=before, after=order_snapshot(order))
    db.commit()
    db.refresh(order)
    logger.info("[ORDERS] %s moved %s -> %s by %s", order.order_number, before["status"], new_status, actor.email)

    if new_status == "delivered":
        email_service.send_order_completion(db, order)
    return order


def mark_payment_status(db: Session, payment_intent_id: str, payment_status: str) -> Order | None:
    """Webhook hook: update the order paid through ``payment_intent_id`` if one exists."""
    order = db.scalar(select(Order).where(Order.payment_intent_id == payment_intent_id).limit(1))
    if order is None:
        return None
    if order.payment_status != "refunded":
        order.payment_status = payment_status
        db.commit()
    return order


def order_to_admin_dict(order: Order) -> dict[str, Any]:
    data = OrderRead.model_validate(order).model_dump()
    data["customer_name"] = order.user.name if order.user else None
    data["customer_email"] = order.user.email if order.user else None
    return data
