"""Hosted-payment checkout: intents, confirmation and provider webhooks."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from eatfreshly.core.config import settings
from eatfreshly.core.errors import Conflict, ServiceUnavailable, ValidationFailed
from eatfreshly.models import Order, User
from eatfreshly.schemas.payment import PaymentConfirm
from eatfreshly.services import order_service
from eatfreshly.services.payment import PaymentProviderError, get_payment_service

logger = logging.getLogger(__name__)


def create_intent_for_cart(db: Session, user: User, promo_code: str | None = None) -> dict[str, Any]:
    """Create a provider intent for the server-side cart total."""
    quote = order_service.quote_cart(db, user, promo_code)
    if quote.total <= 0:
        raise ValidationFailed("Order total must be greater than zero for card payment")
    provider = get_payment_service()
    try:
        intent = provider.create_payment_intent(
            quote.total,
            settings.payment_currency,
            metadata={"user_id": user.id, "promo_code": promo_code or ""},
        )
    except PaymentProviderError as exc:
        logger.error("[PAYMENTS] Could not create intent for user %s: %s", user.id, exc)
        raise ServiceUnavailable("Payment service is not available") from exc
    logger.info("[PAYMENTS] Intent %s for user %s amount=%s", intent.id, user.id, intent.amount)
    return {
        "client_secret": intent.client_secret,
        "payment_intent_id": intent.id,
        "amount": float(intent.amount),
        "currency": intent.currency,
        "discount_amount": float(quote.discount),
    }


def confirm_payment(db: Session, user: User, payload: PaymentConfirm) -> Order:
    """Place the order for a succeeded intent; each intent yields at most one order."""
    existing = db.scalar(select(Order).where(Order.payment_intent_id == payload.payment_intent_id).limit(1))
    if existing is not None:
        raise Conflict("An order has already been placed for this payment")

    provider = get_payment_service()
    try:
        intent = provider.retrieve_payment_intent(payload.payment_intent_id)
    except PaymentProviderError as exc:
        raise ValidationFailed("Payment could not be verified") from exc
    if intent.status != "succeeded":
        raise ValidationFailed("Payment has not been completed")
    metadata_user = str(intent.metadata.get("user_id", user.id))
    if metadata_user != str(user.id):
        raise ValidationFailed("Payment does not belong to this account")

    quote = order_service.quote_cart(db, user, payload.promo_code)
    if intent.amount != quote.total:
        logger.warning(
            "[PAYMENTS] Amount mismatch for %s: intent=%s cart=%s",
            intent.id,
            intent.amount,
            quote.total,
        )
        raise ValidationFailed("Payment amount does not match the cart total")

    return order_service.place_order(
        db,
        user,
        delivery_address=payload.delivery_address.model_dump(),
        payment_method=order_service.HOSTED_PAYMENT_METHOD,
        special_instructions=payload.special_instructions,
        promo_code=payload.promo_code,
        payment_status="paid",
        payment_intent_id=intent.id,
    )


WEBHOOK_PAYMENT_STATUS: dict[str, str] = {
    "payment_intent.succeeded": "paid",
    "payment_intent.payment_failed": "failed",
}


def handle_webhook(db: Session, payload: bytes, signature: str | None) -> dict[str, Any]:
    provider = get_payment_service()
    try:
        event = provider.construct_webhook_event(payload, signature)
    except PaymentProviderError as exc:
        logger.warning("[PAYMENTS] Rejected webhook: %s", exc)
        raise ValidationFailed(str(exc)) from exc

    event_type = event.get("type", "")
    payment_status = WEBHOOK_PAYMENT_STATUS.get(event_type)
    if payment_status is None:
        return {"received": True, "handled": False}
    intent_id = ((event.get("data") or {}).get("object") or {}).get("id")
    order = order_service.mark_payment_status(db, intent_id, payment_status) if intent_id else None
    logger.info("[PAYMENTS] Webhook %s for %s (order=%s)", event_type, intent_id, order.order_number if order else None)
    return {"received": True, "handled": order is not None}
