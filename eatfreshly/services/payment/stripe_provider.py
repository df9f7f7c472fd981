"""
Stripe payment provider backed by the official SDK.

Requires STRIPE_SECRET_KEY; webhook verification also needs
STRIPE_WEBHOOK_SECRET.
"""

import logging
from decimal import Decimal
from typing import Any

import stripe

from eatfreshly.core.config import settings
from eatfreshly.services.payment.base import (
    BasePaymentService,
    PaymentIntent,
    PaymentProviderError,
    RefundResult,
)

logger = logging.getLogger(__name__)


class StripePaymentService(BasePaymentService):
    def __init__(self, secret_key: str | None = None, webhook_secret: str | None = None) -> None:
        key = secret_key or settings.stripe_secret_key
        if not key:
            raise ValueError("STRIPE_SECRET_KEY is required for the Stripe payment provider")
        stripe.api_key = key
        self.webhook_secret = webhook_secret or settings.stripe_webhook_secret
        logger.info("[PAYMENTS] Stripe provider initialized")

    @property
    def provider_name(self) -> str:
        return "stripe"

    def _to_intent(self, intent: Any) -> PaymentIntent:
        return PaymentIntent(
            id=intent.id,
            client_secret=intent.client_secret or "",
            amount=self.from_minor_units(intent.amount),
            currency=intent.currency,
            status=intent.status,
            metadata=dict(intent.metadata or {}),
        )

    def create_payment_intent(
        self,
        amount: Decimal,
        currency: str,
        metadata: dict[str, Any] | None = None,
    ) -> PaymentIntent:
        try:
            intent = stripe.PaymentIntent.create(
                amount=self.to_minor_units(amount),
                currency=currency,
                metadata={key: str(value) for key, value in (metadata or {}).items()},
                automatic_payment_methods={"enabled": True},
            )
        except stripe.StripeError as exc:
            logger.error("[PAYMENTS] Stripe intent creation failed: %s", exc)
            raise PaymentProviderError(exc.user_message or "Payment provider error") from exc
        return self._to_intent(intent)

    def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntent:
        try:
            intent = stripe.PaymentIntent.retrieve(payment_intent_id)
        except stripe.StripeError as exc:
            logger.error("[PAYMENTS] Stripe intent lookup failed for %s: %s", payment_intent_id, exc)
            raise PaymentProviderError("Payment intent not found") from exc
        return self._to_intent(intent)

    def refund_payment(self, payment_intent_id: str, amount: Decimal | None = None) -> RefundResult:
        params: dict[str, Any] = {"payment_intent": payment_intent_id}
        if amount is not None:
            params["amount"] = self.to_minor_units(amount)
        try:
            refund = stripe.Refund.create(**params)
        except stripe.StripeError as exc:
            logger.error("[PAYMENTS] Stripe refund failed for %s: %s", payment_intent_id, exc)
            return RefundResult(success=False, status="failed", error_message=str(exc))
        return RefundResult(
            success=refund.status in {"succeeded", "pending"},
            refund_id=refund.id,
            amount=self.from_minor_units(refund.amount),
            status=refund.status,
        )

    def construct_webhook_event(self, payload: bytes, signature: str | None) -> dict[str, Any]:
        if not self.webhook_secret:
            raise PaymentProviderError("Webhook secret is not configured")
        try:
            event = stripe.Webhook.construct_event(payload, signature or "", self.webhook_secret)
        except (ValueError, stripe.SignatureVerificationError) as exc:
            raise PaymentProviderError("Webhook signature verification failed") from exc
        return event.to_dict()
