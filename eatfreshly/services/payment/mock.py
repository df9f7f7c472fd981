"""In-memory payment provider for development and tests."""

import json
import logging
import uuid
from decimal import Decimal
from typing import Any

from eatfreshly.services.payment.base import (
    BasePaymentService,
    PaymentIntent,
    PaymentProviderError,
    RefundResult,
)

logger = logging.getLogger(__name__)


class MockPaymentService(BasePaymentService):
    """Keeps intents in process memory.

    With ``auto_confirm`` every new intent is immediately ``succeeded``, as if
    the customer had completed the hosted widget. Otherwise intents stay in
    ``requires_payment_method`` until :meth:`confirm` is called.
    """

    def __init__(self, auto_confirm: bool = True) -> None:
        self.auto_confirm = auto_confirm
        self._intents: dict[str, PaymentIntent] = {}
        self.refunds: list[RefundResult] = []

    @property
    def provider_name(self) -> str:
        return "mock"

    def create_payment_intent(
        self,
        amount: Decimal,
        currency: str,
        metadata: dict[str, Any] | None = None,
    ) -> PaymentIntent:
        intent_id = f"pi_mock_{uuid.uuid4().hex[:24]}"
        intent = PaymentIntent(
            id=intent_id,
            client_secret=f"{intent_id}_secret_{uuid.uuid4().hex[:16]}",
            amount=Decimal(amount).quantize(Decimal("0.01")),
            currency=currency,
            status="succeeded" if self.auto_confirm else "requires_payment_method",
            metadata=dict(metadata or {}),
        )
        self._intents[intent_id] = intent
        logger.info("[PAYMENTS] Mock intent %s created for %s %s", intent_id, intent.amount, currency)
        return intent

    def confirm(self, payment_intent_id: str, status: str = "succeeded") -> PaymentIntent:
        intent = self.retrieve_payment_intent(payment_intent_id)
        intent.status = status
        return intent

    def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntent:
        intent = self._intents.get(payment_intent_id)
        if intent is None:
            raise PaymentProviderError("Payment intent not found")
        return intent

    def refund_payment(self, payment_intent_id: str, amount: Decimal | None = None) -> RefundResult:
        intent = self.retrieve_payment_intent(payment_intent_id)
        result = RefundResult(
            success=True,
            refund_id=f"re_mock_{uuid.uuid4().hex[:24]}",
            amount=amount if amount is not None else intent.amount,
            status="succeeded",
        )
        intent.status = "refunded"
        self.refunds.append(result)
        return result

    def construct_webhook_event(self, payload: bytes, signature: str | None) -> dict[str, Any]:
        try:
            return json.loads(payload)
        except ValueError as exc:
            raise PaymentProviderError("Invalid webhook payload") from exc
