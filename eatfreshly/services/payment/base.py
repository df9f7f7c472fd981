"""
Payment provider interface.

Every provider exposes the same synchronous operations so order placement
and the payment endpoints never branch on which provider is active.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


class PaymentProviderError(Exception):
    """Raised when the provider rejects a call or cannot be reached."""


@dataclass
class PaymentIntent:
    """Provider-neutral view of a payment intent.

    Attributes:
        id: Provider identifier (``pi_...``).
        client_secret: Secret handed to the hosted confirmation widget.
        amount: Amount in major currency units.
        currency: Lower-case ISO currency code.
        status: Provider status, ``succeeded`` once the customer has paid.
    """

    id: str
    client_secret: str
    amount: Decimal
    currency: str
    status: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class RefundResult:
    success: bool
    refund_id: str | None = None
    amount: Decimal | None = None
    status: str = "pending"
    error_message: str | None = None


class BasePaymentService(ABC):
    """Strategy interface implemented by the mock and Stripe providers."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Short provider name used in logs."""

    @abstractmethod
    def create_payment_intent(
        self,
        amount: Decimal,
        currency: str,
        metadata: dict[str, Any] | None = None,
    ) -> PaymentIntent:
        """Create an intent the client confirms through the hosted widget."""

    @abstractmethod
    def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntent:
        """Fetch the current state of an intent."""

    @abstractmethod
    def refund_payment(self, payment_intent_id: str, amount: Decimal | None = None) -> RefundResult:
        """Refund an intent fully, or partially when ``amount`` is given."""

    @abstractmethod
    def construct_webhook_event(self, payload: bytes, signature: str | None) -> dict[str, Any]:
        """Verify a webhook payload and return the decoded event."""

    @staticmethod
    def to_minor_units(amount: Decimal) -> int:
        return int((Decimal(amount) * 100).quantize(Decimal("1")))

    @staticmethod
    def from_minor_units(amount: int) -> Decimal:
        return (Decimal(amount) / 100).quantize(Decimal("0.01"))
