"""
Payment provider selection.

``PAYMENT_PROVIDER=mock`` (default) keeps intents in memory;
``PAYMENT_PROVIDER=stripe`` talks to Stripe and needs STRIPE_SECRET_KEY.
"""

import logging
from functools import lru_cache

from eatfreshly.core.config import settings
from eatfreshly.core.errors import ServiceUnavailable
from eatfreshly.services.payment.base import (
    BasePaymentService,
    PaymentIntent,
    PaymentProviderError,
    RefundResult,
)
from eatfreshly.services.payment.mock import MockPaymentService

logger = logging.getLogger(__name__)


@lru_cache()
def get_payment_service() -> BasePaymentService:
    """Return the configured provider, shared for the process lifetime."""
    provider = settings.payment_provider.strip().lower()
    if provider == "stripe":
        if not settings.stripe_secret_key:
            logger.error("[PAYMENTS] Stripe selected but STRIPE_SECRET_KEY is empty")
            raise ServiceUnavailable("Payment service is not available")
        from eatfreshly.services.payment.stripe_provider import StripePaymentService

        return StripePaymentService()
    logger.info("[PAYMENTS] Using mock payment provider")
    return MockPaymentService(auto_confirm=settings.mock_payments_auto_confirm)


def reset_payment_service() -> None:
    get_payment_service.cache_clear()


__all__ = [
    "BasePaymentService",
    "MockPaymentService",
    "PaymentIntent",
    "PaymentProviderError",
    "RefundResult",
    "get_payment_service",
    "reset_payment_service",
]
