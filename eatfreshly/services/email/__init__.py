"""Email sender selection (``EMAIL_PROVIDER=log|sendgrid``)."""

import logging
from functools import lru_cache

from eatfreshly.core.config import settings
from eatfreshly.services.email.base import BaseEmailSender, DeliveryResult, EmailDeliveryError, EmailMessage
from eatfreshly.services.email.log_sender import LogEmailSender

logger = logging.getLogger(__name__)


@lru_cache()
def get_email_sender() -> BaseEmailSender:
    provider = settings.email_provider.strip().lower()
    if provider == "sendgrid":
        from eatfreshly.services.email.sendgrid_sender import SendGridEmailSender

        return SendGridEmailSender()
    logger.info("[EMAIL] Using log email sender")
    return LogEmailSender()


def reset_email_sender() -> None:
    get_email_sender.cache_clear()


__all__ = [
    "BaseEmailSender",
    "DeliveryResult",
    "EmailDeliveryError",
    "EmailMessage",
    "LogEmailSender",
    "get_email_sender",
    "reset_email_sender",
]
