"""Sender that only logs messages and keeps them in an outbox."""

import logging
import uuid

from eatfreshly.services.email.base import BaseEmailSender, DeliveryResult, EmailMessage

logger = logging.getLogger(__name__)


class LogEmailSender(BaseEmailSender):
    def __init__(self) -> None:
        self.outbox: list[EmailMessage] = []

    @property
    def provider_name(self) -> str:
        return "log"

    def send(self, message: EmailMessage) -> DeliveryResult:
        self.outbox.append(message)
        logger.info("[EMAIL] (log) to=%s subject=%r", message.to_email, message.subject)
        return DeliveryResult(success=True, message_id=f"log-{uuid.uuid4().hex[:16]}")
