"""SendGrid email delivery."""

import logging

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from eatfreshly.core.config import settings
from eatfreshly.services.email.base import BaseEmailSender, DeliveryResult, EmailDeliveryError, EmailMessage

logger = logging.getLogger(__name__)


class SendGridEmailSender(BaseEmailSender):
    def __init__(self, api_key: str | None = None) -> None:
        key = api_key or settings.sendgrid_api_key
        if not key:
            raise EmailDeliveryError("SENDGRID_API_KEY is required for the SendGrid email provider")
        self.client = SendGridAPIClient(key)
        self.from_email = (settings.email_sender_email, settings.email_sender_name)

    @property
    def provider_name(self) -> str:
        return "sendgrid"

    def send(self, message: EmailMessage) -> DeliveryResult:
        mail = Mail(
            from_email=self.from_email,
            to_emails=message.to_email,
            subject=message.subject,
            html_content=message.html,
            plain_text_content=message.text,
        )
        try:
            response = self.client.send(mail)
        except Exception as exc:
            logger.error("[EMAIL] SendGrid delivery to %s failed: %s", message.to_email, exc)
            raise EmailDeliveryError(str(exc)) from exc

        logger.info("[EMAIL] SendGrid accepted message to %s: %s", message.to_email, response.status_code)
        if response.status_code not in (200, 201, 202):
            raise EmailDeliveryError(f"SendGrid responded with {response.status_code}")
        return DeliveryResult(success=True, message_id=response.headers.get("X-Message-Id"))
