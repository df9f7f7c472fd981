"""Email sender interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class EmailDeliveryError(Exception):
    """Raised by senders when the provider refuses a message."""


@dataclass
class EmailMessage:
    to_email: str
    subject: str
    html: str
    text: str | None = None
    to_name: str | None = None


@dataclass
class DeliveryResult:
    success: bool
    message_id: str | None = None
    error: str | None = None


class BaseEmailSender(ABC):
    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Short provider name used in logs."""

    @abstractmethod
    def send(self, message: EmailMessage) -> DeliveryResult:
        """Deliver one message."""
