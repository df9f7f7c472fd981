"""Newsletter subscription schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from eatfreshly.schemas.common import EmailAddress

Frequency = Literal["daily", "weekly", "monthly"]


class Preferences(BaseModel):
    newsletter: bool = True
    promotions: bool = True
    order_updates: bool = True
    new_menu_items: bool = True


class SubscribeRequest(BaseModel):
    email: EmailAddress
    name: str | None = Field(default=None, max_length=100)
    phone: str | None = None
    preferences: Preferences | None = None
    frequency: Frequency = "weekly"
    source: Literal["website", "order", "manual", "import"] = "website"


class UnsubscribeRequest(BaseModel):
    """Either the opaque token from an email footer or the address itself."""

    token: str | None = None
    email: EmailAddress | None = None


class PreferencesUpdate(BaseModel):
    preferences: Preferences | None = None
    frequency: Frequency | None = None


class SubscriberRead(BaseModel):
    id: int
    email: str
    name: str | None = None
    is_active: bool
    subscribed_at: datetime
    unsubscribed_at: datetime | None = None
    preferences: dict
    frequency: str
    source: str
    emails_sent: int

    model_config = ConfigDict(from_attributes=True)


class NewsletterSend(BaseModel):
    template_id: int
    variables: dict[str, str] = Field(default_factory=dict)
    preference: Literal["newsletter", "promotions", "new_menu_items"] = "newsletter"


class NewsletterSendResult(BaseModel):
    recipients: int
    sent: int
    failed: int
