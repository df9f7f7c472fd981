"""Contact form and contact info schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from eatfreshly.schemas.common import EmailAddress

InquiryType = Literal["general", "order", "delivery", "feedback", "partnership", "other"]


class ContactCreate(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailAddress
    subject: str = Field(min_length=5, max_length=200)
    message: str = Field(min_length=10, max_length=2000)
    inquiry_type: InquiryType = "general"


class ContactRead(BaseModel):
    id: int
    name: str
    email: str
    subject: str
    message: str
    inquiry_type: str
    status: str
    priority: str
    is_read: bool
    admin_notes: str | None = None
    response_sent: bool
    response_date: datetime | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ContactUpdate(BaseModel):
    status: Literal["new", "in-progress", "resolved", "closed"] | None = None
    priority: Literal["low", "medium", "high", "urgent"] | None = None
    admin_notes: str | None = Field(default=None, max_length=1000)


class ContactInfo(BaseModel):
    """Restaurant contact details shown on the storefront."""

    phone: str
    email: str
    address: str
    opening_hours: str


class ContactInfoUpdate(BaseModel):
    phone: str | None = Field(default=None, max_length=32)
    email: EmailAddress | None = None
    address: str | None = Field(default=None, max_length=300)
    opening_hours: str | None = Field(default=None, max_length=200)
