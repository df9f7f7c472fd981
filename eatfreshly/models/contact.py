"""Contact form message model."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from eatfreshly.db.base import Base

INQUIRY_TYPES: tuple[str, ...] = ("general", "order", "delivery", "feedback", "partnership", "other")
CONTACT_STATUSES: tuple[str, ...] = ("new", "in-progress", "resolved", "closed")
CONTACT_PRIORITIES: tuple[str, ...] = ("low", "medium", "high", "urgent")


class ContactMessage(Base):
    __tablename__ = "contact_messages"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    subject: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    inquiry_type: Mapped[str] = mapped_column(String(16), nullable=False, default="general")
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="new")
    priority: Mapped[str] = mapped_column(String(16), nullable=False, default="medium")
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    admin_notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    response_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    response_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
