"""Newsletter subscriber ORM model."""

import secrets
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from eatfreshly.db.base import Base

DEFAULT_PREFERENCES: dict[str, bool] = {
    "newsletter": True,
    "promotions": True,
    "order_updates": True,
    "new_menu_items": True,
}


class Subscriber(Base):
    __tablename__ = "subscribers"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    subscribed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    unsubscribed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    preferences: Mapped[dict] = mapped_column(JSON, nullable=False, default=lambda: dict(DEFAULT_PREFERENCES))
    frequency: Mapped[str] = mapped_column(String(16), nullable=False, default="weekly")
    unsubscribe_token: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        default=lambda: secrets.token_hex(32),
    )
    source: Mapped[str] = mapped_column(String(16), nullable=False, default="website")
    emails_sent: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
