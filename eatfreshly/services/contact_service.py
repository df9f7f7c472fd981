"""Contact form messages and restaurant contact details."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from eatfreshly.core.errors import NotFoundError
from eatfreshly.models.contact import ContactMessage
from eatfreshly.schemas.contact import ContactCreate, ContactInfoUpdate, ContactUpdate
from eatfreshly.services.settings_service import CONTACT_INFO_DEFAULTS, get_settings, save_settings
from eatfreshly.utils.time import utcnow

logger = logging.getLogger(__name__)

CLOSING_STATUSES: frozenset[str] = frozenset({"resolved", "closed"})


def submit_message(db: Session, payload: ContactCreate) -> ContactMessage:
    message = ContactMessage(**payload.model_dump())
    if payload.inquiry_type == "order":
        message.priority = "high"
    db.add(message)
    db.commit()
    db.refresh(message)
    logger.info("[CONTACT] New %s inquiry id=%s", message.inquiry_type, message.id)
    return message


def list_messages(
    db: Session,
    *,
    offset: int,
    limit: int,
    status: str | None = None,
    inquiry_type: str | None = None,
    search: str | None = None,
) -> tuple[list[ContactMessage], int]:
    stmt = select(ContactMessage)
    if status:
        stmt = stmt.where(ContactMessage.status == status)
    if inquiry_type:
        stmt = stmt.where(ContactMessage.inquiry_type == inquiry_type)
    if search:
        pattern = f"%{search.strip().lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(ContactMessage.name).like(pattern),
                func.lower(ContactMessage.email).like(pattern),
                func.lower(ContactMessage.subject).like(pattern),
            )
        )
    total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
    rows = db.scalars(
        stmt.order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc()).offset(offset).limit(limit)
    ).all()
    return list(rows), total


def get_message(db: Session, message_id: int, *, mark_read: bool = True) -> ContactMessage:
    message = db.get(ContactMessage, message_id)
    if message is None:
        raise NotFoundError("Contact message not found")
    if mark_read and not message.is_read:
        message.is_read = True
        db.commit()
        db.refresh(message)
    return message


def update_message(db: Session, message_id: int, payload: ContactUpdate) -> ContactMessage:
    message = get_message(db, message_id, mark_read=False)
    changes = payload.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if value is not None:
            setattr(message, field, value)
    if changes.get("status") in CLOSING_STATUSES and message.response_date is None:
        message.response_sent = True
        message.response_date = utcnow()
    db.commit()
    db.refresh(message)
    return message


def delete_message(db: Session, message_id: int) -> None:
    db.delete(get_message(db, message_id, mark_read=False))
    db.commit()


def message_stats(db: Session) -> dict[str, Any]:
    messages = db.scalars(select(ContactMessage)).all()
    return {
        "total": len(messages),
        "unread": sum(1 for row in messages if not row.is_read),
        "by_status": dict(Counter(row.status for row in messages)),
        "by_inquiry_type": dict(Counter(row.inquiry_type for row in messages)),
    }


def get_contact_info(db: Session) -> dict[str, str]:
    values = get_settings(db, CONTACT_INFO_DEFAULTS)
    return {key.removeprefix("contact_"): value for key, value in values.items()}


def update_contact_info(db: Session, payload: ContactInfoUpdate, updated_by: str | None = None) -> dict[str, str]:
    changes = {f"contact_{key}": value for key, value in payload.model_dump(exclude_none=True).items()}
    if changes:
        save_settings(db, changes, updated_by=updated_by)
    return get_contact_info(db)
