"""Newsletter subscriptions and sending."""

from __future__ import annotations

import logging
from collections import Counter
from datetime import timedelta
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from eatfreshly.core.errors import NotFoundError, ValidationFailed
from eatfreshly.models.subscriber import DEFAULT_PREFERENCES, Subscriber
from eatfreshly.schemas.newsletter import NewsletterSend, PreferencesUpdate, SubscribeRequest
from eatfreshly.services import email_service
from eatfreshly.utils.time import as_utc, utcnow

logger = logging.getLogger(__name__)


def get_by_email(db: Session, email: str) -> Subscriber | None:
    return db.scalar(select(Subscriber).where(Subscriber.email == email.strip().lower()).limit(1))


def get_by_token(db: Session, token: str) -> Subscriber:
    subscriber = db.scalar(select(Subscriber).where(Subscriber.unsubscribe_token == token).limit(1))
    if subscriber is None:
        raise NotFoundError("Subscriber not found")
    return subscriber


def subscribe(db: Session, payload: SubscribeRequest) -> tuple[Subscriber, bool]:
    """Create or re-activate a subscription; returns the row and whether it was re-activated."""
    preferences = payload.preferences.model_dump() if payload.preferences else dict(DEFAULT_PREFERENCES)
    subscriber = get_by_email(db, payload.email)
    if subscriber is not None and subscriber.is_active:
        raise ValidationFailed("Email is already subscribed to our newsletter")

    reactivated = subscriber is not None
    if subscriber is None:
        subscriber = Subscriber(email=payload.email, source=payload.source)
        db.add(subscriber)
    subscriber.is_active = True
    subscriber.unsubscribed_at = None
    subscriber.subscribed_at = utcnow()
    subscriber.name = payload.name or subscriber.name
    subscriber.phone = payload.phone or subscriber.phone
    subscriber.preferences = preferences
    subscriber.frequency = payload.frequency
    db.commit()
    db.refresh(subscriber)
    return subscriber, reactivated


def unsubscribe(db: Session, *, token: str | None = None, email: str | None = None) -> Subscriber:
    if token:
        subscriber = get_by_token(db, token)
    elif email:
        subscriber = get_by_email(db, email)
        if subscriber is None:
            raise NotFoundError("Subscriber not found")
    else:
        raise ValidationFailed("Unsubscribe token or email is required")

    if subscriber.is_active:
        subscriber.is_active = False
        subscriber.unsubscribed_at = utcnow()
        db.commit()
        db.refresh(subscriber)
    return subscriber


def update_preferences(db: Session, token: str, payload: PreferencesUpdate) -> Subscriber:
    subscriber = get_by_token(db, token)
    if payload.preferences is not None:
        subscriber.preferences = payload.preferences.model_dump()
    if payload.frequency is not None:
        subscriber.frequency = payload.frequency
    db.commit()
    db.refresh(subscriber)
    return subscriber


def list_subscribers(
    db: Session,
    *,
    offset: int,
    limit: int,
    active: bool | None = None,
    search: str | None = None,
) -> tuple[list[Subscriber], int]:
    stmt = select(Subscriber)
    if active is not None:
        stmt = stmt.where(Subscriber.is_active.is_(active))
    if search:
        stmt = stmt.where(Subscriber.email.like(f"%{search.strip().lower()}%"))
    total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
    rows = db.scalars(stmt.order_by(Subscriber.subscribed_at.desc(), Subscriber.id.desc()).offset(offset).limit(limit)).all()
    return list(rows), total


def subscriber_stats(db: Session) -> dict[str, Any]:
    subscribers = db.scalars(select(Subscriber)).all()
    since = utcnow() - timedelta(days=30)
    active = [row for row in subscribers if row.is_active]
    return {
        "total": len(subscribers),
        "active": len(active),
        "inactive": len(subscribers) - len(active),
        "new_last_30_days": sum(1 for row in subscribers if as_utc(row.subscribed_at) >= since),
        "by_source": dict(Counter(row.source for row in active)),
        "by_frequency": dict(Counter(row.frequency for row in active)),
    }


def send_newsletter(db: Session, payload: NewsletterSend) -> dict[str, int]:
    """Send a template to active subscribers who opted into ``payload.preference``."""
    template = email_service.get_template(db, payload.template_id)
    if not template.is_active:
        raise ValidationFailed("Email template is not active")
    # Surface missing variables before anything is sent.
    email_service.render_template(template, {"subscriber_name": "", "unsubscribe_token": "", **payload.variables})

    recipients = [
        row
        for row in db.scalars(select(Subscriber).where(Subscriber.is_active.is_(True)).order_by(Subscriber.id)).all()
        if (row.preferences or {}).get(payload.preference, False)
    ]
    sent = failed = 0
    for subscriber in recipients:
        values = {
            "subscriber_name": subscriber.name or "there",
            "unsubscribe_token": subscriber.unsubscribe_token,
            **payload.variables,
        }
        log = email_service.deliver(
            db,
            to_email=subscriber.email,
            to_name=subscriber.name,
            rendered=email_service.render_template(template, values),
            template_type=template.type,
        )
        if log.status == "sent":
            sent += 1
            subscriber.emails_sent += 1
        else:
            failed += 1
    db.commit()
    logger.info("[EMAIL] Newsletter template %s: %s sent, %s failed", template.id, sent, failed)
    return {"recipients": len(recipients), "sent": sent, "failed": failed}
