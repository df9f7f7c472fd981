"""Email templates, delivery and the delivery log."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from eatfreshly.core.errors import Conflict, NotFoundError, ValidationFailed
from eatfreshly.models import EmailLog, EmailTemplate, Order, User
from eatfreshly.schemas.email import EmailTemplateCreate, EmailTemplateUpdate
from eatfreshly.services.email import EmailDeliveryError, EmailMessage, get_email_sender
from eatfreshly.services.email.renderer import DEFAULT_TEMPLATES, render_email

logger = logging.getLogger(__name__)

CONTENT_FIELDS: frozenset[str] = frozenset({"subject", "html_content", "text_content", "variables"})


def list_templates(db: Session, template_type: str | None = None) -> list[EmailTemplate]:
    stmt = select(EmailTemplate).order_by(EmailTemplate.type.asc(), EmailTemplate.name.asc())
    if template_type:
        stmt = stmt.where(EmailTemplate.type == template_type)
    return list(db.scalars(stmt).all())


def get_template(db: Session, template_id: int) -> EmailTemplate:
    template = db.get(EmailTemplate, template_id)
    if template is None:
        raise NotFoundError("Email template not found")
    return template


def active_template_for(db: Session, template_type: str) -> EmailTemplate | None:
    return db.scalar(
        select(EmailTemplate)
        .where(EmailTemplate.type == template_type, EmailTemplate.is_active.is_(True))
        .order_by(EmailTemplate.updated_at.desc(), EmailTemplate.id.desc())
        .limit(1)
    )


def create_template(db: Session, actor: User, payload: EmailTemplateCreate) -> EmailTemplate:
    if db.scalar(select(EmailTemplate.id).where(EmailTemplate.name == payload.name).limit(1)) is not None:
        raise Conflict("Template name already exists")
    data = payload.model_dump()
    template = EmailTemplate(**data, created_by=actor.id, last_modified_by=actor.id)
    db.add(template)
    db.commit()
    db.refresh(template)
    return template


def update_template(db: Session, actor: User, template_id: int, payload: EmailTemplateUpdate) -> EmailTemplate:
    """Apply changes; any content change bumps the version."""
    template = get_template(db, template_id)
    changes = payload.model_dump(exclude_unset=True)
    if "name" in changes and changes["name"] != template.name:
        clash = db.scalar(select(EmailTemplate.id).where(EmailTemplate.name == changes["name"]).limit(1))
        if clash is not None:
            raise Conflict("Template name already exists")
    for field, value in changes.items():
        setattr(template, field, value)
    if CONTENT_FIELDS & changes.keys():
        template.version += 1
    template.last_modified_by = actor.id
    db.commit()
    db.refresh(template)
    return template


def delete_template(db: Session, template_id: int) -> None:
    db.delete(get_template(db, template_id))
    db.commit()


def render_template(template: EmailTemplate | Mapping[str, Any], values: Mapping[str, Any]) -> dict[str, str | None]:
    if isinstance(template, EmailTemplate):
        source: Mapping[str, Any] = {
            "subject": template.subject,
            "html_content": template.html_content,
            "text_content": template.text_content,
            "variables": template.variables or [],
        }
    else:
        source = template
    return render_email(
        subject=source["subject"],
        html_content=source["html_content"],
        text_content=source.get("text_content"),
        declared=source.get("variables") or [],
        values=values,
    )


def deliver(
    db: Session,
    *,
    to_email: str,
    to_name: str | None,
    rendered: Mapping[str, str | None],
    template_type: str,
    order_id: int | None = None,
) -> EmailLog:
    """Send a rendered email and record the attempt; delivery errors are logged, not raised."""
    log = EmailLog(
        recipient_email=to_email,
        recipient_name=to_name,
        subject=rendered["subject"] or "",
        template_type=template_type,
        order_id=order_id,
        status="sent",
    )
    try:
        result = get_email_sender().send(
            EmailMessage(
                to_email=to_email,
                to_name=to_name,
                subject=rendered["subject"] or "",
                html=rendered["html"] or "",
                text=rendered.get("text"),
            )
        )
        log.provider_message_id = result.message_id
    except EmailDeliveryError as exc:
        logger.warning("[EMAIL] Delivery of %s to %s failed: %s", template_type, to_email, exc)
        log.status = "failed"
        log.error = str(exc)
    db.add(log)
    db.commit()
    return log


def _order_email(db: Session, order: Order, template_type: str, values: dict[str, Any]) -> EmailLog | None:
    template = active_template_for(db, template_type)
    try:
        rendered = render_template(template if template is not None else DEFAULT_TEMPLATES[template_type], values)
    except ValidationFailed as exc:
        logger.error("[EMAIL] Could not render %s for order %s: %s", template_type, order.order_number, exc.message)
        return None
    return deliver(
        db,
        to_email=order.user.email,
        to_name=order.user.name,
        rendered=rendered,
        template_type=template_type,
        order_id=order.id,
    )


def send_order_confirmation(db: Session, order: Order) -> EmailLog | None:
    eta = order.estimated_delivery_time.strftime("%H:%M") if order.estimated_delivery_time else None
    values = {
        "customer_name": order.user.name,
        "order_number": order.order_number,
        "total": f"{order.total_price:.2f}",
        "estimated_delivery": eta,
        "payment_method": order.payment_method,
    }
    return _order_email(db, order, "order-confirmation", values)


def send_order_completion(db: Session, order: Order) -> EmailLog | None:
    values = {"customer_name": order.user.name, "order_number": order.order_number}
    return _order_email(db, order, "order-completion", values)


def list_logs(db: Session, *, offset: int, limit: int, status: str | None = None) -> tuple[list[EmailLog], int]:
    stmt = select(EmailLog)
    if status:
        stmt = stmt.where(EmailLog.status == status)
    rows = db.scalars(stmt.order_by(EmailLog.sent_at.desc(), EmailLog.id.desc())).all()
    return list(rows[offset : offset + limit]), len(rows)
