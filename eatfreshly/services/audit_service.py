"""Audit trail for admin changes to orders and accounts."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from eatfreshly.models import AuditLog, Order, User


def order_snapshot(order: Order) -> dict[str, Any]:
    return {
        "status": order.status,
        "payment_status": order.payment_status,
        "total_price": str(order.total_price),
    }


def user_snapshot(user: User) -> dict[str, Any]:
    return {"email": user.email, "role": user.role, "is_active": user.is_active}


def record_admin_action(
    db: Session,
    actor: User,
    action_type: str,
    subject: Order | User,
    before: dict[str, Any] | None = None,
    after: dict[str, Any] | None = None,
) -> AuditLog:
    """Stage an audit row in the caller's transaction; the caller commits."""
    entry = AuditLog(
        actor_user_id=actor.id,
        actor_email=actor.email,
        action_type=action_type,
        entity_type="order" if isinstance(subject, Order) else "user",
        entity_id=subject.id,
        before_snapshot=before,
        after_snapshot=after,
    )
    db.add(entry)
    return entry
