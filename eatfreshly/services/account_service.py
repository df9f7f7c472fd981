"""Account provisioning, authentication and profile helpers."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from eatfreshly.core.config import settings
from eatfreshly.core.errors import Conflict, NotFoundError, Unauthorized, ValidationFailed
from eatfreshly.core.security import get_password_hash, verify_password
from eatfreshly.models import Order, User
from eatfreshly.models.user import normalize_user_role
from eatfreshly.schemas.user import AdminUserUpdate, ProfileUpdate
from eatfreshly.services.audit_service import record_admin_action, user_snapshot
from eatfreshly.services.user_service import create_user, get_user_by_email

logger = logging.getLogger(__name__)


def ensure_default_admin(db: Session) -> bool:
    """Create or re-activate the admin configured by ADMIN_EMAIL/ADMIN_PASSWORD.

    Returns:
        bool: True when an account with that email existed before this call.
    """
    email = settings.admin_email.strip().lower()
    if not email or not settings.admin_password:
        logger.info("[BOOTSTRAP] ADMIN_EMAIL/ADMIN_PASSWORD not set; skipping admin bootstrap.")
        return False

    existing_admin = get_user_by_email(db, email)
    if existing_admin is not None:
        updates_applied = False
        if not existing_admin.is_active:
            existing_admin.is_active = True
            updates_applied = True
            logger.info("[BOOTSTRAP] Admin exists but was inactive; account re-activated.")
        if existing_admin.role != "admin":
            logger.warning("[BOOTSTRAP] Promoting %s to admin (old role=%s).", email, existing_admin.role)
            existing_admin.role = "admin"
            updates_applied = True
        if updates_applied:
            db.commit()
        logger.info("[BOOTSTRAP] Admin exists")
        return True

    create_user(
        db,
        name="Administrator",
        email=email,
        hashed_password=get_password_hash(settings.admin_password),
        role="admin",
    )
    logger.warning("[BOOTSTRAP] Admin account created for %s.", email)
    return False


def register_customer(db: Session, *, name: str, email: str, password: str, phone: str | None = None) -> User:
    if get_user_by_email(db, email) is not None:
        raise ValidationFailed("User already exists with this email")
    user = create_user(db, name=name, email=email, hashed_password=get_password_hash(password), phone=phone)
    logger.info("[AUTH] Registered customer id=%s", user.id)
    return user


def authenticate_user(db: Session, email: str, password: str) -> User:
    """Return the user for valid credentials and stamp the login time."""
    user = get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.info("[AUTH] Failed login for %s", email)
        raise Unauthorized("Invalid email or password")
    if not user.is_active:
        raise Unauthorized("Account is deactivated")
    user.last_login_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)
    return user


def authenticate_admin(db: Session, email: str, password: str) -> User:
    user = authenticate_user(db, email, password)
    if user.role != "admin":
        raise Unauthorized("Invalid email or password")
    return user


def update_profile(db: Session, user: User, payload: ProfileUpdate) -> User:
    if payload.name is not None:
        user.name = payload.name
    if payload.phone is not None:
        user.phone = payload.phone
    if payload.address is not None:
        user.address = payload.address.model_dump()
    db.commit()
    db.refresh(user)
    return user


def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, user.password_hash):
        raise ValidationFailed("Current password is incorrect")
    user.password_hash = get_password_hash(new_password)
    db.commit()


def admin_create_user(
    db: Session,
    *,
    name: str,
    email: str,
    password: str,
    role: str,
    phone: str | None = None,
) -> User:
    if get_user_by_email(db, email) is not None:
        raise Conflict("User already exists with this email")
    try:
        canonical_role = normalize_user_role(role)
    except ValueError as exc:
        raise ValidationFailed(str(exc)) from exc
    return create_user(
        db,
        name=name,
        email=email,
        hashed_password=get_password_hash(password),
        role=canonical_role,
        phone=phone,
    )


def admin_update_user(db: Session, actor: User, user_id: int, payload: AdminUserUpdate) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    before = user_snapshot(user)
    if payload.role is not None:
        try:
            role = normalize_user_role(payload.role)
        except ValueError as exc:
            raise ValidationFailed(str(exc)) from exc
        if user.id == actor.id and role != "admin":
            raise ValidationFailed("You cannot remove your own admin role")
        user.role = role
    if payload.is_active is not None:
        if user.id == actor.id and not payload.is_active:
            raise ValidationFailed("You cannot deactivate your own account")
        user.is_active = payload.is_active
    if payload.name is not None:
        user.name = payload.name
    if payload.phone is not None:
        user.phone = payload.phone
    record_admin_action(db, actor, "user_updated", user, before=before, after=user_snapshot(user))
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, actor: User, user_id: int) -> None:
    """Delete an account without order history, otherwise deactivate it."""
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    if user.id == actor.id:
        raise ValidationFailed("You cannot delete your own account")
    before = user_snapshot(user)
    has_orders = db.scalar(select(Order.id).where(Order.user_id == user.id).limit(1)) is not None
    if has_orders:
        user.is_active = False
        record_admin_action(db, actor, "user_deactivated", user, before=before, after=user_snapshot(user))
    else:
        record_admin_action(db, actor, "user_deleted", user, before=before)
        db.delete(user)
    db.commit()
