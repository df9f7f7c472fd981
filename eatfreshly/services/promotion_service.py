"""Promotion lookup, discount maths and back-office management."""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from eatfreshly.core.errors import Conflict, NotFoundError, ValidationFailed
from eatfreshly.models.promotion import Promotion
from eatfreshly.schemas.promotion import PromotionCreate, PromotionUpdate
from eatfreshly.utils.time import as_utc, utcnow

CENT = Decimal("0.01")


def money(value: Decimal | float | int) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_discount(promotion: Promotion, order_amount: Decimal) -> Decimal:
    """Discount granted on ``order_amount``; never more than the amount itself."""
    amount = money(order_amount)
    if promotion.discount_type == "percent":
        discount = amount * Decimal(promotion.discount_value) / Decimal(100)
        if promotion.max_discount_amount is not None:
            discount = min(discount, Decimal(promotion.max_discount_amount))
    else:
        discount = Decimal(promotion.discount_value)
    return money(min(discount, amount))


def is_currently_valid(promotion: Promotion, now: datetime | None = None) -> bool:
    now = now or utcnow()
    if not promotion.is_active:
        return False
    if not as_utc(promotion.valid_from) <= now <= as_utc(promotion.valid_to):
        return False
    if promotion.usage_limit is not None and promotion.used_count >= promotion.usage_limit:
        return False
    return True


def list_active_promotions(db: Session) -> list[Promotion]:
    now = utcnow()
    candidates = db.scalars(
        select(Promotion).where(Promotion.is_active.is_(True)).order_by(Promotion.valid_to.asc(), Promotion.id.asc())
    ).all()
    return [promotion for promotion in candidates if is_currently_valid(promotion, now)]


def list_promotions(
    db: Session,
    *,
    offset: int,
    limit: int,
    state: str | None = None,
) -> tuple[list[Promotion], int]:
    """Back-office listing; ``state`` is ``active``, ``inactive`` or ``expired``."""
    promotions = db.scalars(select(Promotion).order_by(Promotion.created_at.desc(), Promotion.id.desc())).all()
    now = utcnow()
    if state == "active":
        promotions = [p for p in promotions if is_currently_valid(p, now)]
    elif state == "inactive":
        promotions = [p for p in promotions if not p.is_active]
    elif state == "expired":
        promotions = [p for p in promotions if as_utc(p.valid_to) < now]
    return list(promotions[offset : offset + limit]), len(promotions)


def get_promotion(db: Session, promotion_id: int) -> Promotion:
    promotion = db.get(Promotion, promotion_id)
    if promotion is None:
        raise NotFoundError("Promotion not found")
    return promotion


def find_by_code(db: Session, promo_code: str) -> Promotion | None:
    code = promo_code.strip().upper()
    if not code:
        return None
    return db.scalar(select(Promotion).where(func.upper(Promotion.promo_code) == code).limit(1))


def validate_code(db: Session, promo_code: str, order_amount: Decimal) -> tuple[Promotion, Decimal, Decimal]:
    """Return the promotion, its discount and the discounted amount."""
    promotion = find_by_code(db, promo_code)
    if promotion is None or not is_currently_valid(promotion):
        raise NotFoundError("Invalid or expired promo code")
    amount = money(order_amount)
    minimum = money(promotion.minimum_order_amount)
    if amount < minimum:
        raise ValidationFailed(f"Minimum order amount of {minimum} required")
    discount = calculate_discount(promotion, amount)
    return promotion, discount, money(amount - discount)


def redeem(promotion: Promotion) -> None:
    promotion.used_count = (promotion.used_count or 0) + 1


def _ensure_unique_code(db: Session, promo_code: str | None, exclude_id: int | None = None) -> None:
    if not promo_code:
        return
    existing = find_by_code(db, promo_code)
    if existing is not None and existing.id != exclude_id:
        raise Conflict("Promo code already exists")


def create_promotion(db: Session, payload: PromotionCreate) -> Promotion:
    _ensure_unique_code(db, payload.promo_code)
    promotion = Promotion(**payload.model_dump())
    db.add(promotion)
    db.commit()
    db.refresh(promotion)
    return promotion


def update_promotion(db: Session, promotion_id: int, payload: PromotionUpdate) -> Promotion:
    promotion = get_promotion(db, promotion_id)
    changes = payload.model_dump(exclude_unset=True)
    if "promo_code" in changes:
        _ensure_unique_code(db, changes["promo_code"], exclude_id=promotion.id)

    valid_from = as_utc(changes.get("valid_from") or promotion.valid_from)
    valid_to = as_utc(changes.get("valid_to") or promotion.valid_to)
    if valid_to <= valid_from:
        raise ValidationFailed("valid_to must be after valid_from")
    discount_type = changes.get("discount_type") or promotion.discount_type
    discount_value = changes.get("discount_value", promotion.discount_value)
    if discount_type == "percent" and Decimal(discount_value) > 100:
        raise ValidationFailed("Percent discount cannot exceed 100")

    for field, value in changes.items():
        setattr(promotion, field, value)
    db.commit()
    db.refresh(promotion)
    return promotion


def toggle_status(db: Session, promotion_id: int) -> Promotion:
    promotion = get_promotion(db, promotion_id)
    promotion.is_active = not promotion.is_active
    db.commit()
    db.refresh(promotion)
    return promotion


def delete_promotion(db: Session, promotion_id: int) -> None:
    db.delete(get_promotion(db, promotion_id))
    db.commit()
