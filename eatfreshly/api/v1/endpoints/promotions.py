"""Public promotion endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from eatfreshly.core.errors import NotFoundError
from eatfreshly.core.security import get_current_user
from eatfreshly.db.session import get_db
from eatfreshly.models.user import User
from eatfreshly.schemas.common import ApiResponse, ok
from eatfreshly.schemas.promotion import PromotionRead, PromoValidateRequest, PromoValidation
from eatfreshly.services import promotion_service

router: APIRouter = APIRouter()


@router.get("/active", response_model=ApiResponse[list[PromotionRead]])
def list_active(db: Session = Depends(get_db)) -> dict:
    return ok(promotion_service.list_active_promotions(db))


@router.post("/validate", response_model=ApiResponse[PromoValidation])
def validate_code(
    payload: PromoValidateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    """Check a code against an order amount and return the discount."""
    promotion, discount, final_amount = promotion_service.validate_code(db, payload.promo_code, payload.order_amount)
    return ok(
        {
            "promotion_id": promotion.id,
            "promo_code": promotion.promo_code,
            "title": promotion.title,
            "discount_type": promotion.discount_type,
            "discount_value": float(promotion.discount_value),
            "discount_amount": float(discount),
            "final_amount": float(final_amount),
        },
        "Promo code applied",
    )


@router.get("/{promotion_id}", response_model=ApiResponse[PromotionRead])
def get_promotion(promotion_id: int, db: Session = Depends(get_db)) -> dict:
    promotion = promotion_service.get_promotion(db, promotion_id)
    if not promotion_service.is_currently_valid(promotion):
        raise NotFoundError("Promotion not found")
    return ok(promotion)
