"""Hosted payment endpoints."""

from fastapi import APIRouter, Depends, Header, Request, status
from sqlalchemy.orm import Session

from eatfreshly.core.security import get_current_user
from eatfreshly.db.session import get_db
from eatfreshly.models.user import User
from eatfreshly.schemas.common import ApiResponse, ok
from eatfreshly.schemas.order import OrderRead
from eatfreshly.schemas.payment import PaymentConfirm, PaymentIntentCreate, PaymentIntentRead
from eatfreshly.services import checkout_service

router: APIRouter = APIRouter()


@router.post("/create-payment-intent", response_model=ApiResponse[PaymentIntentRead])
def create_payment_intent(
    payload: PaymentIntentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    """Create an intent for the server-side cart total."""
    return ok(checkout_service.create_intent_for_cart(db, current_user, payload.promo_code))


@router.post("/confirm-payment", response_model=ApiResponse[OrderRead], status_code=status.HTTP_201_CREATED)
def confirm_payment(
    payload: PaymentConfirm,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    order = checkout_service.confirm_payment(db, current_user, payload)
    return ok(order, "Payment confirmed and order placed")


@router.post("/webhook", response_model=ApiResponse[dict])
async def payment_webhook(
    request: Request,
    stripe_signature: str | None = Header(default=None, alias="Stripe-Signature"),
    db: Session = Depends(get_db),
) -> dict:
    payload: bytes = await request.body()
    return ok(checkout_service.handle_webhook(db, payload, stripe_signature))
