"""Customer order endpoints."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from eatfreshly.core.errors import ValidationFailed
from eatfreshly.core.security import get_current_user
from eatfreshly.db.session import get_db
from eatfreshly.models.user import User
from eatfreshly.schemas.common import ApiResponse, Page, PageParams, ok, page_of
from eatfreshly.schemas.order import OrderCreate, OrderRead
from eatfreshly.services import order_service

router: APIRouter = APIRouter()


@router.post("", response_model=ApiResponse[OrderRead], status_code=status.HTTP_201_CREATED)
def create_order(
    payload: OrderCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    """Place an order from the current cart (non-hosted payment methods)."""
    if payload.payment_method == order_service.HOSTED_PAYMENT_METHOD:
        raise ValidationFailed("Card payments must be completed through /payments/confirm-payment")
    order = order_service.place_order(
        db,
        current_user,
        delivery_address=payload.delivery_address.model_dump(),
        payment_method=payload.payment_method,
        special_instructions=payload.special_instructions,
        promo_code=payload.promo_code,
    )
    return ok(order, "Order placed successfully")


@router.get("", response_model=ApiResponse[Page[OrderRead]])
def list_my_orders(
    status_filter: str | None = Query(default=None, alias="status"),
    params: PageParams = Depends(),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    orders, total = order_service.list_user_orders(
        db,
        current_user,
        offset=params.offset,
        limit=params.limit,
        status=status_filter,
    )
    return ok(page_of(orders, total, params))


@router.get("/{reference}", response_model=ApiResponse[OrderRead])
def get_order(
    reference: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    """Fetch an order by id or order number."""
    return ok(order_service.get_order_for_user(db, current_user, reference))


@router.put("/{reference}/cancel", response_model=ApiResponse[OrderRead])
def cancel_order(
    reference: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    return ok(order_service.cancel_order(db, current_user, reference), "Order cancelled")
