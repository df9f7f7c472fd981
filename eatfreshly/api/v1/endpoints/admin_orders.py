"""Back-office order management."""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from eatfreshly.core.errors import NotFoundError
from eatfreshly.core.security import require_admin
from eatfreshly.db.session import get_db
from eatfreshly.models.order import Order
from eatfreshly.models.user import User
from eatfreshly.schemas.common import ApiResponse, Page, PageParams, ok, page_of
from eatfreshly.schemas.order import AdminOrderRead, OrderStatusUpdate
from eatfreshly.services import order_service

router: APIRouter = APIRouter()


@router.get("/orders", response_model=ApiResponse[Page[AdminOrderRead]])
def list_orders(
    status_filter: str | None = Query(default=None, alias="status"),
    payment_status: str | None = None,
    search: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    params: PageParams = Depends(),
    db: Session = Depends(get_db),
) -> dict:
    orders, total = order_service.admin_list_orders(
        db,
        offset=params.offset,
        limit=params.limit,
        status=status_filter,
        payment_status=payment_status,
        search=search,
        start_date=start_date,
        end_date=end_date,
    )
    return ok(page_of([order_service.order_to_admin_dict(order) for order in orders], total, params))


@router.get("/orders/{order_id}", response_model=ApiResponse[AdminOrderRead])
def get_order(order_id: int, db: Session = Depends(get_db)) -> dict:
    order = db.get(Order, order_id)
    if order is None:
        raise NotFoundError("Order not found")
    return ok(order_service.order_to_admin_dict(order))


@router.put("/orders/{order_id}/status", response_model=ApiResponse[AdminOrderRead])
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> dict:
    order = order_service.admin_update_status(db, admin, order_id, payload.status)
    return ok(order_service.order_to_admin_dict(order), f"Order status updated to {order.status}")
