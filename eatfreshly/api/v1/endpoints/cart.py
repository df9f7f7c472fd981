"""Cart endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from eatfreshly.core.security import get_current_user
from eatfreshly.db.session import get_db
from eatfreshly.models.user import User
from eatfreshly.schemas.cart import CartItemAdd, CartItemUpdate, CartRead
from eatfreshly.schemas.common import ApiResponse, ok
from eatfreshly.services import cart_service

router: APIRouter = APIRouter()


@router.get("", response_model=ApiResponse[CartRead])
def get_cart(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> dict:
    """Return the cart; unavailable dishes are pruned first."""
    return ok(cart_service.serialize_cart(cart_service.load_cart(db, current_user)))


@router.post("/items", response_model=ApiResponse[CartRead])
def add_item(
    payload: CartItemAdd,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    cart = cart_service.add_item(db, current_user, payload.menu_item_id, payload.quantity)
    return ok(cart_service.serialize_cart(cart), "Item added to cart")


@router.put("/items/{cart_item_id}", response_model=ApiResponse[CartRead])
def update_item(
    cart_item_id: int,
    payload: CartItemUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    cart = cart_service.update_item(db, current_user, cart_item_id, payload.quantity)
    return ok(cart_service.serialize_cart(cart), "Cart updated")


@router.delete("/items/{cart_item_id}", response_model=ApiResponse[CartRead])
def remove_item(
    cart_item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    cart = cart_service.remove_item(db, current_user, cart_item_id)
    return ok(cart_service.serialize_cart(cart), "Item removed from cart")


@router.delete("", response_model=ApiResponse[CartRead])
def clear_cart(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> dict:
    return ok(cart_service.serialize_cart(cart_service.clear_cart(db, current_user)), "Cart cleared")
