"""Server-side cart operations."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from eatfreshly.core.errors import NotFoundError, ValidationFailed
from eatfreshly.models import Cart, CartItem, MenuItem, User
from eatfreshly.models.cart import MAX_QUANTITY_PER_ITEM
from eatfreshly.utils.time import utcnow


def get_or_create_cart(db: Session, user: User) -> Cart:
    cart = db.scalar(select(Cart).where(Cart.user_id == user.id).limit(1))
    if cart is None:
        cart = Cart(user_id=user.id)
        db.add(cart)
        db.commit()
        db.refresh(cart)
    return cart


def load_cart(db: Session, user: User) -> Cart:
    """Return the user's cart after pruning lines whose dish is unavailable."""
    cart = get_or_create_cart(db, user)
    stale = [line for line in cart.items if line.menu_item is None or not line.menu_item.is_available]
    if stale:
        for line in stale:
            cart.items.remove(line)
        db.commit()
        db.refresh(cart)
    return cart


def cart_total(cart: Cart) -> Decimal:
    """Sum of price x quantity over available lines."""
    total = Decimal("0.00")
    for line in cart.items:
        if line.menu_item is not None and line.menu_item.is_available:
            total += Decimal(line.menu_item.price) * line.quantity
    return total.quantize(Decimal("0.01"))


def serialize_cart(cart: Cart) -> dict[str, Any]:
    items: list[dict[str, Any]] = []
    total_items = 0
    for line in cart.items:
        menu_item = line.menu_item
        if menu_item is None or not menu_item.is_available:
            continue
        total_items += line.quantity
        items.append(
            {
                "id": line.id,
                "menu_item_id": menu_item.id,
                "name": menu_item.name,
                "category": menu_item.category,
                "price": float(menu_item.price),
                "image_url": menu_item.image_url,
                "quantity": line.quantity,
                "line_total": float(Decimal(menu_item.price) * line.quantity),
            }
        )
    return {
        "id": cart.id,
        "items": items,
        "total_amount": float(cart_total(cart)),
        "total_items": total_items,
        "last_updated": cart.last_updated,
    }


def _owned_line(cart: Cart, cart_item_id: int) -> CartItem:
    for line in cart.items:
        if line.id == cart_item_id:
            return line
    raise NotFoundError("Item not found in cart")


def add_item(db: Session, user: User, menu_item_id: int, quantity: int) -> Cart:
    menu_item = db.get(MenuItem, menu_item_id)
    if menu_item is None:
        raise NotFoundError("Menu item not found")
    if not menu_item.is_available:
        raise ValidationFailed("Menu item is not available")

    cart = get_or_create_cart(db, user)
    line = next((row for row in cart.items if row.menu_item_id == menu_item_id), None)
    new_quantity = quantity + (line.quantity if line is not None else 0)
    if new_quantity > MAX_QUANTITY_PER_ITEM:
        raise ValidationFailed(f"Maximum quantity per item is {MAX_QUANTITY_PER_ITEM}")

    if line is None:
        cart.items.append(CartItem(menu_item_id=menu_item_id, quantity=quantity))
    else:
        line.quantity = new_quantity
    cart.last_updated = utcnow()
    db.commit()
    db.refresh(cart)
    return cart


def update_item(db: Session, user: User, cart_item_id: int, quantity: int) -> Cart:
    if not 1 <= quantity <= MAX_QUANTITY_PER_ITEM:
        raise ValidationFailed(f"Quantity must be between 1 and {MAX_QUANTITY_PER_ITEM}")
    cart = get_or_create_cart(db, user)
    line = _owned_line(cart, cart_item_id)
    line.quantity = quantity
    cart.last_updated = utcnow()
    db.commit()
    db.refresh(cart)
    return cart


def remove_item(db: Session, user: User, cart_item_id: int) -> Cart:
    cart = get_or_create_cart(db, user)
    cart.items.remove(_owned_line(cart, cart_item_id))
    cart.last_updated = utcnow()
    db.commit()
    db.refresh(cart)
    return cart


def clear_cart(db: Session, user: User, *, commit: bool = True) -> Cart:
    cart = get_or_create_cart(db, user)
    cart.items.clear()
    cart.last_updated = utcnow()
    if commit:
        db.commit()
        db.refresh(cart)
    return cart
