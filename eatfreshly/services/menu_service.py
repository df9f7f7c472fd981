"""Menu service helpers shared by storefront and back-office routes."""

from decimal import Decimal

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from eatfreshly.core.errors import NotFoundError
from eatfreshly.models.cart import CartItem
from eatfreshly.models.menu import MENU_CATEGORIES, MenuItem
from eatfreshly.models.order import OrderItem
from eatfreshly.schemas.menu import MenuItemCreate, MenuItemUpdate

SORT_OPTIONS: dict[str, tuple] = {
    "name": (MenuItem.name.asc(),),
    "price_asc": (MenuItem.price.asc(), MenuItem.id.asc()),
    "price_desc": (MenuItem.price.desc(), MenuItem.id.asc()),
    "newest": (MenuItem.created_at.desc(), MenuItem.id.desc()),
}


def list_menu_items(
    db: Session,
    *,
    category: str | None = None,
    search: str | None = None,
    vegetarian: bool | None = None,
    vegan: bool | None = None,
    gluten_free: bool | None = None,
    min_price: Decimal | None = None,
    max_price: Decimal | None = None,
    available_only: bool = True,
    sort: str = "name",
) -> list[MenuItem]:
    """Return menu items matching storefront filters."""
    query = db.query(MenuItem)
    if available_only:
        query = query.filter(MenuItem.is_available.is_(True))
    if category:
        query = query.filter(MenuItem.category == category)
    if vegetarian:
        query = query.filter(MenuItem.is_vegetarian.is_(True))
    if vegan:
        query = query.filter(MenuItem.is_vegan.is_(True))
    if gluten_free:
        query = query.filter(MenuItem.is_gluten_free.is_(True))
    if min_price is not None:
        query = query.filter(MenuItem.price >= min_price)
    if max_price is not None:
        query = query.filter(MenuItem.price <= max_price)
    if search:
        pattern = f"%{search.strip().lower()}%"
        query = query.filter(
            or_(func.lower(MenuItem.name).like(pattern), func.lower(MenuItem.description).like(pattern))
        )
    return query.order_by(*SORT_OPTIONS.get(sort, SORT_OPTIONS["name"])).all()


def list_signature_items(db: Session) -> list[MenuItem]:
    return (
        db.query(MenuItem)
        .filter(MenuItem.is_signature.is_(True), MenuItem.is_available.is_(True))
        .order_by(MenuItem.id.asc())
        .all()
    )


def list_categories(db: Session) -> list[dict[str, object]]:
    """Return every category with its count of available items."""
    counts: dict[str, int] = dict(
        db.query(MenuItem.category, func.count(MenuItem.id))
        .filter(MenuItem.is_available.is_(True))
        .group_by(MenuItem.category)
        .all()
    )
    return [{"name": name, "count": counts.get(name, 0)} for name in MENU_CATEGORIES]


def get_menu_item(db: Session, item_id: int) -> MenuItem:
    item = db.get(MenuItem, item_id)
    if item is None:
        raise NotFoundError("Menu item not found")
    return item


def create_menu_item(db: Session, payload: MenuItemCreate) -> MenuItem:
    data = payload.model_dump()
    item = MenuItem(**data)
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def update_menu_item(db: Session, item_id: int, payload: MenuItemUpdate) -> MenuItem:
    item = get_menu_item(db, item_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(item, field, value)
    db.commit()
    db.refresh(item)
    return item


def toggle_availability(db: Session, item_id: int) -> MenuItem:
    item = get_menu_item(db, item_id)
    item.is_available = not item.is_available
    db.commit()
    db.refresh(item)
    return item


def delete_menu_item(db: Session, item_id: int) -> None:
    """Delete a dish, dropping it from carts and detaching order snapshots."""
    item = get_menu_item(db, item_id)
    db.query(CartItem).filter(CartItem.menu_item_id == item.id).delete(synchronize_session=False)
    db.query(OrderItem).filter(OrderItem.menu_item_id == item.id).update(
        {OrderItem.menu_item_id: None}, synchronize_session=False
    )
    db.delete(item)
    db.commit()
