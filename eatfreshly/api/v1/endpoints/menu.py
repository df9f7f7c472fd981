"""Public menu endpoints."""

from decimal import Decimal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from eatfreshly.db.session import get_db
from eatfreshly.schemas.common import ApiResponse, ok
from eatfreshly.schemas.menu import MenuItemRead
from eatfreshly.services import menu_service

router: APIRouter = APIRouter()


@router.get("", response_model=ApiResponse[list[MenuItemRead]])
def list_menu(
    category: str | None = None,
    search: str | None = None,
    vegetarian: bool | None = None,
    vegan: bool | None = None,
    gluten_free: bool | None = None,
    min_price: Decimal | None = Query(default=None, ge=0),
    max_price: Decimal | None = Query(default=None, ge=0),
    sort: str = "name",
    db: Session = Depends(get_db),
) -> dict:
    """List available dishes with storefront filters."""
    items = menu_service.list_menu_items(
        db,
        category=category,
        search=search,
        vegetarian=vegetarian,
        vegan=vegan,
        gluten_free=gluten_free,
        min_price=min_price,
        max_price=max_price,
        sort=sort,
    )
    return ok(items)


@router.get("/categories", response_model=ApiResponse[list[dict]])
def list_categories(db: Session = Depends(get_db)) -> dict:
    return ok(menu_service.list_categories(db))


@router.get("/signature", response_model=ApiResponse[list[MenuItemRead]])
def list_signature(db: Session = Depends(get_db)) -> dict:
    return ok(menu_service.list_signature_items(db))


@router.get("/{item_id}", response_model=ApiResponse[MenuItemRead])
def get_item(item_id: int, db: Session = Depends(get_db)) -> dict:
    return ok(menu_service.get_menu_item(db, item_id))
