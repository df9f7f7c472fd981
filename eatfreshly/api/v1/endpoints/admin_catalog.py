"""Back-office menu and promotion management."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from eatfreshly.core.errors import NotFoundError
from eatfreshly.db.session import get_db
from eatfreshly.schemas.common import ApiResponse, Page, PageParams, ok, page_of
from eatfreshly.schemas.menu import MenuItemCreate, MenuItemRead, MenuItemUpdate
from eatfreshly.schemas.promotion import PromotionCreate, PromotionRead, PromotionUpdate
from eatfreshly.services import menu_service, promotion_service

router: APIRouter = APIRouter()


@router.get("/menu", response_model=ApiResponse[list[MenuItemRead]])
def list_menu(
    category: str | None = None,
    search: str | None = None,
    sort: str = "name",
    db: Session = Depends(get_db),
) -> dict:
    """All dishes, unavailable ones included."""
    items = menu_service.list_menu_items(db, category=category, search=search, available_only=False, sort=sort)
    return ok(items)


@router.post("/menu", response_model=ApiResponse[MenuItemRead], status_code=status.HTTP_201_CREATED)
def create_menu_item(payload: MenuItemCreate, db: Session = Depends(get_db)) -> dict:
    return ok(menu_service.create_menu_item(db, payload), "Menu item created")


@router.put("/menu/{item_id}", response_model=ApiResponse[MenuItemRead])
def update_menu_item(item_id: int, payload: MenuItemUpdate, db: Session = Depends(get_db)) -> dict:
    return ok(menu_service.update_menu_item(db, item_id, payload), "Menu item updated")


@router.patch("/menu/{item_id}/toggle", response_model=ApiResponse[MenuItemRead])
def toggle_menu_item(item_id: int, db: Session = Depends(get_db)) -> dict:
    item = menu_service.toggle_availability(db, item_id)
    return ok(item, "Menu item is now available" if item.is_available else "Menu item is now unavailable")


@router.delete("/menu/{item_id}", response_model=ApiResponse[None])
def delete_menu_item(item_id: int, db: Session = Depends(get_db)) -> dict:
    menu_service.delete_menu_item(db, item_id)
    return ok(message="Menu item deleted")


@router.get("/promotions", response_model=ApiResponse[Page[PromotionRead]])
def list_promotions(
    state: str | None = Query(default=None, pattern="^(active|inactive|expired)$"),
    params: PageParams = Depends(),
    db: Session = Depends(get_db),
) -> dict:
    promotions, total = promotion_service.list_promotions(db, offset=params.offset, limit=params.limit, state=state)
    return ok(page_of(promotions, total, params))


@router.get("/promotions/code/{promo_code}", response_model=ApiResponse[PromotionRead])
def find_promotion_by_code(promo_code: str, db: Session = Depends(get_db)) -> dict:
    promotion = promotion_service.find_by_code(db, promo_code)
    if promotion is None:
        raise NotFoundError("Promotion not found")
    return ok(promotion)


@router.get("/promotions/{promotion_id}", response_model=ApiResponse[PromotionRead])
def get_promotion(promotion_id: int, db: Session = Depends(get_db)) -> dict:
    return ok(promotion_service.get_promotion(db, promotion_id))


@router.post("/promotions", response_model=ApiResponse[PromotionRead], status_code=status.HTTP_201_CREATED)
def create_promotion(payload: PromotionCreate, db: Session = Depends(get_db)) -> dict:
    return ok(promotion_service.create_promotion(db, payload), "Promotion created")


@router.put("/promotions/{promotion_id}", response_model=ApiResponse[PromotionRead])
def update_promotion(promotion_id: int, payload: PromotionUpdate, db: Session = Depends(get_db)) -> dict:
    return ok(promotion_service.update_promotion(db, promotion_id, payload), "Promotion updated")


@router.patch("/promotions/{promotion_id}/toggle", response_model=ApiResponse[PromotionRead])
def toggle_promotion(promotion_id: int, db: Session = Depends(get_db)) -> dict:
    return ok(promotion_service.toggle_status(db, promotion_id))


@router.delete("/promotions/{promotion_id}", response_model=ApiResponse[None])
def delete_promotion(promotion_id: int, db: Session = Depends(get_db)) -> dict:
    promotion_service.delete_promotion(db, promotion_id)
    return ok(message="Promotion deleted")
