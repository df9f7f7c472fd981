"""Cart schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from eatfreshly.models.cart import MAX_QUANTITY_PER_ITEM


class CartItemAdd(BaseModel):
    menu_item_id: int
    quantity: int = Field(default=1, ge=1, le=MAX_QUANTITY_PER_ITEM)


class CartItemUpdate(BaseModel):
    quantity: int = Field(ge=1, le=MAX_QUANTITY_PER_ITEM)


class CartItemRead(BaseModel):
    id: int
    menu_item_id: int
    name: str
    category: str
    price: float
    image_url: str
    quantity: int
    line_total: float


class CartRead(BaseModel):
    """Cart with derived totals over available items."""

    id: int | None
    items: list[CartItemRead]
    total_amount: float
    total_items: int
    last_updated: datetime | None = None
