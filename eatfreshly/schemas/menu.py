"""Menu API schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator

from eatfreshly.models.menu import MENU_CATEGORIES
from eatfreshly.schemas.common import reject_explicit_nulls


def _check_category(value: str) -> str:
    if value not in MENU_CATEGORIES:
        raise ValueError(f"Category must be one of: {', '.join(MENU_CATEGORIES)}")
    return value


Category = Annotated[str, AfterValidator(_check_category)]


class NutritionalInfo(BaseModel):
    calories: int | None = Field(default=None, ge=0)
    protein: float | None = Field(default=None, ge=0)
    carbs: float | None = Field(default=None, ge=0)
    fat: float | None = Field(default=None, ge=0)
    fiber: float | None = Field(default=None, ge=0)


class MenuItemCreate(BaseModel):
    """Payload for creating a menu item."""

    name: str = Field(min_length=1, max_length=100)
    category: Category
    description: str = Field(min_length=1, max_length=500)
    price: Decimal = Field(ge=0)
    discounted_price: Decimal | None = Field(default=None, ge=0)
    image_url: str = ""
    ingredients: list[str] = Field(default_factory=list)
    nutritional_info: NutritionalInfo | None = None
    is_vegetarian: bool = False
    is_vegan: bool = False
    is_gluten_free: bool = False
    is_available: bool = True
    is_signature: bool = False
    preparation_time: int | None = Field(default=None, ge=1, le=240)


class MenuItemUpdate(BaseModel):
    """Partial update; omitted fields keep their value."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    category: Category | None = None
    description: str | None = Field(default=None, min_length=1, max_length=500)
    price: Decimal | None = Field(default=None, ge=0)
    discounted_price: Decimal | None = Field(default=None, ge=0)
    image_url: str | None = None
    ingredients: list[str] | None = None
    nutritional_info: NutritionalInfo | None = None
    is_vegetarian: bool | None = None
    is_vegan: bool | None = None
    is_gluten_free: bool | None = None
    is_available: bool | None = None
    is_signature: bool | None = None
    preparation_time: int | None = Field(default=None, ge=1, le=240)

    @model_validator(mode="after")
    def _required_columns_not_null(self) -> "MenuItemUpdate":
        reject_explicit_nulls(
            self,
            ("name", "category", "description", "price", "image_url", "ingredients", "is_vegetarian",
             "is_vegan", "is_gluten_free", "is_available", "is_signature"),
        )
        return self


class MenuItemRead(BaseModel):
    """Serialized menu item."""

    id: int
    name: str
    category: str
    description: str
    price: float
    discounted_price: float | None = None
    image_url: str
    ingredients: list[str]
    nutritional_info: dict | None = None
    is_vegetarian: bool
    is_vegan: bool
    is_gluten_free: bool
    is_available: bool
    is_signature: bool
    preparation_time: int | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
