"""Promotion schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from eatfreshly.schemas.common import reject_explicit_nulls
from eatfreshly.utils.time import as_utc


class PromotionCreate(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=500)
    promo_code: str | None = Field(default=None, max_length=32)
    discount_type: Literal["percent", "fixed"] = "percent"
    discount_value: Decimal = Field(ge=0)
    minimum_order_amount: Decimal = Field(default=Decimal("0"), ge=0)
    max_discount_amount: Decimal | None = Field(default=None, ge=0)
    valid_from: datetime
    valid_to: datetime
    is_active: bool = True
    image_url: str | None = None
    usage_limit: int | None = Field(default=None, ge=1)

    @field_validator("valid_from", "valid_to")
    @classmethod
    def _utc_window(cls, value: datetime | None) -> datetime | None:
        return as_utc(value) if value is not None else None

    @field_validator("promo_code")
    @classmethod
    def _upper_code(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip().upper()

    @model_validator(mode="after")
    def _check_window_and_value(self) -> "PromotionCreate":
        if self.valid_to <= self.valid_from:
            raise ValueError("valid_to must be after valid_from")
        if self.discount_type == "percent" and self.discount_value > 100:
            raise ValueError("Percent discount cannot exceed 100")
        return self


class PromotionUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, min_length=1, max_length=500)
    promo_code: str | None = Field(default=None, max_length=32)
    discount_type: Literal["percent", "fixed"] | None = None
    discount_value: Decimal | None = Field(default=None, ge=0)
    minimum_order_amount: Decimal | None = Field(default=None, ge=0)
    max_discount_amount: Decimal | None = Field(default=None, ge=0)
    valid_from: datetime | None = None
    valid_to: datetime | None = None
    is_active: bool | None = None
    image_url: str | None = None
    usage_limit: int | None = Field(default=None, ge=1)

    @field_validator("valid_from", "valid_to")
    @classmethod
    def _utc_window(cls, value: datetime | None) -> datetime | None:
        return as_utc(value) if value is not None else None

    @field_validator("promo_code")
    @classmethod
    def _upper_code(cls, value: str | None) -> str | None:
        return value.strip().upper() if value else value

    @model_validator(mode="after")
    def _required_columns_not_null(self) -> "PromotionUpdate":
        reject_explicit_nulls(
            self,
            ("title", "description", "discount_type", "discount_value", "minimum_order_amount",
             "valid_from", "valid_to", "is_active"),
        )
        return self


class PromotionRead(BaseModel):
    id: int
    title: str
    description: str
    promo_code: str | None = None
    discount_type: str
    discount_value: float
    minimum_order_amount: float
    max_discount_amount: float | None = None
    valid_from: datetime
    valid_to: datetime
    is_active: bool
    image_url: str | None = None
    usage_limit: int | None = None
    used_count: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PromoValidateRequest(BaseModel):
    promo_code: str = Field(min_length=1)
    order_amount: Decimal = Field(ge=0)


class PromoValidation(BaseModel):
    """Discount that a code grants against a given amount."""

    promotion_id: int
    promo_code: str
    title: str
    discount_type: str
    discount_value: float
    discount_amount: float
    final_amount: float
