"""Order request and response schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from eatfreshly.schemas.user import DeliveryAddress


class OrderCreate(BaseModel):
    """Checkout payload; items come from the caller's cart."""

    delivery_address: DeliveryAddress
    payment_method: str = "Cash on Delivery"
    special_instructions: str | None = Field(default=None, max_length=500)
    promo_code: str | None = None


class OrderItemRead(BaseModel):
    menu_item_id: int | None
    name: str
    category: str | None = None
    unit_price: float
    quantity: int

    model_config = ConfigDict(from_attributes=True)


class OrderRead(BaseModel):
    """Serialized order with item snapshots."""

    id: int
    order_number: str
    user_id: int
    status: str
    subtotal: float
    discount_amount: float
    promo_code: str | None = None
    total_price: float
    delivery_address: dict
    payment_method: str
    payment_status: str
    payment_intent_id: str | None = None
    special_instructions: str | None = None
    estimated_delivery_time: datetime | None = None
    created_at: datetime
    status_updated_at: datetime | None = None
    confirmed_at: datetime | None = None
    delivered_at: datetime | None = None
    cancelled_at: datetime | None = None
    items: list[OrderItemRead]

    model_config = ConfigDict(from_attributes=True)


class AdminOrderRead(OrderRead):
    customer_name: str | None = None
    customer_email: str | None = None


class OrderStatusUpdate(BaseModel):
    """Backend status value or its storefront display label."""

    status: str = Field(min_length=1)
