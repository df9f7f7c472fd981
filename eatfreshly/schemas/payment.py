"""Payment schemas."""

from pydantic import BaseModel, Field

from eatfreshly.schemas.user import DeliveryAddress


class PaymentIntentCreate(BaseModel):
    promo_code: str | None = None


class PaymentIntentRead(BaseModel):
    client_secret: str
    payment_intent_id: str
    amount: float
    currency: str
    discount_amount: float = 0.0


class PaymentConfirm(BaseModel):
    """Places the order once the hosted widget has confirmed the intent."""

    payment_intent_id: str = Field(min_length=1)
    delivery_address: DeliveryAddress
    special_instructions: str | None = Field(default=None, max_length=500)
    promo_code: str | None = None
