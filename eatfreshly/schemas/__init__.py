"""Schema exports."""

from eatfreshly.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from eatfreshly.schemas.cart import CartItemAdd, CartItemRead, CartItemUpdate, CartRead
from eatfreshly.schemas.common import ApiResponse, ErrorResponse, Page, PageParams, ok, page_of
from eatfreshly.schemas.menu import MenuItemCreate, MenuItemRead, MenuItemUpdate
from eatfreshly.schemas.order import AdminOrderRead, OrderCreate, OrderItemRead, OrderRead, OrderStatusUpdate
from eatfreshly.schemas.payment import PaymentConfirm, PaymentIntentCreate, PaymentIntentRead
from eatfreshly.schemas.promotion import (
    PromotionCreate,
    PromotionRead,
    PromotionUpdate,
    PromoValidateRequest,
    PromoValidation,
)
from eatfreshly.schemas.user import DeliveryAddress, UserRead

__all__ = [
    "AdminOrderRead",
    "ApiResponse",
    "AuthResponse",
    "CartItemAdd",
    "CartItemRead",
    "CartItemUpdate",
    "CartRead",
    "DeliveryAddress",
    "ErrorResponse",
    "LoginRequest",
    "MenuItemCreate",
    "MenuItemRead",
    "MenuItemUpdate",
    "OrderCreate",
    "OrderItemRead",
    "OrderRead",
    "OrderStatusUpdate",
    "Page",
    "PageParams",
    "PaymentConfirm",
    "PaymentIntentCreate",
    "PaymentIntentRead",
    "PromoValidateRequest",
    "PromoValidation",
    "PromotionCreate",
    "PromotionRead",
    "PromotionUpdate",
    "RegisterRequest",
    "UserRead",
    "ok",
    "page_of",
]
