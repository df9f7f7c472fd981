"""Application models package."""

from eatfreshly.models.app_setting import AppSetting
from eatfreshly.models.audit_log import AuditLog
from eatfreshly.models.cart import Cart, CartItem
from eatfreshly.models.contact import ContactMessage
from eatfreshly.models.email import EmailLog, EmailTemplate
from eatfreshly.models.menu import MenuItem
from eatfreshly.models.order import Order, OrderItem
from eatfreshly.models.promotion import Promotion
from eatfreshly.models.review import Review
from eatfreshly.models.subscriber import Subscriber
from eatfreshly.models.user import User

__all__ = [
    "AppSetting", "AuditLog", "Cart", "CartItem", "ContactMessage", "EmailLog", "EmailTemplate",
    "MenuItem", "Order", "OrderItem", "Promotion", "Review", "Subscriber", "User",
]
