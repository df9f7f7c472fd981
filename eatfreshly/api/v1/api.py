"""API v1 router composition."""

from fastapi import APIRouter, Depends

from eatfreshly.api.v1.endpoints import (
    admin_catalog,
    admin_content,
    admin_orders,
    admin_reports,
    admin_users,
    auth,
    cart,
    contact,
    menu,
    newsletter,
    orders,
    payments,
    promotions,
    reviews,
    users,
)
from eatfreshly.core.security import require_admin

api_router: APIRouter = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(menu.router, prefix="/menu", tags=["menu"])
api_router.include_router(cart.router, prefix="/cart", tags=["cart"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(payments.router, prefix="/payments", tags=["payments"])
api_router.include_router(promotions.router, prefix="/promotions", tags=["promotions"])
api_router.include_router(reviews.router, prefix="/reviews", tags=["reviews"])
api_router.include_router(newsletter.router, prefix="/newsletter", tags=["newsletter"])
api_router.include_router(contact.router, prefix="/contact", tags=["contact"])

admin_router: APIRouter = APIRouter(dependencies=[Depends(require_admin)])
admin_router.include_router(admin_catalog.router)
admin_router.include_router(admin_users.router)
admin_router.include_router(admin_orders.router)
admin_router.include_router(admin_content.router)
admin_router.include_router(admin_reports.router)
api_router.include_router(admin_router, prefix="/admin", tags=["admin"])
