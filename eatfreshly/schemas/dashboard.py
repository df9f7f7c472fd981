"""Admin analytics schemas."""

from pydantic import BaseModel


class DashboardMetrics(BaseModel):
    today_orders: int
    today_revenue: float
    month_orders: int
    month_revenue: float
    month_new_customers: int
    total_customers: int
    total_menu_items: int
    active_menu_items: int
    pending_orders: int


class RevenuePoint(BaseModel):
    date: str
    revenue: float
    orders: int


class StatusCount(BaseModel):
    status: str
    count: int


class CategoryStat(BaseModel):
    category: str
    revenue: float
    quantity: int
    orders: int = 0


class ItemPrediction(BaseModel):
    """Recent sales of one item with its projected demand."""

    menu_item_id: int | None
    name: str
    category: str | None
    current_sales: int
    predicted_sales: int
    revenue: float
    trend_factor: float
    trend: str
    confidence: int


class SalesForecast(BaseModel):
    average_daily_sales: float
    next_week: float
    next_month: float
    growth_rate: float
    confidence: int


class Predictions(BaseModel):
    top_items: list[ItemPrediction]
    popular_categories: list[CategoryStat]
    sales_forecast: SalesForecast


class Activity(BaseModel):
    type: str
    message: str
    timestamp: str
    reference_id: int


class TopItem(BaseModel):
    menu_item_id: int | None
    name: str
    category: str | None
    quantity: int
    revenue: float


class OrderStats(BaseModel):
    total_orders: int
    delivered_orders: int
    cancelled_orders: int
    total_revenue: float
    average_order_value: float
    by_status: dict[str, int]
    by_payment_method: dict[str, int]
