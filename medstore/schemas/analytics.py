from pydantic import Field
from typing import List, Optional
from datetime import date, datetime

from medstore.schemas.base import CamelModel, Money


class SalesSummary(CamelModel):
    total_revenue: Money
    total_orders: int
    average_order_value: Money


class StatusBreakdown(CamelModel):
    status: str
    count: int
    revenue: Money


class DailySales(CamelModel):
    sale_date: date = Field(alias="date")
    order_count: int
    revenue: Money


class ProductBrief(CamelModel):
    id: int
    name: str
    sku: str
    price: Money


class TopProduct(CamelModel):
    product_id: Optional[int] = None
    quantity: int
    revenue: Money
    product: Optional[ProductBrief] = None


class CustomerContact(CamelModel):
    first_name: str
    last_name: str
    email: str


class RecentOrderItem(CamelModel):
    id: int
    product_id: Optional[int] = None
    product_name: Optional[str] = None
    product_sku: Optional[str] = None
    quantity: int
    unit_price: Money
    total_price: Money


class RecentOrder(CamelModel):
    id: int
    order_number: str
    status: str
    total_amount: Money
    currency: str
    created_at: datetime
    customer: Optional[CustomerContact] = None
    items: List[RecentOrderItem] = []


class AnalyticsReport(CamelModel):
    window_days: int
    generated_at: datetime
    summary: SalesSummary
    orders_by_status: List[StatusBreakdown]
    daily_sales: List[DailySales]
    top_products: List[TopProduct]
    recent_orders: List[RecentOrder]
