from typing import List, Optional
from datetime import datetime

from medstore.schemas.base import CamelModel, Money


class OrderCustomer(CamelModel):
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    company: Optional[str] = None


class OrderItemResponse(CamelModel):
    id: int
    product_id: Optional[int] = None
    product_name: Optional[str] = None
    product_sku: Optional[str] = None
    product_price: Optional[Money] = None
    quantity: int
    unit_price: Money
    total_price: Money


class PaymentResponse(CamelModel):
    amount: Money
    status: str
    payment_method: Optional[str] = None
    created_at: datetime


class OrderResponse(CamelModel):
    id: int
    order_number: str
    status: str
    total_amount: Money
    currency: str
    notes: Optional[str] = None
    shipping_address: Optional[dict] = None
    created_at: datetime
    updated_at: datetime
    customer: Optional[OrderCustomer] = None
    items: List[OrderItemResponse] = []
    payments: List[PaymentResponse] = []


class OrderStatusUpdate(CamelModel):
    order_id: Optional[int] = None
    status: Optional[str] = None
    notes: Optional[str] = None
