from typing import Optional
from decimal import Decimal
from datetime import datetime

from medstore.schemas.base import CamelModel, Money


class CustomerResponse(CamelModel):
    id: int
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    company: Optional[str] = None
    created_at: datetime
    total_spent: Money = Decimal("0.00")
    order_count: int = 0
    last_order_date: Optional[datetime] = None
