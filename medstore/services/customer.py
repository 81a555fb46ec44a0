from typing import Optional
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_, case

from medstore.db.models import Customer, Order, OrderStatus
from medstore.schemas.customer import CustomerResponse


async def list_customers(
    db: AsyncSession,
    page: int = 1,
    limit: int = 20,
    search: Optional[str] = None
) -> tuple[list[CustomerResponse], int]:
    offset = (page - 1) * limit

    filters = []
    if search:
        pattern = f"%{search}%"
        filters.append(or_(
            Customer.email.ilike(pattern),
            Customer.first_name.ilike(pattern),
            Customer.last_name.ilike(pattern),
            Customer.company.ilike(pattern)
        ))

    result = await db.execute(
        select(Customer)
        .where(*filters)
        .order_by(Customer.created_at.desc(), Customer.id.desc())
        .offset(offset)
        .limit(limit)
    )
    customers = result.scalars().all()

    count_result = await db.execute(select(func.count(Customer.id)).where(*filters))
    total_count = count_result.scalar()

    stats = {}
    if customers:
        not_cancelled = Order.status != OrderStatus.CANCELLED
        stats_result = await db.execute(
            select(
                Order.customer_id,
                func.sum(case((not_cancelled, Order.total_amount), else_=0)),
                func.count(case((not_cancelled, Order.id))),
                func.max(Order.created_at)
            )
            .where(Order.customer_id.in_([c.id for c in customers]))
            .group_by(Order.customer_id)
        )
        stats = {row[0]: row[1:] for row in stats_result.all()}

    responses = []
    for customer in customers:
        total_spent, order_count, last_order_date = stats.get(customer.id, (None, 0, None))
        responses.append(CustomerResponse(
            id=customer.id,
            email=customer.email,
            first_name=customer.first_name,
            last_name=customer.last_name,
            phone=customer.phone,
            company=customer.company,
            created_at=customer.created_at,
            total_spent=Decimal(str(total_spent or 0)).quantize(Decimal("0.01")),
            order_count=order_count or 0,
            last_order_date=last_order_date
        ))

    return responses, total_count
