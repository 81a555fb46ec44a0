import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from sqlalchemy.orm import selectinload

from medstore.db.models import Order, OrderItem, Customer, OrderStatus, AuditLog, utcnow
from medstore.schemas.order import OrderResponse, OrderItemResponse, OrderCustomer, PaymentResponse

logger = logging.getLogger(__name__)

VALID_STATUSES = {status.value for status in OrderStatus}


def _to_response(order: Order) -> OrderResponse:
    customer = order.customer
    return OrderResponse(
        id=order.id,
        order_number=order.order_number,
        status=order.status.value,
        total_amount=order.total_amount,
        currency=order.currency,
        notes=order.notes,
        shipping_address=order.shipping_address,
        created_at=order.created_at,
        updated_at=order.updated_at,
        customer=OrderCustomer(
            first_name=customer.first_name,
            last_name=customer.last_name,
            email=customer.email,
            phone=customer.phone,
            company=customer.company
        ) if customer else None,
        items=[
            OrderItemResponse(
                id=item.id,
                product_id=item.product_id,
                product_name=item.product.name if item.product else None,
                product_sku=item.product.sku if item.product else None,
                product_price=item.product.price if item.product else None,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total_price=item.total_price
            )
            for item in sorted(order.items, key=lambda i: i.id)
        ],
        payments=[
            PaymentResponse(
                amount=payment.amount,
                status=payment.status,
                payment_method=payment.payment_method,
                created_at=payment.created_at
            )
            for payment in sorted(order.payments, key=lambda p: p.id)
        ]
    )


def _order_options():
    return (
        selectinload(Order.customer),
        selectinload(Order.items).selectinload(OrderItem.product),
        selectinload(Order.payments),
    )


async def list_orders(
    db: AsyncSession,
    page: int = 1,
    limit: int = 20,
    status: Optional[str] = None,
    search: Optional[str] = None
) -> tuple[list[OrderResponse], int]:
    offset = (page - 1) * limit

    filters = []
    if status and status != "all":
        if status not in VALID_STATUSES:
            raise ValueError("Invalid status")
        filters.append(Order.status == OrderStatus(status))
    if search:
        pattern = f"%{search}%"
        filters.append(or_(
            Order.order_number.ilike(pattern),
            Customer.email.ilike(pattern),
            Customer.first_name.ilike(pattern),
            Customer.last_name.ilike(pattern)
        ))

    query = select(Order).join(Customer, Order.customer_id == Customer.id).where(*filters)
    result = await db.execute(
        query.options(*_order_options())
        .order_by(Order.created_at.desc(), Order.id.desc())
        .offset(offset)
        .limit(limit)
    )
    orders = result.scalars().all()

    count_result = await db.execute(
        select(func.count(Order.id))
        .select_from(Order)
        .join(Customer, Order.customer_id == Customer.id)
        .where(*filters)
    )
    total_count = count_result.scalar()

    return [_to_response(order) for order in orders], total_count


async def update_order_status(
    db: AsyncSession,
    admin_id: int,
    order_id: int,
    status: str,
    notes: Optional[str] = None
) -> OrderResponse:
    if status not in VALID_STATUSES:
        raise ValueError("Invalid status")

    result = await db.execute(select(Order).where(Order.id == order_id))
    order = result.scalar_one_or_none()
    if not order:
        raise ValueError("Order not found")

    previous = order.status.value
    order.status = OrderStatus(status)
    if notes:
        order.notes = notes
    order.updated_at = utcnow()
    await db.flush()

    audit_log = AuditLog(
        admin_id=admin_id,
        action="ORDER_STATUS_UPDATE",
        entity="order",
        entity_id=order.id,
        audit_data={"from": previous, "to": status}
    )
    db.add(audit_log)
    await db.commit()
    logger.info(f"Order {order.order_number} status changed {previous} -> {status} by admin {admin_id}")

    refreshed = await db.execute(
        select(Order).where(Order.id == order_id).options(*_order_options()).execution_options(populate_existing=True)
    )
    return _to_response(refreshed.scalar_one())
