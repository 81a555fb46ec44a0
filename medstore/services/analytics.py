import logging
import re
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from sqlalchemy import select, func, Date
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from medstore.core.config import settings
from medstore.core.exceptions import translate_store_error
from medstore.db.models import Order, OrderItem, Product, OrderStatus, utcnow
from medstore.schemas.analytics import (
    AnalyticsReport,
    SalesSummary,
    StatusBreakdown,
    DailySales,
    TopProduct,
    ProductBrief,
    RecentOrder,
    RecentOrderItem,
    CustomerContact,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")
CENTS = Decimal("0.01")

STATUS_ORDER = list(OrderStatus)

LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def parse_window_days(raw: Optional[str], default: Optional[int] = None) -> int:
    """
    Normalize the caller-supplied window.

    Reads the leading run of ASCII digits, so ``"7.5"`` and ``"7days"`` mean 7.
    Missing, non-numeric, zero and negative values fall back to the default.
    """
    fallback = default if default is not None else settings.ANALYTICS_DEFAULT_WINDOW_DAYS
    if raw is None:
        return fallback
    match = LEADING_INT.match(str(raw))
    if not match:
        return fallback
    days = int(match.group(1))
    if days < 1:
        return fallback
    return days


def window_cutoff(now: datetime, window_days: int) -> datetime:
    # windows reaching past year 1 cover every stored row
    try:
        return now - timedelta(days=window_days)
    except OverflowError:
        return datetime.min


def _money(value) -> Decimal:
    if value is None:
        return ZERO
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def _windowed_sales(cutoff: datetime):
    return (Order.created_at >= cutoff) & (Order.status != OrderStatus.CANCELLED)


async def _summary(db: AsyncSession, cutoff: datetime) -> SalesSummary:
    result = await db.execute(
        select(func.count(Order.id), func.sum(Order.total_amount)).where(_windowed_sales(cutoff))
    )
    total_orders, total_revenue = result.first()
    total_orders = total_orders or 0
    total_revenue = _money(total_revenue)

    average = ZERO
    if total_orders > 0:
        average = _money(total_revenue / total_orders)

    return SalesSummary(
        total_revenue=total_revenue,
        total_orders=total_orders,
        average_order_value=average
    )


async def _orders_by_status(db: AsyncSession, cutoff: datetime) -> list[StatusBreakdown]:
    result = await db.execute(
        select(Order.status, func.count(Order.id), func.sum(Order.total_amount))
        .where(Order.created_at >= cutoff)
        .group_by(Order.status)
    )
    rows = sorted(result.all(), key=lambda row: STATUS_ORDER.index(row[0]))

    return [
        StatusBreakdown(status=status.value, count=count, revenue=_money(revenue))
        for status, count, revenue in rows
    ]


async def _daily_sales(db: AsyncSession, cutoff: datetime) -> list[DailySales]:
    # date() buckets by the stored (UTC) calendar day on both SQLite and PostgreSQL
    sale_date = func.date(Order.created_at, type_=Date).label("sale_date")
    result = await db.execute(
        select(sale_date, func.count(Order.id), func.sum(Order.total_amount))
        .where(_windowed_sales(cutoff))
        .group_by(sale_date)
        .order_by(sale_date.desc())
    )

    return [
        DailySales(sale_date=day, order_count=count, revenue=_money(revenue))
        for day, count, revenue in result.all()
    ]


async def _top_products(db: AsyncSession, cutoff: datetime, limit: int) -> list[TopProduct]:
    revenue = func.sum(OrderItem.total_price).label("revenue")
    quantity = func.sum(OrderItem.quantity).label("quantity")
    result = await db.execute(
        select(OrderItem.product_id, quantity, revenue)
        .select_from(OrderItem)
        .join(Order, OrderItem.order_id == Order.id)
        .where(_windowed_sales(cutoff))
        .group_by(OrderItem.product_id)
        .order_by(revenue.desc(), OrderItem.product_id.asc().nulls_last())
        .limit(limit)
    )
    ranked = result.all()
    if not ranked:
        return []

    product_ids = [product_id for product_id, _, _ in ranked]
    products_result = await db.execute(select(Product).where(Product.id.in_(product_ids)))
    products = {product.id: product for product in products_result.scalars().all()}

    top = []
    for product_id, qty, total in ranked:
        product = products.get(product_id)
        top.append(TopProduct(
            product_id=product_id,
            quantity=qty or 0,
            revenue=_money(total),
            product=ProductBrief(
                id=product.id,
                name=product.name,
                sku=product.sku,
                price=product.price
            ) if product else None
        ))

    return top


async def _recent_orders(db: AsyncSession, limit: int) -> list[RecentOrder]:
    result = await db.execute(
        select(Order)
        .options(
            selectinload(Order.customer),
            selectinload(Order.items).selectinload(OrderItem.product),
        )
        .order_by(Order.created_at.desc(), Order.id.desc())
        .limit(limit)
    )
    orders = result.scalars().all()

    recent = []
    for order in orders:
        customer = order.customer
        recent.append(RecentOrder(
            id=order.id,
            order_number=order.order_number,
            status=order.status.value,
            total_amount=order.total_amount,
            currency=order.currency,
            created_at=order.created_at,
            customer=CustomerContact(
                first_name=customer.first_name,
                last_name=customer.last_name,
                email=customer.email
            ) if customer else None,
            items=[
                RecentOrderItem(
                    id=item.id,
                    product_id=item.product_id,
                    product_name=item.product.name if item.product else None,
                    product_sku=item.product.sku if item.product else None,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    total_price=item.total_price
                )
                for item in sorted(order.items, key=lambda i: i.id)
            ]
        ))

    return recent


async def compute_analytics(
    db: AsyncSession,
    window_days: int,
    now: Optional[datetime] = None
) -> AnalyticsReport:
    """
    Build the dashboard report for the trailing ``window_days``.

    Each view is a separate read; the report is not taken from a single
    snapshot. Any failing query aborts the whole report.
    """
    now = now or utcnow()
    cutoff = window_cutoff(now, window_days)
    logger.info(f"Computing analytics for window_days={window_days}, cutoff={cutoff.isoformat()}")

    operation = "summary"
    try:
        summary = await _summary(db, cutoff)
        operation = "orders_by_status"
        orders_by_status = await _orders_by_status(db, cutoff)
        operation = "daily_sales"
        daily_sales = await _daily_sales(db, cutoff)
        operation = "top_products"
        top_products = await _top_products(db, cutoff, settings.ANALYTICS_TOP_PRODUCTS_LIMIT)
        operation = "recent_orders"
        recent_orders = await _recent_orders(db, settings.ANALYTICS_RECENT_ORDERS_LIMIT)
    except SQLAlchemyError as e:
        logger.error(f"Analytics query '{operation}' failed: {str(e)}")
        raise translate_store_error(operation, e) from e

    return AnalyticsReport(
        window_days=window_days,
        generated_at=now,
        summary=summary,
        orders_by_status=orders_by_status,
        daily_sales=daily_sales,
        top_products=top_products,
        recent_orders=recent_orders
    )
