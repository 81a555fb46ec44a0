import logging
import re
import time
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError

from medstore.core.config import settings
from medstore.db.models import Product, Category, OrderItem, AuditLog
from medstore.schemas.product import ProductCreate, ProductResponse

logger = logging.getLogger(__name__)


def slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower())
    return slug.strip("-")


def _to_response(product: Product, category: Optional[Category]) -> ProductResponse:
    return ProductResponse(
        id=product.id,
        name=product.name,
        slug=product.slug,
        sku=product.sku,
        description=product.description,
        short_desc=product.short_desc,
        price=product.price,
        currency=product.currency,
        stock=product.stock,
        image_urls=product.image_urls or [],
        specifications=product.specifications,
        is_active=product.is_active,
        category_id=product.category_id,
        category_name=category.name if category else None,
        category_slug=category.slug if category else None,
        created_at=product.created_at
    )


async def list_products(
    db: AsyncSession,
    page: int = 1,
    limit: int = 20,
    search: Optional[str] = None,
    category_id: Optional[int] = None
) -> tuple[list[ProductResponse], int]:
    offset = (page - 1) * limit

    filters = []
    if search:
        pattern = f"%{search}%"
        filters.append(or_(
            Product.name.ilike(pattern),
            Product.sku.ilike(pattern),
            Product.description.ilike(pattern)
        ))
    if category_id:
        filters.append(Product.category_id == category_id)

    result = await db.execute(
        select(Product, Category)
        .select_from(Product)
        .outerjoin(Category, Product.category_id == Category.id)
        .where(*filters)
        .order_by(Product.created_at.desc(), Product.id.desc())
        .offset(offset)
        .limit(limit)
    )
    products = [_to_response(product, category) for product, category in result.all()]

    count_result = await db.execute(select(func.count(Product.id)).where(*filters))
    total_count = count_result.scalar()

    return products, total_count


async def create_product(db: AsyncSession, admin_id: int, data: ProductCreate) -> ProductResponse:
    if not data.name or not data.sku or not data.price or not data.category_id:
        raise ValueError("Name, SKU, price, and category are required")

    category_result = await db.execute(select(Category).where(Category.id == data.category_id))
    category = category_result.scalar_one_or_none()
    if not category:
        raise ValueError("Category not found")

    existing = await db.execute(select(Product.id).where(Product.sku == data.sku))
    if existing.scalar_one_or_none() is not None:
        raise ValueError("Product with this SKU already exists")

    product = Product(
        name=data.name,
        slug=f"{slugify(data.name)}-{int(time.time() * 1000)}",
        sku=data.sku,
        description=data.description,
        short_desc=data.short_desc,
        price=data.price,
        currency=data.currency or settings.DEFAULT_CURRENCY,
        stock=data.stock,
        image_urls=data.image_urls,
        specifications=data.specifications,
        category_id=category.id,
        is_active=data.is_active
    )
    db.add(product)
    try:
        await db.flush()
    except IntegrityError:
        # concurrent insert with the same SKU
        await db.rollback()
        raise ValueError("Product with this SKU already exists")

    audit_log = AuditLog(
        admin_id=admin_id,
        action="PRODUCT_CREATE",
        entity="product",
        entity_id=product.id,
        audit_data={"sku": product.sku, "name": product.name}
    )
    db.add(audit_log)
    await db.commit()
    await db.refresh(product)
    logger.info(f"Product created: {product.sku} (id={product.id})")

    return _to_response(product, category)


async def delete_product(db: AsyncSession, admin_id: int, product_id: int) -> None:
    result = await db.execute(select(Product).where(Product.id == product_id))
    product = result.scalar_one_or_none()
    if not product:
        raise ValueError("Product not found")

    items_result = await db.execute(
        select(func.count(OrderItem.id)).where(OrderItem.product_id == product_id)
    )
    if items_result.scalar():
        raise ValueError("Cannot delete product - it has associated orders")

    sku = product.sku
    await db.delete(product)

    audit_log = AuditLog(
        admin_id=admin_id,
        action="PRODUCT_DELETE",
        entity="product",
        entity_id=product_id,
        audit_data={"sku": sku}
    )
    db.add(audit_log)
    await db.commit()
    logger.info(f"Product deleted: {sku} (id={product_id})")
