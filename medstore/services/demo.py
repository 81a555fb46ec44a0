import logging
from decimal import Decimal
from typing import Optional
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from medstore.db.models import Category, Product, Customer, Order, OrderItem, Payment, OrderStatus, utcnow

logger = logging.getLogger(__name__)


DEMO_CATEGORIES = [
    {
        "name": "Endoscopy Equipment",
        "slug": "endoscopy",
        "description": "Advanced endoscopic systems and accessories for minimally invasive procedures",
        "image_url": "/images/categories/endoscopy.jpg",
    },
    {
        "name": "Surgical Instruments",
        "slug": "surgical-instruments",
        "description": "Precision surgical instruments for various medical procedures",
        "image_url": "/images/categories/surgical-instruments.jpg",
    },
    {
        "name": "Medical Imaging",
        "slug": "medical-imaging",
        "description": "State-of-the-art imaging solutions for accurate diagnosis",
        "image_url": "/images/categories/medical-imaging.jpg",
    },
]

DEMO_PRODUCTS = [
    {
        "name": "RAMMED Pro Endoscope HD",
        "slug": "rammed-pro-endoscope-hd",
        "sku": "RAM-ENDO-001",
        "short_desc": "Professional HD endoscope with advanced imaging",
        "price": "12500.00",
        "stock": 15,
        "category": "endoscopy",
        "specifications": {"Resolution": "1920x1080 Full HD", "Field of View": "120 degrees", "Warranty": "2 years"},
    },
    {
        "name": "RAMMED Surgical Forceps Set",
        "slug": "rammed-surgical-forceps-set",
        "sku": "RAM-FORC-002",
        "short_desc": "Premium surgical forceps set - various sizes",
        "price": "450.00",
        "stock": 50,
        "category": "surgical-instruments",
        "specifications": {"Material": "316L Stainless Steel", "Pieces": "12 pieces", "Warranty": "1 year"},
    },
    {
        "name": "RAMMED Digital X-Ray System",
        "slug": "rammed-digital-xray-system",
        "sku": "RAM-XRAY-003",
        "short_desc": "Advanced digital X-ray system with high resolution",
        "price": "85000.00",
        "stock": 3,
        "category": "medical-imaging",
        "specifications": {"Resolution": "4K Ultra HD", "Detector Size": "17\" x 17\"", "Warranty": "3 years"},
    },
    {
        "name": "RAMMED Laparoscopic Camera System",
        "slug": "rammed-laparoscopic-camera",
        "sku": "RAM-LAPARO-004",
        "short_desc": "4K laparoscopic camera for minimally invasive surgery",
        "price": "28500.00",
        "stock": 8,
        "category": "endoscopy",
        "specifications": {"Resolution": "4K UHD (3840x2160)", "Frame Rate": "60fps", "Warranty": "2 years"},
    },
    {
        "name": "RAMMED Ultrasound Scanner Pro",
        "slug": "rammed-ultrasound-scanner-pro",
        "sku": "RAM-ULTRA-005",
        "short_desc": "Portable ultrasound scanner with advanced imaging",
        "price": "35000.00",
        "stock": 6,
        "category": "medical-imaging",
        "specifications": {"Display": "15\" HD touchscreen", "Imaging Modes": "2D, 3D, 4D, Doppler", "Warranty": "2 years"},
    },
]

DEMO_CUSTOMER = {
    "email": "john.doe@hospital.com",
    "first_name": "John",
    "last_name": "Doe",
    "phone": "+1-555-0123",
    "company": "Metropolitan Hospital",
}

DEMO_ORDER_NUMBER = "ORD-2024-001"
# (sku, quantity)
DEMO_ORDER_LINES = [("RAM-ENDO-001", 1), ("RAM-FORC-002", 1)]


async def _get_or_create(db: AsyncSession, model, lookup: dict, values: dict):
    result = await db.execute(select(model).filter_by(**lookup))
    instance = result.scalar_one_or_none()
    if instance:
        return instance, False

    instance = model(**lookup, **values)
    db.add(instance)
    await db.flush()
    return instance, True


async def seed_demo_catalog(db: AsyncSession, now: Optional[datetime] = None) -> dict:
    """
    Insert the sample catalog: categories, products, one customer and one
    confirmed order with a succeeded payment.

    Rows are matched on slug, SKU, email and order number, so running it twice
    leaves the store unchanged. Returns the number of rows created per entity.
    """
    now = now or utcnow()
    created = {"categories": 0, "products": 0, "customers": 0, "orders": 0}

    categories = {}
    for data in DEMO_CATEGORIES:
        values = {k: v for k, v in data.items() if k != "slug"}
        category, is_new = await _get_or_create(db, Category, {"slug": data["slug"]}, values)
        categories[category.slug] = category
        created["categories"] += is_new

    products = {}
    for data in DEMO_PRODUCTS:
        product, is_new = await _get_or_create(db, Product, {"sku": data["sku"]}, {
            "name": data["name"],
            "slug": data["slug"],
            "short_desc": data["short_desc"],
            "price": Decimal(data["price"]),
            "stock": data["stock"],
            "image_urls": [],
            "specifications": data["specifications"],
            "category_id": categories[data["category"]].id,
        })
        products[product.sku] = product
        created["products"] += is_new

    values = {k: v for k, v in DEMO_CUSTOMER.items() if k != "email"}
    customer, is_new = await _get_or_create(db, Customer, {"email": DEMO_CUSTOMER["email"]}, values)
    created["customers"] += is_new

    result = await db.execute(select(Order).where(Order.order_number == DEMO_ORDER_NUMBER))
    if result.scalar_one_or_none() is None:
        lines = [(products[sku], quantity) for sku, quantity in DEMO_ORDER_LINES]
        total = sum((product.price * quantity for product, quantity in lines), Decimal("0.00"))

        order = Order(
            order_number=DEMO_ORDER_NUMBER,
            customer_id=customer.id,
            status=OrderStatus.CONFIRMED,
            total_amount=total,
            currency="USD",
            shipping_address={
                "firstName": customer.first_name,
                "lastName": customer.last_name,
                "company": customer.company,
                "address1": "123 Medical Center Dr",
                "address2": "Suite 100",
                "city": "New York",
                "state": "NY",
                "postalCode": "10001",
                "country": "US",
                "phone": customer.phone,
            },
            created_at=now,
            updated_at=now
        )
        db.add(order)
        await db.flush()

        for product, quantity in lines:
            db.add(OrderItem(
                order_id=order.id,
                product_id=product.id,
                quantity=quantity,
                unit_price=product.price,
                total_price=product.price * quantity
            ))
        db.add(Payment(
            order_id=order.id,
            amount=total,
            status="succeeded",
            payment_method="card",
            created_at=now
        ))
        created["orders"] += 1

    await db.commit()
    logger.info(f"Demo catalog seeded: {created}")
    return created
