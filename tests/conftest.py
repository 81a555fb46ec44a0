import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-testing-only")

from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from medstore.core.security import hash_password
from medstore.db.base import Base
from medstore.db.models import AdminUser, Category, Product, Customer, Order, OrderItem, Payment, OrderStatus


DATABASE_URL = "sqlite+aiosqlite:///:memory:"
ADMIN_PASSWORD = "admin-pass-123"


@pytest.fixture
async def engine():
    engine = create_async_engine(DATABASE_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(engine):
    AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
def admin_password():
    return ADMIN_PASSWORD


@pytest.fixture
async def admin_user(db_session):
    admin = AdminUser(
        email="admin@rammed.com",
        password_hash=hash_password(ADMIN_PASSWORD),
        name="RAMMED Admin",
        role="admin"
    )
    db_session.add(admin)
    await db_session.commit()
    await db_session.refresh(admin)
    return admin


@pytest.fixture
async def category(db_session):
    category = Category(name="Endoscopy Equipment", slug="endoscopy", description="Endoscopic systems")
    db_session.add(category)
    await db_session.commit()
    await db_session.refresh(category)
    return category


@pytest.fixture
def product_factory(db_session, category):
    counter = {"n": 0}

    async def make(name=None, price="1000.00", sku=None):
        counter["n"] += 1
        n = counter["n"]
        product = Product(
            name=name or f"Product {n}",
            slug=f"product-{n}",
            sku=sku or f"RAM-{n:03d}",
            price=Decimal(price),
            stock=10,
            image_urls=[],
            category_id=category.id
        )
        db_session.add(product)
        await db_session.commit()
        await db_session.refresh(product)
        return product

    return make


@pytest.fixture
def customer_factory(db_session):
    counter = {"n": 0}

    async def make(first_name="John", last_name="Doe", email=None, company=None):
        counter["n"] += 1
        customer = Customer(
            email=email or f"customer{counter['n']}@hospital.com",
            first_name=first_name,
            last_name=last_name,
            phone="+1-555-0123",
            company=company
        )
        db_session.add(customer)
        await db_session.commit()
        await db_session.refresh(customer)
        return customer

    return make


@pytest.fixture
def order_factory(db_session):
    """Create an order; ``items`` is a list of (product, quantity, total_price)."""
    counter = {"n": 0}

    async def make(customer, total, created_at: datetime, status=OrderStatus.CONFIRMED, items=(), payment=None):
        counter["n"] += 1
        order = Order(
            order_number=f"ORD-{counter['n']:04d}",
            customer_id=customer.id,
            status=status,
            total_amount=Decimal(total),
            currency="INR",
            created_at=created_at,
            updated_at=created_at
        )
        db_session.add(order)
        await db_session.flush()

        for product, quantity, line_total in items:
            line_total = Decimal(line_total)
            db_session.add(OrderItem(
                order_id=order.id,
                product_id=product.id,
                quantity=quantity,
                unit_price=line_total / quantity,
                total_price=line_total
            ))

        if payment:
            db_session.add(Payment(
                order_id=order.id,
                amount=Decimal(total),
                status=payment,
                payment_method="card",
                created_at=created_at
            ))

        await db_session.commit()
        await db_session.refresh(order)
        return order

    return make
