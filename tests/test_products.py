import pytest
from datetime import datetime
from decimal import Decimal
from sqlalchemy import select

from medstore.db.models import AuditLog, Product
from medstore.schemas.product import ProductCreate
from medstore.services.product import list_products, create_product, delete_product, slugify
from medstore.services.category import list_categories


def test_slugify():
    assert slugify("RAMMED Pro Endoscope HD") == "rammed-pro-endoscope-hd"
    assert slugify("  X-Ray / 4K  ") == "x-ray-4k"


@pytest.mark.asyncio
async def test_create_product(db_session, admin_user, category):
    data = ProductCreate(
        name="RAMMED Digital X-Ray System",
        sku="RAM-XRAY-003",
        price=Decimal("85000.00"),
        stock=3,
        shortDesc="Advanced digital X-ray system",
        imageUrls=["/images/products/xray-1.jpg"],
        specifications={"Detector Size": "17\" x 17\""},
        categoryId=category.id
    )

    product = await create_product(db_session, admin_user.id, data)

    assert product.sku == "RAM-XRAY-003"
    assert product.slug.startswith("rammed-digital-x-ray-system-")
    assert product.currency == "INR"
    assert product.category_name == "Endoscopy Equipment"
    assert product.image_urls == ["/images/products/xray-1.jpg"]
    assert product.is_active

    result = await db_session.execute(select(AuditLog).where(AuditLog.action == "PRODUCT_CREATE"))
    assert result.scalar_one().entity_id == product.id


@pytest.mark.asyncio
async def test_create_product_requires_fields(db_session, admin_user, category):
    with pytest.raises(ValueError, match="Name, SKU, price, and category are required"):
        await create_product(db_session, admin_user.id, ProductCreate(name="Scope", categoryId=category.id))


@pytest.mark.asyncio
async def test_create_product_duplicate_sku(db_session, admin_user, category, product_factory):
    await product_factory("Forceps", sku="RAM-FORC-002")

    data = ProductCreate(name="Forceps Copy", sku="RAM-FORC-002", price=Decimal("450.00"), categoryId=category.id)
    with pytest.raises(ValueError, match="SKU already exists"):
        await create_product(db_session, admin_user.id, data)


@pytest.mark.asyncio
async def test_list_products_search_and_category(db_session, category, product_factory):
    await product_factory("HD Endoscope", sku="RAM-ENDO-001")
    await product_factory("Surgical Forceps", sku="RAM-FORC-002")

    products, total = await list_products(db_session, search="forceps")
    assert total == 1
    assert products[0].sku == "RAM-FORC-002"
    assert products[0].category_slug == "endoscopy"

    by_sku, total = await list_products(db_session, search="ENDO")
    assert total == 1

    in_category, total = await list_products(db_session, category_id=category.id)
    assert total == 2

    empty, total = await list_products(db_session, category_id=category.id + 1)
    assert total == 0

    categories = await list_categories(db_session)
    assert [c.slug for c in categories] == ["endoscopy"]


@pytest.mark.asyncio
async def test_delete_product(db_session, admin_user, product_factory):
    product = await product_factory("Retractor")

    await delete_product(db_session, admin_user.id, product.id)

    result = await db_session.execute(select(Product).where(Product.id == product.id))
    assert result.scalar_one_or_none() is None

    with pytest.raises(ValueError, match="Product not found"):
        await delete_product(db_session, admin_user.id, product.id)


@pytest.mark.asyncio
async def test_delete_product_with_orders_is_refused(db_session, admin_user, product_factory, customer_factory, order_factory):
    product = await product_factory("Endoscope")
    customer = await customer_factory()
    await order_factory(customer, "100.00", datetime(2026, 10, 1), items=[(product, 1, "100.00")])

    with pytest.raises(ValueError, match="associated orders"):
        await delete_product(db_session, admin_user.id, product.id)
