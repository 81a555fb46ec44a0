from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from medstore.db.models import Category
from medstore.schemas.product import CategoryResponse


async def list_categories(db: AsyncSession) -> list[CategoryResponse]:
    result = await db.execute(
        select(Category).order_by(Category.name)
    )
    categories = result.scalars().all()

    return [
        CategoryResponse(
            id=cat.id,
            name=cat.name,
            slug=cat.slug
        )
        for cat in categories
    ]
