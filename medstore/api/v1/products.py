from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from medstore.api.dependencies import get_current_admin, normalize_pagination, paginated
from medstore.db.session import get_db
from medstore.schemas.auth import AdminPrincipal
from medstore.schemas.product import ProductCreate
from medstore.services.category import list_categories
from medstore.services.product import list_products, create_product, delete_product


router = APIRouter(prefix="/api/v1/admin", tags=["products"])


@router.get("/products", response_model=dict)
async def get_products(
    page: int = 1,
    limit: int = 20,
    search: Optional[str] = None,
    category_id: Optional[str] = Query(None, alias="categoryId"),
    admin: AdminPrincipal = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    page, limit = normalize_pagination(page, limit)

    category_filter = None
    if category_id and category_id != "all":
        try:
            category_filter = int(category_id)
        except ValueError:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid category")

    products, total_count = await list_products(db, page, limit, search, category_filter)
    categories = await list_categories(db)

    body = paginated(
        [product.model_dump(by_alias=True, mode="json") for product in products],
        total_count, page, limit, key="products"
    )
    body["categories"] = [category.model_dump(by_alias=True, mode="json") for category in categories]
    return body


@router.post("/products", response_model=dict)
async def post_product(
    data: ProductCreate,
    admin: AdminPrincipal = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    try:
        product = await create_product(db, admin.id, data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return {"success": True, "product": product.model_dump(by_alias=True, mode="json")}


@router.delete("/products", response_model=dict)
async def remove_product(
    product_id: Optional[int] = Query(None, alias="id"),
    admin: AdminPrincipal = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    if product_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Product ID is required")

    try:
        await delete_product(db, admin.id, product_id)
    except ValueError as e:
        if "not found" in str(e):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return {"success": True, "message": "Product deleted successfully"}
