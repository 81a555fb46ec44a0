from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from medstore.api.dependencies import get_current_admin, normalize_pagination, paginated
from medstore.db.session import get_db
from medstore.schemas.auth import AdminPrincipal
from medstore.schemas.order import OrderResponse, OrderStatusUpdate
from medstore.services.order import list_orders, update_order_status


router = APIRouter(prefix="/api/v1/admin", tags=["orders"])


@router.get("/orders", response_model=dict)
async def get_orders(
    page: int = 1,
    limit: int = 20,
    status_filter: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = None,
    admin: AdminPrincipal = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    page, limit = normalize_pagination(page, limit)
    try:
        orders, total_count = await list_orders(db, page, limit, status_filter, search)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return paginated(
        [order.model_dump(by_alias=True, mode="json") for order in orders],
        total_count, page, limit, key="orders"
    )


@router.patch("/orders", response_model=OrderResponse)
async def patch_order(
    data: OrderStatusUpdate,
    admin: AdminPrincipal = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    if not data.order_id or not data.status:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Order ID and status are required"
        )

    try:
        return await update_order_status(db, admin.id, data.order_id, data.status, data.notes)
    except ValueError as e:
        if "not found" in str(e):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
