from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from medstore.api.dependencies import get_current_admin, normalize_pagination, paginated
from medstore.db.session import get_db
from medstore.schemas.auth import AdminPrincipal
from medstore.services.customer import list_customers


router = APIRouter(prefix="/api/v1/admin", tags=["customers"])


@router.get("/customers", response_model=dict)
async def get_customers(
    page: int = 1,
    limit: int = 20,
    search: Optional[str] = None,
    admin: AdminPrincipal = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    page, limit = normalize_pagination(page, limit)
    customers, total_count = await list_customers(db, page, limit, search)

    return paginated(
        [customer.model_dump(by_alias=True, mode="json") for customer in customers],
        total_count, page, limit, key="customers"
    )
