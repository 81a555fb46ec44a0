from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from medstore.api.dependencies import get_current_admin
from medstore.db.session import get_db
from medstore.schemas.auth import AdminPrincipal
from medstore.schemas.analytics import AnalyticsReport
from medstore.services.analytics import compute_analytics, parse_window_days


router = APIRouter(prefix="/api/v1/admin", tags=["analytics"])


@router.get("/analytics", response_model=AnalyticsReport)
async def get_analytics(
    period: Optional[str] = None,
    admin: AdminPrincipal = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    # StoreError subclasses are mapped to 5xx by the application handlers
    window_days = parse_window_days(period)
    return await compute_analytics(db, window_days)
