import logging
from fastapi import APIRouter, HTTPException, status, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from medstore.api.dependencies import get_current_admin
from medstore.core.config import settings
from medstore.db.session import get_db
from medstore.schemas.auth import LoginRequest, LoginResponse, AdminPrincipal
from medstore.services.auth import login

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/admin/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login_route(request: LoginRequest, response: Response, db: AsyncSession = Depends(get_db)):
    try:
        admin, token = await login(db, request.email, request.password)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))

    response.set_cookie(
        key=settings.ADMIN_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.ADMIN_TOKEN_EXPIRE_HOURS * 60 * 60,
    )
    return LoginResponse(admin=admin)


@router.post("/logout", status_code=status.HTTP_200_OK)
async def logout(response: Response):
    response.delete_cookie(settings.ADMIN_COOKIE_NAME)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=AdminPrincipal)
async def me(admin: AdminPrincipal = Depends(get_current_admin)):
    return admin
