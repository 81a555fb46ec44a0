import logging
from fastapi import HTTPException, status, Request

from medstore.core.config import settings
from medstore.schemas.auth import AdminPrincipal
from medstore.services.auth import verify_admin_token

logger = logging.getLogger(__name__)


async def get_current_admin(request: Request) -> AdminPrincipal:
    """Verify the admin cookie before any handler touches the database."""
    token = request.cookies.get(settings.ADMIN_COOKIE_NAME)
    admin = verify_admin_token(token)

    if admin is None:
        logger.warning(f"Rejected unauthenticated request to {request.url.path}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )

    return admin


def normalize_pagination(page: int, limit: int, default_limit: int = 20) -> tuple[int, int]:
    if page < 1:
        page = 1
    if limit < 1 or limit > 100:
        limit = default_limit
    return page, limit


def paginated(items: list, total: int, page: int, limit: int, key: str = "items") -> dict:
    return {
        key: items,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": (total + limit - 1) // limit
        }
    }
