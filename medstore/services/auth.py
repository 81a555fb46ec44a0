import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from medstore.db.models import AdminUser
from medstore.core.security import hash_password, verify_password, create_access_token, verify_token
from medstore.schemas.auth import AdminPrincipal

logger = logging.getLogger(__name__)


def verify_admin_token(token: Optional[str]) -> Optional[AdminPrincipal]:
    """Decode an admin session token. Never touches the database."""
    if not token or not token.strip():
        return None

    payload = verify_token(token)
    if not payload or "sub" not in payload:
        return None

    try:
        admin_id = int(payload["sub"])
    except (TypeError, ValueError):
        return None

    return AdminPrincipal(
        id=admin_id,
        email=payload.get("email", ""),
        role=payload.get("role", "admin"),
        name=payload.get("name")
    )


async def login(db: AsyncSession, email: str, password: str) -> tuple[AdminPrincipal, str]:
    result = await db.execute(select(AdminUser).where(AdminUser.email == email))
    admin = result.scalar_one_or_none()

    if not admin:
        logger.warning(f"Admin login attempt for unknown email: {email}")
        raise ValueError("Invalid credentials")

    if not verify_password(password, admin.password_hash):
        logger.warning(f"Admin login attempt with wrong password: {email}")
        raise ValueError("Invalid credentials")

    token = create_access_token({
        "sub": str(admin.id),
        "email": admin.email,
        "role": admin.role,
        "name": admin.name
    })
    logger.info(f"Admin logged in: {admin.email}")

    principal = AdminPrincipal(id=admin.id, email=admin.email, role=admin.role, name=admin.name)
    return principal, token


async def ensure_admin(
    db: AsyncSession,
    email: str,
    password: str,
    name: str,
    reset: bool = False
) -> tuple[AdminUser, bool]:
    """Create the admin account if missing; with ``reset`` replace it. Returns (admin, created)."""
    result = await db.execute(select(AdminUser).where(AdminUser.email == email))
    existing = result.scalar_one_or_none()

    if existing and not reset:
        logger.info(f"Admin user already exists: {email}")
        return existing, False

    if existing:
        logger.info(f"Resetting admin user: {email}")
        await db.delete(existing)
        await db.flush()

    admin = AdminUser(
        email=email,
        password_hash=hash_password(password),
        name=name,
        role="admin"
    )
    db.add(admin)
    await db.commit()
    await db.refresh(admin)
    logger.info(f"Admin user created: {admin.email}")

    return admin, True
