import pytest
from datetime import timedelta
from sqlalchemy import select

from medstore.db.models import AdminUser
from medstore.core.security import create_access_token, verify_password
from medstore.services.auth import login, verify_admin_token, ensure_admin


@pytest.mark.asyncio
async def test_login_success(db_session, admin_user, admin_password):
    principal, token = await login(db_session, "admin@rammed.com", admin_password)

    assert principal.id == admin_user.id
    assert principal.role == "admin"
    assert token

    verified = verify_admin_token(token)
    assert verified.id == admin_user.id
    assert verified.email == "admin@rammed.com"
    assert verified.name == "RAMMED Admin"


@pytest.mark.asyncio
async def test_login_invalid_password(db_session, admin_user):
    with pytest.raises(ValueError, match="Invalid credentials"):
        await login(db_session, "admin@rammed.com", "wrong_password")


@pytest.mark.asyncio
async def test_login_unknown_email(db_session, admin_password):
    with pytest.raises(ValueError, match="Invalid credentials"):
        await login(db_session, "nobody@rammed.com", admin_password)


def test_verify_rejects_missing_and_garbage_tokens():
    assert verify_admin_token(None) is None
    assert verify_admin_token("") is None
    assert verify_admin_token("   ") is None
    assert verify_admin_token("not-a-jwt") is None


def test_verify_rejects_expired_token():
    token = create_access_token({"sub": "1", "email": "admin@rammed.com"}, expires_delta=timedelta(seconds=-5))
    assert verify_admin_token(token) is None


def test_verify_rejects_token_without_subject():
    token = create_access_token({"email": "admin@rammed.com"})
    assert verify_admin_token(token) is None


@pytest.mark.asyncio
async def test_ensure_admin_creates_once(db_session):
    admin, created = await ensure_admin(db_session, "owner@rammed.com", "first-pass-123", "Owner")
    assert created
    assert verify_password("first-pass-123", admin.password_hash)

    again, created_again = await ensure_admin(db_session, "owner@rammed.com", "other-pass-456", "Owner")
    assert not created_again
    assert again.id == admin.id
    assert verify_password("first-pass-123", again.password_hash)


@pytest.mark.asyncio
async def test_ensure_admin_reset_replaces_password(db_session):
    await ensure_admin(db_session, "owner@rammed.com", "first-pass-123", "Owner")
    admin, created = await ensure_admin(db_session, "owner@rammed.com", "new-pass-456", "Owner", reset=True)

    assert created
    assert verify_password("new-pass-456", admin.password_hash)

    result = await db_session.execute(select(AdminUser).where(AdminUser.email == "owner@rammed.com"))
    assert len(result.scalars().all()) == 1
