import logging

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from apps.auth.schemas import AdminLogin
from common.hashing import hash_password, verify_password
from models.admin import Admin
from settings.config import get_settings

logger = logging.getLogger(__name__)


def http_unauthorized(message: str = "Invalid email or password.") -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=message)


class AuthService:
    @staticmethod
    async def authenticate_admin(db: AsyncSession, payload: AdminLogin) -> Admin:
        res = await db.execute(select(Admin).where(func.lower(Admin.email) == payload.email.lower()))
        admin = res.scalar_one_or_none()
        if not admin or not verify_password(payload.password, admin.password_hash):
            logger.warning("Failed login attempt for %s", payload.email)
            raise http_unauthorized()
        logger.info("Admin %s logged in", admin.id)
        return admin

    @staticmethod
    async def ensure_bootstrap_admin(db: AsyncSession) -> None:
        """
        Create the admin from ADMIN_EMAIL / ADMIN_PASSWORD when the table has none.
        """
        settings = get_settings()
        res = await db.execute(select(func.count(Admin.id)))
        if res.scalar_one():
            return
        db.add(
            Admin(
                email=settings.ADMIN_EMAIL.lower(),
                name=settings.ADMIN_NAME,
                password_hash=hash_password(settings.ADMIN_PASSWORD),
            )
        )
        await db.commit()
        logger.info("Bootstrap admin %s created", settings.ADMIN_EMAIL)
