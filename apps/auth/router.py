from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from apps.auth.schemas import AdminLogin, LoginResponse
from apps.auth.service import AuthService
from models.base import get_db

router = APIRouter(prefix="/api", tags=["Authentication"])


@router.post("/login", response_model=LoginResponse)
async def login(payload: AdminLogin, db: AsyncSession = Depends(get_db)):
    """
    Check admin credentials. No session or token is issued; the client keeps
    the returned admin id and sends it as X-Actor-Id on writes.
    """
    admin = await AuthService.authenticate_admin(db, payload)
    return LoginResponse(message="Login successful.", admin_id=admin.id, email=admin.email, name=admin.name)
