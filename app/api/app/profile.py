"""프로필 라우터 — 내 역할, 부서, 위반 상태.

Profile router. A disabled account never reaches this endpoint: the auth
dependency rejects it with 403 first.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.user import ProfileResponse
from app.services.profile_service import profile_service

router: APIRouter = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
async def get_my_profile(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ProfileResponse:
    """내 프로필과 위반 이슈 목록 — My profile with violation issue ids."""
    return await profile_service.get_profile(db, current_user)
