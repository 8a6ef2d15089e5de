"""프로필 서비스 — 내 계정 상태 조회.

Profile Service — Current user's account state including violations.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.repositories.user_repository import user_repository
from app.schemas.user import ProfileResponse


class ProfileService:
    """사용자 프로필 서비스 — User profile service."""

    async def get_profile(self, db: AsyncSession, user: User) -> ProfileResponse:
        """사용자 프로필을 위반 이력과 함께 조회합니다.

        Build the profile of a user with the ids of issues counted as violations.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user: 현재 사용자 (Current user)

        Returns:
            ProfileResponse: 프로필 정보 (Profile information)
        """
        violation_ids = await user_repository.list_violation_issue_ids(db, user.id)
        return ProfileResponse(
            id=str(user.id),
            username=user.username,
            full_name=user.full_name,
            role=user.role,
            department=user.department,
            violations=[str(v) for v in violation_ids],
            is_disabled=user.is_disabled,
        )


profile_service: ProfileService = ProfileService()
