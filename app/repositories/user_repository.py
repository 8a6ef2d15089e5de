"""사용자 레포지토리 — 사용자 조회 및 위반 이력 쿼리.

User Repository — User lookups and violation bookkeeping queries.
"""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User, UserViolation
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for users and their violations.
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def get_violation(self, db: AsyncSession, user_id: UUID, issue_id: UUID) -> UserViolation | None:
        """특정 이슈로 인한 위반 기록을 조회합니다 — Violation row for (user, issue)."""
        result = await db.execute(
            select(UserViolation).where(UserViolation.user_id == user_id, UserViolation.issue_id == issue_id)
        )
        return result.scalar_one_or_none()

    async def count_violations(self, db: AsyncSession, user_id: UUID) -> int:
        result = await db.execute(
            select(func.count()).select_from(UserViolation).where(UserViolation.user_id == user_id)
        )
        return result.scalar() or 0

    async def list_violation_issue_ids(self, db: AsyncSession, user_id: UUID) -> list[UUID]:
        """위반 이슈 ID 목록 (오래된 순) — Violation issue ids, oldest first."""
        result = await db.execute(
            select(UserViolation.issue_id)
            .where(UserViolation.user_id == user_id)
            .order_by(UserViolation.created_at)
        )
        return list(result.scalars().all())


user_repository: UserRepository = UserRepository()
