"""이슈 레포지토리 — 이슈 관련 DB 쿼리 담당.

Issue Repository — Handles all issue-related database queries.
Every list query excludes soft-deleted issues and eager-loads the child
collections needed to build responses (no lazy loads under asyncio).
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import ColumnElement, Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.issue import Issue, IssueComment, IssueReporter, IssueSolution, IssueUpvote
from app.repositories.base import BaseRepository
from app.utils.pagination import PageWindow


class IssueRepository(BaseRepository[Issue]):
    """이슈 레포지토리.

    Issue repository with visibility-scoped listing, phrase search and
    upvoter/reporter membership queries.

    Extends:
        BaseRepository[Issue]
    """

    def __init__(self) -> None:
        super().__init__(Issue)

    def _detail_query(self) -> Select:
        """자식 컬렉션을 함께 로드하는 기본 쿼리.

        Base query with all child collections eager-loaded. populate_existing
        refreshes objects already in the identity map so collections changed
        earlier in the same session are never served stale.
        """
        return (
            select(Issue)
            .options(
                selectinload(Issue.images),
                selectinload(Issue.comments),
                selectinload(Issue.solutions),
                selectinload(Issue.upvoters),
                selectinload(Issue.reporters),
            )
            .execution_options(populate_existing=True)
        )

    def _listing_query(self, scope_clause: ColumnElement[bool] | None) -> Select:
        query: Select = self._detail_query().where(Issue.is_deleted.is_(False))
        if scope_clause is not None:
            query = query.where(scope_clause)
        return query.order_by(Issue.created_at.desc(), Issue.id.desc())

    async def get_detail(self, db: AsyncSession, issue_id: UUID) -> Issue | None:
        """이슈 상세를 조회합니다. 소프트 삭제된 이슈도 반환합니다.

        Retrieve one issue with its collections. Soft-deleted issues are
        returned too; callers decide what to do with them.
        """
        result = await db.execute(self._detail_query().where(Issue.id == issue_id))
        return result.scalar_one_or_none()

    async def get_for_update(self, db: AsyncSession, issue_id: UUID) -> Issue | None:
        """수정용으로 이슈 행을 새로 읽습니다 (현재 version 포함).

        Re-read the issue row with its current version for a read-modify-write.
        """
        result = await db.execute(
            select(Issue).where(Issue.id == issue_id).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_visible(
        self,
        db: AsyncSession,
        window: PageWindow,
        scope_clause: ColumnElement[bool] | None,
        is_resolved: bool | None = None,
    ) -> Sequence[Issue]:
        """범위 필터가 적용된 이슈 목록 윈도우를 조회합니다.

        Retrieve the over-fetch window of visible issues, optionally filtered
        by resolved state.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            window: 페이지 요청 (Page request)
            scope_clause: 가시성 필터, None이면 전체 (Visibility filter, None = all)
            is_resolved: 해결 여부 필터 (Resolved filter, None = both)
        """
        query: Select = self._listing_query(scope_clause)
        if is_resolved is not None:
            query = query.where(Issue.is_resolved.is_(is_resolved))
        return await self.get_window(db, query, window)

    async def list_by_creator(
        self,
        db: AsyncSession,
        user_id: UUID,
        window: PageWindow,
    ) -> Sequence[Issue]:
        """특정 사용자가 작성한 이슈 목록 윈도우 — Issues created by a user."""
        query: Select = self._listing_query(None).where(Issue.created_by == user_id)
        return await self.get_window(db, query, window)

    async def search(
        self,
        db: AsyncSession,
        phrase: str,
        window: PageWindow,
        scope_clause: ColumnElement[bool] | None,
    ) -> Sequence[Issue]:
        """제목/본문/분류에 구문이 포함된 이슈를 검색합니다.

        Case-insensitive substring search over title, description and section.
        LIKE wildcards in the phrase are escaped.
        """
        query: Select = self._listing_query(scope_clause).where(
            or_(
                Issue.title.icontains(phrase, autoescape=True),
                Issue.description.icontains(phrase, autoescape=True),
                Issue.section.icontains(phrase, autoescape=True),
            )
        )
        return await self.get_window(db, query, window)

    async def get_upvote(self, db: AsyncSession, issue_id: UUID, user_id: UUID) -> IssueUpvote | None:
        result = await db.execute(
            select(IssueUpvote).where(IssueUpvote.issue_id == issue_id, IssueUpvote.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_reporter(self, db: AsyncSession, issue_id: UUID, user_id: UUID) -> IssueReporter | None:
        result = await db.execute(
            select(IssueReporter).where(IssueReporter.issue_id == issue_id, IssueReporter.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def count_reporters(self, db: AsyncSession, issue_id: UUID) -> int:
        """저장된 신고자 수 — Number of stored reporters for an issue."""
        result = await db.execute(
            select(func.count()).select_from(IssueReporter).where(IssueReporter.issue_id == issue_id)
        )
        return result.scalar() or 0

    async def add_comment(self, db: AsyncSession, issue_id: UUID, user_id: UUID, comment: str) -> IssueComment:
        row = IssueComment(issue_id=issue_id, user_id=user_id, comment=comment)
        db.add(row)
        await db.flush()
        return row

    async def add_solution(self, db: AsyncSession, issue_id: UUID, user_id: UUID, solution: str) -> IssueSolution:
        row = IssueSolution(issue_id=issue_id, posted_by=user_id, solution=solution)
        db.add(row)
        await db.flush()
        return row


issue_repository: IssueRepository = IssueRepository()
