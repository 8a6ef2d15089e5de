"""이슈 서비스 — 이슈 생명주기, 목록, 응답 투영.

Issue Service — Business logic for the issue lifecycle.
Handles visibility-scoped listing and search, fetch by id, creation with
image linking, update, resolve toggle, comments, solutions and soft delete.
Upvotes and inappropriate flags live in ModerationService.

Every permission or validation check runs before the first write, so a
rejected request never leaves a partial change behind.
"""

import enum
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.issue import Issue
from app.repositories.issue_repository import issue_repository
from app.schemas.issue import IssueCreate, IssueUpdate
from app.schemas.user import Actor
from app.services import issue_policy
from app.services.concurrency import run_with_retry
from app.services.image_service import image_service
from app.utils.exceptions import BadRequestError, ForbiddenError, NotFoundError
from app.utils.pagination import PageWindow, WindowPage, build_page
from app.utils.validators import clean_text, parse_image_ids, parse_scope, validate_issue_data


class IssueFilter(str, enum.Enum):
    """목록 필터 — Listing filter on resolved state."""

    ALL = "all"
    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"


_RESOLVED_BY_FILTER: dict[IssueFilter, bool | None] = {
    IssueFilter.ALL: None,
    IssueFilter.RESOLVED: True,
    IssueFilter.UNRESOLVED: False,
}


class IssueService:
    """이슈 서비스.

    Issue service providing listing, fetch, and lifecycle operations.

    Attributes:
        retry_attempts: 버전 충돌 시 재시도 횟수 (Retries on version conflicts)
    """

    def __init__(self, retry_attempts: int) -> None:
        self.retry_attempts: int = retry_attempts

    def build_response(self, issue: Issue, actor: Actor) -> dict[str, Any]:
        """행위자에게 보여줄 이슈 응답을 구성합니다.

        Project an issue for a given actor. Creator, moderator and
        auth_level_three get every field; everyone else gets a reduced view
        without author and voter identities. In the reduced view an
        inappropriate issue has its content suppressed.

        Args:
            issue: 자식 컬렉션이 로드된 이슈 (Issue with collections loaded)
            actor: 요청 수행자 (Acting user)

        Returns:
            dict: 응답 딕셔너리 (Response dictionary)
        """
        full: bool = issue_policy.can_see_full_detail(actor, issue)
        upvoter_ids: list[UUID] = [u.user_id for u in issue.upvoters]
        reporter_ids: list[UUID] = [r.user_id for r in issue.reporters]
        suppressed: bool = issue.is_inappropriate and not full

        response: dict[str, Any] = {
            "id": str(issue.id),
            "title": None if suppressed else issue.title,
            "description": None if suppressed else issue.description,
            "section": issue.section,
            "scope": issue.scope.value,
            "department": issue.department,
            "images": [] if suppressed else [
                {"id": str(img.id), "path": img.path, "mimetype": img.mimetype}
                for img in issue.images
            ],
            "comments": [] if suppressed else [
                {"id": str(c.id), "comment": c.comment, "created_at": c.created_at}
                for c in issue.comments
            ],
            "solutions": [] if suppressed else [
                {"id": str(s.id), "solution": s.solution, "posted_by": str(s.posted_by), "created_at": s.created_at}
                for s in issue.solutions
            ],
            "upvotes": issue.upvotes,
            "has_upvoted": actor.id in upvoter_ids,
            "has_reported": actor.id in reporter_ids,
            "is_owner": issue_policy.is_creator(actor, issue),
            "is_resolved": issue.is_resolved,
            "is_inappropriate": issue.is_inappropriate,
            "is_suppressed": suppressed,
            "is_edited": issue.is_edited,
            "created_at": issue.created_at,
            "updated_at": issue.updated_at,
        }

        if full:
            comment_authors = {str(c.id): str(c.user_id) for c in issue.comments}
            for comment in response["comments"]:
                comment["user_id"] = comment_authors[comment["id"]]
            response.update({
                "created_by": str(issue.created_by),
                "upvoters": [str(u) for u in upvoter_ids],
                "report_count": len(reporter_ids),
                "is_deleted": issue.is_deleted,
                "version": issue.version,
            })
        return response

    def _page(self, issues: list[Issue], window: PageWindow, actor: Actor) -> WindowPage:
        page: WindowPage = build_page(issues, window)
        page.items = [self.build_response(issue, actor) for issue in page.items]
        return page

    async def get_active_issue(self, db: AsyncSession, issue_id: UUID) -> Issue:
        """수정 대상 이슈를 조회합니다.

        Load an issue for modification.

        Raises:
            BadRequestError: 이슈가 없을 때 (No such issue)
            NotFoundError: 소프트 삭제된 이슈 (Issue has been soft-deleted)
        """
        issue: Issue | None = await issue_repository.get_for_update(db, issue_id)
        if issue is None:
            raise BadRequestError("No issue found")
        if issue.is_deleted:
            raise NotFoundError("Issue has been deleted")
        return issue

    # --- 조회 (Read) ---

    async def list_issues(
        self,
        db: AsyncSession,
        actor: Actor,
        window: PageWindow,
        issue_filter: IssueFilter = IssueFilter.ALL,
    ) -> WindowPage:
        """이슈 목록 — auth_level_three는 전체, 그 외는 자기 부서만.

        List issues. auth_level_three sees every department, other roles see
        only their own department. The resolved filter runs in the query.
        """
        issues = await issue_repository.list_visible(
            db,
            window,
            issue_policy.listing_scope_clause(actor),
            _RESOLVED_BY_FILTER[issue_filter],
        )
        return self._page(list(issues), window, actor)

    async def search_issues(
        self,
        db: AsyncSession,
        actor: Actor,
        phrase: str | None,
        window: PageWindow,
    ) -> WindowPage:
        """구문 검색 — 자기 부서와 조직 공개 이슈.

        Phrase search. Non-global roles see their own department plus
        organization-wide issues.

        Raises:
            BadRequestError: 검색어가 비어 있을 때 (Blank phrase)
        """
        phrase = clean_text(phrase)
        if not phrase:
            raise BadRequestError("Please provide a phrase to search")
        issues = await issue_repository.search(
            db, phrase, window, issue_policy.search_scope_clause(actor)
        )
        return self._page(list(issues), window, actor)

    async def get_issue(self, db: AsyncSession, actor: Actor, issue_id: UUID) -> dict[str, Any]:
        """이슈 단건 조회.

        Fetch one issue. Soft-deleted issues stay addressable by id.

        Raises:
            BadRequestError: 이슈가 없을 때 (No such issue)
            ForbiddenError: 다른 부서의 이슈 (Issue outside the actor's department)
        """
        issue: Issue | None = await issue_repository.get_detail(db, issue_id)
        if issue is None:
            raise BadRequestError("No issue found")
        if not issue_policy.can_fetch(actor, issue):
            raise ForbiddenError()
        return self.build_response(issue, actor)

    async def list_issues_by_user(
        self,
        db: AsyncSession,
        actor: Actor,
        user_id: UUID,
        window: PageWindow,
    ) -> WindowPage:
        """특정 사용자가 작성한 이슈 목록 — Issues filed by a user."""
        issues = await issue_repository.list_by_creator(db, user_id, window)
        return self._page(list(issues), window, actor)

    # --- 생성/수정 (Write) ---

    async def create_issue(self, db: AsyncSession, actor: Actor, data: IssueCreate) -> Issue:
        """이슈를 생성하고 사전 업로드된 이미지를 연결합니다.

        Create an issue in the actor's department, then link its
        pre-uploaded images in order.

        Raises:
            BadRequestError: 필드 오류 목록 (Structured list of field errors)
        """
        errors = validate_issue_data(data.title, data.description, data.section, data.images, data.scope)
        if errors:
            raise BadRequestError(errors)

        image_ids: list[UUID] = parse_image_ids(data.images) or []
        images = await image_service.get_linkable(db, actor, image_ids)

        issue: Issue = await issue_repository.create(
            db,
            {
                "title": clean_text(data.title),
                "description": clean_text(data.description),
                "section": clean_text(data.section),
                "scope": parse_scope(data.scope),
                "department": actor.department,
                "created_by": actor.id,
            },
        )
        await image_service.link(db, images, issue)
        return issue

    async def update_issue(
        self,
        db: AsyncSession,
        actor: Actor,
        issue_id: UUID,
        data: IssueUpdate,
    ) -> bool:
        """제목/본문 수정 — 작성자만.

        Update title and/or description. Blank fields keep their old value.

        Raises:
            ForbiddenError: 작성자가 아님 (Actor is not the creator)
            BadRequestError: 변경할 값이 없음 (Neither field provided)
        """
        title = clean_text(data.title)
        description = clean_text(data.description)

        async def _update() -> bool:
            issue = await self.get_active_issue(db, issue_id)
            if not issue_policy.can_edit(actor, issue):
                raise ForbiddenError()
            if not title and not description:
                raise BadRequestError("Please provide some data")
            issue.title = title or issue.title
            issue.description = description or issue.description
            issue.is_edited = True
            await db.flush()
            return True

        return await run_with_retry(db, _update, self.retry_attempts)

    async def toggle_resolve(self, db: AsyncSession, actor: Actor, issue_id: UUID) -> bool:
        """해결 상태 토글 — 작성자 또는 moderator. 새 상태를 반환합니다."""

        async def _toggle() -> bool:
            issue = await self.get_active_issue(db, issue_id)
            if not issue_policy.can_moderate(actor, issue):
                raise ForbiddenError()
            issue.is_resolved = not issue.is_resolved
            await db.flush()
            return issue.is_resolved

        return await run_with_retry(db, _toggle, self.retry_attempts)

    async def post_comment(self, db: AsyncSession, actor: Actor, issue_id: UUID, comment: str | None) -> None:
        """댓글 작성 — 부서 범위 규칙 적용.

        Raises:
            ForbiddenError: 범위 밖 (Out of department scope)
            BadRequestError: 빈 댓글 (Blank comment)
        """
        issue = await self.get_active_issue(db, issue_id)
        if not issue_policy.can_act_in_scope(actor, issue):
            raise ForbiddenError()
        comment = clean_text(comment)
        if not comment:
            raise BadRequestError("Please provide a valid comment string")
        await issue_repository.add_comment(db, issue.id, actor.id, comment)

    async def post_solution(self, db: AsyncSession, actor: Actor, issue_id: UUID, solution: str | None) -> None:
        """해결책 작성.

        Raises:
            BadRequestError: 빈 해결책 (Blank solution, checked first)
            ForbiddenError: 역할/부서 제한 (Role or department not allowed)
        """
        solution = clean_text(solution)
        if not solution:
            raise BadRequestError("Please provide a valid solution string")
        issue = await self.get_active_issue(db, issue_id)
        if not issue_policy.can_post_solution(actor, issue):
            raise ForbiddenError()
        await issue_repository.add_solution(db, issue.id, actor.id, solution)

    async def delete_issue(self, db: AsyncSession, actor: Actor, issue_id: UUID) -> bool:
        """소프트 삭제 — 작성자 또는 moderator."""

        async def _delete() -> bool:
            issue = await self.get_active_issue(db, issue_id)
            if not issue_policy.can_moderate(actor, issue):
                raise ForbiddenError()
            issue.is_deleted = True
            await db.flush()
            return True

        return await run_with_retry(db, _delete, self.retry_attempts)


issue_service: IssueService = IssueService(settings.WRITE_RETRY_ATTEMPTS)
