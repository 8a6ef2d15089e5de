"""모더레이션 서비스 — 추천 토글, 부적절 신고 토글, 자동 제재.

Moderation Service — Upvote toggle, inappropriate-flag toggle and the
escalation from report counts to content suppression and user suspension.

Escalation is recomputed from stored counts after every flip, never from
the flip itself, so a redundant or replayed call converges to the same
state:
    issue.is_inappropriate = reporters >= issue_reports_threshold
    author has a violation for the issue  <=>  issue.is_inappropriate
    author.is_disabled = violations >= user_violations_threshold

The issue and its author are flushed in the same session and committed
together by the request, so either both changes land or neither does.
"""

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.config import settings
from app.models.issue import Issue, IssueReporter, IssueUpvote
from app.models.user import User, UserViolation
from app.repositories.issue_repository import issue_repository
from app.repositories.user_repository import user_repository
from app.schemas.user import Actor
from app.services import issue_policy
from app.services.concurrency import run_with_retry
from app.services.issue_service import issue_service
from app.utils.exceptions import ForbiddenError, InternalError

logger = logging.getLogger(__name__)


class ModerationService:
    """모더레이션 서비스.

    Attributes:
        issue_reports_threshold: 부적절 판정 신고 수 (Reports that mark an issue inappropriate)
        user_violations_threshold: 계정 정지 위반 수 (Violations that disable a user)
        retry_attempts: 버전 충돌 시 재시도 횟수 (Retries on version conflicts)
    """

    def __init__(
        self,
        issue_reports_threshold: int,
        user_violations_threshold: int,
        retry_attempts: int,
    ) -> None:
        self.issue_reports_threshold: int = issue_reports_threshold
        self.user_violations_threshold: int = user_violations_threshold
        self.retry_attempts: int = retry_attempts

    async def toggle_upvote(self, db: AsyncSession, actor: Actor, issue_id: UUID) -> dict[str, Any]:
        """추천 토글 — 추천자 집합과 추천 수를 같은 flush에서 변경합니다.

        Flip the actor's upvote. The upvoter row and the counter change in
        the same flush, keeping upvotes == len(upvoters).

        Raises:
            ForbiddenError: 부서 범위 밖 (Out of department scope)
        """

        async def _toggle() -> dict[str, Any]:
            issue: Issue = await issue_service.get_active_issue(db, issue_id)
            if not issue_policy.can_act_in_scope(actor, issue):
                raise ForbiddenError()

            existing: IssueUpvote | None = await issue_repository.get_upvote(db, issue.id, actor.id)
            if existing is None:
                db.add(IssueUpvote(issue_id=issue.id, user_id=actor.id))
                issue.upvotes += 1
            else:
                await db.delete(existing)
                issue.upvotes -= 1
            await db.flush()

            upvoted: bool = existing is None
            return {
                "upvoted": upvoted,
                "upvotes": issue.upvotes,
                "message": "Upvoted issue" if upvoted else "Removed upvote from issue",
            }

        return await run_with_retry(db, _toggle, self.retry_attempts)

    async def toggle_inappropriate(self, db: AsyncSession, actor: Actor, issue_id: UUID) -> dict[str, Any]:
        """부적절 신고 토글 및 자동 제재.

        Flip the actor's inappropriate report, then recompute the issue flag,
        the author's violation for this issue, and the author's disabled state.

        Raises:
            ForbiddenError: 다른 부서이고 auth_level_two/three가 아님
                (Different department and not auth_level_two/three)
            InternalError: 저장 실패 (Store failure, logged with issue and author ids)
        """

        async def _toggle() -> dict[str, Any]:
            issue: Issue = await issue_service.get_active_issue(db, issue_id)
            if not issue_policy.can_flag(actor, issue):
                raise ForbiddenError()

            author_id: UUID = issue.created_by
            try:
                existing: IssueReporter | None = await issue_repository.get_reporter(db, issue.id, actor.id)
                if existing is None:
                    db.add(IssueReporter(issue_id=issue.id, user_id=actor.id))
                else:
                    await db.delete(existing)
                # 신고만 바뀌어도 이슈 행을 갱신하여 version 검사를 거치게 함
                # Touch the issue row so the flip goes through the version check
                issue.updated_at = datetime.now(timezone.utc)
                await db.flush()

                await self._escalate(db, issue)
            except (StaleDataError, InternalError):
                raise
            except SQLAlchemyError as exc:
                logger.exception(
                    "Inappropriate toggle failed, reconcile issue %s and author %s",
                    issue_id, author_id,
                )
                raise InternalError() from exc

            reported: bool = existing is None
            return {
                "reported": reported,
                "is_inappropriate": issue.is_inappropriate,
                "message": "Issue marked as inappropriate" if reported else "Inappropriate mark for the issue removed",
            }

        return await run_with_retry(db, _toggle, self.retry_attempts)

    async def _escalate(self, db: AsyncSession, issue: Issue) -> None:
        """저장된 신고 수로부터 이슈/작성자 상태를 재계산합니다.

        Recompute issue and author state from the stored reporter count.
        """
        report_count: int = await issue_repository.count_reporters(db, issue.id)
        was_inappropriate: bool = issue.is_inappropriate
        issue.is_inappropriate = report_count >= self.issue_reports_threshold
        if issue.is_inappropriate != was_inappropriate:
            logger.info(
                "Issue %s inappropriate=%s at %d reports", issue.id, issue.is_inappropriate, report_count
            )

        author: User | None = await user_repository.get_by_id(db, issue.created_by)
        if author is None:
            logger.error("Author %s of issue %s is missing", issue.created_by, issue.id)
            raise InternalError()

        violation: UserViolation | None = await user_repository.get_violation(db, author.id, issue.id)
        if issue.is_inappropriate and violation is None:
            db.add(UserViolation(user_id=author.id, issue_id=issue.id))
        elif not issue.is_inappropriate and violation is not None:
            await db.delete(violation)
        await db.flush()

        # users 행은 version 검사 없음, 다음 재계산에서 수렴
        # The users row is unversioned; the next escalation for this author converges it
        violation_count: int = await user_repository.count_violations(db, author.id)
        was_disabled: bool = author.is_disabled
        author.is_disabled = violation_count >= self.user_violations_threshold
        if author.is_disabled != was_disabled:
            logger.info("User %s disabled=%s at %d violations", author.id, author.is_disabled, violation_count)
        await db.flush()


moderation_service: ModerationService = ModerationService(
    settings.ISSUE_REPORTS_THRESHOLD,
    settings.USER_VIOLATIONS_THRESHOLD,
    settings.WRITE_RETRY_ATTEMPTS,
)
