"""모더레이션 테스트 — 추천 토글, 부적절 신고, 자동 제재.

Moderation tests: upvote toggle, inappropriate flag toggle, escalation to
content suppression and account suspension.
"""

import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.issue import IssueReporter, IssueScope, IssueUpvote
from app.models.user import User, UserRole, UserViolation
from app.schemas.user import Actor
from app.services.moderation_service import ModerationService
from tests.conftest import auth_header, make_issue, make_user

ISSUES = "/api/v1/app/issues"


async def _count(db: AsyncSession, model, **where) -> int:
    query = select(func.count()).select_from(model)
    for column, value in where.items():
        query = query.where(getattr(model, column) == value)
    return (await db.execute(query)).scalar() or 0


# ===== 추천 (Upvote) =====

class TestUpvote:

    async def test_round_trip(self, client: AsyncClient, db: AsyncSession, user_a, user_a2):
        issue = await make_issue(db, user_a)

        first = await client.post(f"{ISSUES}/{issue.id}/upvote", headers=auth_header(user_a2))
        assert first.status_code == 200
        assert first.json()["upvoted"] is True
        assert first.json()["upvotes"] == 1

        detail = (await client.get(f"{ISSUES}/{issue.id}", headers=auth_header(user_a2))).json()
        assert detail["has_upvoted"] is True

        second = await client.post(f"{ISSUES}/{issue.id}/upvote", headers=auth_header(user_a2))
        assert second.json()["upvoted"] is False
        assert second.json()["upvotes"] == 0
        assert await _count(db, IssueUpvote, issue_id=issue.id) == 0

    async def test_count_matches_upvoters(self, client: AsyncClient, db: AsyncSession, user_a, user_a2, moderator_a):
        """여러 번 토글해도 upvotes == 추천자 수."""
        issue = await make_issue(db, user_a)
        for voter in (user_a, user_a2, moderator_a, user_a2, user_a, user_a2):
            await client.post(f"{ISSUES}/{issue.id}/upvote", headers=auth_header(voter))

        full = (await client.get(f"{ISSUES}/{issue.id}", headers=auth_header(user_a))).json()
        assert full["upvotes"] == 2
        assert set(full["upvoters"]) == {str(user_a2.id), str(moderator_a.id)}
        assert await _count(db, IssueUpvote, issue_id=issue.id) == 2

    async def test_scope_rules(self, client: AsyncClient, db: AsyncSession, user_a, user_b):
        dept_issue = await make_issue(db, user_b)
        org_issue = await make_issue(db, user_b, scope=IssueScope.ORGANIZATION)

        denied = await client.post(f"{ISSUES}/{dept_issue.id}/upvote", headers=auth_header(user_a))
        assert denied.status_code == 403
        ok = await client.post(f"{ISSUES}/{org_issue.id}/upvote", headers=auth_header(user_a))
        assert ok.status_code == 200


# ===== 부적절 신고 (Inappropriate flag) =====

class TestInappropriateFlag:

    async def test_toggle(self, client: AsyncClient, db: AsyncSession, user_a, user_a2):
        issue = await make_issue(db, user_a)

        first = await client.post(f"{ISSUES}/{issue.id}/inappropriate", headers=auth_header(user_a2))
        assert first.status_code == 200
        assert first.json() == {
            "reported": True,
            "is_inappropriate": False,
            "message": "Issue marked as inappropriate",
        }
        detail = (await client.get(f"{ISSUES}/{issue.id}", headers=auth_header(user_a2))).json()
        assert detail["has_reported"] is True

        second = await client.post(f"{ISSUES}/{issue.id}/inappropriate", headers=auth_header(user_a2))
        assert second.json()["reported"] is False
        assert await _count(db, IssueReporter, issue_id=issue.id) == 0

    async def test_cross_department_needs_level_two(
        self, client: AsyncClient, db: AsyncSession, user_a, user_b, level_two_b,
    ):
        issue = await make_issue(db, user_a, scope=IssueScope.ORGANIZATION)

        denied = await client.post(f"{ISSUES}/{issue.id}/inappropriate", headers=auth_header(user_b))
        assert denied.status_code == 403
        ok = await client.post(f"{ISSUES}/{issue.id}/inappropriate", headers=auth_header(level_two_b))
        assert ok.status_code == 200

    async def test_deleted_issue(self, client: AsyncClient, db: AsyncSession, user_a, user_a2):
        issue = await make_issue(db, user_a, is_deleted=True)
        res = await client.post(f"{ISSUES}/{issue.id}/inappropriate", headers=auth_header(user_a2))
        assert res.status_code == 404


class TestReportThreshold:
    """신고 74건은 유지, 75번째 신고로 부적절 판정 + 위반 1건."""

    @pytest_asyncio.fixture
    async def reporters(self, db: AsyncSession) -> list[User]:
        users = [
            User(username=f"reporter{n}", full_name=f"Reporter {n}", role=UserRole.USER, department="A")
            for n in range(75)
        ]
        db.add_all(users)
        await db.flush()
        return users

    async def test_escalation_at_threshold(self, client: AsyncClient, db: AsyncSession, user_a, reporters):
        issue = await make_issue(db, user_a)
        db.add_all(IssueReporter(issue_id=issue.id, user_id=u.id) for u in reporters[:73])
        await db.flush()

        res74 = await client.post(f"{ISSUES}/{issue.id}/inappropriate", headers=auth_header(reporters[73]))
        assert res74.json()["is_inappropriate"] is False
        assert await _count(db, UserViolation, user_id=user_a.id) == 0

        res75 = await client.post(f"{ISSUES}/{issue.id}/inappropriate", headers=auth_header(reporters[74]))
        assert res75.json()["is_inappropriate"] is True
        assert await _count(db, UserViolation, user_id=user_a.id, issue_id=issue.id) == 1

        # 본문이 가려지고 작성자 프로필에 위반이 기록됨
        reduced = (await client.get(f"{ISSUES}/{issue.id}", headers=auth_header(reporters[0]))).json()
        assert reduced["is_suppressed"] is True
        profile = (await client.get("/api/v1/app/profile", headers=auth_header(user_a))).json()
        assert profile["violations"] == [str(issue.id)]

        # 신고 철회로 임계값 아래가 되면 위반도 제거
        undo = await client.post(f"{ISSUES}/{issue.id}/inappropriate", headers=auth_header(reporters[74]))
        assert undo.json()["is_inappropriate"] is False
        assert await _count(db, UserViolation, user_id=user_a.id) == 0


class TestSuspension:
    """위반 5건에서 정지, 4건으로 돌아오면 해제."""

    @pytest_asyncio.fixture
    async def moderation(self) -> ModerationService:
        # 신고 1건으로 바로 부적절 판정 (One report is enough to escalate)
        return ModerationService(issue_reports_threshold=1, user_violations_threshold=5, retry_attempts=3)

    async def test_disable_and_reenable(self, db: AsyncSession, moderation, user_a, user_a2):
        for n in range(4):
            earlier = await make_issue(db, user_a, title=f"Old issue {n}", is_inappropriate=True)
            db.add(UserViolation(user_id=user_a.id, issue_id=earlier.id))
        await db.flush()

        issue = await make_issue(db, user_a)
        reporter = Actor.from_user(user_a2)

        result = await moderation.toggle_inappropriate(db, reporter, issue.id)
        assert result["is_inappropriate"] is True
        await db.refresh(user_a)
        assert user_a.is_disabled is True
        assert await _count(db, UserViolation, user_id=user_a.id) == 5

        result = await moderation.toggle_inappropriate(db, reporter, issue.id)
        assert result["is_inappropriate"] is False
        await db.refresh(user_a)
        assert user_a.is_disabled is False
        assert await _count(db, UserViolation, user_id=user_a.id) == 4

    async def test_disabled_author_is_locked_out(self, client: AsyncClient, db: AsyncSession, moderation, user_a, user_a2):
        for n in range(4):
            earlier = await make_issue(db, user_a, title=f"Old issue {n}", is_inappropriate=True)
            db.add(UserViolation(user_id=user_a.id, issue_id=earlier.id))
        issue = await make_issue(db, user_a)

        await moderation.toggle_inappropriate(db, Actor.from_user(user_a2), issue.id)
        await db.commit()

        res = await client.get(ISSUES, headers=auth_header(user_a))
        assert res.status_code == 403

    async def test_reporter_replay_is_idempotent(self, db: AsyncSession, moderation, user_a):
        """다른 사용자의 중복 신고에도 위반은 이슈당 1건."""
        issue = await make_issue(db, user_a)
        for n in range(3):
            reporter = await make_user(db, f"extra{n}", UserRole.USER, "A")
            await moderation.toggle_inappropriate(db, Actor.from_user(reporter), issue.id)
        assert await _count(db, UserViolation, user_id=user_a.id, issue_id=issue.id) == 1
