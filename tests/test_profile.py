"""프로필 및 헬스체크 테스트."""

import logging
import uuid

from httpx import AsyncClient
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User, UserViolation
from tests.conftest import auth_header, make_issue

APP = "/api/v1/app"


class TestProfile:

    async def test_get_profile(self, client: AsyncClient, level_one_a):
        res = await client.get(f"{APP}/profile", headers=auth_header(level_one_a))
        assert res.status_code == 200
        data = res.json()
        assert data["username"] == "owen"
        assert data["role"] == "auth_level_one"
        assert data["department"] == "A"
        assert data["violations"] == []
        assert data["is_disabled"] is False

    async def test_requires_token(self, client: AsyncClient):
        res = await client.get(f"{APP}/profile")
        assert res.status_code == 401

    async def test_profile_lists_violations(self, client: AsyncClient, db: AsyncSession, user_a):
        """위반 이슈 id는 레포지토리 조회로 채워짐."""
        flagged = await make_issue(db, user_a, is_inappropriate=True)
        db.add(UserViolation(user_id=user_a.id, issue_id=flagged.id))
        await db.flush()

        res = await client.get(f"{APP}/profile", headers=auth_header(user_a))
        assert res.status_code == 200
        assert res.json()["violations"] == [str(flagged.id)]
        assert inspect(User).relationships.keys() == []


async def test_health(client: AsyncClient):
    res = await client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


async def test_request_is_logged_with_actor(client: AsyncClient, user_a, caplog):
    """Axiom 미설정 시 app.access 로거로 기록."""
    caplog.set_level(logging.INFO, logger="app.access")
    await client.get(f"{APP}/issues/{uuid.uuid4()}", headers=auth_header(user_a))

    events = [r.event for r in caplog.records if r.name == "app.access"]
    assert events[-1]["status_code"] == 400
    assert events[-1]["actor_id"] == str(user_a.id)
    assert events[-1]["error"] == "No issue found"
