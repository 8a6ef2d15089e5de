"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite (aiosqlite) database, session, and
httpx client fixtures. The schema is created fresh for every test, so no
cleanup between tests is needed.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.models import *  # noqa: F401,F403 — register all models with metadata
from app.models.issue import Issue, IssueScope
from app.models.user import User, UserRole
from app.utils.jwt import mint_access_token

TEST_DATABASE_URL = "sqlite+aiosqlite://"


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 단일 커넥션을 공유하여 인메모리 DB를 유지합니다."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
async def make_user(db: AsyncSession, username: str, role: UserRole, department: str) -> User:
    """사용자를 DB에 직접 생성합니다."""
    user = User(username=username, full_name=username.title(), role=role, department=department)
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


async def make_issue(
    db: AsyncSession,
    creator: User,
    title: str = "Broken printer",
    scope: IssueScope = IssueScope.DEPARTMENT,
    **fields,
) -> Issue:
    """이슈를 DB에 직접 생성합니다. 부서는 작성자 부서를 따릅니다."""
    issue = Issue(
        title=title,
        description=fields.pop("description", "The printer on floor 2 jams"),
        section=fields.pop("section", "facilities"),
        scope=scope,
        department=creator.department,
        created_by=creator.id,
        **fields,
    )
    db.add(issue)
    await db.flush()
    await db.refresh(issue)
    return issue


@pytest_asyncio.fixture
async def user_a(db: AsyncSession) -> User:
    return await make_user(db, "alice", UserRole.USER, "A")


@pytest_asyncio.fixture
async def user_a2(db: AsyncSession) -> User:
    return await make_user(db, "andrew", UserRole.USER, "A")


@pytest_asyncio.fixture
async def user_b(db: AsyncSession) -> User:
    return await make_user(db, "bob", UserRole.USER, "B")


@pytest_asyncio.fixture
async def moderator_a(db: AsyncSession) -> User:
    return await make_user(db, "mona", UserRole.MODERATOR, "A")


@pytest_asyncio.fixture
async def level_one_a(db: AsyncSession) -> User:
    return await make_user(db, "owen", UserRole.AUTH_LEVEL_ONE, "A")


@pytest_asyncio.fixture
async def level_two_b(db: AsyncSession) -> User:
    return await make_user(db, "tina", UserRole.AUTH_LEVEL_TWO, "B")


@pytest_asyncio.fixture
async def level_three_b(db: AsyncSession) -> User:
    return await make_user(db, "theo", UserRole.AUTH_LEVEL_THREE, "B")


def make_token(user: User) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return mint_access_token(user.id)


def auth_header(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user)}"}


@pytest.fixture
def issue_payload() -> dict:
    return {
        "title": "Broken printer",
        "description": "The printer on floor 2 jams on every job",
        "section": "facilities",
        "scope": "department",
    }
