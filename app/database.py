"""비동기 SQLAlchemy 엔진, 세션 팩토리, ORM 베이스.

Async SQLAlchemy engine, session factory and declarative base.
One session per request; routers commit, everything else is rolled back
when the session closes.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from app.config import settings

# pool_timeout / command_timeout: 저장소 호출은 멈추지 않고 실패 (Store calls fail fast)
engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
    pool_size=5,
    max_overflow=10,
    pool_timeout=settings.DB_COMMAND_TIMEOUT,
    connect_args={"command_timeout": settings.DB_COMMAND_TIMEOUT},
)

# 커밋 후에도 응답 구성에 객체를 그대로 사용 (Objects stay usable after commit)
async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """모든 이슈 보드 모델의 베이스 — Base for users, issues and images."""


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """요청 단위 세션 의존성.

    Request-scoped session. Uncommitted work is discarded on close.
    """
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()
