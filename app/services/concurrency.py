"""낙관적 동시성 재시도 — Optimistic concurrency retry.

Issue rows carry a version column checked on every UPDATE. When two
requests modify the same issue concurrently the slower flush matches zero
rows and SQLAlchemy raises StaleDataError. The whole read-modify-write is
then rolled back and replayed against the fresh row.

The operation passed in must re-read everything it needs: a rollback
expires every ORM object in the session.
"""

import logging
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.utils.exceptions import InternalError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_with_retry(
    db: AsyncSession,
    operation: Callable[[], Awaitable[T]],
    attempts: int,
) -> T:
    """버전 충돌 시 작업을 재실행합니다.

    Run a read-modify-write operation, replaying it after a version conflict.

    Args:
        db: 요청 세션 (Request-scoped session)
        operation: 이슈를 다시 읽고 수정 후 flush하는 코루틴 함수
                   (Coroutine function that re-reads, mutates and flushes)
        attempts: 최대 시도 횟수 (Maximum number of attempts, >= 1)

    Returns:
        T: 작업 결과 (Result of the successful attempt)

    Raises:
        InternalError: 모든 시도가 충돌한 경우 (Every attempt conflicted)
    """
    for attempt in range(1, max(attempts, 1) + 1):
        try:
            return await operation()
        except StaleDataError:
            await db.rollback()
            logger.warning("Concurrent issue update detected, attempt %d of %d", attempt, attempts)
    raise InternalError("The issue was modified concurrently, please retry")
