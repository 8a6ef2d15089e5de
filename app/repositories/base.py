"""레포지토리 공통 베이스 — ID 조회, 행 추가, 과다 조회 윈도우.

Shared repository base: lookup by id, staged insert, and the over-fetch
window used by every listing. Repositories never commit.
"""

from typing import Any, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Base
from app.utils.pagination import PageWindow

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """모델 하나를 다루는 레포지토리의 부모 클래스.

    Attributes:
        model: 대상 ORM 모델 (ORM model handled by the repository)
    """

    def __init__(self, model: type[ModelType]) -> None:
        self.model: type[ModelType] = model

    async def get_by_id(self, db: AsyncSession, record_id: UUID) -> ModelType | None:
        """기본 키로 한 행을 조회합니다 — One row by primary key, or None."""
        result = await db.execute(select(self.model).where(self.model.id == record_id))
        return result.scalar_one_or_none()

    async def get_window(self, db: AsyncSession, query: Select, window: PageWindow) -> Sequence[ModelType]:
        """정렬된 쿼리에서 페이지 윈도우를 가져옵니다.

        Run an ordered query over the page window: up to 2 * limit rows
        from (page - 1) * limit. The surplus rows only feed has_next_page.
        """
        result = await db.execute(query.offset(window.offset).limit(window.fetch_size))
        return result.scalars().all()

    async def create(self, db: AsyncSession, values: dict[str, Any]) -> ModelType:
        """행을 추가하고 flush하여 기본값이 채워진 객체를 반환합니다.

        Stage a new row and flush it so defaults and the id are populated.
        The row is committed with the rest of the request.
        """
        row: ModelType = self.model(**values)
        db.add(row)
        await db.flush()
        await db.refresh(row)
        return row
