"""이미지 레포지토리 — 업로드 이미지 메타데이터 쿼리.

Image Repository — Queries over uploaded image metadata.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.image import Image, ImageStatus
from app.repositories.base import BaseRepository


class ImageRepository(BaseRepository[Image]):

    def __init__(self) -> None:
        super().__init__(Image)

    async def get_many(self, db: AsyncSession, image_ids: list[UUID]) -> dict[UUID, Image]:
        """ID 목록으로 이미지를 조회합니다 — Images keyed by id (missing ids absent)."""
        if not image_ids:
            return {}
        result = await db.execute(select(Image).where(Image.id.in_(image_ids)))
        return {image.id: image for image in result.scalars().all()}

    async def list_pending_by_user(self, db: AsyncSession, user_id: UUID) -> Sequence[Image]:
        result = await db.execute(
            select(Image)
            .where(Image.user_id == user_id, Image.status == ImageStatus.PENDING)
            .order_by(Image.created_at.desc())
        )
        return result.scalars().all()


image_repository: ImageRepository = ImageRepository()
