"""이미지 서비스 — 사전 업로드 이미지 등록 및 이슈 연결.

Image Service — Registers pre-uploaded images and links them to issues.
Images are uploaded before the issue exists (PENDING, owned by the
uploader) and become LINKED when an issue referencing them is created.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.image import Image, ImageStatus
from app.models.issue import Issue
from app.repositories.image_repository import image_repository
from app.schemas.image import ImageFile
from app.schemas.user import Actor
from app.utils.exceptions import BadRequestError
from app.utils.validators import clean_text


class ImageService:

    def build_response(self, image: Image) -> dict:
        return {
            "id": str(image.id),
            "path": image.path,
            "mimetype": image.mimetype,
            "status": image.status,
            "created_at": image.created_at,
        }

    async def register_images(self, db: AsyncSession, actor: Actor, files: list[ImageFile]) -> list[Image]:
        """업로드된 파일을 PENDING 이미지로 등록합니다.

        Record uploaded files as PENDING images owned by the actor.

        Raises:
            BadRequestError: 파일이 없거나 경로/타입이 비어 있음 (No files, or blank path/mimetype)
        """
        if not files:
            raise BadRequestError("Please provide images to save")
        if any(not clean_text(f.path) or not clean_text(f.mimetype) for f in files):
            raise BadRequestError("Every image needs a path and a mimetype")

        images: list[Image] = []
        for f in files:
            image = await image_repository.create(
                db,
                {
                    "path": clean_text(f.path),
                    "mimetype": clean_text(f.mimetype),
                    "user_id": actor.id,
                    "status": ImageStatus.PENDING,
                },
            )
            images.append(image)
        return images

    async def list_pending(self, db: AsyncSession, actor: Actor) -> Sequence[Image]:
        """아직 이슈에 연결되지 않은 내 이미지 — My images not yet linked to an issue."""
        return await image_repository.list_pending_by_user(db, actor.id)

    async def get_linkable(self, db: AsyncSession, actor: Actor, image_ids: list[UUID]) -> list[Image]:
        """이슈에 연결할 이미지를 검증하고 요청 순서대로 반환합니다.

        Validate images referenced by a new issue and return them in request
        order. Each must exist, belong to the actor and still be PENDING.

        Raises:
            BadRequestError: 필드 오류 목록 (Structured field errors)
        """
        found = await image_repository.get_many(db, image_ids)
        errors: list[dict[str, str]] = []
        for image_id in image_ids:
            image = found.get(image_id)
            if image is None or image.user_id != actor.id:
                errors.append({"field": "images", "message": f"Image {image_id} not found"})
            elif image.status is not ImageStatus.PENDING:
                errors.append({"field": "images", "message": f"Image {image_id} is already linked"})
        if errors:
            raise BadRequestError(errors)
        return [found[image_id] for image_id in image_ids]

    async def link(self, db: AsyncSession, images: list[Image], issue: Issue) -> None:
        """이미지를 이슈에 연결합니다 (PENDING → LINKED).

        Link images to a freshly created issue, keeping their order.
        """
        for position, image in enumerate(images):
            image.issue_id = issue.id
            image.position = position
            image.status = ImageStatus.LINKED
        await db.flush()


image_service: ImageService = ImageService()
