"""앱 이미지 라우터 — 업로드된 이미지 등록.

App Image Router — Registers metadata of images already stored on the
file server, before the issue that will use them is created.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_actor
from app.database import get_db
from app.schemas.image import ImageRegister, ImageResponse
from app.schemas.user import Actor
from app.services.image_service import image_service

router: APIRouter = APIRouter()


@router.post("", status_code=201)
async def register_images(
    data: ImageRegister,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_actor)],
) -> dict:
    """업로드된 이미지를 PENDING 상태로 등록."""
    images = await image_service.register_images(db, actor, data.files)
    await db.commit()
    return {"files": [{"id": str(img.id), "path": img.path} for img in images]}


@router.get("/pending", response_model=list[ImageResponse])
async def list_pending_images(
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_actor)],
) -> list[dict]:
    """이슈에 연결되지 않은 내 이미지 목록."""
    images = await image_service.list_pending(db, actor)
    return [image_service.build_response(img) for img in images]
