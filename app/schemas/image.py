"""이미지 Pydantic 스키마.

Image registration request/response schemas.
"""

from datetime import datetime

from pydantic import BaseModel

from app.models.image import ImageStatus


class ImageFile(BaseModel):
    """업로드된 파일 메타데이터 — Metadata of one uploaded file."""

    path: str
    mimetype: str


class ImageRegister(BaseModel):
    files: list[ImageFile] = []


class ImageResponse(BaseModel):
    id: str
    path: str
    mimetype: str
    status: ImageStatus
    created_at: datetime
