"""이미지 SQLAlchemy ORM 모델 정의.

Image SQLAlchemy ORM model definition.
Images are uploaded before the issue that uses them exists. They start as
PENDING (owned by the uploader, no issue) and become LINKED once an issue
references them, so an image stuck in PENDING is visible rather than lost.

Tables:
    - images: 업로드 이미지 메타데이터 (Uploaded image metadata)
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class ImageStatus(str, enum.Enum):
    """이미지 연결 상태 — Image association state."""

    PENDING = "PENDING"
    LINKED = "LINKED"


class Image(Base):
    """이미지 모델 — 업로드된 파일의 메타데이터.

    Image model — Metadata of an uploaded file.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        path: 파일 서버 경로/URL (File server path or URL)
        mimetype: MIME 타입 (Content type)
        user_id: 업로더 FK (Uploader)
        issue_id: 연결된 이슈 FK, PENDING이면 NULL (Linked issue, NULL while pending)
        position: 이슈 내 순서 (Order within the issue)
        status: 연결 상태 (ImageStatus)
        created_at: 업로드 일시 UTC (Upload timestamp)
    """

    __tablename__ = "images"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    path: Mapped[str] = mapped_column(String(1000), nullable=False)
    mimetype: Mapped[str] = mapped_column(String(100), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    issue_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("issues.id", ondelete="SET NULL"), nullable=True, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[ImageStatus] = mapped_column(
        Enum(ImageStatus, name="image_status", native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ImageStatus.PENDING,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    issue = relationship("Issue", back_populates="images")
