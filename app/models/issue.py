"""이슈 관련 SQLAlchemy ORM 모델 정의.

Issue-related SQLAlchemy ORM model definitions.
An issue is filed within a department and is visible either to that
department only or to the whole organization.

Tables:
    - issues: 이슈 본문 및 상태 플래그 (Issue body and state flags)
    - issue_comments: 댓글 (Ordered comments)
    - issue_solutions: 해결책 제안 (Ordered proposed solutions)
    - issue_upvotes: 추천 사용자 집합 (Upvoter set, one row per user)
    - issue_reporters: 부적절 신고 사용자 집합 (Reporter set, one row per user)
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class IssueScope(str, enum.Enum):
    """이슈 공개 범위 — Issue visibility scope."""

    DEPARTMENT = "DEPARTMENT"
    ORGANIZATION = "ORGANIZATION"


class Issue(Base):
    """이슈 모델 — 부서 또는 조직 범위의 커뮤니티 이슈.

    Issue model — A community issue scoped to a department or the organization.

    Invariants maintained by ModerationService:
        upvotes == len(upvoters)
        is_inappropriate == (len(reporters) >= ISSUE_REPORTS_THRESHOLD)

    Issues are never physically deleted; is_deleted hides them from listings.
    version is SQLAlchemy's optimistic concurrency token: every UPDATE checks
    and increments it, so concurrent read-modify-write cycles cannot silently
    overwrite each other.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        title: 제목 (Title)
        description: 본문 (Description)
        section: 분류 (Category)
        scope: 공개 범위 (IssueScope)
        department: 소속 부서 (Owning department)
        created_by: 작성자 FK, 생성 후 불변 (Creator, immutable)
        upvotes: 추천 수 (Upvote count)
        is_resolved: 해결 여부 (Resolved flag)
        is_inappropriate: 부적절 판정 여부 (Escalated by reports)
        is_edited: 수정 여부 (Edited flag)
        is_deleted: 삭제 여부 (Soft delete flag)
        version: 낙관적 잠금 버전 (Optimistic lock version)
    """

    __tablename__ = "issues"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    # 분류 — Free-form category chosen by the author
    section: Mapped[str] = mapped_column(String(100), nullable=False)
    scope: Mapped[IssueScope] = mapped_column(
        Enum(IssueScope, name="issue_scope", native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=IssueScope.DEPARTMENT,
    )
    department: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    created_by: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    upvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_resolved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_inappropriate: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_edited: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __mapper_args__ = {"version_id_col": version}

    # 관계 — Relationships (always eager-loaded by IssueRepository)
    images = relationship("Image", back_populates="issue", order_by="Image.position")
    comments = relationship("IssueComment", back_populates="issue", order_by="IssueComment.created_at")
    solutions = relationship("IssueSolution", back_populates="issue", order_by="IssueSolution.created_at")
    upvoters = relationship("IssueUpvote", back_populates="issue")
    reporters = relationship("IssueReporter", back_populates="issue")


class IssueComment(Base):
    """이슈 댓글 — Issue comment."""

    __tablename__ = "issue_comments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    issue_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("issues.id", ondelete="CASCADE"), nullable=False, index=True)
    # 작성자 — Author (shown only in the full-detail view)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    issue = relationship("Issue", back_populates="comments")


class IssueSolution(Base):
    """해결책 제안 — Proposed solution posted by an authorised role."""

    __tablename__ = "issue_solutions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    issue_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("issues.id", ondelete="CASCADE"), nullable=False, index=True)
    posted_by: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    solution: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    issue = relationship("Issue", back_populates="solutions")


class IssueUpvote(Base):
    """추천 — One row per (issue, user); the composite key makes the upvoter set unique."""

    __tablename__ = "issue_upvotes"

    issue_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("issues.id", ondelete="CASCADE"), primary_key=True)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    issue = relationship("Issue", back_populates="upvoters")


class IssueReporter(Base):
    """부적절 신고 — One row per (issue, user) flagging the issue as inappropriate."""

    __tablename__ = "issue_reporters"

    issue_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("issues.id", ondelete="CASCADE"), primary_key=True)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    issue = relationship("Issue", back_populates="reporters")
