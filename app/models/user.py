"""사용자 관련 SQLAlchemy ORM 모델 정의.

User SQLAlchemy ORM model definitions.
Roles are a closed enum; permission rules over them live in
app.services.issue_policy.

Tables:
    - users: 사용자 계정 (User accounts with role and department)
    - user_violations: 부적절 판정 이력 (Issues of this user escalated to inappropriate)
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class UserRole(str, enum.Enum):
    """사용자 역할 — 닫힌 역할 집합.

    Closed set of user roles. Values match the wire format.
    """

    USER = "user"
    MODERATOR = "moderator"
    AUTH_LEVEL_ONE = "auth_level_one"
    AUTH_LEVEL_TWO = "auth_level_two"
    AUTH_LEVEL_THREE = "auth_level_three"


class User(Base):
    """사용자 모델 — 역할, 부서, 위반 상태.

    User model — Account with role, department and violation state.
    is_disabled is derived from the size of the violations set by
    ModerationService and persisted for cheap checks at authentication time.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        username: 로그인 아이디 (Login username, globally unique)
        full_name: 실명 (Full display name)
        role: 역할 (UserRole)
        department: 소속 부서 식별자 (Department identifier)
        is_disabled: 정지 여부 (True when violations reach the threshold)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Violation rows are read through UserRepository, never through a
    relationship on the user.
    """

    __tablename__ = "users"

    # 사용자 고유 식별자 — User unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 로그인 아이디 — Login username
    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    # 실명 — User's full display name
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    # 역할 — Role (VARCHAR + CHECK, DB 독립적 / portable across backends)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role", native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=UserRole.USER,
    )
    # 소속 부서 — Department identifier
    department: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    # 정지 여부 — Disabled when violations >= USER_VIOLATIONS_THRESHOLD
    is_disabled: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))


class UserViolation(Base):
    """사용자 위반 모델 — 사용자와 부적절 판정 이슈의 연결.

    One row per (author, issue) whose issue crossed the reports threshold.
    The composite primary key keeps the violation set free of duplicates.
    """

    __tablename__ = "user_violations"

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    issue_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("issues.id", ondelete="CASCADE"), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
