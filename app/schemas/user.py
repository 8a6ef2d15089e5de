"""사용자 관련 Pydantic 스키마.

User-related schemas: the Actor value passed to services and the
profile response.
"""

from uuid import UUID

from pydantic import BaseModel

from app.models.user import User, UserRole


class Actor(BaseModel):
    """요청 수행자 — 인증된 사용자의 불변 스냅샷.

    The authenticated user performing an operation, captured once per request.
    Services and policy functions take an Actor instead of the ORM row so a
    session rollback during a retry never touches it.

    Attributes:
        id: 사용자 UUID (User id)
        role: 역할 (UserRole)
        department: 소속 부서 (Department)
    """

    model_config = {"frozen": True}

    id: UUID
    role: UserRole
    department: str

    @classmethod
    def from_user(cls, user: User) -> "Actor":
        return cls(id=user.id, role=user.role, department=user.department)


class ProfileResponse(BaseModel):
    """내 프로필 응답 스키마 — Profile response with violation state."""

    id: str
    username: str
    full_name: str
    role: UserRole
    department: str
    violations: list[str]  # 부적절 판정된 내 이슈 ID (Issue ids escalated to inappropriate)
    is_disabled: bool
