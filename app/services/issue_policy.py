"""이슈 권한 정책 — 누가 이슈를 보고, 수정하고, 신고할 수 있는지.

Issue permission policy — pure predicates over the closed UserRole enum.
Nothing here touches the database; services call these before any write.

Two listing filters exist on purpose:
    listing_scope_clause: plain listing, own department only.
    search_scope_clause: phrase search, own department plus
        organization-wide issues.
"""

from typing import Protocol
from uuid import UUID

from sqlalchemy import ColumnElement, or_

from app.models.issue import Issue, IssueScope
from app.models.user import UserRole
from app.schemas.user import Actor

# 부서 경계를 넘어 신고할 수 있는 역할 — Roles allowed to flag across departments
CROSS_DEPARTMENT_FLAG_ROLES: frozenset[UserRole] = frozenset(
    {UserRole.AUTH_LEVEL_TWO, UserRole.AUTH_LEVEL_THREE}
)


class ScopedIssue(Protocol):
    department: str
    scope: IssueScope
    created_by: UUID


def has_global_view(actor: Actor) -> bool:
    """모든 부서를 볼 수 있는지 — auth_level_three sees every department."""
    return actor.role is UserRole.AUTH_LEVEL_THREE


def is_creator(actor: Actor, issue: ScopedIssue) -> bool:
    return issue.created_by == actor.id


def can_act_in_scope(actor: Actor, issue: ScopedIssue) -> bool:
    """부서 범위 규칙 — 같은 부서, 조직 공개 이슈, 또는 auth_level_three.

    Department-scope rule used by upvote and comment.
    """
    return (
        actor.department == issue.department
        or issue.scope is IssueScope.ORGANIZATION
        or has_global_view(actor)
    )


def can_fetch(actor: Actor, issue: ScopedIssue) -> bool:
    """단건 조회 — 같은 부서 또는 auth_level_three.

    Fetch by id. Out-of-scope actors get FORBIDDEN, which reveals that the
    issue exists.
    """
    return actor.department == issue.department or has_global_view(actor)


def can_edit(actor: Actor, issue: ScopedIssue) -> bool:
    """제목/본문 수정 — 작성자만 (Title/description: creator only)."""
    return is_creator(actor, issue)


def can_moderate(actor: Actor, issue: ScopedIssue) -> bool:
    """삭제 및 해결 토글 — 작성자 또는 moderator (Delete / resolve toggle)."""
    return is_creator(actor, issue) or actor.role is UserRole.MODERATOR


def can_post_solution(actor: Actor, issue: ScopedIssue) -> bool:
    """해결책 작성 권한.

    user/moderator never; auth_level_one only inside its own department;
    auth_level_two and auth_level_three anywhere.
    """
    match actor.role:
        case UserRole.USER | UserRole.MODERATOR:
            return False
        case UserRole.AUTH_LEVEL_ONE:
            return actor.department == issue.department
        case UserRole.AUTH_LEVEL_TWO | UserRole.AUTH_LEVEL_THREE:
            return True


def can_flag(actor: Actor, issue: ScopedIssue) -> bool:
    """부적절 신고 — 같은 부서 또는 auth_level_two/three."""
    return actor.department == issue.department or actor.role in CROSS_DEPARTMENT_FLAG_ROLES


def can_see_full_detail(actor: Actor, issue: ScopedIssue) -> bool:
    """전체 필드 조회 — 작성자, moderator, auth_level_three.

    Everyone else gets the reduced projection.
    """
    return (
        is_creator(actor, issue)
        or actor.role is UserRole.MODERATOR
        or has_global_view(actor)
    )


def listing_scope_clause(actor: Actor) -> ColumnElement[bool] | None:
    """목록 조회 필터 — 자기 부서만. None이면 필터 없음.

    Filter for plain listings: own department only; None means unrestricted.
    """
    if has_global_view(actor):
        return None
    return Issue.department == actor.department


def search_scope_clause(actor: Actor) -> ColumnElement[bool] | None:
    """검색 필터 — 자기 부서 또는 조직 공개 이슈. None이면 필터 없음.

    Filter for phrase search: own department or organization scope.
    """
    if has_global_view(actor):
        return None
    return or_(Issue.department == actor.department, Issue.scope == IssueScope.ORGANIZATION)
