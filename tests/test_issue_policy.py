"""이슈 권한 정책 단위 테스트 — DB 없이 순수 함수만 검증.

Issue permission policy unit tests. Pure predicates, no database.
"""

import uuid
from types import SimpleNamespace

import pytest

from app.models.issue import IssueScope
from app.models.user import UserRole
from app.schemas.user import Actor
from app.services import issue_policy


def _actor(role: UserRole, department: str = "A") -> Actor:
    return Actor(id=uuid.uuid4(), role=role, department=department)


def _issue(department: str = "B", scope: IssueScope = IssueScope.DEPARTMENT, created_by=None):
    return SimpleNamespace(department=department, scope=scope, created_by=created_by or uuid.uuid4())


class TestScope:
    """부서 범위 규칙 테스트."""

    def test_other_department_issue_is_out_of_scope(self):
        assert not issue_policy.can_act_in_scope(_actor(UserRole.USER), _issue())

    def test_organization_issue_is_in_scope_everywhere(self):
        assert issue_policy.can_act_in_scope(_actor(UserRole.USER), _issue(scope=IssueScope.ORGANIZATION))

    def test_auth_level_three_acts_anywhere(self):
        assert issue_policy.can_act_in_scope(_actor(UserRole.AUTH_LEVEL_THREE), _issue())

    def test_fetch_ignores_organization_scope(self):
        """단건 조회는 같은 부서 또는 auth_level_three만."""
        issue = _issue(scope=IssueScope.ORGANIZATION)
        assert not issue_policy.can_fetch(_actor(UserRole.USER), issue)
        assert issue_policy.can_fetch(_actor(UserRole.AUTH_LEVEL_THREE), issue)
        assert issue_policy.can_fetch(_actor(UserRole.USER, "B"), issue)


class TestLifecycle:
    """수정/삭제/해결 권한 테스트."""

    def test_only_creator_edits(self):
        actor = _actor(UserRole.MODERATOR, "B")
        assert not issue_policy.can_edit(actor, _issue())
        assert issue_policy.can_edit(actor, _issue(created_by=actor.id))

    def test_moderator_or_creator_moderates(self):
        assert issue_policy.can_moderate(_actor(UserRole.MODERATOR), _issue())
        assert not issue_policy.can_moderate(_actor(UserRole.AUTH_LEVEL_THREE), _issue())
        creator = _actor(UserRole.USER)
        assert issue_policy.can_moderate(creator, _issue(created_by=creator.id))


class TestSolutions:
    """해결책 작성 권한 — 역할별."""

    @pytest.mark.parametrize(
        ("role", "department", "allowed"),
        [
            (UserRole.USER, "B", False),
            (UserRole.MODERATOR, "B", False),
            (UserRole.AUTH_LEVEL_ONE, "A", False),
            (UserRole.AUTH_LEVEL_ONE, "B", True),
            (UserRole.AUTH_LEVEL_TWO, "A", True),
            (UserRole.AUTH_LEVEL_THREE, "A", True),
        ],
    )
    def test_can_post_solution(self, role, department, allowed):
        assert issue_policy.can_post_solution(_actor(role, department), _issue("B")) is allowed


class TestFlag:
    """부적절 신고 권한 테스트."""

    def test_same_department_flags(self):
        assert issue_policy.can_flag(_actor(UserRole.USER, "B"), _issue("B"))

    def test_cross_department_needs_level_two(self):
        assert not issue_policy.can_flag(_actor(UserRole.AUTH_LEVEL_ONE), _issue("B"))
        assert not issue_policy.can_flag(_actor(UserRole.MODERATOR), _issue("B"))
        assert issue_policy.can_flag(_actor(UserRole.AUTH_LEVEL_TWO), _issue("B"))
        assert issue_policy.can_flag(_actor(UserRole.AUTH_LEVEL_THREE), _issue("B"))


class TestProjection:
    """전체/축약 응답 판정."""

    def test_full_detail_roles(self):
        creator = _actor(UserRole.USER)
        assert issue_policy.can_see_full_detail(creator, _issue(created_by=creator.id))
        assert issue_policy.can_see_full_detail(_actor(UserRole.MODERATOR), _issue())
        assert issue_policy.can_see_full_detail(_actor(UserRole.AUTH_LEVEL_THREE), _issue())

    def test_other_roles_get_reduced_view(self):
        assert not issue_policy.can_see_full_detail(_actor(UserRole.USER, "B"), _issue("B"))
        assert not issue_policy.can_see_full_detail(_actor(UserRole.AUTH_LEVEL_TWO, "B"), _issue("B"))

    def test_scope_clauses(self):
        assert issue_policy.listing_scope_clause(_actor(UserRole.AUTH_LEVEL_THREE)) is None
        assert issue_policy.search_scope_clause(_actor(UserRole.AUTH_LEVEL_THREE)) is None
        assert issue_policy.listing_scope_clause(_actor(UserRole.USER)) is not None
        assert issue_policy.search_scope_clause(_actor(UserRole.USER)) is not None
