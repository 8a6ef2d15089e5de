"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
relationship resolution.

Modules:
    user: 사용자, 역할, 위반 이력 (User, UserRole, UserViolation)
    issue: 이슈, 댓글, 해결책, 추천, 신고 (Issue, comments, solutions, upvotes, reporters)
    image: 업로드 이미지 (Uploaded images with pending/linked state)
"""

from app.models.user import User, UserRole, UserViolation
from app.models.issue import Issue, IssueComment, IssueReporter, IssueScope, IssueSolution, IssueUpvote
from app.models.image import Image, ImageStatus

__all__ = [
    "User", "UserRole", "UserViolation",
    "Issue", "IssueComment", "IssueReporter", "IssueScope", "IssueSolution", "IssueUpvote",
    "Image", "ImageStatus",
]
