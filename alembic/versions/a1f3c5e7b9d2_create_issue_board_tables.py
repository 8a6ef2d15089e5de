"""create_issue_board_tables

Revision ID: a1f3c5e7b9d2
Revises:
Create Date: 2026-10-19 09:00:00.000000

이슈 보드 초기 스키마.
users, user_violations, issues(version 낙관적 잠금), 댓글/해결책,
추천/신고 집합 테이블, 사전 업로드 이미지(images).
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "a1f3c5e7b9d2"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("username", sa.String(100), nullable=False, unique=True),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), server_default="user", nullable=False),
        sa.Column("department", sa.String(100), nullable=False),
        sa.Column("is_disabled", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_users_department", "users", ["department"])

    op.create_table(
        "issues",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("section", sa.String(100), nullable=False),
        sa.Column("scope", sa.String(20), server_default="DEPARTMENT", nullable=False),
        sa.Column("department", sa.String(100), nullable=False),
        sa.Column("created_by", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("upvotes", sa.Integer(), server_default="0", nullable=False),
        sa.Column("is_resolved", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("is_inappropriate", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("is_edited", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("is_deleted", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_issues_department", "issues", ["department"])
    op.create_index("ix_issues_created_by", "issues", ["created_by"])
    op.create_index("ix_issues_is_deleted", "issues", ["is_deleted"])
    op.create_index("ix_issues_created_at", "issues", ["created_at"])

    op.create_table(
        "user_violations",
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("issue_id", UUID(as_uuid=True), sa.ForeignKey("issues.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "issue_comments",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("issue_id", UUID(as_uuid=True), sa.ForeignKey("issues.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("comment", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_issue_comments_issue_id", "issue_comments", ["issue_id"])

    op.create_table(
        "issue_solutions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("issue_id", UUID(as_uuid=True), sa.ForeignKey("issues.id", ondelete="CASCADE"), nullable=False),
        sa.Column("posted_by", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("solution", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_issue_solutions_issue_id", "issue_solutions", ["issue_id"])

    # 추천/신고 집합 — 복합 PK로 사용자당 1회 (one row per user)
    for table in ("issue_upvotes", "issue_reporters"):
        op.create_table(
            table,
            sa.Column("issue_id", UUID(as_uuid=True), sa.ForeignKey("issues.id", ondelete="CASCADE"), primary_key=True),
            sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        )

    op.create_table(
        "images",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("path", sa.String(1000), nullable=False),
        sa.Column("mimetype", sa.String(100), nullable=False),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("issue_id", UUID(as_uuid=True), sa.ForeignKey("issues.id", ondelete="SET NULL"), nullable=True),
        sa.Column("position", sa.Integer(), server_default="0", nullable=False),
        sa.Column("status", sa.String(10), server_default="PENDING", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_images_user_id", "images", ["user_id"])
    op.create_index("ix_images_issue_id", "images", ["issue_id"])


def downgrade() -> None:
    op.drop_index("ix_images_issue_id")
    op.drop_index("ix_images_user_id")
    op.drop_table("images")
    op.drop_table("issue_reporters")
    op.drop_table("issue_upvotes")
    op.drop_index("ix_issue_solutions_issue_id")
    op.drop_table("issue_solutions")
    op.drop_index("ix_issue_comments_issue_id")
    op.drop_table("issue_comments")
    op.drop_table("user_violations")
    op.drop_index("ix_issues_created_at")
    op.drop_index("ix_issues_is_deleted")
    op.drop_index("ix_issues_created_by")
    op.drop_index("ix_issues_department")
    op.drop_table("issues")
    op.drop_index("ix_users_department")
    op.drop_table("users")
