"""이슈 Pydantic 스키마.

Issue request schemas. Fields are deliberately loose (optional strings);
app.utils.validators produces the structured field errors.
"""

from pydantic import BaseModel


class IssueCreate(BaseModel):
    title: str | None = None
    description: str | None = None
    section: str | None = None
    scope: str | None = None  # DEPARTMENT, ORGANIZATION (대소문자 무관)
    images: list[str] = []  # 사전 업로드된 이미지 ID (Pre-uploaded image ids)


class IssueUpdate(BaseModel):
    title: str | None = None
    description: str | None = None


class IssueSearch(BaseModel):
    phrase: str | None = None


class CommentCreate(BaseModel):
    comment: str | None = None


class SolutionCreate(BaseModel):
    solution: str | None = None
