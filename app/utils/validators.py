"""입력 검증 유틸리티 모듈.

Input validation utilities for issue data.
Validation collects every problem instead of stopping at the first one so
the client can fix the whole form in one round trip.
"""

from uuid import UUID

from app.models.issue import IssueScope

MAX_TITLE_LENGTH: int = 500
MAX_SECTION_LENGTH: int = 100


def clean_text(value: str | None) -> str:
    """앞뒤 공백을 제거합니다. None은 빈 문자열로 취급합니다."""
    return value.strip() if value else ""


def parse_scope(value: str | None) -> IssueScope | None:
    """대소문자 구분 없이 공개 범위를 파싱합니다 — Case-insensitive scope parse."""
    try:
        return IssueScope(clean_text(value).upper())
    except ValueError:
        return None


def parse_image_ids(values: list[str]) -> list[UUID] | None:
    """이미지 참조를 UUID 목록으로 변환합니다. 하나라도 잘못되면 None."""
    try:
        return [UUID(str(v)) for v in values]
    except ValueError:
        return None


def validate_issue_data(
    title: str | None,
    description: str | None,
    section: str | None,
    images: list[str],
    scope: str | None,
) -> list[dict[str, str]]:
    """이슈 생성 데이터를 검증합니다.

    Validate issue creation data.

    Args:
        title: 제목 (Title)
        description: 본문 (Description)
        section: 분류 (Category)
        images: 사전 업로드된 이미지 ID 목록 (Pre-uploaded image ids)
        scope: 공개 범위 문자열 (Scope, case-insensitive)

    Returns:
        list[dict[str, str]]: 필드 오류 목록, 비어 있으면 유효
            (List of {"field", "message"} errors; empty when valid)
    """
    errors: list[dict[str, str]] = []

    title = clean_text(title)
    if not title:
        errors.append({"field": "title", "message": "Title is required"})
    elif len(title) > MAX_TITLE_LENGTH:
        errors.append({"field": "title", "message": f"Title must be at most {MAX_TITLE_LENGTH} characters"})

    if not clean_text(description):
        errors.append({"field": "description", "message": "Description is required"})

    section = clean_text(section)
    if not section:
        errors.append({"field": "section", "message": "Section is required"})
    elif len(section) > MAX_SECTION_LENGTH:
        errors.append({"field": "section", "message": f"Section must be at most {MAX_SECTION_LENGTH} characters"})

    if parse_scope(scope) is None:
        allowed = ", ".join(s.value for s in IssueScope)
        errors.append({"field": "scope", "message": f"Scope must be one of: {allowed}"})

    image_ids = parse_image_ids(images)
    if image_ids is None:
        errors.append({"field": "images", "message": "Image references must be valid ids"})
    elif len(set(image_ids)) != len(image_ids):
        errors.append({"field": "images", "message": "Image references must not repeat"})

    return errors
