"""페이지네이션 유틸리티 모듈.

Pagination utility module.
List endpoints do not run a COUNT query. Instead the store is asked for
twice the page size starting at the page offset, and the surplus only
tells whether a next page exists. At exact page boundaries this can
misreport has_next_page; clients rely on this behaviour, keep it.
"""

from typing import Any, Sequence

from pydantic import BaseModel

from app.config import settings


class PageWindow(BaseModel):
    """정규화된 페이지 요청.

    Normalised page request with the store window derived from it.

    Attributes:
        page: 페이지 번호, 1부터 시작 (Page number, 1-based, >= 1)
        limit: 페이지 크기 (Page size, >= MIN_PAGE_LIMIT)
    """

    page: int
    limit: int

    @property
    def offset(self) -> int:
        """저장소 조회 시작 위치 — Store offset: (page - 1) * limit."""
        return (self.page - 1) * self.limit

    @property
    def fetch_size(self) -> int:
        """저장소 조회 개수 — Over-fetch size: 2 * limit."""
        return 2 * self.limit


class WindowPage(BaseModel):
    """페이지 응답 모델.

    Page response model returned by every list operation.

    Attributes:
        items: 현재 페이지 항목 (At most `limit` items)
        page: 현재 페이지 번호 (Current page, 1-based)
        limit: 페이지 크기 (Page size after clamping)
        has_next_page: 다음 페이지 존재 추정 (Derived from the over-fetch)
        has_previous_page: 이전 페이지 존재 여부 (page > 1)
    """

    items: list[Any]
    page: int
    limit: int
    has_next_page: bool
    has_previous_page: bool


def page_window(page: int | None = None, limit: int | None = None) -> PageWindow:
    """페이지 파라미터를 정규화합니다.

    Normalise raw page parameters. Missing or zero values fall back to the
    defaults; values below the minimums are clamped up.

    Args:
        page: 요청 페이지 (Requested page, default 1)
        limit: 요청 페이지 크기 (Requested page size, default DEFAULT_PAGE_LIMIT)

    Returns:
        PageWindow: 정규화된 요청 (Normalised request)
    """
    page = page or 1
    limit = limit or settings.DEFAULT_PAGE_LIMIT
    return PageWindow(page=max(page, 1), limit=max(limit, settings.MIN_PAGE_LIMIT))


def build_page(fetched: Sequence[Any], window: PageWindow) -> WindowPage:
    """과다 조회 결과에서 한 페이지를 잘라냅니다.

    Cut one page out of an over-fetched batch.

    Args:
        fetched: 저장소가 반환한 최대 2 * limit 개 항목 (Over-fetched items)
        window: 정규화된 요청 (Normalised request)

    Returns:
        WindowPage: 페이지 응답 (Page with navigation flags)
    """
    return WindowPage(
        items=list(fetched[: window.limit]),
        page=window.page,
        limit=window.limit,
        has_next_page=len(fetched) > window.limit,
        has_previous_page=window.page > 1,
    )
