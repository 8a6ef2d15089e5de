"""앱 이슈 라우터 — 이슈 조회, 작성, 모더레이션 API.

App Issue Router — Issue listing, lifecycle and moderation endpoints.
Each mutating endpoint is one transaction committed here after the
service returns.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_actor
from app.database import get_db
from app.schemas.common import MessageResponse
from app.schemas.issue import CommentCreate, IssueCreate, IssueSearch, IssueUpdate, SolutionCreate
from app.schemas.user import Actor
from app.services.issue_service import IssueFilter, issue_service
from app.services.moderation_service import moderation_service
from app.utils.pagination import WindowPage, page_window

router: APIRouter = APIRouter()


# --- 목록 (Listing) ---

@router.get("", response_model=WindowPage)
async def list_issues(
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_actor)],
    page: int | None = None,
    limit: int | None = None,
) -> WindowPage:
    """이슈 목록 조회."""
    return await issue_service.list_issues(db, actor, page_window(page, limit), IssueFilter.ALL)


@router.get("/resolved", response_model=WindowPage)
async def list_resolved_issues(
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_actor)],
    page: int | None = None,
    limit: int | None = None,
) -> WindowPage:
    """해결된 이슈 목록 조회."""
    return await issue_service.list_issues(db, actor, page_window(page, limit), IssueFilter.RESOLVED)


@router.get("/unresolved", response_model=WindowPage)
async def list_unresolved_issues(
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_actor)],
    page: int | None = None,
    limit: int | None = None,
) -> WindowPage:
    """미해결 이슈 목록 조회."""
    return await issue_service.list_issues(db, actor, page_window(page, limit), IssueFilter.UNRESOLVED)


@router.get("/mine", response_model=WindowPage)
async def list_my_issues(
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_actor)],
    page: int | None = None,
    limit: int | None = None,
) -> WindowPage:
    """내가 작성한 이슈 목록 조회."""
    return await issue_service.list_issues_by_user(db, actor, actor.id, page_window(page, limit))


@router.post("/search", response_model=WindowPage)
async def search_issues(
    data: IssueSearch,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_actor)],
    page: int | None = None,
    limit: int | None = None,
) -> WindowPage:
    """구문으로 이슈 검색."""
    return await issue_service.search_issues(db, actor, data.phrase, page_window(page, limit))


# --- 단건 (Single issue) ---

@router.get("/{issue_id}")
async def get_issue(
    issue_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_actor)],
) -> dict:
    """이슈 상세 조회."""
    return await issue_service.get_issue(db, actor, issue_id)


@router.post("", status_code=201)
async def create_issue(
    data: IssueCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_actor)],
) -> dict:
    """이슈 생성. 사전 업로드된 이미지를 함께 연결."""
    issue = await issue_service.create_issue(db, actor, data)
    await db.commit()
    return {"id": str(issue.id), "message": "Issue created"}


@router.patch("/{issue_id}")
async def update_issue(
    issue_id: UUID,
    data: IssueUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_actor)],
) -> dict:
    """이슈 제목/본문 수정. 작성자만 가능."""
    updated = await issue_service.update_issue(db, actor, issue_id, data)
    await db.commit()
    return {"updated": updated, "message": "Issue updated"}


@router.delete("/{issue_id}")
async def delete_issue(
    issue_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_actor)],
) -> dict:
    """이슈 소프트 삭제. 작성자 또는 moderator."""
    deleted = await issue_service.delete_issue(db, actor, issue_id)
    await db.commit()
    return {"deleted": deleted, "message": "Issue deleted"}


@router.post("/{issue_id}/resolve")
async def toggle_resolve(
    issue_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_actor)],
) -> dict:
    """해결 상태 토글. 작성자 또는 moderator."""
    is_resolved = await issue_service.toggle_resolve(db, actor, issue_id)
    await db.commit()
    return {
        "is_resolved": is_resolved,
        "message": "Issue marked as resolved" if is_resolved else "Issue marked as unresolved",
    }


@router.post("/{issue_id}/upvote")
async def toggle_upvote(
    issue_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_actor)],
) -> dict:
    """추천 토글."""
    result = await moderation_service.toggle_upvote(db, actor, issue_id)
    await db.commit()
    return result


@router.post("/{issue_id}/inappropriate")
async def toggle_inappropriate(
    issue_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_actor)],
) -> dict:
    """부적절 신고 토글. 임계값 도달 시 작성자 제재."""
    result = await moderation_service.toggle_inappropriate(db, actor, issue_id)
    await db.commit()
    return result


@router.post("/{issue_id}/comments", response_model=MessageResponse, status_code=201)
async def post_comment(
    issue_id: UUID,
    data: CommentCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_actor)],
) -> MessageResponse:
    """댓글 작성."""
    await issue_service.post_comment(db, actor, issue_id, data.comment)
    await db.commit()
    return MessageResponse(message="Comment posted")


@router.post("/{issue_id}/solutions", response_model=MessageResponse, status_code=201)
async def post_solution(
    issue_id: UUID,
    data: SolutionCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_actor)],
) -> MessageResponse:
    """해결책 작성."""
    await issue_service.post_solution(db, actor, issue_id, data.solution)
    await db.commit()
    return MessageResponse(message="Solution posted")
