"""앱 API 라우터 패키지 — 모든 앱(사용자용) 엔드포인트 통합.

App API Router package — Aggregates all user-facing endpoints into a
single router for inclusion in the FastAPI application.

Included routers:
    - profile: 내 프로필 (My profile and violation state)
    - issues: 이슈 조회/작성/모더레이션 (Issue listing, lifecycle, moderation)
    - images: 사전 업로드 이미지 등록 (Pre-uploaded image registration)
"""

from fastapi import APIRouter

from app.api.app.profile import router as profile_router
from app.api.app.issues import router as issues_router
from app.api.app.images import router as images_router

app_router: APIRouter = APIRouter()

# 프로필: /profile 엔드포인트 (GET my profile)
app_router.include_router(profile_router, tags=["App Profile"])
app_router.include_router(issues_router, prefix="/issues", tags=["Issues"])
app_router.include_router(images_router, prefix="/images", tags=["Images"])
