"""FastAPI 의존성 주입 모듈 — 인증 및 행위자 추출.

FastAPI dependency injection module — Authentication and actor extraction.
Tokens are issued by the identity service; this API only verifies them.

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends Authorization: Bearer <token> header)
    2. read_access_token()이 JWT를 검증하고 사용자 ID를 반환
       (read_access_token verifies the JWT and returns the user id)
    3. 사용자 ID로 DB에서 역할과 부서를 다시 조회
       (Role and department are re-read from the users table)
    4. 정지된 사용자는 403으로 거부 (Disabled users are rejected with 403)
"""

from typing import Annotated
from uuid import UUID

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.user import User
from app.repositories.user_repository import user_repository
from app.schemas.user import Actor
from app.utils.exceptions import ForbiddenError, UnauthorizedError
from app.utils.jwt import read_access_token

# HTTP Bearer 토큰 추출기 — auto_error=False로 401을 직접 발생
# (Extracts the bearer token; missing header is reported as 401 below)
security: HTTPBearer = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """JWT 토큰에서 현재 인증된 사용자를 추출합니다.

    Decode JWT from the Authorization header and return the authenticated user.

    Raises:
        UnauthorizedError: 토큰 누락/무효/만료, 사용자 없음 (Missing/invalid token, unknown user)
        ForbiddenError: 정지된 계정 (Account disabled by violations)
    """
    if credentials is None:
        raise UnauthorizedError()
    try:
        user_id: UUID = read_access_token(credentials.credentials)
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid or expired token")

    user: User | None = await user_repository.get_by_id(db, user_id)
    if user is None:
        raise UnauthorizedError("User not found")
    if user.is_disabled:
        raise ForbiddenError("Account disabled")

    # 요청 로깅 미들웨어가 참조 — Picked up by the request logging middleware
    request.state.actor_id = str(user.id)
    return user


async def get_actor(
    current_user: Annotated[User, Depends(get_current_user)],
) -> Actor:
    """현재 사용자의 불변 행위자 스냅샷 — Immutable actor snapshot of the current user."""
    return Actor.from_user(current_user)
