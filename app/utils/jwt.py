"""액세스 토큰 유틸리티 — 발급은 인증 서비스, 이 API는 검증만.

Access token helpers. Tokens are issued by the identity service; this API
only verifies them and extracts the user id. mint_access_token exists for
local tooling and tests.

Claims:
    sub: 사용자 UUID 문자열 (User id)
    exp: 만료 시각 (Expiry, JWT_ACCESS_TOKEN_EXPIRE_MINUTES after minting)
    type: "access" 고정 (Token type discriminator)

Role and department are never taken from claims; they are re-read from the
users table on every request.
"""

from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

import jwt

from app.config import settings

ACCESS_TOKEN_TYPE: str = "access"


def mint_access_token(user_id: UUID, **extra_claims: Any) -> str:
    """사용자 ID로 서명된 액세스 토큰을 만듭니다."""
    claims: dict[str, Any] = {
        **extra_claims,
        "sub": str(user_id),
        "type": ACCESS_TOKEN_TYPE,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def read_access_token(token: str) -> UUID:
    """액세스 토큰을 검증하고 사용자 ID를 반환합니다.

    Verify signature, expiry and token type, then return the subject.

    Raises:
        jwt.InvalidTokenError: 서명/만료/유형/subject 오류 (Any verification failure;
            ExpiredSignatureError is a subclass)
    """
    claims: dict[str, Any] = jwt.decode(
        token,
        settings.JWT_SECRET_KEY,
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["sub", "exp"]},
    )
    if claims.get("type") != ACCESS_TOKEN_TYPE:
        raise jwt.InvalidTokenError("Not an access token")
    try:
        return UUID(claims["sub"])
    except (TypeError, ValueError) as exc:
        raise jwt.InvalidTokenError("Malformed subject") from exc
