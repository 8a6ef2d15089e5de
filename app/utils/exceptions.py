"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses for the four error kinds
the engine reports. Every fault raised by a service is one of these before
it reaches the transport layer; raw database errors are translated by the
handlers registered in app.main.

Usage:
    from app.utils.exceptions import BadRequestError, ForbiddenError
    raise BadRequestError("Please provide some data")
    raise ForbiddenError()
"""

import enum
from typing import Any

from fastapi import HTTPException, status


class ErrorKind(str, enum.Enum):
    """오류 분류 — Error taxonomy shared by all operations."""

    VALIDATION = "VALIDATION"  # 호출자가 고칠 수 있음 (Caller-recoverable)
    PERMISSION = "PERMISSION"  # 재시도 불가 (Never retried)
    NOT_FOUND = "NOT_FOUND"  # 없음 또는 소프트 삭제됨 (Absent or soft-deleted)
    INTERNAL = "INTERNAL"  # 저장소/인프라 장애 (Store or infrastructure failure)


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 잘못된 요청 데이터 시 사용.

    400 Bad Request exception.
    Raised for malformed or missing input, including a structured list of
    field errors produced by app.utils.validators.

    Args:
        detail: 오류 메시지 또는 필드 오류 목록 (Message or list of field errors)
    """

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, detail: Any = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ForbiddenError(HTTPException):
    """403 Forbidden 예외 — 권한 부족 시 사용.

    403 Forbidden exception.
    Raised when the actor's role or department does not permit the action.

    Args:
        detail: 오류 메시지 (Error message, default: "Action not allowed")
    """

    kind: ErrorKind = ErrorKind.PERMISSION

    def __init__(self, detail: str = "Action not allowed") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 인증 실패 시 사용.

    401 Unauthorized exception.
    Raised when the bearer token is missing, invalid, or expired.

    Args:
        detail: 오류 메시지 (Error message, default: "Authentication required")
    """

    kind: ErrorKind = ErrorKind.PERMISSION

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 소프트 삭제된 리소스에 대한 작업 시 사용.

    404 Not Found exception.
    Raised when an operation targets an entity that has been soft-deleted.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource not found")
    """

    kind: ErrorKind = ErrorKind.NOT_FOUND

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class InternalError(HTTPException):
    """500 Internal Server Error 예외 — 저장소 장애 시 사용.

    500 Internal Server Error exception.
    Raised after a store failure has been logged. The detail never carries
    the underlying driver message.

    Args:
        detail: 오류 메시지 (Error message, default: "Something went wrong")
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, detail: str = "Something went wrong") -> None:
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
