"""공통 Pydantic 응답 스키마 정의.

Common Pydantic response schema definitions shared across routers.
Page responses live in app.utils.pagination (WindowPage).
"""

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """범용 메시지 응답 스키마.

    Generic message response schema for simple confirmations.

    Attributes:
        message: 응답 메시지 (Response message string)
    """

    message: str  # 응답 메시지 (Human-readable confirmation message)
