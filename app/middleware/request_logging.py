"""요청 로깅 미들웨어 — 요청마다 구조화된 이벤트 1건.

Request logging middleware. Every request (except health and docs) yields
one structured event: method, path, status, duration, acting user, masked
query/body and the error reason for 4xx/5xx responses.

Events go to Axiom when AXIOM_API_TOKEN and AXIOM_DATASET are set and to
the standard "app.access" logger otherwise. Comment and solution bodies
are user content and are never logged.
"""

import json
import logging
import re
import time
from typing import Any

from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from app.config import settings

access_logger = logging.getLogger("app.access")

_MASKED_KEY = re.compile(r"(password|secret|token|authorization|api_?key|credential)", re.IGNORECASE)
_UNLOGGED_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})
_CONTENT_SUFFIXES = ("/comments", "/solutions")
_MAX_DEPTH = 5
_MAX_ITEMS = 20
_MAX_ERROR_CHARS = 500


def mask(value: Any, depth: int = 0) -> Any:
    """민감한 키의 값을 가립니다 — Mask values under sensitive keys, recursively."""
    if depth > _MAX_DEPTH:
        return "..."
    if isinstance(value, dict):
        return {key: "***" if _MASKED_KEY.search(key) else mask(item, depth + 1) for key, item in value.items()}
    if isinstance(value, list):
        return [mask(item, depth + 1) for item in value[:_MAX_ITEMS]]
    return value


def error_reason(body: bytes) -> str:
    """에러 응답의 detail을 문자열로 — Error response detail as a bounded string."""
    try:
        detail: Any = json.loads(body).get("detail")
    except (json.JSONDecodeError, UnicodeDecodeError, AttributeError):
        return body.decode("utf-8", errors="replace")[:_MAX_ERROR_CHARS]
    text = detail if isinstance(detail, str) else json.dumps(detail, default=str)
    return text[:_MAX_ERROR_CHARS]


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """요청 이벤트를 Axiom 또는 표준 로거로 보냅니다."""

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)
        self._dataset: str = settings.AXIOM_DATASET
        self._axiom: AxiomClient | None = (
            AxiomClient(token=settings.AXIOM_API_TOKEN)
            if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET
            else None
        )

    async def _read_body(self, request: Request) -> Any:
        if request.method not in ("POST", "PUT", "PATCH") or request.url.path.endswith(_CONTENT_SUFFIXES):
            return None
        raw = await request.body()
        if not raw:
            return None
        try:
            return mask(json.loads(raw))
        except (json.JSONDecodeError, UnicodeDecodeError):
            return "(non-json body)"

    def _emit(self, event: dict[str, Any]) -> None:
        if self._axiom is None:
            level = logging.WARNING if event["status_code"] >= 500 else logging.INFO
            access_logger.log(
                level, "%s %s -> %s (%.1fms)",
                event["method"], event["path"], event["status_code"], event["duration_ms"],
                extra={"event": event},
            )
            return
        try:
            self._axiom.ingest_events(self._dataset, [event])
        except Exception:
            # 전송 실패가 응답을 막지 않음 (A failed ingest never fails the request)
            access_logger.warning("Axiom ingest failed for %s %s", event["method"], event["path"], exc_info=True)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in _UNLOGGED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        event: dict[str, Any] = {"method": request.method, "path": request.url.path, "status_code": 500}
        if request.query_params:
            event["query_params"] = mask(dict(request.query_params))
        body = await self._read_body(request)
        if body is not None:
            event["request_body"] = body

        try:
            response = await call_next(request)
            event["status_code"] = response.status_code
            if response.status_code >= 400:
                # 본문을 소비했으므로 새 응답으로 다시 감쌈 (Body iterator is consumed, rebuild it)
                content = b"".join([
                    chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
                    async for chunk in response.body_iterator
                ])
                event["error"] = error_reason(content)
                response = Response(
                    content=content,
                    status_code=response.status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
            return response
        except Exception as exc:
            event["error"] = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            event["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
            actor_id = getattr(request.state, "actor_id", None)
            if actor_id:
                event["actor_id"] = actor_id
            self._emit(event)
