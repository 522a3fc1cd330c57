"""Request/response logging hooks.

Observational only: nothing here alters the request or response, and no
exception raised while logging reaches the HTTP caller.
"""

from typing import Any, Optional

import httpx
import structlog

logger = structlog.get_logger()

REDACTED = "[redacted]"
_SENSITIVE_HEADERS = {"authorization", "cookie", "set-cookie", "proxy-authorization"}


def _truncate(text: str, max_chars: int) -> str:
    if len(text) > max_chars:
        return text[:max_chars] + "..."
    return text


def _render_body(body: Any, max_chars: int) -> Optional[str]:
    if body is None:
        return None
    if isinstance(body, (bytes, bytearray)):
        return _truncate(bytes(body).decode("utf-8", errors="replace"), max_chars)
    return _truncate(str(body), max_chars)


def _redact_headers(headers: httpx.Headers) -> dict[str, str]:
    return {
        key: REDACTED if key.lower() in _SENSITIVE_HEADERS else value
        for key, value in headers.items()
    }


class RequestLogger:
    """Emits one structured event per logged request or response."""

    def __init__(self, max_body_chars: int = 2000) -> None:
        self._max_body_chars = max_body_chars

    async def log_request(self, absolute_uri: str, body: Any, method: str) -> None:
        try:
            logger.info(
                "http_request",
                method=method,
                url=absolute_uri,
                body=_render_body(body, self._max_body_chars),
            )
        except Exception as e:
            logger.warning("request_log_failed", url=absolute_uri, error=str(e))

    async def log_response(self, response: httpx.Response) -> None:
        try:
            request = response.request
            logger.info(
                "http_response",
                method=request.method,
                url=str(request.url),
                status_code=response.status_code,
                reason=response.reason_phrase,
                elapsed_ms=int(response.elapsed.total_seconds() * 1000),
                headers=_redact_headers(response.headers),
                body=_render_body(response.content, self._max_body_chars),
            )
        except Exception as e:
            logger.warning(
                "response_log_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
