"""Keeps the authenticated transport's Authorization header fresh.

Every authenticated request asks the token source for the current token and
compares it with the last one seen. The cached ``(token, header)`` pair is
replaced as a whole when the token changes, so concurrent readers never see
a token from one refresh paired with a header from another.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

import httpx
import structlog

from ..errors import AuthenticationUnavailableError
from .session import SessionState
from .token_source import AccessTokenNotAvailableError, AccessTokenResultStatus, TokenSource

logger = structlog.get_logger()

AUTHORIZATION_HEADER = "Authorization"


@dataclass(frozen=True)
class CachedAuthState:
    """Last token seen and its precomputed header value."""

    token_value: str
    header_value: str

    @classmethod
    def for_token(cls, token_value: str) -> "CachedAuthState":
        return cls(token_value=token_value, header_value=f"Bearer {token_value}")


class AuthHeaderCoordinator:
    """Attaches a current bearer token to a shared transport.

    Concurrent token fetches are collapsed into one in-flight task. No lock
    is held while awaiting the token source.
    """

    def __init__(self, token_source: TokenSource, session: Optional[SessionState] = None) -> None:
        self._token_source = token_source
        self._session = session if session is not None else SessionState()
        self._state: Optional[CachedAuthState] = None
        self._inflight: Optional[asyncio.Task] = None

    @property
    def state(self) -> Optional[CachedAuthState]:
        return self._state

    @property
    def session(self) -> SessionState:
        return self._session

    async def get_access_token(self) -> str:
        """Fetch the current access token.

        Raises:
            AuthenticationUnavailableError: the token source produced no token.
        """
        task = self._inflight
        if task is None or task.done():
            task = asyncio.ensure_future(self._fetch_token())
            self._inflight = task
            task.add_done_callback(self._clear_inflight)
        # Shielded so one cancelled caller does not cancel the fetch for the rest.
        return await asyncio.shield(task)

    async def ensure_fresh_header(self, transport: httpx.AsyncClient) -> None:
        """Make ``transport`` carry a header for the current token.

        When no token can be obtained the transport's Authorization header is
        removed before the error propagates, so a rejected token is not sent.
        """
        try:
            token_value = await self.get_access_token()
        except Exception:
            transport.headers.pop(AUTHORIZATION_HEADER, None)
            raise

        # No await between compare and swap.
        state = self._state
        if state is None or state.token_value != token_value:
            state = CachedAuthState.for_token(token_value)
            self._state = state
            logger.debug("auth_header_refreshed")

        if transport.headers.get(AUTHORIZATION_HEADER) != state.header_value:
            transport.headers[AUTHORIZATION_HEADER] = state.header_value

    def reset(self) -> None:
        """Forget the cached token and expire the session."""
        self._state = None
        self._session.expire()

    async def _fetch_token(self) -> str:
        try:
            result = await self._token_source.request_token()
        except AccessTokenNotAvailableError as e:
            self.reset()
            logger.warning("access_token_redirect_required", redirect_url=e.redirect_url)
            raise AuthenticationUnavailableError(
                "Access token not available, interactive login required",
                redirect_url=e.redirect_url,
            ) from e
        except Exception as e:
            self.reset()
            logger.error(
                "access_token_request_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        token = result.try_get_token()
        if token is None or not token.value:
            self.reset()
            logger.warning(
                "access_token_unavailable",
                status=result.status.value,
                redirect_url=result.redirect_url,
            )
            raise AuthenticationUnavailableError(
                "Access token was null or empty, expiring session",
                redirect_url=result.redirect_url,
                requires_redirect=result.status is AccessTokenResultStatus.REQUIRES_REDIRECT,
            )

        self._session.update_with_access_token(token.expires)
        return token.value

    def _clear_inflight(self, task: asyncio.Task) -> None:
        if self._inflight is task:
            self._inflight = None
        # Mark the exception retrieved when every waiter was cancelled.
        if not task.cancelled():
            task.exception()
