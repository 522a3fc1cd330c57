"""Access token sources.

The identity provider client lives outside this package. Anything with an
async ``request_token()`` returning an ``AccessTokenResult`` can be used.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Awaitable, Callable, Optional, Protocol, Union, runtime_checkable


class AccessTokenResultStatus(str, Enum):
    """Outcome of a token request."""

    SUCCESS = "success"
    REQUIRES_REDIRECT = "requires_redirect"


@dataclass(frozen=True)
class AccessToken:
    """Bearer token issued by the identity provider."""

    value: str
    expires: Optional[datetime] = None


@dataclass(frozen=True)
class AccessTokenResult:
    """Result of ``TokenSource.request_token``."""

    status: AccessTokenResultStatus
    token: Optional[AccessToken] = None
    redirect_url: Optional[str] = None

    def try_get_token(self) -> Optional[AccessToken]:
        """Return the token if the request succeeded and produced one."""
        if self.status is not AccessTokenResultStatus.SUCCESS:
            return None
        return self.token

    @classmethod
    def success(cls, token: AccessToken) -> "AccessTokenResult":
        return cls(status=AccessTokenResultStatus.SUCCESS, token=token)

    @classmethod
    def redirect(cls, redirect_url: Optional[str] = None) -> "AccessTokenResult":
        return cls(status=AccessTokenResultStatus.REQUIRES_REDIRECT, redirect_url=redirect_url)


class AccessTokenNotAvailableError(Exception):
    """Raised by a token source when the user must log in interactively."""

    def __init__(self, redirect_url: Optional[str] = None) -> None:
        super().__init__("Access token not available, interactive login required")
        self.redirect_url = redirect_url


@runtime_checkable
class TokenSource(Protocol):
    """Produces bearer tokens on demand.

    Implementations own their caching and expiry policy and should be cheap
    to call repeatedly.
    """

    async def request_token(self) -> AccessTokenResult:
        """Return the current access token, or a redirect result."""
        ...


class StaticTokenSource:
    """Token source that always returns the same token."""

    def __init__(self, token: str, expires: Optional[datetime] = None) -> None:
        self._token = AccessToken(value=token, expires=expires)

    async def request_token(self) -> AccessTokenResult:
        return AccessTokenResult.success(self._token)


TokenFetch = Callable[[], Awaitable[Union[str, AccessToken, None]]]


class CallbackTokenSource:
    """Token source backed by an async callable.

    The callable may return a raw token string, an ``AccessToken``, or None
    when no token is available.
    """

    def __init__(self, fetch: TokenFetch) -> None:
        self._fetch = fetch

    async def request_token(self) -> AccessTokenResult:
        value = await self._fetch()
        if value is None:
            return AccessTokenResult.redirect()
        if isinstance(value, str):
            value = AccessToken(value=value)
        return AccessTokenResult.success(value)
