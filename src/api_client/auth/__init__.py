"""Authentication module."""

from .header_coordinator import AuthHeaderCoordinator, CachedAuthState
from .session import SessionState
from .token_source import (
    AccessToken,
    AccessTokenNotAvailableError,
    AccessTokenResult,
    AccessTokenResultStatus,
    CallbackTokenSource,
    StaticTokenSource,
    TokenSource,
)

__all__ = [
    "AccessToken",
    "AccessTokenNotAvailableError",
    "AccessTokenResult",
    "AccessTokenResultStatus",
    "AuthHeaderCoordinator",
    "CachedAuthState",
    "CallbackTokenSource",
    "SessionState",
    "StaticTokenSource",
    "TokenSource",
]
