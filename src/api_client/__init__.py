"""Async HTTP client with scoped transports and transparent bearer token refresh."""

from .auth import (
    AccessToken,
    AccessTokenNotAvailableError,
    AccessTokenResult,
    CallbackTokenSource,
    StaticTokenSource,
    TokenSource,
)
from .client import ApiClient, close_api_client, configure_api_client, get_api_client
from .errors import (
    ApiClientError,
    AuthenticationUnavailableError,
    ClientAlreadyInitializedError,
    ClientNotInitializedError,
    SerializationError,
)
from .models import AuthScope, RequestOptions, UploadOptions

__all__ = [
    "AccessToken",
    "AccessTokenNotAvailableError",
    "AccessTokenResult",
    "ApiClient",
    "ApiClientError",
    "AuthScope",
    "AuthenticationUnavailableError",
    "CallbackTokenSource",
    "ClientAlreadyInitializedError",
    "ClientNotInitializedError",
    "RequestOptions",
    "SerializationError",
    "StaticTokenSource",
    "TokenSource",
    "UploadOptions",
    "close_api_client",
    "configure_api_client",
    "get_api_client",
]
