"""Client error types.

Transport failures are not wrapped: they surface as ``httpx.RequestError``
subclasses. Cancellation surfaces as ``asyncio.CancelledError``.
"""

from typing import Optional


class ApiClientError(Exception):
    """Base client error."""


class ClientNotInitializedError(ApiClientError):
    """A request was attempted before ``ApiClient.initialize``."""


class ClientAlreadyInitializedError(ApiClientError):
    """``initialize`` was called again with a different configuration."""


class AuthenticationUnavailableError(ApiClientError):
    """No usable access token could be obtained.

    The caller is expected to send the user through an interactive login.
    ``redirect_url`` is set when the token source named where to go.
    """

    def __init__(
        self,
        message: str,
        *,
        redirect_url: Optional[str] = None,
        requires_redirect: bool = True,
    ) -> None:
        super().__init__(message)
        self.redirect_url = redirect_url
        self.requires_redirect = requires_redirect


class SerializationError(ApiClientError):
    """Request body could not be encoded as JSON."""
