"""HTTP client for a single backend origin.

Every request goes through one pipeline: resolve the scope's shared
transport, make sure an authenticated transport carries a current bearer
token, optionally log the request, send it, optionally log the response.
Responses are returned as-is; callers check the status themselves.
"""

from typing import Any, Optional, Union

import httpx
import structlog

from .auth.header_coordinator import AuthHeaderCoordinator
from .auth.session import SessionState
from .auth.token_source import TokenSource
from .config import get_settings
from .config.settings import Settings
from .errors import ClientAlreadyInitializedError, ClientNotInitializedError
from .models import ClientConfig, RequestOptions, UploadOptions
from .services.request_logger import RequestLogger
from .services.serialization import JSON_CONTENT_TYPE, to_json_bytes
from .transport.cache import TransportCache
from .transport.provider import ScopedTransportProvider

logger = structlog.get_logger()

OCTET_STREAM = "application/octet-stream"
_JSON_HEADERS = {"Content-Type": f"{JSON_CONTENT_TYPE}; charset=utf-8"}

RequestTarget = Union[str, RequestOptions]


class ApiClient:
    """Async client with anonymous and authenticated transports.

    Call ``initialize`` once before sending anything. Use as an async
    context manager, or call ``aclose``, to release the transports.
    """

    def __init__(
        self,
        token_source: TokenSource,
        *,
        settings: Optional[Settings] = None,
        session: Optional[SessionState] = None,
        transport_cache: Optional[TransportCache] = None,
        request_logger: Optional[RequestLogger] = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        settings = settings if settings is not None else get_settings()
        self._config: Optional[ClientConfig] = None
        self._coordinator = AuthHeaderCoordinator(token_source, session)
        self._cache = transport_cache if transport_cache is not None else TransportCache()
        self._request_logger = (
            request_logger if request_logger is not None else RequestLogger(settings.log_body_max_chars)
        )
        self._transports = ScopedTransportProvider(
            self._cache,
            self._coordinator,
            self._require_config,
            timeout_seconds=settings.timeout_seconds,
            user_agent=settings.user_agent,
            http_transport=http_transport,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    @property
    def config(self) -> Optional[ClientConfig]:
        return self._config

    @property
    def coordinator(self) -> AuthHeaderCoordinator:
        return self._coordinator

    def initialize(self, base_address: str, request_response_logging: bool = False) -> None:
        """Set the backend base address and the global logging switch.

        Calling again with the same values is a no-op. Changing them once a
        transport has been built raises ``ClientAlreadyInitializedError``.
        """
        config = ClientConfig(
            base_address=base_address,
            request_response_logging=request_response_logging,
        )
        if self._config == config:
            return
        if self._config is not None and len(self._cache):
            raise ClientAlreadyInitializedError(
                "ApiClient is already initialized and its transports are bound to "
                f"{self._config.base_address}"
            )
        self._config = config
        logger.info(
            "api_client_initialized",
            base_address=config.base_address,
            request_response_logging=config.request_response_logging,
        )

    async def aclose(self) -> None:
        await self._cache.aclose()

    async def get_access_token(self) -> str:
        """Fetch the current access token from the token source.

        Raises:
            AuthenticationUnavailableError: no token could be obtained.
        """
        return await self._coordinator.get_access_token()

    async def get_transport(self, allow_anonymous: Optional[bool] = False) -> httpx.AsyncClient:
        """Return the shared transport for the scope.

        The authenticated transport lives for the whole client lifetime and
        is kept carrying a current token.
        """
        return await self._transports.get_transport(allow_anonymous)

    async def get(self, target: RequestTarget, *, allow_anonymous: Optional[bool] = False) -> httpx.Response:
        """Send a GET request.

        Args:
            target: Relative URI, or a ``RequestOptions`` used as-is.
            allow_anonymous: Send without a bearer token (URI form only).
        """
        options = self._options(
            target, allow_anonymous=allow_anonymous, log_request=True, log_response=True
        )
        return await self._send("GET", options)

    async def post(
        self,
        target: RequestTarget,
        body: Any = None,
        *,
        allow_anonymous: Optional[bool] = False,
        log_response: bool = True,
    ) -> httpx.Response:
        """Send a POST request with an optional JSON body."""
        options = self._options(
            target, body=body, allow_anonymous=allow_anonymous, log_request=True, log_response=log_response
        )
        content = self._encode_body(options)
        return await self._send("POST", options, content=content, log_body=content)

    async def put(
        self,
        target: RequestTarget,
        body: Any = None,
        *,
        allow_anonymous: Optional[bool] = False,
    ) -> httpx.Response:
        """Send a PUT request with an optional JSON body."""
        options = self._options(
            target, body=body, allow_anonymous=allow_anonymous, log_request=True, log_response=True
        )
        content = self._encode_body(options)
        return await self._send("PUT", options, content=content, log_body=content)

    async def delete(self, target: RequestTarget, *, allow_anonymous: Optional[bool] = False) -> httpx.Response:
        """Send a DELETE request. Never carries a body."""
        options = self._options(
            target, allow_anonymous=allow_anonymous, log_request=True, log_response=True
        )
        return await self._send("DELETE", options)

    async def upload(self, options: UploadOptions) -> httpx.Response:
        """POST a file as multipart form data.

        The stream goes in a ``file`` part. When ``options.body`` is set it
        is serialized into a second ``json`` part.
        """
        files: dict[str, Any] = {"file": (options.file_name, options.stream, OCTET_STREAM)}
        metadata = None
        if options.body is not None:
            metadata = to_json_bytes(options.body)
            files["json"] = (None, metadata, JSON_CONTENT_TYPE)

        return await self._send("POST", options, files=files, log_body=metadata)

    def _require_config(self) -> ClientConfig:
        if self._config is None:
            raise ClientNotInitializedError("ApiClient.initialize must be called before sending requests")
        return self._config

    @staticmethod
    def _options(target: RequestTarget, **defaults: Any) -> RequestOptions:
        if isinstance(target, RequestOptions):
            return target
        return RequestOptions(uri=target, **defaults)

    @staticmethod
    def _encode_body(options: RequestOptions) -> Optional[bytes]:
        if options.body is None:
            return None
        return to_json_bytes(options.body)

    async def _send(
        self,
        method: str,
        options: RequestOptions,
        *,
        content: Optional[bytes] = None,
        files: Optional[dict[str, Any]] = None,
        log_body: Optional[bytes] = None,
    ) -> httpx.Response:
        config = self._require_config()
        # Authenticated transports come back with a fresh header; no await
        # separates that refresh from build_request.
        transport = await self.get_transport(options.allow_anonymous)
        request = transport.build_request(
            method,
            options.uri,
            content=content,
            files=files,
            headers=_JSON_HEADERS if content is not None else None,
        )

        if options.log_request and config.request_response_logging:
            await self._request_logger.log_request(str(request.url), log_body, method)

        response = await transport.send(request)

        if options.log_response and config.request_response_logging:
            await self._request_logger.log_response(response)

        return response


_client: Optional[ApiClient] = None


def configure_api_client(token_source: TokenSource, settings: Optional[Settings] = None) -> ApiClient:
    """Create the process-wide ApiClient, initialized from settings."""
    global _client
    settings = settings if settings is not None else get_settings()
    if not settings.has_base_address:
        raise ClientNotInitializedError("API_CLIENT_BASE_ADDRESS is not set")
    client = ApiClient(token_source, settings=settings)
    client.initialize(settings.base_address, settings.request_response_logging)
    _client = client
    return client


def get_api_client() -> ApiClient:
    """Get the ApiClient built by ``configure_api_client``."""
    if _client is None:
        raise ClientNotInitializedError("configure_api_client has not been called")
    return _client


async def close_api_client() -> None:
    """Close the process-wide ApiClient's transports and drop it."""
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
