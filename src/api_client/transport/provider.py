"""Resolves the cached transport for an authentication scope."""

from typing import Callable, Optional

import httpx

from ..auth.header_coordinator import AuthHeaderCoordinator
from ..models import AuthScope, ClientConfig
from .cache import TransportCache, TransportOptions


class ScopedTransportProvider:
    """One shared transport per scope, built lazily through the cache.

    The authenticated transport is handed out only after its Authorization
    header matches the current token. The anonymous transport never gets one.
    """

    def __init__(
        self,
        cache: TransportCache,
        coordinator: AuthHeaderCoordinator,
        config: Callable[[], ClientConfig],
        *,
        timeout_seconds: float = 30.0,
        user_agent: Optional[str] = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._cache = cache
        self._coordinator = coordinator
        self._config = config
        self._timeout_seconds = timeout_seconds
        self._user_agent = user_agent
        self._http_transport = http_transport

    async def get_transport(self, allow_anonymous: Optional[bool] = False) -> httpx.AsyncClient:
        """Return the scope's transport.

        Raises:
            AuthenticationUnavailableError: authenticated scope and no token.
        """
        scope = AuthScope.from_flag(allow_anonymous)
        transport = self._cache.get_or_create(scope.value, self._options())
        if scope is AuthScope.AUTHENTICATED:
            await self._coordinator.ensure_fresh_header(transport)
        return transport

    def _options(self) -> TransportOptions:
        headers = {"User-Agent": self._user_agent} if self._user_agent else {}
        return TransportOptions(
            base_address=self._config().base_address,
            timeout_seconds=self._timeout_seconds,
            headers=headers,
            http_transport=self._http_transport,
        )
