"""Named, long-lived httpx transports."""

from dataclasses import dataclass, field
from typing import Callable, Optional

import httpx
import structlog

logger = structlog.get_logger()


@dataclass(frozen=True)
class TransportOptions:
    """Everything needed to build one transport. Holds no per-request state."""

    base_address: str
    timeout_seconds: float = 30.0
    headers: dict[str, str] = field(default_factory=dict)
    http_transport: Optional[httpx.AsyncBaseTransport] = None


TransportBuilder = Callable[[TransportOptions], httpx.AsyncClient]


def build_transport(options: TransportOptions) -> httpx.AsyncClient:
    """Default builder: an ``httpx.AsyncClient`` bound to the base address."""
    return httpx.AsyncClient(
        base_url=options.base_address,
        timeout=options.timeout_seconds,
        headers=options.headers,
        transport=options.http_transport,
    )


class TransportCache:
    """Builds at most one transport per key and keeps it until ``aclose``.

    Construction is synchronous, so the check-and-insert cannot interleave
    with another coroutine and a cached transport is always fully built.
    """

    def __init__(self) -> None:
        self._transports: dict[str, httpx.AsyncClient] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._transports

    def __len__(self) -> int:
        return len(self._transports)

    def get_or_create(
        self,
        key: str,
        options: TransportOptions,
        build: TransportBuilder = build_transport,
    ) -> httpx.AsyncClient:
        """Return the transport for ``key``, building it on first use."""
        transport = self._transports.get(key)
        if transport is None:
            transport = build(options)
            self._transports[key] = transport
            logger.info("transport_created", key=key, base_address=options.base_address)
        return transport

    async def aclose(self) -> None:
        """Close and forget every cached transport."""
        transports = list(self._transports.items())
        self._transports.clear()
        for key, transport in transports:
            await transport.aclose()
            logger.debug("transport_closed", key=key)
