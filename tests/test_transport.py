"""Tests for the transport cache and scope resolution."""

import asyncio

import httpx
import pytest

from api_client.auth.token_source import CallbackTokenSource
from api_client.errors import AuthenticationUnavailableError, ClientNotInitializedError
from api_client.transport.cache import TransportCache, TransportOptions

from conftest import BASE_ADDRESS, _FakeTokenSource


@pytest.mark.asyncio
async def test_cache_builds_once_per_key():
    cache = TransportCache()
    builds = 0

    def _build(options: TransportOptions) -> httpx.AsyncClient:
        nonlocal builds
        builds += 1
        return httpx.AsyncClient(base_url=options.base_address)

    options = TransportOptions(base_address=BASE_ADDRESS)
    transports = [cache.get_or_create("k", options, _build) for _ in range(10)]

    assert builds == 1
    assert all(t is transports[0] for t in transports)
    await cache.aclose()


@pytest.mark.asyncio
async def test_cache_aclose_forgets_transports():
    cache = TransportCache()
    transport = cache.get_or_create("k", TransportOptions(base_address=BASE_ADDRESS))

    assert "k" in cache
    await cache.aclose()

    assert len(cache) == 0
    assert transport.is_closed


@pytest.mark.asyncio
async def test_same_flag_returns_same_transport(make_client, token_source):
    client = make_client(token_source)

    assert await client.get_transport(False) is await client.get_transport(False)
    assert await client.get_transport(True) is await client.get_transport(True)
    assert await client.get_transport(None) is await client.get_transport(False)
    await client.aclose()


@pytest.mark.asyncio
async def test_scopes_get_distinct_transports(make_client, token_source):
    client = make_client(token_source)

    anonymous = await client.get_transport(True)
    authenticated = await client.get_transport(False)

    assert anonymous is not authenticated
    assert str(authenticated.base_url) == BASE_ADDRESS + "/"
    assert authenticated.headers["Authorization"] == "Bearer token-1"
    assert "Authorization" not in anonymous.headers
    assert anonymous.headers["User-Agent"] == "tests/1.0"
    await client.aclose()


@pytest.mark.asyncio
async def test_authenticated_transport_fetches_token_per_call(make_client):
    source = _FakeTokenSource("t")
    client = make_client(source)

    await client.get_transport(True)
    assert source.calls == 0

    await client.get_transport(False)
    await client.get_transport(False)
    assert source.calls == 2
    await client.aclose()


@pytest.mark.asyncio
async def test_get_transport_before_initialize_raises(settings, token_source):
    from api_client.client import ApiClient

    client = ApiClient(token_source, settings=settings)

    with pytest.raises(ClientNotInitializedError):
        await client.get_transport()


@pytest.mark.asyncio
async def test_second_caller_waits_for_header_while_first_fetch_runs(make_client):
    release = asyncio.Event()

    async def _fetch():
        await release.wait()
        return "slow-token"

    client = make_client(CallbackTokenSource(_fetch))

    first = asyncio.ensure_future(client.get_transport(False))
    await asyncio.sleep(0)
    second = asyncio.ensure_future(client.get_transport(False))
    await asyncio.sleep(0)
    assert not second.done()

    release.set()
    transport = await second

    assert transport.headers["Authorization"] == "Bearer slow-token"
    assert await first is transport
    await client.aclose()


@pytest.mark.asyncio
async def test_failed_token_keeps_failing_instead_of_returning_bare_transport(make_client, backend):
    client = make_client(_FakeTokenSource(None))

    with pytest.raises(AuthenticationUnavailableError):
        await client.get_transport(False)
    with pytest.raises(AuthenticationUnavailableError):
        await client.get_transport(False)
    with pytest.raises(AuthenticationUnavailableError):
        await client.get("/x")

    assert backend.requests == []
    await client.aclose()


@pytest.mark.asyncio
async def test_token_loss_strips_stale_header_from_shared_transport(make_client):
    client = make_client(_FakeTokenSource("good", None))

    transport = await client.get_transport(False)
    assert transport.headers["Authorization"] == "Bearer good"

    with pytest.raises(AuthenticationUnavailableError):
        await client.get_transport(False)

    assert "Authorization" not in transport.headers
    assert client.coordinator.state is None
    await client.aclose()
