"""Shared fakes and fixtures."""

from typing import Any, Optional

import httpx
import pytest

from api_client.auth.token_source import AccessToken, AccessTokenResult
from api_client.client import ApiClient
from api_client.config.settings import Settings

BASE_ADDRESS = "https://api.example.com"


class _FakeTokenSource:
    """Hands out queued tokens; repeats the last one when the queue runs dry."""

    def __init__(self, *tokens: Optional[str]) -> None:
        self._tokens = list(tokens) or ["token-1"]
        self.calls = 0

    async def request_token(self) -> AccessTokenResult:
        self.calls += 1
        value = self._tokens.pop(0) if len(self._tokens) > 1 else self._tokens[0]
        if value is None:
            return AccessTokenResult.redirect("https://login.example.com")
        return AccessTokenResult.success(AccessToken(value=value))


class _RecordingLogger:
    """Stands in for RequestLogger and keeps every call."""

    def __init__(self) -> None:
        self.requests: list[tuple[str, Any, str]] = []
        self.responses: list[httpx.Response] = []

    async def log_request(self, absolute_uri: str, body: Any, method: str) -> None:
        self.requests.append((absolute_uri, body, method))

    async def log_response(self, response: httpx.Response) -> None:
        self.responses.append(response)


class _Backend:
    """MockTransport handler that records requests and answers 200 JSON."""

    def __init__(self, status_code: int = 200) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = status_code

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json={"ok": True})


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, timeout_seconds=5.0, user_agent="tests/1.0")


@pytest.fixture
def token_source() -> _FakeTokenSource:
    return _FakeTokenSource("token-1")


@pytest.fixture
def backend() -> _Backend:
    return _Backend()


@pytest.fixture
def recording_logger() -> _RecordingLogger:
    return _RecordingLogger()


@pytest.fixture
def make_client(settings, backend, recording_logger):
    """Build an ApiClient wired to the mock backend and recording logger."""

    def _make(token_source, *, logging_enabled: bool = True, handler=None) -> ApiClient:
        client = ApiClient(
            token_source,
            settings=settings,
            request_logger=recording_logger,
            http_transport=httpx.MockTransport(handler or backend),
        )
        client.initialize(BASE_ADDRESS, logging_enabled)
        return client

    return _make
