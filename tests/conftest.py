from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from adapters.mochi_client import MochiClient
from adapters.request_queue import RequestSerializer
from core.config import AppSettings


def make_settings(**overrides: Any) -> AppSettings:
    values: dict[str, Any] = {
        "api_key": None,
        "base_url": "https://mochi.test/api",
        "pagination_delay_ms": 0,
        "retry_jitter_ms": 0,
    }
    values.update(overrides)
    return AppSettings(_env_file=None, **values)


def json_response(status_code: int, payload: Any = None, **kwargs: Any) -> httpx.Response:
    if payload is None:
        return httpx.Response(status_code, **kwargs)
    return httpx.Response(status_code, json=payload, **kwargs)


class RecordedSleep:
    """Stands in for `asyncio.sleep`; records delays instead of waiting."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class FakeApi:
    """`httpx.MockTransport` handler fed from a queue of canned responses."""

    def __init__(self, responses: list[httpx.Response | Exception] | None = None) -> None:
        self.responses = list(responses or [])
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def json_body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.delenv("MOCHI_API_KEY", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings() -> AppSettings:
    return make_settings()


@pytest.fixture
def recorded_sleep() -> RecordedSleep:
    return RecordedSleep()


@pytest.fixture
def make_client(settings: AppSettings, recorded_sleep: RecordedSleep) -> Callable[..., MochiClient]:
    def _factory(api: FakeApi, **kwargs: Any) -> MochiClient:
        kwargs.setdefault("settings", settings)
        kwargs.setdefault("serializer", RequestSerializer())
        kwargs.setdefault("sleep", recorded_sleep)
        return MochiClient("test-key", transport=api.transport(), **kwargs)

    return _factory
