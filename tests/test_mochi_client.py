from __future__ import annotations

import asyncio
import base64

import httpx
import pytest

from adapters.mochi_client import MochiClient, clean_params
from adapters.request_queue import RequestSerializer
from core.domain.errors import ApiError, ConfigurationError, LocalValidationError, NetworkError
from conftest import FakeApi, json_response, make_settings


def test_blank_api_key_is_rejected_before_any_io():
    with pytest.raises(ConfigurationError):
        MochiClient("   ", settings=make_settings())


def test_clean_params_drops_empty_values():
    assert clean_params({"a": None, "b": "", "c": 3, "d": True, "e": "x"}) == {
        "c": "3",
        "d": "true",
        "e": "x",
    }


@pytest.mark.asyncio
async def test_get_sends_basic_auth_and_query(make_client):
    api = FakeApi([json_response(200, {"docs": [], "bookmark": None})])

    async with make_client(api) as client:
        data = await client.get("/cards", {"deck-id": "d1", "bookmark": None, "limit": 10})

    assert data == {"docs": [], "bookmark": None}
    request = api.requests[0]
    expected = base64.b64encode(b"test-key:").decode("ascii")
    assert request.headers["authorization"] == f"Basic {expected}"
    assert request.headers["accept"] == "application/json"
    assert request.url.path == "/api/cards"
    assert dict(request.url.params) == {"deck-id": "d1", "limit": "10"}


@pytest.mark.asyncio
async def test_post_sends_json_body(make_client):
    api = FakeApi([json_response(200, {"id": "c1"})])

    async with make_client(api) as client:
        await client.post("/cards", {"content": "hi", "deck-id": "d1"})

    assert api.requests[0].headers["content-type"] == "application/json"
    assert api.json_body() == {"content": "hi", "deck-id": "d1"}


@pytest.mark.asyncio
async def test_no_content_is_an_empty_success(make_client):
    api = FakeApi([httpx.Response(204)])

    async with make_client(api) as client:
        assert await client.delete("/cards/c1") is None


@pytest.mark.asyncio
async def test_retries_on_429_then_succeeds(make_client, recorded_sleep):
    api = FakeApi(
        [
            json_response(429, headers={"Retry-After": "2"}),
            json_response(503),
            json_response(200, {"id": "d1", "name": "Deck"}),
        ]
    )

    async with make_client(api) as client:
        data = await client.get("/decks/d1")

    assert data["id"] == "d1"
    assert len(api.requests) == 3
    assert recorded_sleep.calls == [2.0, 1.0]


@pytest.mark.asyncio
async def test_retryable_status_on_last_attempt_is_terminal(make_client, recorded_sleep):
    api = FakeApi([json_response(503, {"errors": "busy"}) for _ in range(6)])

    async with make_client(api) as client:
        with pytest.raises(ApiError) as excinfo:
            await client.get("/decks")

    assert len(api.requests) == 6
    assert len(recorded_sleep.calls) == 5
    assert excinfo.value.status_code == 503
    assert excinfo.value.message == "busy"


@pytest.mark.asyncio
async def test_non_retryable_error_is_not_retried(make_client, recorded_sleep):
    api = FakeApi([json_response(422, {"errors": {"deck-id": "required"}})])

    async with make_client(api) as client:
        with pytest.raises(ApiError) as excinfo:
            await client.post("/cards", {"content": "x"})

    error = excinfo.value
    assert error.message == "deck-id: required"
    assert error.status_code == 422
    assert error.errors == {"deck-id": "required"}
    assert error.to_dict() == {
        "error": "deck-id: required",
        "statusCode": 422,
        "details": {"deck-id": "required"},
    }
    assert len(api.requests) == 1
    assert recorded_sleep.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"errors": "Card not found"}, "Card not found"),
        ({"errors": ["a", "b"]}, "a, b"),
        ({"errors": []}, "Request failed with status 404"),
        (None, "HTTP 404: Not Found"),
    ],
)
async def test_error_messages(make_client, payload, message):
    api = FakeApi([json_response(404, payload)])

    async with make_client(api) as client:
        with pytest.raises(ApiError) as excinfo:
            await client.get("/cards/missing")

    assert str(excinfo.value) == message


@pytest.mark.asyncio
async def test_malformed_json_error_body_uses_fallback(make_client):
    api = FakeApi(
        [httpx.Response(400, content=b"{not json", headers={"content-type": "application/json"})]
    )

    async with make_client(api) as client:
        with pytest.raises(ApiError) as excinfo:
            await client.get("/cards")

    assert str(excinfo.value) == "HTTP 400: Bad Request"


@pytest.mark.asyncio
async def test_network_errors_are_retried_then_reported_with_status_zero(make_client, recorded_sleep):
    request = httpx.Request("GET", "https://mochi.test/api/decks")
    api = FakeApi([httpx.ConnectError("boom", request=request) for _ in range(3)])

    async with make_client(api, policy=None, settings=make_settings(max_retries=2, retry_jitter_ms=0)) as client:
        with pytest.raises(NetworkError) as excinfo:
            await client.get("/decks")

    assert excinfo.value.status_code == 0
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)
    assert len(api.requests) == 3
    assert recorded_sleep.calls == [0.5, 1.0]


@pytest.mark.asyncio
async def test_network_error_then_success(make_client):
    request = httpx.Request("GET", "https://mochi.test/api/decks")
    api = FakeApi([httpx.ReadTimeout("slow", request=request), json_response(200, {"docs": []})])

    async with make_client(api) as client:
        assert await client.get("/decks") == {"docs": []}


@pytest.mark.asyncio
async def test_upload_attachment_sends_multipart_once(make_client, tmp_path, recorded_sleep):
    image = tmp_path / "cat.png"
    image.write_bytes(b"\x89PNG")
    api = FakeApi([json_response(503)])

    async with make_client(api) as client:
        with pytest.raises(ApiError) as excinfo:
            await client.upload_attachment("/cards/c1/attachments/cat.png", "cat.png", image)

    assert str(excinfo.value) == "Failed to upload attachment: 503 Service Unavailable"
    assert len(api.requests) == 1
    assert recorded_sleep.calls == []
    request = api.requests[0]
    assert request.headers["content-type"].startswith("multipart/form-data")
    assert request.headers["authorization"].startswith("Basic ")
    body = request.read()
    assert b'name="file"; filename="cat.png"' in body
    assert b"image/png" in body


@pytest.mark.asyncio
async def test_upload_missing_file(make_client, tmp_path):
    api = FakeApi()

    async with make_client(api) as client:
        with pytest.raises(LocalValidationError):
            await client.upload_attachment("/cards/c1/attachments/x", "x", tmp_path / "nope.txt")

    assert api.requests == []


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [429, 502, 503, 504])
@pytest.mark.parametrize("succeeds_on", [1, 3, 6])
async def test_success_on_kth_attempt_sleeps_k_minus_one_times(make_client, recorded_sleep, status, succeeds_on):
    failures = [json_response(status) for _ in range(succeeds_on - 1)]
    api = FakeApi([*failures, json_response(200, {"ok": True})])

    async with make_client(api) as client:
        assert await client.get("/decks") == {"ok": True}

    assert len(api.requests) == succeeds_on
    assert len(recorded_sleep.calls) == succeeds_on - 1


@pytest.mark.asyncio
async def test_requests_share_the_serializer(make_client):
    api = FakeApi([json_response(200, {"n": 1}), json_response(200, {"n": 2})])
    serializer = RequestSerializer()

    async with make_client(api, serializer=serializer) as client:
        results = await asyncio.gather(client.get("/a"), client.get("/b"))

    assert results == [{"n": 1}, {"n": 2}]
    assert [request.url.path for request in api.requests] == ["/api/a", "/api/b"]
    assert serializer.pending == 0


@pytest.mark.asyncio
async def test_malformed_json_success_body_is_null(make_client):
    api = FakeApi(
        [httpx.Response(200, content=b"{not json", headers={"content-type": "application/json"})]
    )

    async with make_client(api) as client:
        assert await client.get("/decks") is None


def _redirect_loop(request: httpx.Request) -> httpx.Response:
    return httpx.Response(302, headers={"location": str(request.url)})


@pytest.mark.asyncio
async def test_redirect_loop_is_a_network_error(recorded_sleep):
    client = MochiClient(
        "test-key",
        settings=make_settings(max_retries=1, retry_jitter_ms=0),
        serializer=RequestSerializer(),
        transport=httpx.MockTransport(_redirect_loop),
        sleep=recorded_sleep,
    )

    async with client:
        with pytest.raises(NetworkError) as excinfo:
            await client.get("/decks/d1")

    assert excinfo.value.status_code == 0
    assert isinstance(excinfo.value.__cause__, httpx.TooManyRedirects)
    assert recorded_sleep.calls == [0.5]


@pytest.mark.asyncio
async def test_upload_redirect_loop_is_a_network_error(tmp_path):
    upload = tmp_path / "notes.txt"
    upload.write_text("hello")
    client = MochiClient(
        "test-key",
        settings=make_settings(),
        serializer=RequestSerializer(),
        transport=httpx.MockTransport(_redirect_loop),
    )

    async with client:
        with pytest.raises(NetworkError) as excinfo:
            await client.upload_attachment("/cards/c1/attachments/notes.txt", "notes.txt", upload)

    assert excinfo.value.status_code == 0
