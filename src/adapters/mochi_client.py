"""Mochi REST API client (request executor).

Responsibilities:
- Build and send one authenticated request (Basic auth, JSON body).
- Retry 429/502/503/504 responses and transport failures per `RetryPolicy`.
- Classify the final response and raise the typed errors of `core.domain.errors`.
- Run the whole attempt loop, sleeps included, inside the shared
  `RequestSerializer` so at most one request is in flight per process.

Attachment uploads are the exception: a single authenticated multipart call,
outside the queue and without retries.
"""

from __future__ import annotations

import asyncio
import json
import logging
import mimetypes
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping
from pathlib import Path
from typing import Any

import httpx

from adapters.http_client import basic_auth_header, build_async_client
from adapters.pagination import paginate
from adapters.request_queue import RequestSerializer, shared_serializer
from adapters.retry_policy import RetryPolicy
from core.config import AppSettings
from core.domain.errors import (
    ApiError,
    ConfigurationError,
    LocalValidationError,
    NetworkError,
    describe_errors,
)
from core.domain.outcomes import (
    NetworkFailure,
    Outcome,
    RetryableFailure,
    Success,
    TerminalFailure,
)

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


def clean_params(params: Mapping[str, Any] | None) -> dict[str, str]:
    """Drop None/empty values and stringify the rest."""

    if not params:
        return {}
    out: dict[str, str] = {}
    for key, value in params.items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            out[key] = "true" if value else "false"
        else:
            out[key] = str(value)
    return out


def read_body(response: httpx.Response) -> Any:
    """Decode a response body: empty, JSON (None when malformed) or text."""

    if response.status_code == 204 or response.headers.get("content-length") == "0":
        return None

    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            return response.json()
        except ValueError:
            return None
    return response.text


def classify_response(response: httpx.Response) -> Success | TerminalFailure:
    data = read_body(response)
    if response.is_success:
        return Success(data)
    return TerminalFailure(
        status_code=response.status_code,
        reason=response.reason_phrase,
        data=data,
    )


def failure_to_error(failure: TerminalFailure) -> ApiError:
    message = describe_errors(failure.errors, failure.status_code, failure.reason)
    return ApiError(message, failure.status_code, failure.errors)


class MochiClient:
    """HTTP client for the Mochi REST API, bound to one API key."""

    def __init__(
        self,
        api_key: str,
        *,
        settings: AppSettings | None = None,
        serializer: RequestSerializer | None = None,
        policy: RetryPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleep | None = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ConfigurationError("API key is required")
        self._api_key = api_key
        self._settings = settings or AppSettings()
        self._serializer = serializer or shared_serializer()
        self._policy = policy or RetryPolicy.from_settings(self._settings)
        self._transport = transport
        self._sleep: Sleep = sleep or asyncio.sleep
        self._http: httpx.AsyncClient | None = None

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    @property
    def is_open(self) -> bool:
        """True while a connection pool is open."""
        return self._http is not None and not self._http.is_closed

    def _client(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = build_async_client(
                self._settings,
                api_key=self._api_key,
                transport=self._transport,
            )
        return self._http

    async def aclose(self) -> None:
        """Close the connection pool; the next request opens a new one."""
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def __aenter__(self) -> "MochiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # --- Executor ---

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Send one request and return the decoded body.

        Raises `ApiError` for a non-2xx final response and `NetworkError`
        (status 0) when the transport keeps failing after all retries.
        """

        request_headers: dict[str, str] = {}
        content: bytes | None = None
        if body is not None:
            request_headers["Content-Type"] = "application/json"
            content = json.dumps(body).encode("utf-8")
        if headers:
            request_headers.update(headers)
        query = clean_params(params)

        async def _send() -> Any:
            return await self._send_with_retry(method, path, query, content, request_headers)

        return await self._serializer.run(_send)

    async def _attempt(
        self,
        method: str,
        path: str,
        query: dict[str, str],
        content: bytes | None,
        headers: dict[str, str],
        *,
        final: bool,
    ) -> Outcome:
        try:
            response = await self._client().request(
                method,
                path,
                params=query or None,
                content=content,
                headers=headers,
            )
        except httpx.RequestError as exc:
            return NetworkFailure(exc)

        if not final and self._policy.is_retryable_status(response.status_code):
            return RetryableFailure(response.status_code, response.headers)
        return classify_response(response)

    async def _send_with_retry(
        self,
        method: str,
        path: str,
        query: dict[str, str],
        content: bytes | None,
        headers: dict[str, str],
    ) -> Any:
        attempts = self._policy.max_attempts
        for attempt in range(attempts):
            logger.debug("%s %s (attempt %d/%d)", method, path, attempt + 1, attempts)
            final = not self._policy.can_retry(attempt)
            outcome = await self._attempt(method, path, query, content, headers, final=final)

            if isinstance(outcome, Success):
                return outcome.data
            if isinstance(outcome, TerminalFailure):
                raise failure_to_error(outcome)

            if isinstance(outcome, NetworkFailure):
                if final:
                    raise NetworkError(f"Network error: {outcome.error}") from outcome.error
                delay_ms = self._policy.delay_ms(attempt)
                logger.warning(
                    "%s %s failed (%s); retrying in %.0f ms",
                    method,
                    path,
                    type(outcome.error).__name__,
                    delay_ms,
                )
            else:
                delay_ms = self._policy.delay_ms(attempt, outcome.headers)
                logger.warning(
                    "%s %s returned HTTP %d; retrying in %.0f ms",
                    method,
                    path,
                    outcome.status_code,
                    delay_ms,
                )
            await self._sleep(delay_ms / 1000)

        # The last attempt is always final, so the loop never falls through.
        raise NetworkError("Network error: retries exhausted")

    # --- Verbs ---

    async def get(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, body: Any = None) -> Any:
        return await self.request("POST", path, body=body)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    def paginate(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        *,
        limit: int | None = None,
    ) -> AsyncIterator[dict[str, Any]]:
        return paginate(
            self,
            path,
            params,
            limit=limit,
            delay_seconds=self._settings.pagination_delay_ms / 1000,
            sleep=self._sleep,
        )

    # --- Attachments ---

    async def upload_attachment(self, path: str, filename: str, file_path: Path) -> None:
        """Single-shot multipart upload: no retries, no request queue."""

        file_path = Path(file_path)
        try:
            data = file_path.read_bytes()
        except FileNotFoundError as exc:
            raise LocalValidationError(f"File not found: {file_path}") from exc
        except OSError as exc:
            raise LocalValidationError(f"Cannot read {file_path}: {exc.strerror or exc}") from exc

        mime_type = mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
        logger.info("Uploading %s (%d bytes, %s)", filename, len(data), mime_type)

        async with build_async_client(
            self._settings,
            extra_headers={"Authorization": basic_auth_header(self._api_key)},
            transport=self._transport,
        ) as client:
            try:
                response = await client.post(path, files={"file": (filename, data, mime_type)})
            except httpx.RequestError as exc:
                raise NetworkError(f"Network error: {exc}") from exc

        if not response.is_success:
            body = read_body(response)
            errors = body.get("errors") if isinstance(body, dict) else None
            raise ApiError(
                f"Failed to upload attachment: {response.status_code} {response.reason_phrase}",
                response.status_code,
                errors,
            )
