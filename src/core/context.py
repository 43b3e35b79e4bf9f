"""Credential and client lifecycle.

`ClientContext` is the explicit replacement for a process-wide client
singleton: it owns the credential, lazily builds one `MochiClient` bound to
it, and drops that client whenever the credential changes. The CLI builds a
single context per invocation and threads it through the commands.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from adapters.mochi_client import MochiClient
from adapters.request_queue import RequestSerializer, shared_serializer
from core.config import AppSettings
from core.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = (
    "API key is required. Set MOCHI_API_KEY environment variable or provide --api-key option."
)


class ClientContext:
    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        api_key: str | None = None,
        serializer: RequestSerializer | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or AppSettings()
        self._api_key = api_key
        self._serializer = serializer or shared_serializer()
        self._transport = transport
        self._client: MochiClient | None = None
        self._closing: set[asyncio.Task[None]] = set()

    def api_key_source(self) -> str | None:
        """Where the active key comes from: "option", "environment" or None."""

        if self._api_key and self._api_key.strip():
            return "option"
        if self.settings.api_key and self.settings.api_key.strip():
            return "environment"
        return None

    def resolve_api_key(self) -> str:
        source = self.api_key_source()
        if source == "option":
            return self._api_key.strip()  # type: ignore[union-attr]
        if source == "environment":
            return self.settings.api_key.strip()  # type: ignore[union-attr]
        raise ConfigurationError(MISSING_KEY_MESSAGE)

    def set_api_key(self, api_key: str) -> None:
        """Replace the credential; the next `client()` call builds a fresh client."""

        if not api_key or not api_key.strip():
            raise ConfigurationError("API key is required")
        self._api_key = api_key
        self._discard_client()
        logger.info("API key replaced; client will be rebuilt")

    def reset(self) -> None:
        """Forget the explicit credential and the cached client."""

        self._api_key = None
        self._discard_client()
        logger.info("API key cleared")

    def _discard_client(self) -> None:
        """Drop the cached client, closing its pool on the running loop.

        Without a running loop an open pool belongs to a loop that already
        finished and cannot be closed from here; it is dropped.
        """

        client, self._client = self._client, None
        if client is None or not client.is_open:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("Dropping client whose event loop has finished")
            return
        task = loop.create_task(client.aclose())
        self._closing.add(task)
        task.add_done_callback(self._closing.discard)

    def client(self) -> MochiClient:
        if self._client is None:
            self._client = MochiClient(
                self.resolve_api_key(),
                settings=self.settings,
                serializer=self._serializer,
                transport=self._transport,
            )
        return self._client

    @asynccontextmanager
    async def session(self) -> AsyncIterator[MochiClient]:
        """Yield the client and close its connection pool on exit."""

        client = self.client()
        try:
            yield client
        finally:
            await client.aclose()
