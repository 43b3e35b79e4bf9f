"""Bookmark pagination as a lazy async iterator.

The iterator fetches a page only when the caller has consumed the previous
one, so abandoning it early never fetches further pages. It stops when the
server returns no bookmark, an empty page, or the bookmark it was just given
(cycle guard). Any page failure propagates and ends the iteration.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class _PageFetcher(Protocol):
    async def get(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        ...


async def paginate(
    requester: _PageFetcher,
    path: str,
    params: Mapping[str, Any] | None = None,
    *,
    limit: int | None = None,
    delay_seconds: float = 0.075,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> AsyncIterator[dict[str, Any]]:
    base = dict(params or {})
    bookmark: str | None = None
    page_number = 0

    while True:
        page_number += 1
        query = {**base, "bookmark": bookmark, "limit": limit}
        logger.debug("Fetching %s page %d", path, page_number)
        page = await requester.get(path, query)
        if not isinstance(page, dict):
            page = {}

        docs = page.get("docs") or []
        for doc in docs:
            yield doc

        next_bookmark = page.get("bookmark")
        if not next_bookmark:
            break
        if not docs:
            break
        if next_bookmark == bookmark:
            logger.debug("Server repeated bookmark on %s page %d; stopping", path, page_number)
            break

        bookmark = next_bookmark
        if delay_seconds > 0:
            await sleep(delay_seconds)
