from __future__ import annotations

import pytest

from adapters.pagination import paginate
from core.domain.errors import ApiError
from conftest import FakeApi, RecordedSleep, json_response


class StubRequester:
    """Serves canned pages and records the query of every call."""

    def __init__(self, pages):
        self.pages = list(pages)
        self.calls: list[dict] = []

    async def get(self, path, params=None):
        self.calls.append(dict(params or {}))
        page = self.pages.pop(0)
        if isinstance(page, Exception):
            raise page
        return page


async def collect(iterator):
    return [item async for item in iterator]


@pytest.mark.asyncio
async def test_walks_pages_in_order_until_bookmark_is_missing():
    requester = StubRequester(
        [
            {"docs": [{"id": 1}, {"id": 2}], "bookmark": "b1"},
            {"docs": [{"id": 3}], "bookmark": "b2"},
            {"docs": [{"id": 4}]},
        ]
    )
    sleep = RecordedSleep()

    items = await collect(paginate(requester, "/cards", {"deck-id": "d1"}, limit=2, sleep=sleep))

    assert [item["id"] for item in items] == [1, 2, 3, 4]
    assert requester.calls == [
        {"deck-id": "d1", "bookmark": None, "limit": 2},
        {"deck-id": "d1", "bookmark": "b1", "limit": 2},
        {"deck-id": "d1", "bookmark": "b2", "limit": 2},
    ]
    assert sleep.calls == [0.075, 0.075]


@pytest.mark.asyncio
async def test_stops_on_empty_page_even_with_bookmark():
    requester = StubRequester([{"docs": [], "bookmark": "b1"}])

    assert await collect(paginate(requester, "/decks", delay_seconds=0)) == []
    assert len(requester.calls) == 1


@pytest.mark.asyncio
async def test_stops_when_server_repeats_the_bookmark():
    requester = StubRequester(
        [
            {"docs": [{"id": 1}], "bookmark": "same"},
            {"docs": [{"id": 2}], "bookmark": "same"},
            {"docs": [{"id": 3}], "bookmark": "other"},
        ]
    )

    items = await collect(paginate(requester, "/decks", delay_seconds=0))

    assert [item["id"] for item in items] == [1, 2]
    assert len(requester.calls) == 2


@pytest.mark.asyncio
async def test_abandoning_early_fetches_no_more_pages():
    requester = StubRequester(
        [
            {"docs": [{"id": 1}, {"id": 2}], "bookmark": "b1"},
            {"docs": [{"id": 3}], "bookmark": None},
        ]
    )

    async for item in paginate(requester, "/cards", delay_seconds=0):
        assert item["id"] == 1
        break

    assert len(requester.calls) == 1


@pytest.mark.asyncio
async def test_page_failure_ends_iteration_after_yielded_items():
    requester = StubRequester(
        [
            {"docs": [{"id": 1}], "bookmark": "b1"},
            ApiError("boom", 500),
        ]
    )
    seen = []

    with pytest.raises(ApiError):
        async for item in paginate(requester, "/cards", delay_seconds=0):
            seen.append(item["id"])

    assert seen == [1]


@pytest.mark.asyncio
async def test_client_paginate_uses_configured_delay(make_client, recorded_sleep):
    api = FakeApi(
        [
            json_response(200, {"docs": [{"id": "a", "name": "A"}], "bookmark": "b1"}),
            json_response(200, {"docs": [], "bookmark": "b2"}),
        ]
    )

    async with make_client(api) as client:
        docs = await collect(client.paginate("/decks"))

    assert docs == [{"id": "a", "name": "A"}]
    assert dict(api.requests[1].url.params) == {"bookmark": "b1"}
    # Test settings disable the courtesy pause.
    assert recorded_sleep.calls == []
