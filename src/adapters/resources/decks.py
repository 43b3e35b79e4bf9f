"""Decks resource: `/decks`."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

from adapters.resources.base import ResourceApi, coerce_input, parse_response, segment
from core.domain.models import Deck, DeckCreateInput, DeckUpdateInput, Page


class DecksApi(ResourceApi):
    async def list(self, *, bookmark: str | None = None) -> Page[Deck]:
        data = await self._requester.get("/decks", {"bookmark": bookmark})
        return parse_response(Page[Deck], data)

    async def list_all(self) -> AsyncIterator[Deck]:
        async for doc in self._requester.paginate("/decks"):
            yield parse_response(Deck, doc)

    async def get(self, deck_id: str) -> Deck:
        data = await self._requester.get(f"/decks/{segment(deck_id, name='Deck ID')}")
        return parse_response(Deck, data)

    async def create(self, payload: DeckCreateInput | dict[str, Any]) -> Deck:
        body = coerce_input(DeckCreateInput, payload).to_wire()
        return parse_response(Deck, await self._requester.post("/decks", body))

    async def update(self, deck_id: str, payload: DeckUpdateInput | dict[str, Any]) -> Deck:
        path = f"/decks/{segment(deck_id, name='Deck ID')}"
        body = coerce_input(DeckUpdateInput, payload).to_wire()
        return parse_response(Deck, await self._requester.post(path, body))

    async def delete(self, deck_id: str) -> None:
        await self._requester.delete(f"/decks/{segment(deck_id, name='Deck ID')}")
