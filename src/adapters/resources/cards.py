"""Cards resource: `/cards` and `/cards/:id/attachments/:filename`."""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any

from adapters.resources.base import ResourceApi, coerce_input, parse_response, segment
from core.domain.models import Card, CardCreateInput, CardUpdateInput, Page


class CardsApi(ResourceApi):
    async def list(
        self,
        *,
        deck_id: str | None = None,
        limit: int | None = None,
        bookmark: str | None = None,
    ) -> Page[Card]:
        """One page of cards, optionally restricted to a deck."""

        data = await self._requester.get(
            "/cards",
            {"deck-id": deck_id, "limit": limit, "bookmark": bookmark},
        )
        return parse_response(Page[Card], data)

    async def list_all(
        self,
        *,
        deck_id: str | None = None,
        limit: int | None = None,
    ) -> AsyncIterator[Card]:
        """Every card, fetched page by page as the caller iterates."""

        async for doc in self._requester.paginate("/cards", {"deck-id": deck_id}, limit=limit):
            yield parse_response(Card, doc)

    async def get(self, card_id: str) -> Card:
        data = await self._requester.get(f"/cards/{segment(card_id, name='Card ID')}")
        return parse_response(Card, data)

    async def create(self, payload: CardCreateInput | dict[str, Any]) -> Card:
        body = coerce_input(CardCreateInput, payload).to_wire()
        return parse_response(Card, await self._requester.post("/cards", body))

    async def update(self, card_id: str, payload: CardUpdateInput | dict[str, Any]) -> Card:
        path = f"/cards/{segment(card_id, name='Card ID')}"
        body = coerce_input(CardUpdateInput, payload).to_wire()
        return parse_response(Card, await self._requester.post(path, body))

    async def delete(self, card_id: str) -> None:
        await self._requester.delete(f"/cards/{segment(card_id, name='Card ID')}")

    async def add_attachment(self, card_id: str, filename: str, file_path: Path) -> None:
        path = (
            f"/cards/{segment(card_id, name='Card ID')}"
            f"/attachments/{segment(filename, name='Filename')}"
        )
        await self._requester.upload_attachment(path, filename, Path(file_path))

    async def delete_attachment(self, card_id: str, filename: str) -> None:
        await self._requester.delete(
            f"/cards/{segment(card_id, name='Card ID')}"
            f"/attachments/{segment(filename, name='Filename')}"
        )
