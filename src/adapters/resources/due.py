"""Due cards: `/due` and `/due/:deckId`.

The endpoint is not paginated; it answers `{"cards": [...]}` for the given
date (ISO 8601, server default: today).
"""

from __future__ import annotations

from adapters.resources.base import ResourceApi, parse_response, segment
from core.domain.models import Card, DueCards


class DueApi(ResourceApi):
    async def list(self, *, date: str | None = None) -> list[Card]:
        data = await self._requester.get("/due", {"date": date})
        return parse_response(DueCards, data).cards

    async def list_by_deck(self, deck_id: str, *, date: str | None = None) -> list[Card]:
        path = f"/due/{segment(deck_id, name='Deck ID')}"
        data = await self._requester.get(path, {"date": date})
        return parse_response(DueCards, data).cards
