"""Templates resource: `/templates` (read and create only)."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

from adapters.resources.base import ResourceApi, coerce_input, parse_response, segment
from core.domain.models import Page, Template, TemplateCreateInput


class TemplatesApi(ResourceApi):
    async def list(self, *, bookmark: str | None = None) -> Page[Template]:
        data = await self._requester.get("/templates", {"bookmark": bookmark})
        return parse_response(Page[Template], data)

    async def list_all(self) -> AsyncIterator[Template]:
        async for doc in self._requester.paginate("/templates"):
            yield parse_response(Template, doc)

    async def get(self, template_id: str) -> Template:
        data = await self._requester.get(f"/templates/{segment(template_id, name='Template ID')}")
        return parse_response(Template, data)

    async def create(self, payload: TemplateCreateInput | dict[str, Any]) -> Template:
        body = coerce_input(TemplateCreateInput, payload).to_wire()
        return parse_response(Template, await self._requester.post("/templates", body))
