"""Contract for issuing requests against the Mochi API.

Why Protocol:
- Structural contract (duck typing) without rigid inheritance.
- Resource clients (cards, decks, templates, due) stay testable with a stub
  and are not coupled to httpx.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

QueryParams = Mapping[str, "str | int | float | None"]


@runtime_checkable
class ApiRequester(Protocol):
    """Minimal surface resource clients rely on.

    Design rules:
    - Every method is async because it performs network I/O.
    - `paginate` is lazy: pages are fetched only as the caller consumes items.
    """

    async def get(self, path: str, params: QueryParams | None = None) -> Any:
        ...

    async def post(self, path: str, body: Any = None) -> Any:
        ...

    async def delete(self, path: str) -> Any:
        ...

    def paginate(
        self,
        path: str,
        params: QueryParams | None = None,
        *,
        limit: int | None = None,
    ) -> AsyncIterator[dict[str, Any]]:
        ...

    async def upload_attachment(self, path: str, filename: str, file_path: Path) -> None:
        ...
