"""Process-wide FIFO serialization of outbound API calls.

Each submission chains itself behind the current tail and becomes the new
tail, so units of work run strictly one at a time in submission order. A unit
starts once its predecessor finished, whether it succeeded or failed, and its
own result or exception goes only to its own caller.

Known limitation: there is no timeout or cancellation at this layer. A stuck
unit blocks every later one.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RequestSerializer:
    """At most one unit of work in flight, in FIFO order."""

    def __init__(self) -> None:
        self._tail: asyncio.Future[None] | None = None
        self._pending = 0

    @property
    def pending(self) -> int:
        """Units submitted and not yet finished (including the running one)."""

        return self._pending

    async def run(self, work: Callable[[], Awaitable[T]]) -> T:
        loop = asyncio.get_running_loop()
        previous = self._tail
        turn: asyncio.Future[None] = loop.create_future()
        self._tail = turn
        self._pending += 1

        try:
            # A tail left behind by an earlier event loop can never complete here.
            if previous is not None and not previous.done() and previous.get_loop() is loop:
                logger.debug("Waiting for %d queued request(s)", self._pending - 1)
                await asyncio.shield(previous)
            return await work()
        finally:
            self._pending -= 1
            self._hand_over(previous, turn)

    @staticmethod
    def _hand_over(previous: asyncio.Future[None] | None, turn: asyncio.Future[None]) -> None:
        # A caller abandoned while still waiting must not let its successor
        # overtake the predecessor that is still running.
        if previous is None or previous.done() or previous.get_loop() is not turn.get_loop():
            if not turn.done():
                turn.set_result(None)
            return

        def _release(_: asyncio.Future[None]) -> None:
            if not turn.done():
                turn.set_result(None)

        previous.add_done_callback(_release)


_shared_serializer = RequestSerializer()


def shared_serializer() -> RequestSerializer:
    """The serializer every client shares unless one is injected."""

    return _shared_serializer
