"""
Request dispatch policies.

The notebook hands every evaluation request to a dispatcher. The default
imposes no limit on outstanding requests; ``BoundedDispatcher`` adds an
admission limit without touching the cell state machine.
"""

import asyncio
from typing import Any, Awaitable, Optional


class UnboundedDispatcher:
    async def dispatch(self, request: Awaitable[Any]) -> Any:
        return await request


class BoundedDispatcher:
    """At most ``limit`` requests in flight; the rest wait their turn."""

    def __init__(self, limit: int):
        if limit < 1:
            raise ValueError("limit must be >= 1")
        self.limit = limit
        self._sem: Optional[asyncio.Semaphore] = None

    def _semaphore(self) -> asyncio.Semaphore:
        # created lazily so it binds to the running loop
        if self._sem is None:
            self._sem = asyncio.Semaphore(self.limit)
        return self._sem

    async def dispatch(self, request: Awaitable[Any]) -> Any:
        async with self._semaphore():
            return await request
