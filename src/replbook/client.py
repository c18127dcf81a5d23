"""
AsyncReplbook / Replbook — main client objects.
"""

import asyncio
from typing import Any, Optional, Union

import httpx

from replbook.config import Settings
from replbook.errors import TransportError
from replbook.notebook import Dispatcher, NotebookEngine
from replbook.repl import ReplAPI
from replbook.sessions import SessionBinder
from replbook.storage import FileStorage, MemoryStorage
from replbook.transport.http import HttpClient


class AsyncReplbook:
    """Async client (primary)."""

    def __init__(
        self,
        api_base: Optional[str] = None,
        storage: Optional[Union[FileStorage, MemoryStorage]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        dispatcher: Optional[Dispatcher] = None,
        timeout: Optional[float] = None,
    ):
        self.settings = Settings.resolve(api_base=api_base, timeout=timeout)
        self.storage = storage if storage is not None else FileStorage(self.settings.state_file)
        self._dispatcher = dispatcher

        self.http = HttpClient(base_url=self.settings.api_base, timeout=self.settings.timeout, transport=transport)
        self.repl = ReplAPI(self.http)
        self.binder = SessionBinder(self.repl, self.storage)

    @property
    def repl_id(self) -> Optional[int]:
        return self.binder.repl_id

    async def resolve_session(self) -> Optional[int]:
        return await self.binder.resolve_session()

    def notebook(self, **kwargs: Any) -> NotebookEngine:
        """New notebook bound to the current session (or unbound if there is none yet)."""
        kwargs.setdefault("dispatcher", self._dispatcher)
        return NotebookEngine(self.repl, self.binder.repl_id, **kwargs)

    async def start(self, **kwargs: Any) -> NotebookEngine:
        """Resolve the session, then return a notebook bound to it."""
        await self.binder.resolve_session()
        return self.notebook(**kwargs)

    async def eval(self, text: str) -> str:
        """One-shot evaluation outside any notebook. Errors propagate."""
        repl_id = await self.binder.resolve_session()
        if repl_id is None:
            raise TransportError("No repl session available.")
        return await self.repl.eval(repl_id, text)

    async def close(self) -> None:
        await self.http.close()


class Replbook:
    """Sync wrapper around AsyncReplbook. Runs the event loop internally."""

    def __init__(self, **kwargs: Any):
        self._loop = asyncio.new_event_loop()
        self._async = AsyncReplbook(**kwargs)

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    @property
    def repl_id(self) -> Optional[int]:
        return self._async.repl_id

    def resolve_session(self) -> Optional[int]:
        return self._run(self._async.resolve_session())

    def eval(self, text: str) -> str:
        return self._run(self._async.eval(text))

    def close(self) -> None:
        self._run(self._async.close())
        self._loop.close()
