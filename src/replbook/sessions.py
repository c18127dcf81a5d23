"""
Session binder: resolves the repl id that scopes every evaluation.

The id is read from storage when present; otherwise one is created on the
server and persisted. A failed creation leaves the session unresolved for the
lifetime of the binder and is not retried.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Optional, Union

import httpx

from replbook.errors import ReplbookError
from replbook.repl import ReplAPI
from replbook.storage import REPL_ID_KEY, FileStorage, MemoryStorage

logger = logging.getLogger("replbook.sessions")

Storage = Union[FileStorage, MemoryStorage]


class SessionState(str, Enum):
    UNRESOLVED = "unresolved"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    FAILED = "failed"


def parse_repl_id(raw: Optional[str]) -> Optional[int]:
    if not raw:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


class SessionBinder:
    def __init__(self, repl: ReplAPI, storage: Storage):
        self._repl = repl
        self._storage = storage
        self._state = SessionState.UNRESOLVED
        self._repl_id: Optional[int] = None
        self._pending: Optional[asyncio.Task[Optional[int]]] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def repl_id(self) -> Optional[int]:
        return self._repl_id

    @property
    def available(self) -> bool:
        return self._state == SessionState.RESOLVED

    def load_persisted(self) -> Optional[int]:
        """Synchronous path: adopt a stored id without touching the network."""
        if self._state == SessionState.RESOLVED:
            return self._repl_id
        if self._state != SessionState.UNRESOLVED:
            return None
        raw = self._storage.get(REPL_ID_KEY)
        repl_id = parse_repl_id(raw)
        if repl_id is None:
            if raw:
                logger.warning(f"Ignoring non-numeric stored {REPL_ID_KEY}={raw!r}")
            return None
        logger.info(f"Reusing repl {repl_id}")
        self._repl_id = repl_id
        self._state = SessionState.RESOLVED
        return repl_id

    async def resolve_session(self) -> Optional[int]:
        """Return the repl id, creating and persisting one if needed.

        Returns None when creation fails; later calls keep returning None.
        Concurrent callers share one creation request.
        """
        if self.load_persisted() is not None:
            return self._repl_id
        if self._state == SessionState.FAILED:
            return None
        if self._pending is None:
            self._state = SessionState.RESOLVING
            self._pending = asyncio.ensure_future(self._create())
        return await asyncio.shield(self._pending)

    async def _create(self) -> Optional[int]:
        try:
            repl_id = await self._repl.create()
        except (httpx.HTTPError, ReplbookError, ValueError) as e:
            logger.warning(f"Session creation failed: {e}")
            self._state = SessionState.FAILED
            return None
        try:
            self._storage.set(REPL_ID_KEY, str(repl_id))
        except OSError as e:
            logger.warning(f"Could not persist repl {repl_id}: {e}")
        self._repl_id = repl_id
        self._state = SessionState.RESOLVED
        logger.info(f"Created repl {repl_id}")
        return repl_id
