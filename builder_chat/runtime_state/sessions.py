# builder_chat/runtime_state/sessions.py
# -*- coding: utf-8 -*-
"""
Builder Chat Server — Runtime Session State
-------------------------------------------

Per-session, append-only conversation log.

Purpose
~~~~~~~
- Keep each session's messages in arrival order, durably, through a
  pluggable backend (see backends.py).
- Serialize every operation on one session key so reads and writes for
  that key never interleave. Different keys proceed in parallel.

Design notes
~~~~~~~~~~~~
- One asyncio.Lock per key, kept in a reference-counted table. An entry is
  dropped as soon as nobody holds or waits on it, so the table only grows
  with the number of keys in flight.
- `session(key)` holds the key's lock for a whole block, so a caller can run
  get -> generate -> append as one unit. The single-call helpers
  (`get_history`, `add_message`, ...) each take the lock for one step.
- Sessions are created implicitly by the first write. There is no existence
  check: an unknown key reads as an empty history.
- Backend I/O runs in the threadpool. Any backend failure surfaces as
  PersistenceError and is not retried.
- Single process only. Several server workers sharing one sessions_dir get
  no cross-process ordering.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Callable, Dict, List, Sequence, TypeVar

from fastapi.concurrency import run_in_threadpool

from builder_chat.core.config import Settings, settings
from builder_chat.core.errors import PersistenceError
from builder_chat.models.message import Message
from builder_chat.runtime_state.backends import (
    JsonFileBackend,
    MemoryBackend,
    SessionBackend,
)
from builder_chat.utils import get_logger

logger = get_logger("builder_chat.runtime_state")

T = TypeVar("T")


@dataclass
class _KeyLock:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


class SessionHandle:
    """
    Operations on one session while its lock is held.

    Only obtained through SessionStore.session(); do not keep it after the
    `async with` block ends.
    """

    def __init__(self, store: "SessionStore", session_key: str) -> None:
        self._store = store
        self.session_key = session_key

    async def get_history(self) -> List[Message]:
        return await self._store._run(self.session_key, "load", self._store.backend.load, self.session_key)

    async def add_message(self, message: Message) -> None:
        await self.add_messages([message])

    async def add_messages(self, messages: Sequence[Message]) -> None:
        """Append `messages` in order with a single backend write."""
        new_messages = list(messages)
        if not new_messages:
            return

        def _append() -> int:
            history = self._store.backend.load(self.session_key)
            history.extend(new_messages)
            self._store.backend.save(self.session_key, history)
            return len(history)

        length = await self._store._run(self.session_key, "append", _append)
        logger.debug(
            "[SessionStore] Appended %d message(s) to %s (length=%d)",
            len(new_messages),
            self.session_key,
            length,
        )

    async def clear_history(self) -> None:
        await self._store._run(self.session_key, "delete", self._store.backend.delete, self.session_key)
        logger.info("[SessionStore] Cleared session %s", self.session_key)


class SessionStore:
    """
    Per-key serialized session store.

    Parameters
    ----------
    backend:
        Persistence backend. Defaults to an in-memory backend.
    """

    def __init__(self, backend: SessionBackend | None = None) -> None:
        self.backend: SessionBackend = backend if backend is not None else MemoryBackend()
        self._locks: Dict[str, _KeyLock] = {}

    # ------------------------------------------------------------------
    # Serialization boundary
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def session(self, session_key: str) -> AsyncIterator[SessionHandle]:
        """Hold the lock for `session_key` for the duration of the block."""
        entry = self._locks.get(session_key)
        if entry is None:
            entry = self._locks[session_key] = _KeyLock()
        entry.users += 1
        try:
            async with entry.lock:
                yield SessionHandle(self, session_key)
        finally:
            entry.users -= 1
            if entry.users == 0 and self._locks.get(session_key) is entry:
                del self._locks[session_key]

    def active_keys(self) -> int:
        """Number of keys with an operation holding or waiting on their lock."""
        return len(self._locks)

    async def _run(self, session_key: str, op: str, func: Callable[..., T], *args) -> T:
        try:
            return await run_in_threadpool(func, *args)
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "[SessionStore] Backend %s failed for session %s: %s",
                op,
                session_key,
                exc,
            )
            raise PersistenceError(
                f"Session store {op} failed: {exc}",
                session_key=session_key,
            ) from exc

    # ------------------------------------------------------------------
    # Public API (one locked step per call)
    # ------------------------------------------------------------------

    async def get_history(self, session_key: str) -> List[Message]:
        """Ordered messages for `session_key`; empty if never written."""
        async with self.session(session_key) as handle:
            return await handle.get_history()

    async def add_message(self, session_key: str, message: Message) -> None:
        """Append one message to the end of the session."""
        async with self.session(session_key) as handle:
            await handle.add_message(message)

    async def add_messages(self, session_key: str, messages: Sequence[Message]) -> None:
        """Append several messages as one atomic batch."""
        async with self.session(session_key) as handle:
            await handle.add_messages(messages)

    async def clear_history(self, session_key: str) -> None:
        """Remove the whole session. Clearing an unknown key is a no-op."""
        async with self.session(session_key) as handle:
            await handle.clear_history()


def build_session_store(config: Settings) -> SessionStore:
    """Create the store selected by `config.session_backend`."""
    if config.session_backend == "memory":
        logger.info("[SessionStore] Using in-memory backend")
        return SessionStore(MemoryBackend())

    logger.info("[SessionStore] Using JSON file backend at %s", config.sessions_dir)
    return SessionStore(JsonFileBackend(config.sessions_dir))


# Global instance used by the rest of the app
session_store = build_session_store(settings)
