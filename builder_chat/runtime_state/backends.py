# builder_chat/runtime_state/backends.py
# -*- coding: utf-8 -*-
"""
Builder Chat Server — Session persistence backends
--------------------------------------------------
A backend knows how to load, save and delete the full message list of one
session. It is synchronous and knows nothing about locking: the SessionStore
serializes access per key and runs backend calls in a worker thread.

Backends
~~~~~~~~
- JsonFileBackend : one JSON document per session under a root directory.
                    File names are the SHA-256 of the session key, so any
                    key string maps to a safe path.
- MemoryBackend   : process-local dict, for tests and throwaway deployments.

Errors are raised as-is (OSError, ValueError, pydantic.ValidationError);
SessionStore turns them into PersistenceError.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Dict, List, Protocol, Sequence, Tuple, Union

from pydantic import BaseModel, Field

from builder_chat.models.message import Message
from builder_chat.utils import read_json, remove_file, write_json_atomic

logger = logging.getLogger(__name__)


class SessionBackend(Protocol):
    def load(self, session_key: str) -> List[Message]:
        ...

    def save(self, session_key: str, messages: Sequence[Message]) -> None:
        ...

    def delete(self, session_key: str) -> None:
        ...


class SessionDocument(BaseModel):
    """On-disk shape of one session file."""

    session_key: str
    messages: List[Message] = Field(default_factory=list)


class JsonFileBackend:
    """
    File-backed session persistence.

    Parameters
    ----------
    root:
        Directory holding the session files. Created on first write.
    """

    def __init__(self, root: Union[Path, str]) -> None:
        self.root = Path(root)

    def path_for(self, session_key: str) -> Path:
        digest = hashlib.sha256(session_key.encode("utf-8")).hexdigest()
        return self.root / f"{digest}.json"

    def load(self, session_key: str) -> List[Message]:
        raw = read_json(self.path_for(session_key))
        if raw is None:
            return []
        document = SessionDocument.model_validate(raw)
        if document.session_key != session_key:
            raise ValueError(
                f"Session file {self.path_for(session_key).name} belongs to another key"
            )
        return list(document.messages)

    def save(self, session_key: str, messages: Sequence[Message]) -> None:
        document = SessionDocument(session_key=session_key, messages=list(messages))
        write_json_atomic(self.path_for(session_key), document.model_dump(mode="json"))

    def delete(self, session_key: str) -> None:
        if remove_file(self.path_for(session_key)):
            logger.debug("[JsonFileBackend] Removed file for session %s", session_key)


class MemoryBackend:
    """Dict-backed session persistence. Contents are lost on restart."""

    def __init__(self) -> None:
        self._sessions: Dict[str, Tuple[Message, ...]] = {}

    def load(self, session_key: str) -> List[Message]:
        return list(self._sessions.get(session_key, ()))

    def save(self, session_key: str, messages: Sequence[Message]) -> None:
        self._sessions[session_key] = tuple(messages)

    def delete(self, session_key: str) -> None:
        self._sessions.pop(session_key, None)
