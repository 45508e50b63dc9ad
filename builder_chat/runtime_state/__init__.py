"""
Runtime state package for the Builder Chat Server.

Tracks per-session conversation history so each browser tab keeps its own
multi-turn conversation.

Typical usage (e.g. in pipeline.py):

    from builder_chat.runtime_state import session_store

    async with session_store.session(session_key) as session:
        history = await session.get_history()
        # ... build the prompt, call the model ...
        await session.add_messages([user_message, assistant_message])
"""

from .backends import (
    JsonFileBackend,
    MemoryBackend,
    SessionBackend,
    SessionDocument,
)
from .sessions import (
    SessionHandle,
    SessionStore,
    build_session_store,
    session_store,
)

__all__ = [
    "JsonFileBackend",
    "MemoryBackend",
    "SessionBackend",
    "SessionDocument",
    "SessionHandle",
    "SessionStore",
    "build_session_store",
    "session_store",
]
