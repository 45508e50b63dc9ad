# builder_chat/core/errors.py
# -*- coding: utf-8 -*-
"""
Builder Chat Server — Error taxonomy
------------------------------------
Exceptions raised by the chat core. The HTTP layer maps them as follows:

    InvalidInput           -> 400, not retried
    GenerationUnavailable  -> never reaches the HTTP layer (fallback text)
    PersistenceError       -> 500 with details
    AllocationError        -> 500 with details

PersistenceError may leave a session partially written when a caller issues
separate add_message calls and the second one fails. There is no
compensating rollback. The orchestrator avoids this window by writing the
user and assistant messages in a single batch.
"""

from __future__ import annotations


class ChatError(Exception):
    """Base class for all chat core errors."""


class InvalidInput(ChatError):
    """A required field is missing or blank."""


class GenerationUnavailable(ChatError):
    """No generation tier could produce a reply."""


class PersistenceError(ChatError):
    """The session store backend failed to read, write or delete."""

    def __init__(self, message: str, *, session_key: str | None = None) -> None:
        super().__init__(message)
        self.session_key = session_key


class AllocationError(ChatError):
    """A new session key could not be generated."""
