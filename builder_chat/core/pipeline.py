# builder_chat/core/pipeline.py
# -*- coding: utf-8 -*-
"""
Builder Chat Server — Chat pipeline
-----------------------------------
One chat turn, end to end:

    (session key?, user text)
      -> validate text
      -> resolve session key (allocate if absent)
      -> [per-key lock held from here]
      -> load history
      -> build prompt (preamble + last N history + user)
      -> generate reply (model, placeholder, or offline template)
      -> append user + assistant messages in one batch
      -> [lock released]
      -> TurnResult

Holding the session lock for the whole turn means two turns on the same key
run one after the other in arrival order, and each one sees the previous
turn's messages as history.

Failure policy
~~~~~~~~~~~~~~
- Blank text                 -> InvalidInput, nothing is written.
- Generation raises anything -> offline template, turn still succeeds.
- Store fails                -> PersistenceError propagates, reply discarded.
- Key allocation fails       -> AllocationError propagates.
No step is retried.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from builder_chat.core.config import settings
from builder_chat.core.errors import InvalidInput
from builder_chat.core.generate import GenerationCapability, ProviderChain
from builder_chat.core.prompts import build_prompt, get_system_prompt
from builder_chat.core.session_keys import new_session_key
from builder_chat.core.types import ReplySource, TurnResult
from builder_chat.models.message import Message
from builder_chat.providers.tier3_fallback import (
    EMPTY_REPLY_PLACEHOLDER,
    build_fallback_reply,
)
from builder_chat.runtime_state import SessionStore, session_store
from builder_chat.utils import Stopwatch, now_ms

logger = logging.getLogger(__name__)


class ChatOrchestrator:
    """
    Executes chat turns against a session store and a generation capability.

    Parameters
    ----------
    store:
        Session store holding the conversation logs.
    generator:
        Generation capability; any exception it raises is absorbed.
    key_allocator:
        Returns a fresh session key when the caller sends none.
    system_prompt:
        Preamble placed first in every prompt.
    history_window:
        How many of the most recent stored messages enter the prompt.
    clock:
        Timestamp source for persisted messages (milliseconds).
    """

    def __init__(
        self,
        store: SessionStore,
        generator: GenerationCapability,
        *,
        key_allocator: Callable[[], str] = new_session_key,
        system_prompt: Optional[str] = None,
        history_window: Optional[int] = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.store = store
        self.generator = generator
        self.key_allocator = key_allocator
        self.system_prompt = system_prompt if system_prompt is not None else get_system_prompt()
        self.history_window = (
            history_window if history_window is not None else settings.history_window
        )
        self.clock = clock

    async def handle_turn(
        self,
        session_key: Optional[str],
        user_text: Optional[str],
    ) -> TurnResult:
        """
        Run one conversational turn and persist it.

        Raises
        ------
        InvalidInput
            `user_text` is missing, empty or whitespace only.
        AllocationError
            No key was supplied and a new one could not be generated.
        PersistenceError
            History could not be read or the exchange could not be saved.
        """
        if user_text is None or not user_text.strip():
            raise InvalidInput("Message is required")

        if not session_key:
            session_key = self.key_allocator()
            logger.info("[pipeline] Allocated new session %s", session_key)

        async with self.store.session(session_key) as session:
            history = await session.get_history()

            prompt = build_prompt(
                history,
                user_text,
                system_prompt=self.system_prompt,
                window=self.history_window,
            )
            logger.debug(
                "[pipeline] session=%s history=%d prompt_messages=%d",
                session_key,
                len(history),
                len(prompt),
            )

            reply_text, source = await self._generate(prompt, user_text)

            timestamp = self.clock()
            await session.add_messages(
                [
                    Message(role="user", content=user_text, timestamp=timestamp),
                    Message(role="assistant", content=reply_text, timestamp=timestamp),
                ]
            )

        logger.info(
            "[pipeline] session=%s reply_source=%s reply_chars=%d",
            session_key,
            source,
            len(reply_text),
        )
        return TurnResult(reply_text=reply_text, session_key=session_key, reply_source=source)

    async def clear_session(self, session_key: Optional[str]) -> None:
        """Remove all history for `session_key`. Raises InvalidInput when it is blank."""
        if not session_key:
            raise InvalidInput("Session ID is required")
        await self.store.clear_history(session_key)

    async def _generate(
        self,
        prompt: List[Dict[str, str]],
        user_text: str,
    ) -> tuple[str, ReplySource]:
        try:
            with Stopwatch("generation", logger):
                text = await self.generator.generate(prompt)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Generation unavailable, using offline reply: %s", exc)
            return build_fallback_reply(user_text), "fallback"

        if not text:
            return EMPTY_REPLY_PLACEHOLDER, "placeholder"
        return text, "model"


_default_orchestrator: Optional[ChatOrchestrator] = None


def get_orchestrator() -> ChatOrchestrator:
    """Process-wide orchestrator over the global session store and ProviderChain."""
    global _default_orchestrator
    if _default_orchestrator is None:
        _default_orchestrator = ChatOrchestrator(session_store, ProviderChain())
    return _default_orchestrator
