"""
Tests for ChatOrchestrator: one chat turn from validation to persistence.
"""

import asyncio
import uuid
from unittest.mock import patch

import pytest

from builder_chat.core.errors import AllocationError, InvalidInput, PersistenceError
from builder_chat.core.pipeline import ChatOrchestrator
from builder_chat.core.session_keys import new_session_key
from builder_chat.models.message import Message
from builder_chat.providers.tier3_fallback import (
    EMPTY_REPLY_PLACEHOLDER,
    build_fallback_reply,
)
from builder_chat.runtime_state import SessionStore

from conftest import BrokenBackend, EchoGenerator, FailingGenerator, ScriptedGenerator


@pytest.mark.asyncio
async def test_first_turn_allocates_session_and_saves_both_messages(orchestrator, memory_store):
    result = await orchestrator.handle_turn(None, "Build a todo app")

    assert result.reply_text == "Use Workers + D1."
    assert result.reply_source == "model"
    uuid.UUID(result.session_key)

    history = await memory_store.get_history(result.session_key)
    assert [(m.role, m.content) for m in history] == [
        ("user", "Build a todo app"),
        ("assistant", "Use Workers + D1."),
    ]
    assert history[0].timestamp <= history[1].timestamp


@pytest.mark.asyncio
async def test_supplied_key_is_used_verbatim(orchestrator):
    result = await orchestrator.handle_turn("my-own-key", "hello")
    assert result.session_key == "my-own-key"


@pytest.mark.asyncio
@pytest.mark.parametrize("text", [None, "", "   ", "\n\t "])
async def test_blank_message_is_rejected_without_writes(orchestrator, memory_store, generator, text):
    with pytest.raises(InvalidInput):
        await orchestrator.handle_turn("s1", text)

    assert await memory_store.get_history("s1") == []
    assert generator.prompts == []


@pytest.mark.asyncio
async def test_message_with_surrounding_whitespace_is_stored_untrimmed(orchestrator, memory_store):
    await orchestrator.handle_turn("s1", "  hi  ")
    history = await memory_store.get_history("s1")
    assert history[0].content == "  hi  "


@pytest.mark.asyncio
async def test_generation_failure_uses_offline_reply(memory_store):
    orchestrator = ChatOrchestrator(memory_store, FailingGenerator(), system_prompt="SYS")

    result = await orchestrator.handle_turn("s1", "Build a chat bot")

    assert result.reply_source == "fallback"
    assert result.reply_text == build_fallback_reply("Build a chat bot")
    assert '"Build a chat bot"' in result.reply_text
    history = await memory_store.get_history("s1")
    assert history[1].content == result.reply_text


@pytest.mark.asyncio
@pytest.mark.parametrize("reply", [None, ""])
async def test_empty_generation_uses_placeholder(memory_store, reply):
    orchestrator = ChatOrchestrator(memory_store, ScriptedGenerator(reply=reply))

    result = await orchestrator.handle_turn("s1", "hi")

    assert result.reply_text == EMPTY_REPLY_PLACEHOLDER
    assert result.reply_source == "placeholder"


@pytest.mark.asyncio
async def test_prompt_holds_last_ten_history_entries(memory_store, generator, orchestrator):
    stored = [
        Message(role="user" if i % 2 == 0 else "assistant", content=f"m{i}", timestamp=i)
        for i in range(12)
    ]
    await memory_store.add_messages("s1", stored)

    await orchestrator.handle_turn("s1", "next")

    prompt = generator.prompts[-1]
    assert len(prompt) == 12
    assert prompt[0] == {"role": "system", "content": "SYSTEM"}
    assert [p["content"] for p in prompt[1:11]] == [f"m{i}" for i in range(2, 12)]
    assert prompt[-1] == {"role": "user", "content": "next"}


@pytest.mark.asyncio
async def test_history_window_is_configurable(memory_store, generator):
    orchestrator = ChatOrchestrator(memory_store, generator, history_window=2)
    for i in range(3):
        await orchestrator.handle_turn("s1", f"q{i}")

    assert len(generator.prompts[-1]) == 4


@pytest.mark.asyncio
async def test_persistence_failure_propagates(generator):
    orchestrator = ChatOrchestrator(SessionStore(BrokenBackend()), generator)

    with pytest.raises(PersistenceError):
        await orchestrator.handle_turn("s1", "hi")
    # The model was asked before the write failed.
    assert len(generator.prompts) == 1


@pytest.mark.asyncio
async def test_history_read_failure_skips_generation(generator):
    orchestrator = ChatOrchestrator(SessionStore(BrokenBackend(fail_load=True)), generator)

    with pytest.raises(PersistenceError):
        await orchestrator.handle_turn("s1", "hi")
    assert generator.prompts == []


@pytest.mark.asyncio
async def test_allocation_failure_propagates(memory_store, generator):
    def broken_allocator():
        raise AllocationError("no entropy")

    orchestrator = ChatOrchestrator(memory_store, generator, key_allocator=broken_allocator)

    with pytest.raises(AllocationError):
        await orchestrator.handle_turn(None, "hi")


@pytest.mark.asyncio
async def test_concurrent_turns_on_one_key_do_not_interleave(memory_store):
    generator = EchoGenerator()
    orchestrator = ChatOrchestrator(memory_store, generator)

    await asyncio.gather(*(orchestrator.handle_turn("s1", f"q{i}") for i in range(6)))

    history = await memory_store.get_history("s1")
    assert len(history) == 12
    for user_msg, reply_msg in zip(history[0::2], history[1::2]):
        assert user_msg.role == "user"
        assert reply_msg.role == "assistant"
        assert reply_msg.content == f"echo: {user_msg.content}"

    # Each turn saw every earlier turn as history.
    seen = sorted(len(prompt) for prompt in generator.prompts)
    assert seen == [min(2 * k, 10) + 2 for k in range(6)]
    assert memory_store.active_keys() == 0


@pytest.mark.asyncio
async def test_clear_session(orchestrator, memory_store):
    await orchestrator.handle_turn("s1", "hi")

    await orchestrator.clear_session("s1")

    assert await memory_store.get_history("s1") == []


@pytest.mark.asyncio
@pytest.mark.parametrize("key", [None, ""])
async def test_clear_session_requires_key(orchestrator, key):
    with pytest.raises(InvalidInput):
        await orchestrator.clear_session(key)


def test_new_session_keys_are_unique_uuids():
    keys = {new_session_key() for _ in range(1000)}
    assert len(keys) == 1000
    for key in list(keys)[:10]:
        assert uuid.UUID(key).version == 4


def test_entropy_failure_becomes_allocation_error():
    with patch("builder_chat.core.session_keys.uuid.uuid4", side_effect=NotImplementedError("no urandom")):
        with pytest.raises(AllocationError):
            new_session_key()
