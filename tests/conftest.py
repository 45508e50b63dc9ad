"""
Shared test fixtures for the chat server test suite.

Provides: in-memory and file-backed session stores, scripted generation
capabilities, an orchestrator wired to them, and a TestClient over the app.
"""

import asyncio
from pathlib import Path
from typing import Dict, List, Optional

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from builder_chat.core.pipeline import ChatOrchestrator, get_orchestrator
from builder_chat.main import create_app
from builder_chat.models.message import Message
from builder_chat.runtime_state import JsonFileBackend, MemoryBackend, SessionStore


class ScriptedGenerator:
    """Returns a fixed reply and records every prompt it was given."""

    def __init__(self, reply: Optional[str] = "Use Workers + D1.") -> None:
        self.reply = reply
        self.prompts: List[List[Dict[str, str]]] = []

    async def generate(self, messages: List[Dict[str, str]]) -> Optional[str]:
        self.prompts.append(list(messages))
        await asyncio.sleep(0)
        return self.reply


class EchoGenerator(ScriptedGenerator):
    """Replies with 'echo: <last user content>'."""

    async def generate(self, messages: List[Dict[str, str]]) -> Optional[str]:
        self.prompts.append(list(messages))
        await asyncio.sleep(0)
        return f"echo: {messages[-1]['content']}"


class FailingGenerator(ScriptedGenerator):
    """Always raises, like an unreachable inference provider."""

    def __init__(self, exc: Exception | None = None) -> None:
        super().__init__(reply=None)
        self.exc = exc or ConnectionError("inference provider unreachable")

    async def generate(self, messages: List[Dict[str, str]]) -> Optional[str]:
        self.prompts.append(list(messages))
        raise self.exc


class BrokenBackend(MemoryBackend):
    """Memory backend whose writes (and optionally reads) fail."""

    def __init__(self, fail_load: bool = False) -> None:
        super().__init__()
        self.fail_load = fail_load

    def load(self, session_key: str) -> List[Message]:
        if self.fail_load:
            raise OSError("disk unavailable")
        return super().load(session_key)

    def save(self, session_key, messages) -> None:
        raise OSError("disk full")

    def delete(self, session_key: str) -> None:
        raise OSError("disk unavailable")


@pytest.fixture
def memory_store() -> SessionStore:
    return SessionStore(MemoryBackend())


@pytest.fixture
def json_store(tmp_path: Path) -> SessionStore:
    return SessionStore(JsonFileBackend(tmp_path / "sessions"))


@pytest.fixture
def generator() -> ScriptedGenerator:
    return ScriptedGenerator()


@pytest.fixture
def orchestrator(memory_store: SessionStore, generator: ScriptedGenerator) -> ChatOrchestrator:
    return ChatOrchestrator(memory_store, generator, system_prompt="SYSTEM")


@pytest.fixture
def app(orchestrator: ChatOrchestrator) -> FastAPI:
    application = create_app()
    application.dependency_overrides[get_orchestrator] = lambda: orchestrator
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)
