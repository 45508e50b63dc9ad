# builder_chat/core/prompts.py
# -*- coding: utf-8 -*-
"""
Builder Chat Server — Prompt assembly
-------------------------------------
Turns stored history plus the new user message into the exact message list
sent to the model:

    [system preamble] + [last N stored messages, system entries dropped] + [user]

No other transformation happens here: no length-based truncation, no
summarization. The preamble is never persisted.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from builder_chat.core.config import settings
from builder_chat.models.message import Message

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_WINDOW = 10

SYSTEM_PROMPT = """You are an expert Cloudflare AI App Builder assistant. Your role is to help users design and build Cloudflare Workers applications that use AI capabilities.

When users describe what they want to build, you should:

1. Analyse their requirements and suggest an architecture using:
   - Cloudflare Workers for serverless compute
   - Workers AI for LLM inference (recommend appropriate models like Llama 3.3)
   - Durable Objects for state management and coordination
   - Assets for serving static HTML/CSS/JS interfaces

2. Provide a clear file structure for their project, showing what files they need and where they go.

3. Offer TypeScript code examples that are:
   - Production-ready and well-commented
   - Following Cloudflare Workers best practices
   - Using British English in comments and user-facing text
   - Minimal and without unnecessary frameworks

4. Explain how the different components work together (e.g. how the frontend calls the Worker, how the Worker uses Durable Objects, how to integrate Workers AI).

5. Suggest appropriate Workers AI models based on the use case (text generation, embeddings, image classification, etc.).

IMPORTANT: Always provide complete, detailed responses. Include full code examples and finish your thoughts. Don't cut off mid-sentence or mid-code block. Ensure file structures, code samples and explanations are comprehensive and actionable.

Be concise yet thorough, practical, and focus on actionable guidance. Use British English spelling and terminology throughout."""

_PROMPT_CACHE: Dict[Path, str] = {}


def _read_prompt_file(path: Path) -> str:
    """Read a preamble override file once. Missing files read as ''."""
    if path in _PROMPT_CACHE:
        return _PROMPT_CACHE[path]

    if not path.is_file():
        logger.warning("System prompt file not found: %s", path)
        _PROMPT_CACHE[path] = ""
        return ""

    text = path.read_text(encoding="utf-8").strip()
    _PROMPT_CACHE[path] = text
    return text


def get_system_prompt(override_path: Optional[Path] = None) -> str:
    """
    Return the assistant preamble.

    Uses `override_path` (or settings.system_prompt_file) when it points to
    a non-empty file, otherwise the built-in SYSTEM_PROMPT.
    """
    path = override_path or settings.system_prompt_file
    if path is None:
        return SYSTEM_PROMPT

    text = _read_prompt_file(Path(path))
    return text or SYSTEM_PROMPT


def build_prompt(
    history: Sequence[Message],
    user_text: str,
    *,
    system_prompt: str = SYSTEM_PROMPT,
    window: int = DEFAULT_HISTORY_WINDOW,
) -> List[Dict[str, str]]:
    """
    Assemble the model input for one turn.

    The window is taken first and stored system entries are dropped from it
    afterwards, so a stored system entry inside the window shrinks the
    history part rather than pulling in an older message.
    """
    messages: List[Dict[str, str]] = [
        {"role": "system", "content": system_prompt},
    ]

    recent = list(history)[-window:] if window > 0 else []
    for msg in recent:
        if msg.role == "system":
            continue
        messages.append(msg.as_prompt_entry())

    messages.append({"role": "user", "content": user_text})
    return messages
