# builder_chat/providers/tier2_local.py
# -*- coding: utf-8 -*-
"""

Builder Chat Server — Tier2 Local Provider (Ollama)

"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

import requests

from builder_chat.core.config import settings

logger = logging.getLogger(__name__)


class Tier2Error(Exception):
    """Raised when Tier2 (local) fails in a recoverable way."""


def is_configured() -> bool:
    return bool(settings.tier2_enabled and settings.tier2_ollama_url and settings.tier2_ollama_model)


def call_tier2_model(messages: List[Dict[str, str]]) -> str:
    """
    Call the local Ollama model and return the assistant's text.

    Expected config:
        settings.tier2_ollama_url   e.g. "http://localhost:11434/api/chat"
        settings.tier2_ollama_model e.g. "llama3.3:latest"

    Returns the stripped reply, which may be empty.

    Raises
    ------
    Tier2Error
        If Tier2 is disabled, not configured, or the HTTP/JSON exchange fails.
    """
    if not settings.tier2_enabled:
        raise Tier2Error("Tier2 is disabled in config.")

    base_url = settings.tier2_ollama_url
    model = settings.tier2_ollama_model
    if not base_url or not model:
        raise Tier2Error(
            "Tier2 (Ollama) is not configured. "
            "Set TIER2_OLLAMA_URL and TIER2_OLLAMA_MODEL or disable Tier2."
        )

    # /api/chat streams by default; stream=false gives one JSON object.
    payload: Dict[str, Any] = {
        "model": model,
        "messages": messages,
        "stream": False,
    }

    try:
        resp = requests.post(base_url, json=payload, timeout=settings.tier2_timeout_s)
    except requests.RequestException as exc:
        raise Tier2Error(f"Ollama HTTP error: {exc}") from exc

    if resp.status_code != 200:
        text_preview = resp.text[:200].replace("\n", " ")
        raise Tier2Error(f"Ollama HTTP {resp.status_code}: {text_preview}")

    try:
        data = resp.json()
    except ValueError as exc:
        raise Tier2Error("Ollama returned non-JSON response.") from exc

    # {"model": "...", "message": {"role": "assistant", "content": "..."}, "done": true}
    if not isinstance(data, dict):
        raise Tier2Error("Ollama response is not a JSON object.")
    message = data.get("message") or {}
    content = message.get("content") if isinstance(message, dict) else None

    if content is None:
        return ""
    if not isinstance(content, str):
        raise Tier2Error(f"Ollama content has unexpected type {type(content).__name__}.")

    return content.strip()
