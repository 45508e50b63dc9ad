# builder_chat/providers/tier1_online.py
# -*- coding: utf-8 -*-
"""
Builder Chat Server — Tier1 Online Provider
-------------------------------------------
The only module that talks to the online, OpenAI-compatible chat completions
endpoint (OpenRouter by default).

- Builds the HTTP request (URL, headers, JSON payload).
- Parses choices[0].message.content from the response.

core/generate.py picks the model from settings.tier1_model_candidates and
moves on to the next candidate (then Tier2) when this raises Tier1Error.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

import requests

from builder_chat.core.config import settings

logger = logging.getLogger(__name__)


class Tier1Error(Exception):
    """Raised when Tier1 (online) fails in a recoverable way."""


def _build_payload(
    messages: List[Dict[str, str]],
    model_name: str,
) -> Dict[str, Any]:
    """Chat completions payload. max_tokens is raised so code samples are not cut off."""
    return {
        "model": model_name,
        "messages": messages,
        "max_tokens": settings.tier1_max_tokens,
    }


def call_tier1_model(
    messages: List[Dict[str, str]],
    model_name: str,
) -> str:
    """
    Call a Tier1 model and return the assistant's text.

    Parameters
    ----------
    messages:
        List of {"role": "system"|"user"|"assistant", "content": "..."} dicts.
    model_name:
        Provider model ID, e.g. "meta-llama/llama-3.3-70b-instruct".

    Returns
    -------
    content: str
        The reply, stripped. May be empty if the model produced nothing.

    Raises
    ------
    Tier1Error
        If Tier1 is disabled, has no API key, or the HTTP/JSON exchange fails.
    """
    if not settings.tier1_enabled:
        raise Tier1Error("Tier1 is disabled in config.")

    api_key = settings.tier1_api_key
    if not api_key:
        raise Tier1Error("Tier1 API key is missing.")

    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }
    payload = _build_payload(messages, model_name)

    try:
        resp = requests.post(
            settings.tier1_base_url,
            headers=headers,
            json=payload,
            timeout=settings.tier1_timeout_s,
        )
    except requests.RequestException as exc:
        raise Tier1Error(f"Tier1 HTTP error: {exc}") from exc

    if resp.status_code != 200:
        text_preview = resp.text[:200].replace("\n", " ")
        raise Tier1Error(f"Tier1 HTTP {resp.status_code}: {text_preview}")

    try:
        data = resp.json()
    except ValueError as exc:
        raise Tier1Error("Tier1 returned non-JSON response.") from exc

    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise Tier1Error(
            "Tier1 response JSON missing choices[0].message.content"
        ) from exc

    if content is None:
        return ""
    if not isinstance(content, str):
        raise Tier1Error(f"Tier1 content has unexpected type {type(content).__name__}.")

    return content.strip()
