# builder_chat/core/types.py
# -*- coding: utf-8 -*-
"""
Builder Chat Server — Shared type helpers
-----------------------------------------
Small shared definitions used across the core:

- TierLabel        : which generation tier answered ("tier1"|"tier2")
- ReplySource      : where a turn's reply text came from
- GenerationResult : one successful provider-chain call
- TurnResult       : outcome of one chat turn
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal

TierLabel = Literal["tier1", "tier2"]

# "model"       -> text returned by a generation tier
# "placeholder" -> a tier answered with empty text
# "fallback"    -> no tier answered, offline template used
ReplySource = Literal["model", "placeholder", "fallback"]


@dataclass
class GenerationResult:
    """
    Attributes
    ----------
    text:
        Reply text as returned by the provider (may be empty).
    used_tier:
        "tier1" | "tier2"
    raw:
        Backend metadata (provider, model name).
    """
    text: str
    used_tier: TierLabel
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class TurnResult:
    reply_text: str
    session_key: str
    reply_source: ReplySource
