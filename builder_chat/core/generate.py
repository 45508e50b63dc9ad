# builder_chat/core/generate.py
# -*- coding: utf-8 -*-
"""
Builder Chat Server — Generation core
-------------------------------------
The generation capability seen by the chat pipeline is anything with

    async generate(messages) -> str | None

where `messages` is the assembled [{"role", "content"}, ...] list. It may
raise; the pipeline then answers with the offline template.

ProviderChain is the production implementation:

    1) Tier1: online model, trying tier1_model_candidates in priority order
    2) Tier2: local Ollama model

If neither tier answers it raises GenerationUnavailable. The Tier3 template
lives in the pipeline, not here, so that every failure of any capability
ends in the same fallback.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Protocol

from fastapi.concurrency import run_in_threadpool

from builder_chat.core.config import settings
from builder_chat.core.errors import GenerationUnavailable
from builder_chat.core.types import GenerationResult
from builder_chat.providers import tier2_local
from builder_chat.providers.tier1_online import Tier1Error, call_tier1_model
from builder_chat.providers.tier2_local import Tier2Error, call_tier2_model
from builder_chat.utils import Stopwatch

logger = logging.getLogger(__name__)


class GenerationCapability(Protocol):
    async def generate(self, messages: List[Dict[str, str]]) -> Optional[str]:
        ...


class ProviderChain:
    """Tier1 → Tier2 generation chain over blocking HTTP providers."""

    def generate_sync(self, messages: List[Dict[str, str]]) -> GenerationResult:
        """
        Run the chain in the calling thread.

        Raises
        ------
        GenerationUnavailable
            When every enabled tier failed or none is configured.
        """
        errors: List[str] = []

        if settings.tier1_enabled and settings.tier1_api_key:
            model_list = settings.tier1_model_candidates or []
            if not model_list:
                logger.warning(
                    "Tier1 is enabled and API key is set, but no "
                    "tier1_model_candidates configured; skipping Tier1."
                )
            for model_name in model_list:
                try:
                    with Stopwatch(f"tier1 {model_name}", logger, logging.DEBUG):
                        text = call_tier1_model(messages, model_name)
                    return GenerationResult(
                        text=text,
                        used_tier="tier1",
                        raw={"backend": "tier1", "model": model_name},
                    )
                except Tier1Error as exc:
                    logger.warning("Tier1 model %s failed: %s", model_name, exc)
                    errors.append(f"tier1 {model_name}: {exc}")

        if tier2_local.is_configured():
            try:
                with Stopwatch("tier2 ollama", logger, logging.DEBUG):
                    text = call_tier2_model(messages)
                return GenerationResult(
                    text=text,
                    used_tier="tier2",
                    raw={"backend": "ollama", "model": settings.tier2_ollama_model},
                )
            except Tier2Error as exc:
                logger.warning("Tier2 failed: %s", exc)
                errors.append(f"tier2: {exc}")

        if not errors:
            raise GenerationUnavailable("No generation tier is configured.")
        raise GenerationUnavailable("; ".join(errors))

    async def generate(self, messages: List[Dict[str, str]]) -> Optional[str]:
        result = await run_in_threadpool(self.generate_sync, messages)
        logger.info(
            "[generate] used_tier=%s backend=%r",
            result.used_tier,
            result.raw,
        )
        return result.text
