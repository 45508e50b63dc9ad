# builder_chat/core/config.py
# -*- coding: utf-8 -*-
"""
Builder Chat Server — Configuration
-----------------------------------
Central configuration for the chat server:

- app metadata and API host/port
- session store backend and its location on disk
- prompt window size and optional preamble override
- Tier1 (online, OpenAI-compatible endpoint, OpenRouter by default)
- Tier2 (local Ollama over HTTP)

Values come from environment variables or a `.env` file next to the package.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

# This file is: builder_chat/core/config.py
PACKAGE_DIR: Path = Path(__file__).resolve().parents[1]   # .../builder_chat
ROOT_DIR: Path = PACKAGE_DIR.parent                       # project root

DATA_DIR: Path = ROOT_DIR / "data"


# ---------------------------------------------------------------------------
# Settings model
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    """
    Global configuration for the chat server.

    Instantiated once at import time as `settings`.
    """

    model_config = SettingsConfigDict(
        env_file=ROOT_DIR / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- App / server basics -----------------------------------------------
    app_name: str = "Builder Chat Server"
    environment: Literal["development", "production", "test"] = "development"
    debug: bool = True

    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # --- Session store ------------------------------------------------------
    # "json"   -> one JSON document per session under sessions_dir
    # "memory" -> process-local dict, lost on restart
    session_backend: Literal["json", "memory"] = "json"
    sessions_dir: Path = DATA_DIR / "sessions"

    # --- Prompt assembly ----------------------------------------------------
    history_window: int = Field(
        default=10,
        ge=0,
        description="How many of the most recent stored messages go into the prompt.",
    )
    system_prompt_file: Path | None = Field(
        default=None,
        description="Optional text file replacing the built-in assistant preamble.",
    )

    # --- Tier1: Online provider (OpenAI-compatible) -------------------------
    tier1_enabled: bool = True
    tier1_base_url: str = "https://openrouter.ai/api/v1/chat/completions"

    # ENV: TIER1_API_KEY=sk-or-v1-...
    tier1_api_key: str | None = Field(
        default=None,
        description="API key for the Tier1 online provider (env: TIER1_API_KEY).",
    )

    # Priority-ordered model list (first → last).
    tier1_model_candidates: list[str] = [
        "meta-llama/llama-3.3-70b-instruct",
        "meta-llama/llama-3.3-70b-instruct:free",
    ]

    tier1_timeout_s: float = 30.0
    tier1_max_tokens: int = 2048

    # --- Tier2: Local backend (Ollama HTTP) ---------------------------------
    #   TIER2_OLLAMA_URL   (e.g. http://localhost:11434/api/chat)
    #   TIER2_OLLAMA_MODEL (e.g. llama3.3:latest)
    tier2_enabled: bool = True
    tier2_ollama_url: str | None = Field(
        default=None,
        description="Ollama chat endpoint (env: TIER2_OLLAMA_URL).",
    )
    tier2_ollama_model: str | None = Field(
        default=None,
        description="Ollama model name (env: TIER2_OLLAMA_MODEL).",
    )
    tier2_timeout_s: float = 60.0


# Single global settings instance used by the rest of the app.
settings = Settings()
