# builder_chat/models/chat_response.py
# -*- coding: utf-8 -*-
"""
Builder Chat Server — response models
-------------------------------------
JSON bodies returned by the HTTP endpoints. Field names are camelCase on the
wire (`sessionId`) to match what the browser UI sends.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ChatResponse(BaseModel):
    """Successful /api/chat reply."""

    model_config = ConfigDict(populate_by_name=True)

    reply: str
    session_id: str = Field(alias="sessionId")


class ClearResponse(BaseModel):
    """Successful /api/clear reply."""

    success: bool = True


class ErrorResponse(BaseModel):
    """Error body for 4xx/5xx replies. `details` is only set on 5xx."""

    error: str
    details: Optional[str] = None
