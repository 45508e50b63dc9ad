# builder_chat/models/chat_request.py
# -*- coding: utf-8 -*-
"""
Builder Chat Server — request models
------------------------------------
Request bodies for the HTTP endpoints:

- ChatRequest  : POST /api/chat   { "message": "...", "sessionId": "..." }
- ClearRequest : POST /api/clear  { "sessionId": "..." }

Both fields are optional at the schema level. Presence and blankness are
checked by the chat core so that a missing field yields the
`{ "error": ... }` 400 body rather than a schema error.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ChatRequest(BaseModel):
    """
    Canonical request body for /api/chat.

    Fields
    ------
    message:
        The user's message. Required and must not be blank.
    session_id:
        Key returned by a previous turn. Omit it to start a new session.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {"message": "Build a todo app"},
                {
                    "message": "Add user accounts to it",
                    "sessionId": "0b6f7a0e-52d4-4bd1-9a3c-2f43c4a4b1d1",
                },
            ]
        },
    )

    message: Optional[str] = Field(
        default=None,
        description="User message in plain text.",
    )
    session_id: Optional[str] = Field(
        default=None,
        alias="sessionId",
        description="Session key from a previous reply; omitted for a new session.",
    )


class ClearRequest(BaseModel):
    """Request body for /api/clear."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: Optional[str] = Field(
        default=None,
        alias="sessionId",
        description="Session key whose history should be removed.",
    )
