# builder_chat/models/message.py
# -*- coding: utf-8 -*-
"""
Builder Chat Server — Message model
-----------------------------------
One entry of a session's conversation history.

Messages are immutable once created. `timestamp` is milliseconds since the
Unix epoch (see builder_chat.utils.now_ms).
"""

from __future__ import annotations

from typing import Dict, Literal

from pydantic import BaseModel, ConfigDict, Field

from builder_chat.utils import now_ms

Role = Literal["user", "assistant", "system"]


class Message(BaseModel):
    """A single stored conversation message."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str
    timestamp: int = Field(default_factory=now_ms)

    def as_prompt_entry(self) -> Dict[str, str]:
        """Return the {"role", "content"} pair sent to the model."""
        return {"role": self.role, "content": self.content}
