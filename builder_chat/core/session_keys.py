# builder_chat/core/session_keys.py
# -*- coding: utf-8 -*-
"""
Session key allocation.

Keys are random UUIDs (version 4) taken from the OS CSPRNG and rendered in
the canonical hyphenated form. No state, no persistence.
"""

from __future__ import annotations

import logging
import uuid

from builder_chat.core.errors import AllocationError

logger = logging.getLogger(__name__)


def new_session_key() -> str:
    """Return a fresh opaque session key, e.g. '6f1c...-...'."""
    try:
        return str(uuid.uuid4())
    except (OSError, NotImplementedError) as exc:
        logger.error("Entropy source unavailable while allocating session key: %s", exc)
        raise AllocationError(f"Could not allocate session key: {exc}") from exc
