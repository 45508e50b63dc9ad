# -*- coding: utf-8 -*-
"""
Builder Chat Server — Utility toolbox
-------------------------------------
Shared helpers used across the chat server:

- file_io   : strict JSON read, atomic JSON write, file removal
- logging   : central logging configuration
- timers    : Stopwatch and the message timestamp clock

    from builder_chat.utils import setup_logging, get_logger
"""

from __future__ import annotations

from .file_io import (  # noqa: F401
    read_json,
    write_json_atomic,
    remove_file,
)

from .logging import (  # noqa: F401
    setup_logging,
    get_logger,
)

from .timers import (  # noqa: F401
    Stopwatch,
    now_ms,
)
