# builder_chat/utils/logging.py
# -*- coding: utf-8 -*-
"""
Builder Chat Server — logging utilities
---------------------------------------
Central logging configuration for the chat server.

- One format for every module (timestamp, level, logger name, message).
- settings.debug switches the default level to DEBUG.
- Uvicorn access logs and the HTTP client libraries are kept quieter.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Loggers that flood the console at INFO level during normal traffic.
_NOISY_LOGGERS = ("uvicorn.access", "httpx", "urllib3")


def setup_logging(
    *,
    debug: bool = False,
    level: Optional[int] = None,
) -> None:
    """
    Configure root logging for the process.

    Parameters
    ----------
    debug:
        If True, the default level becomes DEBUG, otherwise INFO.
        Normally wired from settings.debug.
    level:
        Explicit logging level, overrides the debug flag.

    Safe to call more than once: when handlers already exist only the
    levels are adjusted.
    """
    if level is not None:
        base_level = level
    else:
        base_level = logging.DEBUG if debug else logging.INFO

    root = logging.getLogger()
    if root.handlers:
        root.setLevel(base_level)
        for h in root.handlers:
            h.setLevel(base_level)
        return

    logging.basicConfig(
        level=base_level,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )

    noisy_level = os.getenv("BUILDER_CHAT_NOISY_LOG_LEVEL", "WARNING")
    for noisy in _NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(noisy_level)


def get_logger(name: str) -> logging.Logger:
    """
    Thin wrapper around logging.getLogger.

        from builder_chat.utils import get_logger
        logger = get_logger(__name__)
    """
    return logging.getLogger(name)
