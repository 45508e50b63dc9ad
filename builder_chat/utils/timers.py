# builder_chat/utils/timers.py
# -*- coding: utf-8 -*-
"""
Builder Chat Server — timing utilities
--------------------------------------
- Stopwatch: logs how long a block took (provider latency, store I/O).
- now_ms: wall-clock milliseconds for message timestamps.
"""

from __future__ import annotations

import logging
import threading
import time
from contextlib import ContextDecorator
from typing import Optional


class Stopwatch(ContextDecorator):
    """
    Context manager that logs the elapsed time of a block.

        with Stopwatch("tier1 call", logger):
            call_tier1_model(...)

    logs:
        tier1 call took 0.237 s

    `elapsed` holds the duration in seconds after the block exits.
    """

    def __init__(
        self,
        label: str,
        logger: Optional[logging.Logger] = None,
        level: int = logging.INFO,
    ) -> None:
        self.label = label
        self.logger = logger or logging.getLogger(__name__)
        self.level = level
        self.elapsed: float = 0.0
        self._start: float = 0.0

    def __enter__(self) -> "Stopwatch":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, exc_tb) -> None:  # type: ignore[override]
        self.elapsed = time.perf_counter() - self._start
        self.logger.log(self.level, "%s took %.3f s", self.label, self.elapsed)


_clock_lock = threading.Lock()
_last_ms = 0


def now_ms() -> int:
    """
    Milliseconds since the Unix epoch.

    Never returns a value smaller than a previous call in this process,
    even if the system clock is stepped backwards.
    """
    global _last_ms
    current = time.time_ns() // 1_000_000
    with _clock_lock:
        if current < _last_ms:
            current = _last_ms
        _last_ms = current
    return current
