"""
Tests for the timing helpers: the message timestamp clock and Stopwatch.
"""

import logging
from types import SimpleNamespace

import pytest

from builder_chat.utils import timers
from builder_chat.utils.timers import Stopwatch, now_ms


def _fake_clock(monkeypatch, readings_ns):
    readings = iter(readings_ns)
    monkeypatch.setattr(timers, "time", SimpleNamespace(time_ns=lambda: next(readings)))


def test_now_ms_converts_wall_clock_to_milliseconds(monkeypatch):
    monkeypatch.setattr(timers, "_last_ms", 0)
    _fake_clock(monkeypatch, [1_700_000_000_123_456_789])

    assert now_ms() == 1_700_000_000_123


def test_now_ms_holds_when_clock_steps_back(monkeypatch):
    monkeypatch.setattr(timers, "_last_ms", 0)
    _fake_clock(monkeypatch, [5_000_000_000, 2_000_000_000, 4_999_000_000, 7_000_000_000])

    assert [now_ms() for _ in range(4)] == [5_000, 5_000, 5_000, 7_000]


def test_now_ms_never_below_last_value(monkeypatch):
    monkeypatch.setattr(timers, "_last_ms", 10**15)

    assert now_ms() == 10**15
    assert timers._last_ms == 10**15


def test_stopwatch_records_elapsed_and_logs(caplog):
    logger = logging.getLogger("builder_chat.test")

    with caplog.at_level(logging.INFO, logger="builder_chat.test"):
        with Stopwatch("store write", logger) as sw:
            pass

    assert sw.elapsed >= 0.0
    assert "store write took" in caplog.text


def test_stopwatch_logs_even_when_block_raises(caplog):
    logger = logging.getLogger("builder_chat.test")

    with caplog.at_level(logging.INFO, logger="builder_chat.test"):
        with pytest.raises(RuntimeError):
            with Stopwatch("tier1 call", logger):
                raise RuntimeError("boom")

    assert "tier1 call took" in caplog.text
