from __future__ import annotations

import logging
from unittest.mock import patch

import pytest

from surface_explorer.debouncing import QueuedDebouncer


class _FakeThreadTimer:
    created: list["_FakeThreadTimer"] = []

    def __init__(self, delay: float, callback):
        self.delay = delay
        self.callback = callback
        self.daemon = False
        self.started = False
        self.cancelled = False
        _FakeThreadTimer.created.append(self)

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True


class _FakeLoopHandle:
    def __init__(self, callback):
        self._callback = callback

    def fire(self) -> None:
        self._callback()

    def cancel(self) -> None:
        pass


class _FakeAsyncLoop:
    def __init__(self) -> None:
        self.handles: list[_FakeLoopHandle] = []

    def call_later(self, _delay: float, callback):
        handle = _FakeLoopHandle(callback)
        self.handles.append(handle)
        return handle


def test_debouncer_logs_and_keeps_processing_after_callback_error_threading(caplog) -> None:
    state = {"n": 0}

    def _callback(_payload):
        state["n"] += 1
        if state["n"] == 1:
            raise RuntimeError("boom")

    _FakeThreadTimer.created.clear()

    with patch("surface_explorer.debouncing.threading.Timer", _FakeThreadTimer):
        debouncer = QueuedDebouncer(_callback, execute_every_ms=1, drop_overflow=False)
        with caplog.at_level(logging.ERROR, logger="surface_explorer.debouncing"):
            debouncer("first")
            debouncer("second")
            assert len(_FakeThreadTimer.created) == 1
            assert _FakeThreadTimer.created[0].daemon is True

            _FakeThreadTimer.created[0].callback()
            assert len(_FakeThreadTimer.created) == 2
            _FakeThreadTimer.created[1].callback()

    assert state["n"] == 2
    assert "QueuedDebouncer callback failed" in caplog.text


def test_debouncer_drops_overflow_to_latest_event_asyncio() -> None:
    seen = []
    fake_loop = _FakeAsyncLoop()

    with patch("surface_explorer.debouncing.asyncio.get_running_loop", return_value=fake_loop):
        debouncer = QueuedDebouncer(seen.append, execute_every_ms=1, drop_overflow=True)
        debouncer((0, 1))
        debouncer((0, 2))
        debouncer((0, 3))
        assert len(fake_loop.handles) == 1
        assert debouncer.pending == 3

        fake_loop.handles[0].fire()

    assert seen == [(0, 3)]
    assert debouncer.pending == 0
    assert len(fake_loop.handles) == 1


def test_debouncer_cancel_discards_queue() -> None:
    seen = []
    _FakeThreadTimer.created.clear()

    with patch("surface_explorer.debouncing.threading.Timer", _FakeThreadTimer):
        debouncer = QueuedDebouncer(seen.append, execute_every_ms=5)
        debouncer("x")
        debouncer.cancel()
        assert _FakeThreadTimer.created[0].cancelled
        _FakeThreadTimer.created[0].callback()

    assert seen == []
    assert debouncer.pending == 0


def test_debouncer_rejects_non_positive_cadence() -> None:
    with pytest.raises(ValueError, match="execute_every_ms must be > 0"):
        QueuedDebouncer(print, execute_every_ms=0)
