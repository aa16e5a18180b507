"""Tests for the recurring timer implementations."""

from __future__ import annotations

import threading
import time

import pytest
from PySide6.QtCore import QCoreApplication, QEventLoop, QTimer

from autosave.timers.qt_timer import QtTimer
from autosave.timers.thread_timer import ThreadTimer


class TestThreadTimer:
    def test_fires_repeatedly_until_stopped(self) -> None:
        ticks = threading.Semaphore(0)
        stopped = threading.Event()
        timer = ThreadTimer("test")
        timer.start(ticks.release, period=0.02, start_delay=0.0, on_stop=stopped.set)

        for _ in range(3):
            assert ticks.acquire(timeout=2)
        timer.stop()

        assert stopped.is_set()
        assert not timer.is_running

    def test_start_delay(self) -> None:
        fired = threading.Event()
        timer = ThreadTimer("test")
        started = time.monotonic()
        timer.start(fired.set, period=10, start_delay=0.1)
        assert fired.wait(timeout=2)
        assert time.monotonic() - started >= 0.09
        timer.stop()

    def test_error_hook_then_stop_hook(self) -> None:
        calls: list[str] = []
        done = threading.Event()

        def boom() -> None:
            raise RuntimeError("tick failed")

        def on_stop() -> None:
            calls.append("stop")
            done.set()

        timer = ThreadTimer("test")
        timer.start(boom, period=0.01, on_stop=on_stop, on_error=lambda e: calls.append(f"error:{e}"))

        assert done.wait(timeout=2)
        assert calls == ["error:tick failed", "stop"]
        timer.stop()
        assert not timer.is_running

    def test_stop_from_inside_callback(self) -> None:
        stopped = threading.Event()
        timer = ThreadTimer("test")
        timer.start(lambda: timer.stop(), period=0.01, on_stop=stopped.set)
        assert stopped.wait(timeout=2)

    def test_slow_pass_keeps_fixed_grid(self) -> None:
        stamps: list[float] = []
        done = threading.Event()

        def slow() -> None:
            stamps.append(time.monotonic())
            if len(stamps) == 1:
                time.sleep(0.25)  # Overruns two 0.1s slots
            if len(stamps) == 3:
                done.set()

        timer = ThreadTimer("test")
        timer.start(slow, period=0.1)
        assert done.wait(timeout=3)
        timer.stop()

        first = stamps[0]
        # Second tick lands on the 0.3s grid point, not 0.25 + 0.1
        assert stamps[1] - first == pytest.approx(0.3, abs=0.08)
        assert stamps[2] - first == pytest.approx(0.4, abs=0.08)

    def test_rejects_double_start_and_bad_period(self) -> None:
        timer = ThreadTimer("test")
        with pytest.raises(ValueError):
            timer.start(lambda: None, period=0)
        timer.start(lambda: None, period=1, start_delay=5)
        with pytest.raises(RuntimeError):
            timer.start(lambda: None, period=1)
        timer.stop()


@pytest.fixture(scope="module")
def qt_app() -> QCoreApplication:
    return QCoreApplication.instance() or QCoreApplication([])


def _spin(ms: int) -> None:
    loop = QEventLoop()
    QTimer.singleShot(ms, loop.quit)
    loop.exec()


class TestQtTimer:
    def test_fires_in_event_loop(self, qt_app: QCoreApplication) -> None:
        ticks: list[int] = []
        stops: list[bool] = []
        timer = QtTimer("qt-test")
        timer.start(lambda: ticks.append(1), period=0.02, start_delay=0.0, on_stop=lambda: stops.append(True))
        _spin(200)
        timer.stop()

        assert len(ticks) >= 3
        assert stops == [True]
        assert not timer.is_running

    def test_error_stops_timer(self, qt_app: QCoreApplication) -> None:
        calls: list[str] = []

        def boom() -> None:
            raise RuntimeError("tick failed")

        timer = QtTimer("qt-test")
        timer.start(
            boom,
            period=0.02,
            on_stop=lambda: calls.append("stop"),
            on_error=lambda e: calls.append("error"),
        )
        _spin(150)

        assert calls == ["error", "stop"]
        assert not timer.is_running

    def test_stop_before_delay_elapses(self, qt_app: QCoreApplication) -> None:
        ticks: list[int] = []
        timer = QtTimer("qt-test")
        timer.start(lambda: ticks.append(1), period=0.01, start_delay=0.5)
        timer.stop()
        _spin(100)
        assert ticks == []
