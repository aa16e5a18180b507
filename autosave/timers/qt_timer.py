"""QTimer-driven fixed-rate timer for hosts that run a Qt event loop."""

from __future__ import annotations

from PySide6.QtCore import QObject, Qt, QTimer
from loguru import logger

from autosave.timers.base import ErrorHook, StopHook, TickCallback


class QtTimer:
    """
    Recurring timer backed by ``QTimer``.

    Ticks are delivered on the thread owning the event loop, so a Qt editor
    host can read its buffers without extra locking. A single-shot timer
    handles the start delay, then a precise repeating timer takes over.
    """

    def __init__(self, name: str = "AutoBackupTimer", parent: QObject | None = None) -> None:
        self._name = name
        self._callback: TickCallback | None = None
        self._on_stop: StopHook | None = None
        self._on_error: ErrorHook | None = None
        self._period_ms = 0
        self._running = False

        self._delay = QTimer(parent)
        self._delay.setSingleShot(True)
        self._delay.timeout.connect(self._begin)

        self._timer = QTimer(parent)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.timeout.connect(self._fire)

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_running(self) -> bool:
        return self._running

    def start(
        self,
        callback: TickCallback,
        period: float,
        start_delay: float = 0.0,
        on_stop: StopHook | None = None,
        on_error: ErrorHook | None = None,
    ) -> None:
        if period <= 0:
            raise ValueError(f"Timer period must be positive, got {period}")
        if self._running:
            raise RuntimeError(f"Timer {self._name} is already running")
        self._callback = callback
        self._on_stop = on_stop
        self._on_error = on_error
        self._period_ms = max(1, round(period * 1000))
        self._running = True
        self._delay.start(max(0, round(start_delay * 1000)))

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        self._delay.stop()
        self._timer.stop()
        if self._on_stop is not None:
            self._on_stop()

    def _begin(self) -> None:
        if not self._running:
            return
        self._timer.start(self._period_ms)
        self._fire()

    def _fire(self) -> None:
        if not self._running or self._callback is None:
            return
        try:
            self._callback()
        except Exception as e:
            logger.debug(f"Timer {self._name} callback raised: {e}")
            if self._on_error is not None:
                self._on_error(e)
            self.stop()
