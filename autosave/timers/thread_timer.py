"""Fixed-rate timer on a background daemon thread."""

from __future__ import annotations

import math
import threading
import time

from loguru import logger

from autosave.timers.base import ErrorHook, StopHook, TickCallback


class ThreadTimer:
    """
    Fires ``callback`` every ``period`` seconds after ``start_delay``.

    Fire times sit on a fixed grid anchored at the first tick. A pass that
    overruns its period does not shift the grid; the slots it covered are
    skipped and the next tick lands on the following grid point.
    """

    def __init__(self, name: str = "AutoBackupTimer") -> None:
        self._name = name
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

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
        with self._lock:
            if self.is_running:
                raise RuntimeError(f"Timer {self._name} is already running")
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(callback, period, max(0.0, start_delay), on_stop, on_error, self._stop_event),
                name=self._name,
                daemon=True,
            )
            self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def _run(
        self,
        callback: TickCallback,
        period: float,
        start_delay: float,
        on_stop: StopHook | None,
        on_error: ErrorHook | None,
        stop_event: threading.Event,
    ) -> None:
        first = time.monotonic() + start_delay
        next_fire = first
        try:
            while not stop_event.wait(max(0.0, next_fire - time.monotonic())):
                try:
                    callback()
                except Exception as e:
                    logger.debug(f"Timer {self._name} callback raised: {e}")
                    if on_error is not None:
                        on_error(e)
                    break
                elapsed = time.monotonic() - first
                next_fire = max(
                    next_fire + period,
                    first + (math.floor(elapsed / period) + 1) * period,
                )
        finally:
            stop_event.set()
            if on_stop is not None:
                on_stop()
