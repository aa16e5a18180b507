"""Recurring-task facility protocol."""

from __future__ import annotations

from typing import Callable, Protocol

TickCallback = Callable[[], None]
StopHook = Callable[[], None]
ErrorHook = Callable[[BaseException], None]


class RecurringTimer(Protocol):
    """
    Fixed-rate timer.

    ``on_error`` runs when the callback raises; the timer then stops.
    ``on_stop`` runs once whenever the timer stops, for any reason.
    """

    @property
    def name(self) -> str: ...

    @property
    def is_running(self) -> bool: ...

    def start(
        self,
        callback: TickCallback,
        period: float,
        start_delay: float = 0.0,
        on_stop: StopHook | None = None,
        on_error: ErrorHook | None = None,
    ) -> None: ...

    def stop(self) -> None: ...
