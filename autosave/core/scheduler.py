"""Autosave scheduler — runs backup passes on a fixed-rate timer."""

from __future__ import annotations

import re
from enum import StrEnum
from typing import TYPE_CHECKING, Callable, Sequence

from loguru import logger

from autosave.errors import DocumentSourceUnavailable
from autosave.models.document import DocumentSnapshot, FilterMode

if TYPE_CHECKING:
    from autosave.core.location import BackupLocationCache
    from autosave.core.writer import BackupWriter
    from autosave.models.backup_result import BackupResult
    from autosave.models.settings import AutoSaveSettings
    from autosave.sources.base import DocumentSource
    from autosave.timers.base import RecurringTimer


class SchedulerState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"
    FAULTED = "faulted"


def select_pending(
    documents: Sequence[DocumentSnapshot],
    filter_mode: FilterMode,
    untitled_pattern: str = "Untitled",
) -> list[DocumentSnapshot]:
    """Modified documents worth backing up under the given filter mode."""
    pending = [doc for doc in documents if doc.modified]
    if filter_mode == FilterMode.ONLY_UNTITLED:
        pattern = re.compile(untitled_pattern)
        pending = [doc for doc in pending if pattern.search(doc.path)]
    return pending


class AutoSaveScheduler:
    """
    Drives periodic backup passes.

    Each tick pulls modified documents from the source, resolves this
    process's backup folder and hands the snapshots to the writer. Errors
    stop at the tick boundary unless ``stop_on_error`` is set, in which case
    they reach the timer, which stops and reports through its error hook.

    Ticks are not serialized: if a pass outlasts the period, the timer may
    start the next one before it finishes.
    """

    def __init__(
        self,
        source: DocumentSource,
        location: BackupLocationCache,
        writer: BackupWriter,
        settings: AutoSaveSettings,
        timer: RecurringTimer,
        pause: Callable[[], None] = breakpoint,
    ) -> None:
        self._source = source
        self._location = location
        self._writer = writer
        self._settings = settings
        self._timer = timer
        self._pause = pause
        self._state = SchedulerState.IDLE
        self._tick_count = 0
        self._last_result: BackupResult | None = None

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == SchedulerState.RUNNING

    @property
    def settings(self) -> AutoSaveSettings:
        return self._settings

    @property
    def name(self) -> str:
        return self._timer.name

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def last_result(self) -> BackupResult | None:
        return self._last_result

    # ── Lifecycle ──

    def start(self, interval: float | None = None, initial_delay: float | None = None) -> None:
        if self._state == SchedulerState.RUNNING:
            raise RuntimeError(f"Scheduler {self.name} is already running")
        period = self._settings.refresh_interval_sec if interval is None else interval
        delay = self._settings.start_delay_sec if initial_delay is None else initial_delay

        self._state = SchedulerState.RUNNING
        try:
            self._timer.start(
                self.tick,
                period,
                start_delay=delay,
                on_stop=self._on_timer_stop,
                on_error=self._on_timer_error,
            )
        except Exception:
            self._state = SchedulerState.IDLE
            raise
        logger.info(f"Autosave {self.name} started: every {period}s after {delay}s")

    def stop(self) -> None:
        if self._state != SchedulerState.RUNNING:
            return
        self._timer.stop()
        # Timers that report asynchronously may not have called back yet
        if self._state == SchedulerState.RUNNING:
            self._on_timer_stop()

    def cleanup(self) -> None:
        """Release anything a failed pass left behind."""
        try:
            self._writer.close_dangling()
        except Exception as e:
            logger.error(f"Error cleaning up: {e}")

    def _on_timer_stop(self) -> None:
        self.cleanup()
        if self._state == SchedulerState.RUNNING:
            self._state = SchedulerState.STOPPED
            logger.info(f"Autosave {self.name} stopped")

    def _on_timer_error(self, error: BaseException) -> None:
        self.cleanup()
        self._state = SchedulerState.FAULTED
        logger.error(f"Autosave {self.name} halted after error: {error}")

    # ── Backup pass ──

    def tick(self) -> None:
        """Run one backup pass, isolating its errors from future ticks."""
        self._tick_count += 1
        try:
            self._last_result = self.backup_pass()
        except Exception as e:
            logger.error(f"Error during backup pass: {e}")
            if self._settings.keyboard_on_error:
                logger.warning("Pausing after error; continue the debugger to keep running")
                self._pause()
            if self._settings.stop_on_error:
                raise

    def backup_pass(self) -> BackupResult | None:
        """Back up modified documents now; None when there was nothing to do."""
        if not self._source.is_available():
            logger.debug("Document source unavailable, skipping pass")
            return None
        try:
            documents = self._source.list_documents()
        except DocumentSourceUnavailable as e:
            logger.debug(f"Document source unavailable, skipping pass: {e}")
            return None

        filter_mode = self._settings.filter_mode
        pending = select_pending(documents, filter_mode, self._settings.untitled_pattern)
        if not pending:
            return None

        target = self._location.resolve()
        result = self._writer.write_all(target, pending, filter_mode)
        if result.failures:
            logger.warning(f"Backed up {result.count} document(s), {len(result.failures)} failed")
        else:
            logger.debug(f"Backed up {result.count} document(s) to {target}")
        return result
