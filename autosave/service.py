"""Service entry points — wire the components and run one autosave per timer name."""

from __future__ import annotations

import threading

from loguru import logger
from PySide6.QtCore import QCoreApplication

from autosave.config import Config, get_config
from autosave.context import AutoSaveContext
from autosave.core.allocator import InstanceDirectoryAllocator
from autosave.core.location import BackupLocationCache
from autosave.core.scheduler import AutoSaveScheduler
from autosave.core.writer import BackupWriter
from autosave.logger import setup_logger
from autosave.sources.base import DocumentSource
from autosave.timers.base import RecurringTimer
from autosave.timers.qt_timer import QtTimer
from autosave.timers.thread_timer import ThreadTimer

_running: dict[str, AutoSaveContext] = {}
_running_lock = threading.Lock()


def default_timer(name: str) -> RecurringTimer:
    """QTimer inside a Qt application, a background thread otherwise."""
    if QCoreApplication.instance() is not None:
        return QtTimer(name)
    return ThreadTimer(name)


def create_context(
    source: DocumentSource,
    config: Config | None = None,
    timer: RecurringTimer | None = None,
    configure_logging: bool = True,
) -> AutoSaveContext:
    """Wire all services and return an AutoSaveContext."""
    config = config or get_config()
    settings = config.settings

    # Logger
    if configure_logging:
        setup_logger(config.data_dir / "logs", verbose=settings.verbose)

    allocator = InstanceDirectoryAllocator(
        settings.instance_prefix,
        max_attempts=settings.max_attempts,
        min_wait=settings.min_wait_sec,
        max_wait=settings.max_wait_sec,
    )
    location = BackupLocationCache(settings.backup_dir, allocator, settings.backup_subdir_format)
    writer = BackupWriter(settings.script_extension, stop_on_error=settings.stop_on_error)
    scheduler = AutoSaveScheduler(
        source,
        location,
        writer,
        settings,
        timer or default_timer(settings.timer_name),
    )

    return AutoSaveContext(
        config=config,
        settings=settings,
        source=source,
        allocator=allocator,
        location=location,
        writer=writer,
        scheduler=scheduler,
    )


def start_autosave(
    source: DocumentSource,
    config: Config | None = None,
    timer: RecurringTimer | None = None,
    configure_logging: bool = True,
) -> AutoSaveContext:
    """
    Start backing up ``source`` in the background.

    Any autosave already running under the same timer name is stopped
    first, so calling this again (e.g. from a host's startup hook) never
    leaves two timers writing side by side.
    """
    ctx = create_context(source, config, timer, configure_logging)
    name = ctx.scheduler.name
    with _running_lock:
        previous = _running.pop(name, None)
        if previous is not None:
            logger.info(f"Replacing running autosave {name}")
            previous.scheduler.stop()
        ctx.scheduler.start()
        _running[name] = ctx
    return ctx


def stop_autosave(name: str | None = None) -> int:
    """Stop the named autosave, or all of them. Returns how many were stopped."""
    with _running_lock:
        names = list(_running) if name is None else [name]
        stopped = 0
        for key in names:
            ctx = _running.pop(key, None)
            if ctx is not None:
                ctx.scheduler.stop()
                stopped += 1
    return stopped


def running_schedulers() -> dict[str, AutoSaveScheduler]:
    with _running_lock:
        return {name: ctx.scheduler for name, ctx in _running.items() if ctx.scheduler.is_running}
