"""Editor autosave — periodic crash-safe backups of unsaved editor buffers.

Typical use from a host's startup hook::

    from autosave import InMemoryDocumentSource, start_autosave

    source = InMemoryDocumentSource()
    start_autosave(source)
    source.update("Untitled", "x = 1")

Backups land in ``<backup_dir>/<YYYY-MM-DD>/<instance_prefix><N>/``, one
numbered folder per running editor process.
"""

from autosave.config import Config, get_config, reset_config
from autosave.core.allocator import InstanceDirectoryAllocator
from autosave.core.location import BackupLocationCache
from autosave.core.scheduler import AutoSaveScheduler, SchedulerState
from autosave.core.writer import BackupWriter
from autosave.errors import (
    AllocationExhausted,
    AutoSaveError,
    CleanupFailure,
    DocumentSourceUnavailable,
    WriteFailure,
)
from autosave.models.document import DocumentSnapshot, FilterMode
from autosave.models.settings import AutoSaveSettings
from autosave.service import create_context, running_schedulers, start_autosave, stop_autosave
from autosave.sources.memory import InMemoryDocumentSource

__all__ = [
    "AllocationExhausted",
    "AutoSaveError",
    "AutoSaveScheduler",
    "AutoSaveSettings",
    "BackupLocationCache",
    "BackupWriter",
    "CleanupFailure",
    "Config",
    "DocumentSnapshot",
    "DocumentSourceUnavailable",
    "FilterMode",
    "InMemoryDocumentSource",
    "InstanceDirectoryAllocator",
    "SchedulerState",
    "WriteFailure",
    "create_context",
    "get_config",
    "reset_config",
    "running_schedulers",
    "start_autosave",
    "stop_autosave",
]
