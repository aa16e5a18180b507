"""Autosave context — per-process service container."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from autosave.config import Config
    from autosave.core.allocator import InstanceDirectoryAllocator
    from autosave.core.location import BackupLocationCache
    from autosave.core.scheduler import AutoSaveScheduler
    from autosave.core.writer import BackupWriter
    from autosave.models.settings import AutoSaveSettings
    from autosave.sources.base import DocumentSource


@dataclass
class AutoSaveContext:
    """
    Everything one process needs to keep its buffers backed up.

    The location cache is the process-wide backup state: it holds the
    instance directory claimed on the first pass for the rest of the run.
    """

    config: Config
    settings: AutoSaveSettings
    source: DocumentSource

    allocator: InstanceDirectoryAllocator
    location: BackupLocationCache
    writer: BackupWriter
    scheduler: AutoSaveScheduler
