"""Backup location cache — one instance directory per process lifetime."""

from __future__ import annotations

import threading
from datetime import datetime
from pathlib import Path
from typing import Callable

from loguru import logger

from autosave.core.allocator import InstanceDirectoryAllocator


class BackupLocationCache:
    """
    Resolves where this process writes its backups.

    Directory structure:
      {backup_dir}/{date}/{prefix}{N}/
        ├── Untitled.m
        └── Untitled2.m

    The first ``resolve()`` allocates ``{prefix}{N}``; later calls reuse it.
    If the folder disappears while cached it is recreated under the same
    name instead of allocating a new number.
    """

    def __init__(
        self,
        backup_dir: Path,
        allocator: InstanceDirectoryAllocator,
        subdir_format: str = "%Y-%m-%d",
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._backup_dir = backup_dir
        self._allocator = allocator
        self._subdir_format = subdir_format
        self._clock = clock
        self._location: Path | None = None
        self._lock = threading.Lock()

    @property
    def cached(self) -> Path | None:
        return self._location

    def backup_root(self) -> Path:
        """Today's date partition under the backup dir."""
        return self._backup_dir / self._clock().strftime(self._subdir_format)

    def resolve(self) -> Path:
        with self._lock:
            if self._location is None:
                root = self.backup_root()
                root.mkdir(parents=True, exist_ok=True)
                self._location = self._allocator.allocate(root)
                logger.info(f"Backing up to {self._location}")
            elif not self._location.is_dir():
                logger.warning(f"Backup directory vanished, recreating {self._location}")
                self._location.mkdir(parents=True, exist_ok=True)
            return self._location

    def invalidate(self) -> None:
        """Forget the cached directory; the next resolve() allocates again."""
        with self._lock:
            self._location = None
