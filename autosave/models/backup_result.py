"""Backup pass result model."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from autosave.errors import WriteFailure


@dataclass
class BackupResult:
    """Outcome of writing one batch of snapshots."""

    target_dir: Path
    written: list[Path] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)  # Document paths filtered out
    failures: list[WriteFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def count(self) -> int:
        return len(self.written)
