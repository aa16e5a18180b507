"""Autosave settings — the configuration surface consumed by the services."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from autosave.models.document import FilterMode


@dataclass(frozen=True)
class AutoSaveSettings:
    """Immutable view of the autosave configuration.

    Built from :class:`autosave.config.Config` (``config.settings``) or directly
    by hosts and tests that do not use the JSON config file.
    """

    backup_dir: Path
    refresh_interval_sec: float = 300.0
    start_delay_sec: float = 0.01  # Keeps start() from blocking on the first pass
    backup_subdir_format: str = "%Y-%m-%d"
    instance_prefix: str = "EditorInstance"
    script_extension: str = "m"
    only_untitled: bool = False
    untitled_pattern: str = "Untitled"
    timer_name: str = "AutoBackupTimer"

    # Instance directory allocation
    max_attempts: int = 10
    min_wait_sec: float = 0.01
    max_wait_sec: float = 0.15

    # Debug
    stop_on_error: bool = False
    keyboard_on_error: bool = False
    verbose: bool = False

    @property
    def filter_mode(self) -> FilterMode:
        return FilterMode.ONLY_UNTITLED if self.only_untitled else FilterMode.ALL
