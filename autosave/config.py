"""Autosave configuration — read from a JSON file, merged over built-in defaults."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from loguru import logger

from autosave.models.settings import AutoSaveSettings

_instance: "Config | None" = None

# Default config/data directory
_DEFAULT_DATA_DIR = Path.home() / "Documents" / "EditorAutoSave"


def get_config() -> Config:
    """Module-level factory — single global Config instance."""
    global _instance
    if _instance is None:
        _instance = Config()
    return _instance


def reset_config() -> None:
    """Reset the global config instance (for testing)."""
    global _instance
    _instance = None


class Config:
    """
    Read-only autosave configuration.

    Values come from ``<config_dir>/config.json`` layered over ``_DEFAULTS``,
    then over any ``overrides`` the host passes in code. The file is never
    written back; hosts edit it by hand or ship their own.
    """

    _DEFAULTS: dict[str, Any] = {
        "refresh_interval_sec": 300,
        "start_delay_sec": 0.01,
        "backup_dir": "",
        "backup_subdir_format": "%Y-%m-%d",
        "instance_prefix": "EditorInstance",
        "script_extension": "m",
        "only_untitled": False,
        "untitled_pattern": "Untitled",
        "timer_name": "AutoBackupTimer",
        # Instance directory allocation
        "allocation": {
            "max_attempts": 10,
            "min_wait_sec": 0.01,
            "max_wait_sec": 0.15,
        },
        # Debug
        "debug": {
            "stop_on_error": False,  # Rethrow pass errors, halting the timer
            "keyboard_on_error": False,  # Drop into the debugger on pass errors
            "verbose_prints": False,
        },
    }

    def __init__(self, config_dir: Path | None = None, overrides: dict[str, Any] | None = None) -> None:
        self._dir = config_dir or _DEFAULT_DATA_DIR
        self._path = self._dir / "config.json"
        self._data: dict[str, Any] = json.loads(json.dumps(self._DEFAULTS))  # deep copy defaults
        self._load()
        if overrides:
            self._deep_merge(self._data, overrides)

    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            with open(self._path, encoding="utf-8") as f:
                user_data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Failed to load config, using defaults: {e}")
            return
        if not isinstance(user_data, dict):
            logger.warning(f"Ignoring {self._path}: expected a JSON object")
            return
        self._deep_merge(self._data, user_data)

    def _deep_merge(self, base: dict, override: dict) -> None:
        for key, value in override.items():
            if isinstance(base.get(key), dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a value by dotted path, e.g. ``"debug.stop_on_error"``."""
        node = self._data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    # ── Typed properties ──

    @property
    def data_dir(self) -> Path:
        return self._dir

    @property
    def config_path(self) -> Path:
        return self._path

    @property
    def backup_dir(self) -> Path:
        raw = self._data.get("backup_dir", "")
        return Path(raw) if raw else self._dir / "backup"

    @property
    def refresh_interval_sec(self) -> float:
        return float(self._data.get("refresh_interval_sec", 300))

    @property
    def only_untitled(self) -> bool:
        return bool(self._data.get("only_untitled", False))

    @property
    def verbose(self) -> bool:
        return bool(self.get("debug.verbose_prints", False))

    @property
    def timer_name(self) -> str:
        return self._data.get("timer_name", "AutoBackupTimer")

    @property
    def settings(self) -> AutoSaveSettings:
        """Snapshot of the current values as an immutable settings struct."""
        return AutoSaveSettings(
            backup_dir=self.backup_dir,
            refresh_interval_sec=self.refresh_interval_sec,
            start_delay_sec=float(self.get("start_delay_sec", 0.01)),
            backup_subdir_format=self.get("backup_subdir_format", "%Y-%m-%d"),
            instance_prefix=self.get("instance_prefix", "EditorInstance"),
            script_extension=self.get("script_extension", "m"),
            only_untitled=self.only_untitled,
            untitled_pattern=self.get("untitled_pattern", "Untitled"),
            timer_name=self.timer_name,
            max_attempts=int(self.get("allocation.max_attempts", 10)),
            min_wait_sec=float(self.get("allocation.min_wait_sec", 0.01)),
            max_wait_sec=float(self.get("allocation.max_wait_sec", 0.15)),
            stop_on_error=bool(self.get("debug.stop_on_error", False)),
            keyboard_on_error=bool(self.get("debug.keyboard_on_error", False)),
            verbose=self.verbose,
        )
