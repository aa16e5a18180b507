"""Backup writer — persists document snapshots, one plain-text file each."""

from __future__ import annotations

from pathlib import Path
from typing import IO, Iterable

from loguru import logger

from autosave.errors import CleanupFailure, WriteFailure
from autosave.models.backup_result import BackupResult
from autosave.models.document import DocumentSnapshot, FilterMode


class BackupWriter:
    """Best-effort batch writer: one bad document never stops the rest."""

    def __init__(self, script_extension: str = "m", stop_on_error: bool = False) -> None:
        self._extension = script_extension.lstrip(".")
        self._stop_on_error = stop_on_error
        self._open_handle: IO[str] | None = None

    @property
    def open_handle(self) -> IO[str] | None:
        """Handle of the file currently being written, if any."""
        return self._open_handle

    def destination(self, target_dir: Path, snapshot: DocumentSnapshot) -> Path:
        return target_dir / f"{snapshot.base_name}.{self._extension}"

    def write_all(
        self,
        target_dir: Path,
        snapshots: Iterable[DocumentSnapshot],
        filter_mode: FilterMode = FilterMode.ALL,
    ) -> BackupResult:
        """Write every snapshot into target_dir, collecting per-file failures."""
        result = BackupResult(target_dir=target_dir)

        for snapshot in snapshots:
            # Saved-to-disk documents carry a folder; untitled buffers do not
            if filter_mode == FilterMode.ONLY_UNTITLED and not snapshot.is_untitled:
                logger.debug(f"Skipping {snapshot.path} (not untitled)")
                result.skipped.append(snapshot.path)
                continue

            filename = self.destination(target_dir, snapshot)
            try:
                self._write_one(filename, snapshot)
            except Exception as e:
                failure = WriteFailure(snapshot.path, filename, str(e))
                logger.error(f"Problem writing file {filename}: {e}")
                result.failures.append(failure)
                if self._stop_on_error:
                    raise failure from e
                continue
            result.written.append(filename)

        return result

    def _write_one(self, filename: Path, snapshot: DocumentSnapshot) -> None:
        logger.debug(f"Saving {filename}...")
        text = snapshot.read_text()  # Decode before truncating the previous backup
        with open(filename, "w", encoding="utf-8") as f:
            self._open_handle = f
            try:
                f.write(text)
            finally:
                self._open_handle = None
        logger.debug(f"Saved {filename}")

    def close_dangling(self) -> bool:
        """Force-close a handle left open by an interrupted write.

        Returns True when a handle was closed. Never raises.
        """
        handle, self._open_handle = self._open_handle, None
        if handle is None:
            return False
        try:
            handle.close()
        except (OSError, ValueError) as e:
            logger.error(f"Error cleaning up: {CleanupFailure(str(e))}")
            return False
        logger.debug(f"Closed dangling handle {getattr(handle, 'name', handle)}")
        return True
