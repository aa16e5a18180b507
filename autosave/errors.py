"""Exception taxonomy for the autosave service."""

from __future__ import annotations

from pathlib import Path


class AutoSaveError(RuntimeError):
    """Base class for autosave failures."""


class AllocationExhausted(AutoSaveError):
    """No instance directory could be claimed within the retry budget."""

    def __init__(self, root: Path, contents: list[str], attempts: int) -> None:
        self.root = root
        self.contents = contents
        self.attempts = attempts
        listing = ", ".join(contents) if contents else "<empty>"
        super().__init__(
            f"Could not create a new instance directory at {root} "
            f"after {attempts} attempts (contents: {listing})"
        )


class WriteFailure(AutoSaveError):
    """A single document could not be written to the backup location."""

    def __init__(self, document: str, path: Path, reason: str) -> None:
        self.document = document
        self.path = path
        self.reason = reason
        super().__init__(f"Problem writing {document} to {path}: {reason}")


class DocumentSourceUnavailable(AutoSaveError):
    """The host editor's document listing cannot be reached right now."""


class CleanupFailure(AutoSaveError):
    """Force-closing a dangling file handle failed."""
