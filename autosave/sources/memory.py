"""In-memory document source — hosts push buffer state, backups pull snapshots."""

from __future__ import annotations

import threading

from autosave.errors import DocumentSourceUnavailable
from autosave.models.document import DocumentSnapshot


class InMemoryDocumentSource:
    """
    Thread-safe registry of open editor buffers.

    The host editor calls ``update()`` whenever a buffer changes and
    ``mark_saved()`` / ``close()`` as the user saves or closes it. The
    scheduler thread reads immutable snapshots through ``list_documents()``.
    """

    def __init__(self) -> None:
        self._documents: dict[str, DocumentSnapshot] = {}
        self._available = True
        self._lock = threading.Lock()

    def update(self, path: str, text: str | bytes, modified: bool = True) -> None:
        with self._lock:
            self._documents[path] = DocumentSnapshot(path=path, text=text, modified=modified)

    def mark_saved(self, path: str) -> None:
        with self._lock:
            doc = self._documents.get(path)
            if doc is not None:
                self._documents[path] = DocumentSnapshot(path=doc.path, text=doc.text, modified=False)

    def close(self, path: str) -> None:
        with self._lock:
            self._documents.pop(path, None)

    def set_available(self, available: bool) -> None:
        self._available = available

    def is_available(self) -> bool:
        return self._available

    def list_documents(self) -> list[DocumentSnapshot]:
        if not self._available:
            raise DocumentSourceUnavailable("Editor is not available")
        with self._lock:
            return list(self._documents.values())
