"""Document source protocol — the host editor's view of open buffers."""

from __future__ import annotations

from typing import Protocol, Sequence

from autosave.models.document import DocumentSnapshot


class DocumentSource(Protocol):
    """Read-only listing of the editor's open documents."""

    def is_available(self) -> bool: ...

    def list_documents(self) -> Sequence[DocumentSnapshot]: ...
