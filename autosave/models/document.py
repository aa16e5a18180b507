"""Document snapshot models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import PurePath


class FilterMode(StrEnum):
    """Which modified documents a backup pass considers."""

    ALL = "all"
    ONLY_UNTITLED = "only_untitled"


@dataclass(frozen=True)
class DocumentSnapshot:
    """Point-in-time copy of one editor buffer."""

    path: str  # Editor filename, e.g. "Untitled3" or "/work/analysis.m"
    text: str | bytes  # Hosts may hand over the raw buffer bytes
    modified: bool = True

    @property
    def content(self) -> bytes:
        if isinstance(self.text, bytes):
            return self.text
        return self.text.encode("utf-8")

    def read_text(self) -> str:
        """Buffer content as text; raw bytes are decoded as UTF-8."""
        if isinstance(self.text, bytes):
            return self.text.decode("utf-8")
        return self.text

    @property
    def base_name(self) -> str:
        return PurePath(self.path).stem

    @property
    def directory(self) -> str:
        parent = str(PurePath(self.path).parent)
        return "" if parent == "." else parent

    @property
    def is_untitled(self) -> bool:
        """True for buffers that were never saved to a real folder."""
        return not self.directory
