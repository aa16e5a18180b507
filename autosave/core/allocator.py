"""Instance directory allocator — claims a unique numbered folder per process."""

from __future__ import annotations

import random
import re
import time
from pathlib import Path
from typing import Callable

from loguru import logger

from autosave.errors import AllocationExhausted


class InstanceDirectoryAllocator:
    """
    Claims ``<root>/<prefix><N>`` for the calling process.

    Several editor processes may start backing up at the same moment against
    the same date folder. There is no lock file: each attempt sleeps a random
    jitter, rescans the root for the highest ``N`` and creates ``N + 1`` with a
    fail-if-exists ``mkdir``. Losing the race just means trying again, up to
    ``max_attempts`` times.

    Usage::

        allocator = InstanceDirectoryAllocator("EditorInstance")
        allocator.allocate(Path("backup/2024-05-01"))  # → .../EditorInstance3
    """

    def __init__(
        self,
        prefix: str,
        max_attempts: int = 10,
        min_wait: float = 0.01,
        max_wait: float = 0.15,
        sleep: Callable[[float], None] = time.sleep,
        rng: random.Random | None = None,
    ) -> None:
        if not prefix:
            raise ValueError("Instance prefix must not be empty")
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if min_wait < 0 or max_wait < min_wait:
            raise ValueError(f"Invalid jitter window: {min_wait}..{max_wait}")
        self._prefix = prefix
        self._pattern = re.compile(rf"{re.escape(prefix)}(\d+)")
        self._max_attempts = max_attempts
        self._min_wait = min_wait
        self._max_wait = max_wait
        self._sleep = sleep
        self._rng = rng or random.Random()

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def existing_indices(self, root: Path) -> list[int]:
        """Instance numbers already taken under root (malformed names ignored).

        Any entry counts, not only directories: a file squatting on a name
        blocks mkdir just the same.
        """
        if not root.is_dir():
            return []
        indices: list[int] = []
        for entry in root.iterdir():
            match = self._pattern.fullmatch(entry.name)
            if match:
                indices.append(int(match.group(1)))
        return sorted(indices)

    def next_index(self, root: Path) -> int:
        indices = self.existing_indices(root)
        return max(indices) + 1 if indices else 1

    def allocate(self, root: Path) -> Path:
        """Create and return a fresh instance directory under root."""
        for attempt in range(1, self._max_attempts + 1):
            candidate = self._try_create(root)
            if candidate is not None:
                return candidate
            logger.debug(f"Instance directory taken, retrying ({attempt}/{self._max_attempts})")

        contents = sorted(p.name for p in root.iterdir()) if root.is_dir() else []
        logger.error(f"Contents of {root}: {contents}")
        raise AllocationExhausted(root, contents, self._max_attempts)

    def _try_create(self, root: Path) -> Path | None:
        # Desynchronize processes that woke up on the same timer tick
        self._sleep(self._rng.uniform(self._min_wait, self._max_wait))

        candidate = root / f"{self._prefix}{self.next_index(root)}"
        try:
            candidate.mkdir()
        except FileExistsError:
            return None
        logger.debug(f"Created backup directory at {candidate}")
        return candidate
