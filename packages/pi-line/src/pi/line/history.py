"""Bounded history of accepted lines with an optional on-disk log."""

from __future__ import annotations

import logging
import os
from collections import deque
from pathlib import Path

logger = logging.getLogger(__name__)


class HistoryStore:
    """Ordered, capacity-bounded sequence of immutable past lines.

    Pushing past capacity drops the oldest entry. Index ``size`` is the
    draft slot and has no stored entry.
    """

    def __init__(self, capacity: int = 100) -> None:
        if capacity < 0:
            raise ValueError(f"history capacity must be >= 0, got {capacity}")
        self._capacity = capacity
        self._entries: deque[bytes] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def size(self) -> int:
        return len(self._entries)

    def push(self, line: bytes) -> None:
        """Append an immutable copy of *line*, evicting the oldest on overflow."""
        self._entries.append(bytes(line))

    def entry(self, index: int) -> bytes:
        """Return the entry at *index* (0 is the oldest)."""
        if not 0 <= index < len(self._entries):
            raise IndexError(f"history index {index} out of range [0, {len(self._entries)})")
        return self._entries[index]

    def entries(self) -> list[bytes]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    # -- persistence ---------------------------------------------------------

    def load(self, path: str | os.PathLike[str]) -> int:
        """Push every line of the file at *path*, oldest first.

        Raises :class:`OSError` if the file cannot be read. Returns the
        number of lines read (some may already have been evicted).
        """
        data = Path(path).read_bytes()
        if not data:
            return 0
        if data.endswith(b"\n"):
            data = data[:-1]
        lines = data.split(b"\n")
        for line in lines:
            self.push(line)
        logger.debug("loaded %d history lines from %s", len(lines), path)
        return len(lines)

    def write_all(self, path: str | os.PathLike[str]) -> None:
        """Rewrite the file at *path* with the full history, one entry per line."""
        Path(path).write_bytes(b"".join(line + b"\n" for line in self._entries))

    def __len__(self) -> int:
        return len(self._entries)
