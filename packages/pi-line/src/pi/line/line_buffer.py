"""Growable byte buffer for line editing."""

from __future__ import annotations


class LineBuffer:
    """Owned, mutable byte sequence addressed by byte offsets.

    No UTF-8 validation is done here; callers keep offsets on codepoint
    boundaries to keep the text well formed.
    """

    def __init__(self, data: bytes = b"") -> None:
        self._data = bytearray(data)

    def assign(self, data: bytes) -> None:
        """Replace the whole content with *data*."""
        self._data[:] = data

    def insert(self, offset: int, data: bytes) -> None:
        self._check_offset(offset)
        self._data[offset:offset] = data

    def insert_byte(self, offset: int, byte: int) -> None:
        """Insert a single raw byte (not a decoded character)."""
        self._check_offset(offset)
        self._data.insert(offset, byte)

    def erase(self, offset: int, length: int) -> None:
        self._check_offset(offset)
        if length < 0 or offset + length > len(self._data):
            raise IndexError(
                f"erase range {offset}+{length} outside buffer of {len(self._data)} bytes"
            )
        del self._data[offset : offset + length]

    def append(self, data: bytes) -> None:
        self._data.extend(data)

    def prepend(self, data: bytes) -> None:
        self._data[0:0] = data

    def slice(self, start: int, end: int) -> bytes:
        return bytes(self._data[start:end])

    def to_bytes(self) -> bytes:
        return bytes(self._data)

    def _check_offset(self, offset: int) -> None:
        if not 0 <= offset <= len(self._data):
            raise IndexError(f"offset {offset} outside buffer of {len(self._data)} bytes")

    def __len__(self) -> int:
        return len(self._data)

    def __bool__(self) -> bool:
        return bool(self._data)

    def __repr__(self) -> str:
        return f"LineBuffer({bytes(self._data)!r})"
