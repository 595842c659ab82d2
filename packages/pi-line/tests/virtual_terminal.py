"""Virtual terminal for testing -- implements the Terminal protocol in-memory.

This module provides a ``VirtualTerminal`` class that satisfies the
``pi.line.terminal.Terminal`` protocol without performing any real I/O.
Input is a scripted byte string; all output is captured for assertions.
"""

from __future__ import annotations


class VirtualTerminal:
    """In-memory terminal that replays scripted keys and records writes.

    Parameters
    ----------
    keys:
        Bytes handed out one at a time by ``read_byte``. Running out raises
        ``EOFError`` so a test that forgets to accept the line fails loudly.
    """

    def __init__(self, keys: bytes = b"") -> None:
        self._input = bytearray(keys)
        self._buffer: list[bytes] = []
        self.started = False
        self.start_count = 0
        self.stop_count = 0

    # -- Terminal protocol: lifecycle ---------------------------------------

    def start(self) -> None:
        self.started = True
        self.start_count += 1

    def stop(self) -> None:
        self.started = False
        self.stop_count += 1

    # -- Terminal protocol: I/O ---------------------------------------------

    def read_byte(self) -> int:
        if not self._input:
            raise EOFError("virtual terminal ran out of scripted input")
        return self._input.pop(0)

    def write(self, data: bytes) -> None:
        """Append *data* to the internal buffer."""
        self._buffer.append(bytes(data))

    # -- Test helpers -------------------------------------------------------

    def feed(self, keys: bytes) -> None:
        """Queue more scripted input."""
        self._input += keys

    @property
    def remaining(self) -> bytes:
        return bytes(self._input)

    @property
    def output(self) -> bytes:
        """Return everything written to the terminal as a single byte string."""
        return b"".join(self._buffer)

    def clear_buffer(self) -> None:
        """Discard all recorded output."""
        self._buffer.clear()
