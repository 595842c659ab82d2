"""Terminal abstraction for byte-at-a-time keyboard input.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal`` that
switches the controlling terminal into non-canonical, no-echo mode and reads
stdin one byte at a time.
"""

from __future__ import annotations

import errno
import logging
import os
import sys
import termios
from typing import Protocol

logger = logging.getLogger(__name__)

EOT = 0x04


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface the line editor needs from a keyboard and display."""

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def read_byte(self) -> int: ...

    def write(self, data: bytes) -> None: ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Terminal backed by the process's stdin/stdout file descriptors.

    ``start`` saves the current termios attributes and clears ICANON, ECHO and
    ISIG so that every key, C-c included, arrives as a byte. ``stop`` puts the
    saved attributes back and is safe to call more than once.
    """

    def __init__(self, input_fd: int | None = None, output_fd: int | None = None) -> None:
        self._input_fd = sys.stdin.fileno() if input_fd is None else input_fd
        self._output_fd = sys.stdout.fileno() if output_fd is None else output_fd
        self._original_termios: list | None = None
        self._is_tty = os.isatty(self._input_fd)
        self._eof_seen = False

    # -- start / stop -------------------------------------------------------

    def start(self) -> None:
        """Enter raw-ish mode. A no-op when stdin is not a terminal."""
        if not self._is_tty or self._original_termios is not None:
            return
        self._original_termios = termios.tcgetattr(self._input_fd)

        attrs = termios.tcgetattr(self._input_fd)
        attrs[3] &= ~(termios.ICANON | termios.ECHO | termios.ISIG)  # c_lflag
        attrs[6][termios.VMIN] = 1
        attrs[6][termios.VTIME] = 0
        termios.tcsetattr(self._input_fd, termios.TCSANOW, attrs)
        logger.debug("terminal fd %d switched to raw mode", self._input_fd)

    def stop(self) -> None:
        """Restore the terminal attributes saved by :meth:`start`."""
        if self._original_termios is None:
            return
        termios.tcsetattr(self._input_fd, termios.TCSANOW, self._original_termios)
        self._original_termios = None
        logger.debug("terminal fd %d restored", self._input_fd)

    # -- I/O ----------------------------------------------------------------

    def read_byte(self) -> int:
        """Block until one byte is available and return it.

        Interrupted and empty reads on a terminal are retried. When stdin is a
        pipe or file that has run dry, the first read returns EOT (C-d) and
        any later read raises :class:`EOFError`.
        """
        while True:
            try:
                data = os.read(self._input_fd, 1)
            except InterruptedError:
                continue
            except OSError as e:
                if e.errno == errno.EAGAIN:
                    continue
                raise
            if data:
                return data[0]
            if not self._is_tty:
                if self._eof_seen:
                    raise EOFError("end of input stream")
                self._eof_seen = True
                return EOT

    def write(self, data: bytes) -> None:
        """Write all of *data* to the output descriptor."""
        view = memoryview(data)
        while view:
            try:
                written = os.write(self._output_fd, view)
            except InterruptedError:
                continue
            view = view[written:]
