"""Edit session: the read loop and every editing command.

An :class:`EditSession` owns the draft buffer and the clipboard and holds
shared references to a :class:`HistoryStore` and a
:class:`KeyBindingMatcher`. Each ``read_line`` call renders the line, reads
one key (one or more bytes) through the matcher and dispatches the bound
command until a command accepts or aborts.

The text on screen is either the draft or a read-only view of a history
entry. Commands that change text first copy the viewed entry into the draft,
so stored history is never edited in place.
"""

from __future__ import annotations

import enum
import logging
import os
import string
from contextlib import contextmanager
from typing import Callable, Iterator

from pi.line.config import LineConfig
from pi.line.history import HistoryStore
from pi.line.keybindings import (
    LINE_COMMANDS,
    KeyBinding,
    KeyBindingMatcher,
    LineCommand,
    MatchState,
)
from pi.line.line_buffer import LineBuffer
from pi.line.render import RenderEngine, is_continuation_byte, utf8_sequence_length
from pi.line.terminal import Terminal

logger = logging.getLogger(__name__)

BELL = b"\x07"

_WORD_BYTES = frozenset((string.ascii_letters + string.digits).encode("ascii"))


class Signal(enum.IntEnum):
    """What a command tells the read loop to do next."""

    REJECTED = -1
    CONTINUE = 0
    ACCEPT = 1
    ABORT = 2


def _is_word_byte(byte: int) -> bool:
    return byte in _WORD_BYTES


class EditSession:
    """Interactive single-line editor bound to one terminal."""

    def __init__(
        self,
        terminal: Terminal,
        *,
        history: HistoryStore | None = None,
        key_bindings: KeyBindingMatcher | None = None,
    ) -> None:
        self._terminal = terminal
        self._history = history if history is not None else HistoryStore()
        self._history_file: str | os.PathLike[str] | None = None
        self._matcher = key_bindings if key_bindings is not None else KeyBindingMatcher()
        self._renderer = RenderEngine()

        self._draft = LineBuffer()
        # Outlives read_line calls
        self._clipboard = LineBuffer()
        self._view: bytes | None = None
        self._focus = 0
        self._cursor = 0
        self._last_command: LineCommand | None = None

        self._commands: dict[LineCommand, Callable[[], Signal]] = {
            "beginning-of-line": self.beginning_of_line,
            "end-of-line": self.end_of_line,
            "backward-char": self.backward_char,
            "forward-char": self.forward_char,
            "backward-word": self.backward_word,
            "forward-word": self.forward_word,
            "delete-char": self.delete_char,
            "backward-delete-char": self.backward_delete_char,
            "forward-kill-line": self.forward_kill_line,
            "backward-kill-line": self.backward_kill_line,
            "forward-kill-word": self.forward_kill_word,
            "backward-kill-word": self.backward_kill_word,
            "yank": self.yank,
            "verbatim": self.verbatim,
            "previous-history": self.previous_history,
            "next-history": self.next_history,
            "beginning-of-history": self.beginning_of_history,
            "end-of-history": self.end_of_history,
            "accept-line": self.accept_line,
            "end-of-file": self.end_of_file,
            "terminate": self.terminate,
        }

        self._reset_line()

    @classmethod
    def from_config(cls, config: LineConfig, terminal: Terminal) -> EditSession:
        session = cls(terminal)
        if config.history_file is not None:
            session.configure_history_with_file(config.history_size, config.history_file)
        else:
            session.configure_history(config.history_size)
        return session

    # -- configuration ------------------------------------------------------

    def configure_history(self, max_entries: int) -> None:
        """Use a fresh in-memory history holding at most *max_entries* lines."""
        self._history = HistoryStore(max_entries)
        self._history_file = None
        self._reset_line()

    def configure_history_with_file(
        self, max_entries: int, path: str | os.PathLike[str]
    ) -> bool:
        """Use a fresh history persisted at *path*, seeded from its contents.

        Returns ``False`` if the file could not be read; the history then
        starts empty and accepted lines are still written to *path*.
        """
        self._history = HistoryStore(max_entries)
        self._history_file = path
        ok = True
        try:
            self._history.load(path)
        except OSError as e:
            logger.warning("could not read history file %s: %s", path, e)
            self._history.clear()
            ok = False
        self._reset_line()
        return ok

    def configure_key_bindings(self, bindings: list[KeyBinding]) -> None:
        unknown = [cmd for _, cmd in bindings if cmd not in LINE_COMMANDS]
        if unknown:
            raise ValueError(f"unknown line commands: {', '.join(map(repr, unknown))}")
        self._matcher = KeyBindingMatcher(bindings)

    # -- state --------------------------------------------------------------

    @property
    def history(self) -> HistoryStore:
        return self._history

    @property
    def text(self) -> bytes:
        """Bytes of the active text: the draft or the viewed history entry."""
        return self._draft.to_bytes() if self._view is None else self._view

    @property
    def is_draft(self) -> bool:
        return self._view is None

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def focus(self) -> int:
        return self._focus

    @property
    def clipboard(self) -> bytes:
        return self._clipboard.to_bytes()

    @property
    def last_command(self) -> LineCommand | None:
        return self._last_command

    def _reset_line(self) -> None:
        self._draft.assign(b"")
        self._view = None
        self._focus = self._history.size
        self._cursor = 0
        self._renderer.reset()

    def _materialize(self) -> None:
        """Copy the viewed history entry into the draft before editing it."""
        if self._view is None:
            return
        self._draft.assign(self._view)
        self._view = None
        self._focus = self._history.size

    def _select(self, focus: int) -> None:
        self._focus = focus
        self._view = None if focus == self._history.size else self._history.entry(focus)
        self._cursor = len(self.text)

    # -- read loop ----------------------------------------------------------

    def read_line(self, prompt: str | bytes = "") -> str | None:
        """Edit one line interactively; ``None`` if the user aborted."""
        line = self.read_line_bytes(prompt)
        if line is None:
            return None
        return line.decode("utf-8", errors="surrogateescape")

    def read_line_bytes(self, prompt: str | bytes = b"") -> bytes | None:
        if isinstance(prompt, str):
            prompt = prompt.encode("utf-8")
        self._reset_line()
        self._matcher.reset()

        with self._raw_mode():
            self._terminal.write(prompt + b" ")
            while True:
                self._redraw()
                signal = self._handle_key()
                if signal is Signal.REJECTED:
                    self._terminal.write(BELL)
                elif signal is not Signal.CONTINUE:
                    break
            self._redraw()
            self._terminal.write(b"\n")

        if signal is Signal.ABORT:
            return None
        return self._draft.to_bytes()

    @contextmanager
    def _raw_mode(self) -> Iterator[None]:
        self._terminal.start()
        try:
            yield
        finally:
            self._terminal.stop()

    def _redraw(self) -> None:
        self._terminal.write(self._renderer.render(self.text, self._cursor))

    def _handle_key(self) -> Signal:
        while True:
            result = self._matcher.feed(self._terminal.read_byte())
            if result.state is not MatchState.PENDING:
                break
        if result.state is MatchState.COMPLETE:
            return self.execute(result.command)
        self.insert(result.consumed)
        self._last_command = None
        return Signal.CONTINUE

    def execute(self, command: LineCommand) -> Signal:
        """Run *command* and record it as the last command."""
        signal = self._commands[command]()
        self._last_command = command
        logger.debug("%s -> %s", command, signal.name)
        return signal

    def insert(self, data: bytes) -> None:
        """Insert *data* at the cursor and move the cursor past it."""
        self._materialize()
        self._draft.insert(self._cursor, data)
        self._cursor += len(data)

    # -- motion -------------------------------------------------------------

    def beginning_of_line(self) -> Signal:
        self._cursor = 0
        return Signal.CONTINUE

    def end_of_line(self) -> Signal:
        self._cursor = len(self.text)
        return Signal.CONTINUE

    def backward_char(self) -> Signal:
        if self._cursor == 0:
            return Signal.REJECTED
        text = self.text
        self._cursor -= 1
        while self._cursor > 0 and is_continuation_byte(text[self._cursor]):
            self._cursor -= 1
        return Signal.CONTINUE

    def forward_char(self) -> Signal:
        text = self.text
        if self._cursor >= len(text):
            return Signal.REJECTED
        self._cursor += 1
        while self._cursor < len(text) and is_continuation_byte(text[self._cursor]):
            self._cursor += 1
        return Signal.CONTINUE

    def backward_word(self) -> Signal:
        if self._cursor == 0:
            return Signal.REJECTED
        text = self.text
        pos = self._cursor - 1
        while pos >= 0 and not _is_word_byte(text[pos]):
            pos -= 1
        while pos >= 0 and _is_word_byte(text[pos]):
            pos -= 1
        self._cursor = pos + 1
        return Signal.CONTINUE

    def forward_word(self) -> Signal:
        """Move to the start of the next word, past the separators after this one."""
        text = self.text
        end = len(text)
        if self._cursor >= end:
            return Signal.REJECTED
        pos = self._cursor
        while pos < end and not _is_word_byte(text[pos]):
            pos += 1
        while pos < end and _is_word_byte(text[pos]):
            pos += 1
        while pos < end and not _is_word_byte(text[pos]):
            pos += 1
        self._cursor = pos
        return Signal.CONTINUE

    # -- deletion -----------------------------------------------------------

    def delete_char(self) -> Signal:
        """Erase the encoded character under the cursor."""
        text = self.text
        if self._cursor >= len(text):
            return Signal.REJECTED
        self._materialize()
        length = utf8_sequence_length(text[self._cursor]) or 1
        self._draft.erase(self._cursor, min(length, len(text) - self._cursor))
        return Signal.CONTINUE

    def backward_delete_char(self) -> Signal:
        if self.backward_char() is Signal.REJECTED:
            return Signal.REJECTED
        return self.delete_char()

    # -- kill and yank ------------------------------------------------------

    def _kill(self, command: LineCommand, start: int, end: int, *, prepend: bool) -> None:
        """Cut ``[start, end)`` of the draft into the clipboard.

        Repeating the same kill command grows the clipboard instead of
        replacing it.
        """
        cut = self._draft.slice(start, end)
        if self._last_command == command:
            if prepend:
                self._clipboard.prepend(cut)
            else:
                self._clipboard.append(cut)
        else:
            self._clipboard.assign(cut)
        self._draft.erase(start, end - start)

    def forward_kill_line(self) -> Signal:
        if self._cursor >= len(self.text):
            return Signal.CONTINUE
        self._materialize()
        self._kill("forward-kill-line", self._cursor, len(self._draft), prepend=False)
        return Signal.CONTINUE

    def backward_kill_line(self) -> Signal:
        if self._cursor == 0:
            return Signal.CONTINUE
        self._materialize()
        self._kill("backward-kill-line", 0, self._cursor, prepend=True)
        self._cursor = 0
        return Signal.CONTINUE

    def forward_kill_word(self) -> Signal:
        if self._cursor >= len(self.text):
            return Signal.CONTINUE
        self._materialize()
        begin = self._cursor
        self.forward_word()
        end = self._cursor
        self._cursor = begin
        self._kill("forward-kill-word", begin, end, prepend=False)
        return Signal.CONTINUE

    def backward_kill_word(self) -> Signal:
        if self._cursor == 0:
            return Signal.CONTINUE
        self._materialize()
        end = self._cursor
        self.backward_word()
        self._kill("backward-kill-word", self._cursor, end, prepend=True)
        return Signal.CONTINUE

    def yank(self) -> Signal:
        if self._clipboard:
            self.insert(self._clipboard.to_bytes())
        return Signal.CONTINUE

    # -- text input ---------------------------------------------------------

    def verbatim(self) -> Signal:
        """Insert the next input byte as-is, even if it is bound.

        Only one byte is read, so a multi-byte character typed after C-v
        arrives split: its lead byte here, the rest as ordinary input.
        """
        self._redraw()
        byte = self._terminal.read_byte()
        self._materialize()
        self._draft.insert_byte(self._cursor, byte)
        self._cursor += 1
        return Signal.CONTINUE

    # -- history ------------------------------------------------------------

    def previous_history(self) -> Signal:
        if self._focus == 0:
            return Signal.REJECTED
        self._select(self._focus - 1)
        return Signal.CONTINUE

    def next_history(self) -> Signal:
        if self._focus >= self._history.size:
            return Signal.REJECTED
        self._select(self._focus + 1)
        return Signal.CONTINUE

    def beginning_of_history(self) -> Signal:
        self._select(0)
        return Signal.CONTINUE

    def end_of_history(self) -> Signal:
        self._select(self._history.size)
        return Signal.CONTINUE

    # -- session ------------------------------------------------------------

    def accept_line(self) -> Signal:
        self._materialize()
        self._history.push(self._draft.to_bytes())
        if self._history_file is not None:
            try:
                self._history.write_all(self._history_file)
            except OSError as e:
                logger.warning("could not write history file %s: %s", self._history_file, e)
        return Signal.ACCEPT

    def end_of_file(self) -> Signal:
        """Abort on an empty line, otherwise delete forward."""
        if not self.text:
            return self.terminate()
        return self.delete_char()

    def terminate(self) -> Signal:
        return Signal.ABORT
