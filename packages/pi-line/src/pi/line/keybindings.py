"""Key bindings: byte-sequence recognizer mapping key presses to commands.

Bindings are ``(sequence, command)`` pairs. The matcher compiles them into a
trie and is fed one byte at a time; it answers whether the bytes seen so far
complete a binding, may still complete one, or cannot match anything.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Literal, get_args

LineCommand = Literal[
    # Cursor movement
    "beginning-of-line",
    "end-of-line",
    "backward-char",
    "forward-char",
    "backward-word",
    "forward-word",
    # Deletion
    "delete-char",
    "backward-delete-char",
    # Kill ring
    "forward-kill-line",
    "backward-kill-line",
    "forward-kill-word",
    "backward-kill-word",
    "yank",
    # Text input
    "verbatim",
    # History
    "previous-history",
    "next-history",
    "beginning-of-history",
    "end-of-history",
    # Session
    "accept-line",
    "end-of-file",
    "terminate",
]

LINE_COMMANDS: frozenset[str] = frozenset(get_args(LineCommand))

KeyBinding = tuple[bytes, LineCommand]

DEFAULT_KEY_BINDINGS: list[KeyBinding] = [
    # Control characters
    (b"\x01", "beginning-of-line"),  # C-a
    (b"\x02", "backward-char"),  # C-b
    (b"\x03", "terminate"),  # C-c
    (b"\x04", "end-of-file"),  # C-d
    (b"\x05", "end-of-line"),  # C-e
    (b"\x06", "forward-char"),  # C-f
    (b"\x08", "backward-delete-char"),  # C-h
    (b"\x0a", "accept-line"),  # C-j
    (b"\x0b", "forward-kill-line"),  # C-k
    (b"\x0d", "accept-line"),  # C-m
    (b"\x0e", "next-history"),  # C-n
    (b"\x10", "previous-history"),  # C-p
    (b"\x15", "backward-kill-line"),  # C-u
    (b"\x16", "verbatim"),  # C-v
    (b"\x17", "backward-kill-word"),  # C-w
    (b"\x19", "yank"),  # C-y
    (b"\x7f", "backward-delete-char"),  # Backspace
    # Meta keys
    (b"\x1bb", "backward-word"),  # M-b
    (b"\x1bf", "forward-word"),  # M-f
    (b"\x1bd", "forward-kill-word"),  # M-d
    (b"\x1b<", "beginning-of-history"),  # M-<
    (b"\x1b>", "end-of-history"),  # M->
    # ANSI sequences
    (b"\x1b[A", "previous-history"),  # Up
    (b"\x1b[B", "next-history"),  # Down
    (b"\x1b[C", "forward-char"),  # Right
    (b"\x1b[D", "backward-char"),  # Left
    (b"\x1b[H", "beginning-of-line"),  # Home
    (b"\x1b[F", "end-of-line"),  # End
    (b"\x1b[1~", "beginning-of-line"),  # Home (vt)
    (b"\x1b[4~", "end-of-line"),  # End (vt)
    (b"\x1b[7~", "beginning-of-line"),  # Home (rxvt)
    (b"\x1b[8~", "end-of-line"),  # End (rxvt)
    (b"\x1b[3~", "delete-char"),  # Delete
]


class MatchState(enum.Enum):
    PENDING = "pending"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass(frozen=True)
class MatchResult:
    """Outcome of feeding one byte to the matcher.

    ``consumed`` holds every byte of the current attempt, including the one
    just fed. On ``FAILED`` the caller inserts these bytes as literal text.
    """

    state: MatchState
    consumed: bytes
    command: LineCommand | None = None


@dataclass
class _Node:
    children: dict[int, _Node] = field(default_factory=dict)
    command: LineCommand | None = None


class KeyBindingMatcher:
    """Deterministic byte-sequence automaton over a binding table.

    Matching is eager: the first node along the path that carries a command
    completes, and a byte with no transition fails the whole attempt without
    backtracking into other branches.
    """

    def __init__(self, bindings: list[KeyBinding] | None = None) -> None:
        self._root = _Node()
        self._node = self._root
        self._pending = bytearray()
        self._bindings: list[KeyBinding] = []
        for sequence, command in DEFAULT_KEY_BINDINGS if bindings is None else bindings:
            self._add(sequence, command)

    def _add(self, sequence: bytes, command: LineCommand) -> None:
        if not sequence:
            raise ValueError(f"empty key sequence bound to {command!r}")
        node = self._root
        for byte in sequence:
            node = node.children.setdefault(byte, _Node())
        if node.command is not None:
            raise ValueError(f"key sequence {sequence!r} bound twice")
        node.command = command
        self._bindings.append((bytes(sequence), command))

    @property
    def bindings(self) -> list[KeyBinding]:
        return list(self._bindings)

    @property
    def pending(self) -> bytes:
        """Bytes consumed so far by an unfinished attempt."""
        return bytes(self._pending)

    def reset(self) -> None:
        self._node = self._root
        self._pending.clear()

    def feed(self, byte: int) -> MatchResult:
        """Advance the automaton by one input byte."""
        self._pending.append(byte)
        consumed = bytes(self._pending)

        child = self._node.children.get(byte)
        if child is None:
            self.reset()
            return MatchResult(MatchState.FAILED, consumed)

        if child.command is not None:
            self.reset()
            return MatchResult(MatchState.COMPLETE, consumed, child.command)

        if child.children:
            self._node = child
            return MatchResult(MatchState.PENDING, consumed)

        # Dead end: a node with neither command nor children
        self.reset()
        return MatchResult(MatchState.FAILED, consumed)

    def keys_for(self, command: LineCommand) -> list[bytes]:
        """Get every sequence bound to *command*."""
        return [seq for seq, cmd in self._bindings if cmd == command]
