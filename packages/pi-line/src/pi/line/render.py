"""Incremental single-line redraw.

Each frame walks the cursor back to column 0 with backspaces, rewrites the
whole line, blanks any leftover columns from the previous frame, then
backspaces to the cursor column. Only backspace, space and the text itself
are emitted, so it works on any terminal that honours ``\\b``.
"""

from __future__ import annotations

from dataclasses import dataclass

BACKSPACE = b"\b"

# Lead-byte (mask, pattern) -> encoded sequence length
_UTF8_LEADS: tuple[tuple[int, int, int], ...] = (
    (0xE0, 0xC0, 2),
    (0xF0, 0xE0, 3),
    (0xF8, 0xF0, 4),
    (0xFC, 0xF8, 5),
)


def utf8_sequence_length(lead: int) -> int:
    """Length of the sequence introduced by *lead*, or 0 if it is not a lead byte.

    Plain ASCII counts as a one-byte sequence.
    """
    if lead & 0x80 == 0:
        return 1
    for mask, pattern, length in _UTF8_LEADS:
        if lead & mask == pattern:
            return length
    return 0


def is_continuation_byte(byte: int) -> bool:
    return byte & 0xC0 == 0x80


@dataclass
class Frame:
    """Result of laying out a line: output bytes plus its column metrics."""

    output: bytes
    length: int
    cursor_column: int


def layout_line(text: bytes, cursor: int) -> Frame:
    """Escape *text* for display and find the column of byte offset *cursor*.

    Control bytes render as ``^X``, valid multi-byte sequences as one column,
    anything else as a ``\\xHH`` escape. An incomplete sequence at the end of
    the text stops the walk.
    """
    out = bytearray()
    columns = 0
    cursor_column = -1
    i = 0
    end = len(text)
    while i < end:
        if i == cursor:
            cursor_column = columns
        c = text[i]
        if c < 0x20:
            out += b"^" + bytes((c + 64,))
            columns += 2
            i += 1
            continue
        length = utf8_sequence_length(c)
        if length == 1:
            out.append(c)
            columns += 1
            i += 1
        elif length:
            if end - i < length:
                break
            out += text[i : i + length]
            columns += 1
            i += length
        else:
            out += b"\\x%02x" % c
            columns += 4
            i += 1
    if cursor_column < 0:
        cursor_column = columns
    return Frame(bytes(out), columns, cursor_column)


class RenderEngine:
    """Redraws the edited line, remembering what the previous frame left on screen."""

    def __init__(self) -> None:
        self.rendered_cursor_column = 0
        self.rendered_length = 0

    def reset(self) -> None:
        """Forget the previous frame (the cursor sits right after a fresh prompt)."""
        self.rendered_cursor_column = 0
        self.rendered_length = 0

    def render(self, text: bytes, cursor: int) -> bytes:
        """Return the bytes that turn the previous frame into this one."""
        old_length = self.rendered_length
        frame = layout_line(text, cursor)

        out = bytearray(BACKSPACE * self.rendered_cursor_column)
        out += frame.output
        column = frame.length
        if column < old_length:
            out += b" " * (old_length - column)
            column = old_length
        out += BACKSPACE * (column - frame.cursor_column)

        self.rendered_length = frame.length
        self.rendered_cursor_column = frame.cursor_column
        return bytes(out)
