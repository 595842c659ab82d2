"""Tests for pi.line.render -- line layout and incremental redraw."""

from __future__ import annotations

from pi.line.render import RenderEngine, layout_line, utf8_sequence_length


class TestSequenceLength:
    def test_ascii(self) -> None:
        assert utf8_sequence_length(ord("a")) == 1

    def test_lead_bytes(self) -> None:
        assert utf8_sequence_length(0xC3) == 2
        assert utf8_sequence_length(0xE2) == 3
        assert utf8_sequence_length(0xF0) == 4
        assert utf8_sequence_length(0xF8) == 5

    def test_continuation_and_invalid(self) -> None:
        assert utf8_sequence_length(0x80) == 0
        assert utf8_sequence_length(0xFF) == 0


class TestLayout:
    def test_plain_ascii(self) -> None:
        frame = layout_line(b"abc", 1)
        assert frame.output == b"abc"
        assert frame.length == 3
        assert frame.cursor_column == 1

    def test_control_byte_is_caret_escaped(self) -> None:
        frame = layout_line(b"a\x01b", 2)
        assert frame.output == b"a^Ab"
        assert frame.length == 4
        assert frame.cursor_column == 3

    def test_multibyte_character_is_one_column(self) -> None:
        text = "é€😀".encode()
        frame = layout_line(text, len("é€".encode()))
        assert frame.output == text
        assert frame.length == 3
        assert frame.cursor_column == 2

    def test_stray_continuation_byte_is_hex_escaped(self) -> None:
        frame = layout_line(b"a\x80b", 2)
        assert frame.output == b"a\\x80b"
        assert frame.length == 6
        assert frame.cursor_column == 5

    def test_hex_escape_uses_hex_digits(self) -> None:
        assert layout_line(b"\xff", 0).output == b"\\xff"

    def test_incomplete_tail_stops_rendering(self) -> None:
        frame = layout_line(b"a\xe2\x82", 3)
        assert frame.output == b"a"
        assert frame.length == 1
        assert frame.cursor_column == 1

    def test_cursor_at_end(self) -> None:
        frame = layout_line(b"ab", 2)
        assert frame.cursor_column == 2

    def test_delete_is_rendered_verbatim(self) -> None:
        assert layout_line(b"\x7f", 0).output == b"\x7f"


class TestRenderEngine:
    def test_first_frame(self) -> None:
        engine = RenderEngine()
        assert engine.render(b"abc", 3) == b"abc"
        assert engine.rendered_length == 3
        assert engine.rendered_cursor_column == 3

    def test_cursor_in_middle_backs_up(self) -> None:
        engine = RenderEngine()
        assert engine.render(b"abc", 1) == b"abc\b\b"
        assert engine.rendered_cursor_column == 1

    def test_redraw_returns_to_column_zero(self) -> None:
        engine = RenderEngine()
        engine.render(b"ab", 2)
        assert engine.render(b"abc", 3) == b"\b\babc"

    def test_unchanged_state_has_zero_net_motion(self) -> None:
        engine = RenderEngine()
        engine.render(b"hello", 2)
        out = engine.render(b"hello", 2)
        assert out == b"\b\bhello\b\b\b"
        assert out.count(b"\b") == len(b"hello")
        assert engine.rendered_cursor_column == 2

    def test_shrinking_line_is_padded(self) -> None:
        engine = RenderEngine()
        engine.render(b"\x01", 1)
        assert engine.rendered_length == 2
        out = engine.render(b"", 0)
        assert out == b"\b\b" + b"  " + b"\b\b"
        assert engine.rendered_length == 0
        assert engine.rendered_cursor_column == 0

    def test_shrinking_with_cursor_mid_line(self) -> None:
        engine = RenderEngine()
        engine.render(b"abcd", 4)
        out = engine.render(b"ab", 1)
        assert out == b"\b\b\b\bab  \b\b\b"
        assert engine.rendered_length == 2
        assert engine.rendered_cursor_column == 1

    def test_reset_forgets_previous_frame(self) -> None:
        engine = RenderEngine()
        engine.render(b"abc", 3)
        engine.reset()
        assert engine.render(b"x", 1) == b"x"
