"""Tests for pi.line.terminal.ProcessTerminal over pipes."""

from __future__ import annotations

import os
from typing import Iterator

import pytest

from pi.line.session import EditSession
from pi.line.terminal import EOT, ProcessTerminal


@pytest.fixture
def pipes() -> Iterator[tuple[int, int, int, int]]:
    in_r, in_w = os.pipe()
    out_r, out_w = os.pipe()
    yield in_r, in_w, out_r, out_w
    for fd in (in_r, in_w, out_r, out_w):
        try:
            os.close(fd)
        except OSError:
            pass


class TestProcessTerminalPipes:
    def test_read_byte_one_at_a_time(self, pipes: tuple[int, int, int, int]) -> None:
        in_r, in_w, _, out_w = pipes
        os.write(in_w, b"xy")
        term = ProcessTerminal(input_fd=in_r, output_fd=out_w)
        assert term.read_byte() == ord("x")
        assert term.read_byte() == ord("y")

    def test_exhausted_pipe_reads_as_eot(self, pipes: tuple[int, int, int, int]) -> None:
        in_r, in_w, _, out_w = pipes
        os.write(in_w, b"a")
        os.close(in_w)
        term = ProcessTerminal(input_fd=in_r, output_fd=out_w)
        assert term.read_byte() == ord("a")
        assert term.read_byte() == EOT

    def test_write(self, pipes: tuple[int, int, int, int]) -> None:
        in_r, _, out_r, out_w = pipes
        term = ProcessTerminal(input_fd=in_r, output_fd=out_w)
        term.write(b"abc\b")
        assert os.read(out_r, 16) == b"abc\b"

    def test_start_and_stop_are_noops_off_a_tty(self, pipes: tuple[int, int, int, int]) -> None:
        in_r, _, _, out_w = pipes
        term = ProcessTerminal(input_fd=in_r, output_fd=out_w)
        term.start()
        term.stop()
        term.stop()


class TestPipedSession:
    def test_unterminated_input_ends_instead_of_looping(
        self, pipes: tuple[int, int, int, int]
    ) -> None:
        in_r, in_w, out_r, out_w = pipes
        os.write(in_w, b"abc")
        os.close(in_w)
        term = ProcessTerminal(input_fd=in_r, output_fd=out_w)
        session = EditSession(term)
        with pytest.raises(EOFError):
            session.read_line_bytes(">")
        assert session.text == b"abc"
        # One bell for the rejected C-d at end of text, then the read fails
        assert os.read(out_r, 4096).count(b"\x07") == 1

    def test_empty_pipe_aborts(self, pipes: tuple[int, int, int, int]) -> None:
        in_r, in_w, _, out_w = pipes
        os.close(in_w)
        session = EditSession(ProcessTerminal(input_fd=in_r, output_fd=out_w))
        assert session.read_line(">") is None

    def test_reads_after_eot_raise(self, pipes: tuple[int, int, int, int]) -> None:
        in_r, in_w, _, out_w = pipes
        os.close(in_w)
        term = ProcessTerminal(input_fd=in_r, output_fd=out_w)
        assert term.read_byte() == EOT
        with pytest.raises(EOFError):
            term.read_byte()
