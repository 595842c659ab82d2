"""Shared fixtures for pi-line tests."""

from __future__ import annotations

import pytest

from pi.line.session import EditSession
from .virtual_terminal import VirtualTerminal


@pytest.fixture
def terminal() -> VirtualTerminal:
    return VirtualTerminal()


@pytest.fixture
def session(terminal: VirtualTerminal) -> EditSession:
    return EditSession(terminal)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PI_LINE_HISTORY_SIZE", raising=False)
    monkeypatch.delenv("PI_LINE_HISTORY_FILE", raising=False)
