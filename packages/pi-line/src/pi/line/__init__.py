"""pi-line: interactive line editing for terminal REPLs."""

# Configuration
from pi.line.config import LineConfig, load_config

# History
from pi.line.history import HistoryStore

# Key bindings
from pi.line.keybindings import (
    DEFAULT_KEY_BINDINGS,
    KeyBinding,
    KeyBindingMatcher,
    LineCommand,
    MatchResult,
    MatchState,
)

# Text buffer
from pi.line.line_buffer import LineBuffer

# Rendering
from pi.line.render import RenderEngine

# Edit session
from pi.line.session import EditSession, Signal

# Terminal interface and implementation
from pi.line.terminal import ProcessTerminal, Terminal

__all__ = [
    # Configuration
    "LineConfig",
    "load_config",
    # History
    "HistoryStore",
    # Key bindings
    "DEFAULT_KEY_BINDINGS",
    "KeyBinding",
    "KeyBindingMatcher",
    "LineCommand",
    "MatchResult",
    "MatchState",
    # Text buffer
    "LineBuffer",
    # Rendering
    "RenderEngine",
    # Edit session
    "EditSession",
    "Signal",
    # Terminal
    "ProcessTerminal",
    "Terminal",
]
