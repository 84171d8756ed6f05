"""Terminal UI module for Cardinal Genie.

Provides a Textual-based TUI for chatting with the assistant.

Module structure (each module hides a design decision):
- config.py: Tunable constants (render interval, history size, log levels)
- widgets.py: Custom widgets (message views, input history, log panel)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palette and theme configuration
- app.py: Application orchestration (user interaction flow)
"""

from .app import GenieApp, run_textual_tui
from .config import LogLevel
from .widgets import (
    ChatHistoryWidget,
    ChatInputBar,
    ChatMessageView,
    LogPanel,
    LogPanelHandler,
    StatusBar,
)

__all__ = [
    "ChatHistoryWidget",
    "ChatInputBar",
    "ChatMessageView",
    "GenieApp",
    "LogLevel",
    "LogPanel",
    "LogPanelHandler",
    "StatusBar",
    "run_textual_tui",
]
