"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Input history management
- Live re-rendering of a streaming assistant message
- Log rendering, level filtering and routing from `logging`
- Status line formatting
"""

import logging
from datetime import datetime

from rich.text import Text
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.message import Message
from textual.widgets import Button, RichLog, Static, TextArea

from ..conversation import QUICK_ACTIONS
from ..llm.models import ChatMessage, Role
from ..render import render_message
from .config import (
    INPUT_HISTORY_MAX_SIZE,
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    LogLevel,
)


class ChatMessageView(Vertical):
    """One rendered chat message: a header line and its content."""

    def __init__(self, message: ChatMessage, streaming: bool = False, **kwargs) -> None:
        is_user = message.role == Role.USER
        classes = "chat-message " + ("user-message" if is_user else "assistant-message")
        super().__init__(classes=classes, **kwargs)
        self._message = message
        self._streaming = streaming
        self._timestamp = datetime.now().strftime("%H:%M:%S")
        self.set_class(streaming, "-streaming")

    @property
    def message(self) -> ChatMessage:
        return self._message

    def compose(self):
        who = "> You" if self._message.role == Role.USER else "< Cardinal Genie"
        yield Static(f"{who} [{self._timestamp}]", classes="message-header", markup=False)
        yield Static(
            render_message(self._message, streaming=self._streaming),
            classes="message-content",
        )

    def update_content(self, content: str, streaming: bool = False) -> None:
        """Replace the content and re-render it."""
        self._message = ChatMessage(role=self._message.role, content=content)
        self._streaming = streaming
        self.set_class(streaming, "-streaming")
        # Before compose runs there is nothing to update; compose renders _message
        for content_view in self.query(".message-content").results(Static):
            content_view.update(render_message(self._message, streaming=streaming))


class ChatHistoryWidget(VerticalScroll):
    """Scrollable chat history."""

    BORDER_TITLE = "Cardinal Genie"
    BORDER_SUBTITLE = "Conversation"
    ALLOW_MAXIMIZE = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._views: list[ChatMessageView] = []

    def add_message(self, message: ChatMessage, streaming: bool = False) -> ChatMessageView:
        """Append a message and return its view."""
        view = ChatMessageView(message, streaming=streaming)
        self._views.append(view)
        self.mount(view)
        self._update_subtitle()
        self.scroll_end(animate=False)
        return view

    def remove_message(self, view: ChatMessageView) -> None:
        """Remove a message view (e.g. a cancelled reply)."""
        if view in self._views:
            self._views.remove(view)
        view.remove()
        self._update_subtitle()

    def get_last_response(self) -> str | None:
        """Get the last assistant response."""
        for view in reversed(self._views):
            if view.message.role == Role.ASSISTANT:
                return view.message.content
        return None

    def clear_history(self) -> None:
        """Clear the chat history."""
        self._views.clear()
        self.remove_children()
        self.border_subtitle = "Conversation"

    def _update_subtitle(self) -> None:
        self.border_subtitle = f"{len(self._views)} messages"


class ChatInputBar(Horizontal):
    """Chat input bar with TextArea and Send button."""

    class Submitted(Message):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1

    def compose(self):
        text_area = TextArea(id="chat-input", show_line_numbers=False)
        text_area.cursor_blink = False
        yield text_area
        yield Button("Send", id="send-btn", variant="primary").with_tooltip(
            "Send message (Ctrl+J)"
        )

    def on_mount(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        text_area.focus()
        text_area.highlight_cursor_line = False

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            self._submit()

    def on_key(self, event) -> None:
        """ctrl+j submits; up/down at the edges walk the input history.

        Terminals do not report modifiers on Enter, so ctrl+enter is unusable.
        """
        if event.key == "ctrl+j":
            self._submit()
            event.prevent_default()
            event.stop()
        elif event.key == "up" and self._is_cursor_at_start():
            self._navigate_history(-1)
            event.prevent_default()
            event.stop()
        elif event.key == "down" and self._is_cursor_at_end():
            self._navigate_history(1)
            event.prevent_default()
            event.stop()

    def _is_cursor_at_start(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        return text_area.cursor_location == (0, 0)

    def _is_cursor_at_end(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        lines = text_area.text.split("\n")
        return text_area.cursor_location == (len(lines) - 1, len(lines[-1]))

    def _navigate_history(self, direction: int) -> None:
        if not self._history:
            return
        text_area = self.query_one("#chat-input", TextArea)
        if direction < 0:
            if self._history_index == -1:
                self._history_index = len(self._history) - 1
            elif self._history_index > 0:
                self._history_index -= 1
        else:
            if self._history_index == -1:
                return
            if self._history_index < len(self._history) - 1:
                self._history_index += 1
            else:
                self._history_index = -1
                text_area.text = ""
                return
        text_area.text = self._history[self._history_index]

    def _submit(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        value = text_area.text.strip()
        if value:
            if not self._history or self._history[-1] != value:
                self._history.append(value)
                del self._history[:-INPUT_HISTORY_MAX_SIZE]
            self._history_index = -1
            text_area.text = ""
            self.post_message(self.Submitted(value))

    def prefill(self, text: str) -> None:
        """Replace the input text and place the cursor at its end."""
        text_area = self.query_one("#chat-input", TextArea)
        text_area.text = text
        text_area.move_cursor(text_area.document.end)
        text_area.focus()

    def set_busy(self, busy: bool) -> None:
        """Disable sending while a reply is streaming."""
        self.query_one("#send-btn", Button).disabled = busy

    def focus_input(self) -> None:
        """Focus the text input."""
        self.query_one("#chat-input", TextArea).focus()


class QuickActionsBar(Static):
    """One-line list of the quick actions and their keys."""

    def on_mount(self) -> None:
        self.update("  ".join(
            f"[bold]F{index}[/] {label}"
            for index, label in enumerate(QUICK_ACTIONS, start=1)
        ))


class StatusBar(Static):
    """Status line: endpoint, message count and streaming state."""

    def __init__(self, *args, model: str = "", **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._model = model
        self._messages = 0
        self._state = "Ready"

    def on_mount(self) -> None:
        self._update_display()

    def update_status(self, state: str | None = None, messages: int | None = None) -> None:
        if state is not None:
            self._state = state
        if messages is not None:
            self._messages = messages
        self.set_class(self._state != "Ready", "-busy")
        self._update_display()

    def _update_display(self) -> None:
        self.update(
            f"[bold]Model:[/] {self._model}  "
            f"[bold]Messages:[/] {self._messages}  "
            f"[bold]Status:[/] {self._state}"
        )


class LogPanel(RichLog):
    """Log panel for real-time tracing with level filtering.

    Shows timestamped records from the application's loggers.
    Hidden by default, shown with --log-level flag or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Hidden"

    LEVEL_COLORS = {
        LogLevel.DEBUG: "dim white",
        LogLevel.INFO: "cyan",
        LogLevel.WARNING: "yellow",
        LogLevel.ERROR: "red",
    }

    def __init__(self, *args, log_level: int = LogLevel.INFO, **kwargs) -> None:
        super().__init__(
            *args,
            markup=False,
            highlight=False,
            auto_scroll=True,
            wrap=True,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        """Hide by default."""
        self.display = False

    def add_record(self, component: str, message: str, level: int) -> None:
        """Add a log entry if it meets the current level threshold."""
        if level < self._log_level:
            return
        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."
        line = Text()
        line.append(datetime.now().strftime(LOG_TIMESTAMP_FORMAT) + " ", style="dim")
        line.append(f"{LogLevel.name(level):<7} ", style=self.LEVEL_COLORS.get(level, "white"))
        line.append(f"[{component}] ", style="magenta")
        line.append(message)
        self.write(line)

    def show(self) -> None:
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        self.display = False
        self._update_subtitle()

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True


class LogPanelHandler(logging.Handler):
    """Route `logging` records into a LogPanel."""

    def __init__(self, panel: LogPanel) -> None:
        super().__init__(level=logging.DEBUG)
        self._panel = panel

    def emit(self, record: logging.LogRecord) -> None:
        try:
            component = record.name.rsplit(".", 1)[-1]
            self._panel.add_record(component, record.getMessage(), record.levelno)
        except Exception:
            self.handleError(record)
