"""Main Textual TUI application.

Orchestrates the UI components and runs chat turns against a ChatProvider.
"""

import asyncio
import logging
import time

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Header

from ..conversation import QUICK_ACTIONS, Conversation, quick_action_prompt
from ..errors import RequestFailed
from ..llm.base import ChatProvider
from ..llm.models import ChatMessage, Role
from .config import ERROR_NOTIFY_TIMEOUT, NOTIFY_TIMEOUT, RENDER_INTERVAL, LogLevel
from .styles import APP_CSS
from .themes import CARDINAL
from .widgets import (
    ChatHistoryWidget,
    ChatInputBar,
    ChatMessageView,
    LogPanel,
    LogPanelHandler,
    QuickActionsBar,
    StatusBar,
)

logger = logging.getLogger(__name__)


class GenieApp(App):
    """Textual TUI for chatting with Cardinal Genie."""

    CSS = APP_CSS
    TITLE = "Cardinal Business Genie"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("escape", "cancel_request", "Cancel"),
        Binding("ctrl+k", "clear_chat", "Clear Chat", priority=True),
        Binding("ctrl+r", "copy_last_response", "Copy Response"),
        Binding("ctrl+d", "toggle_log", "Log", priority=True),
        *[
            Binding(f"f{index}", f"quick_action({index - 1})", label, show=False)
            for index, label in enumerate(QUICK_ACTIONS, start=1)
        ],
    ]

    def __init__(self, provider: ChatProvider, log_level: str | None = None) -> None:
        super().__init__()
        self._provider = provider
        self._log_level = log_level
        self._conversation = Conversation(provider)
        self._current_worker = None
        self._log_handler: LogPanelHandler | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield ChatHistoryWidget(id="chat-history")
        yield LogPanel(id="log-panel")
        with Vertical(id="bottom-bar"):
            yield QuickActionsBar(id="quick-actions")
            yield StatusBar(id="status-bar", model=self._provider.model)
            yield ChatInputBar(id="chat-input-bar")
        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.register_theme(CARDINAL)
        self.theme = "cardinal"
        self.sub_title = self._provider.model

        log_panel = self.query_one("#log-panel", LogPanel)
        self._log_handler = LogPanelHandler(log_panel)
        logging.getLogger("cardinal_genie").addHandler(self._log_handler)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            self._show_log(True)
            logger.info("Log panel enabled with level: %s", self._log_level.upper())

        chat = self.query_one("#chat-history", ChatHistoryWidget)
        for message in self._conversation.messages:
            chat.add_message(message)
        self._update_status()
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def on_unmount(self) -> None:
        """Detach the log handler when the app exits."""
        if self._log_handler is not None:
            logging.getLogger("cardinal_genie").removeHandler(self._log_handler)
            self._log_handler = None

    def _update_status(self, state: str | None = None) -> None:
        status = self.query_one("#status-bar", StatusBar)
        status.update_status(
            state=state or ("Generating..." if self._conversation.is_busy else "Ready"),
            messages=len(self._conversation.messages),
        )

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Handle user input submission."""
        text = event.value
        if not text:
            return
        if self._conversation.is_busy:
            self.notify(
                "Still answering. Press Escape to cancel.",
                severity="warning",
                timeout=NOTIFY_TIMEOUT,
            )
            return

        chat = self.query_one("#chat-history", ChatHistoryWidget)
        chat.add_message(ChatMessage(role=Role.USER, content=text))
        view = chat.add_message(ChatMessage(role=Role.ASSISTANT, content=""), streaming=True)
        self._current_worker = self._run_turn(text, view)

    @work(exclusive=True)
    async def _run_turn(self, text: str, view: ChatMessageView) -> None:
        """Stream one assistant reply into `view` as a background worker."""
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        input_bar = self.query_one("#chat-input-bar", ChatInputBar)
        last_render = 0.0

        def _on_update(value: str) -> None:
            nonlocal last_render
            now = time.monotonic()
            if now - last_render >= RENDER_INTERVAL:
                last_render = now
                view.update_content(value, streaming=True)
                chat.scroll_end(animate=False)

        input_bar.set_busy(True)
        self._update_status("Generating...")
        try:
            reply = await self._conversation.send(text, on_update=_on_update)
            view.update_content(reply, streaming=False)
            chat.scroll_end(animate=False)
        except RequestFailed as e:
            view.update_content(self._conversation.last_response() or "", streaming=False)
            self.notify(e.message, title="Request failed", severity="error", timeout=ERROR_NOTIFY_TIMEOUT)
        except asyncio.CancelledError:
            chat.remove_message(view)
            self.notify("Cancelled", severity="warning", timeout=2)
            raise
        finally:
            input_bar.set_busy(False)
            self._update_status()

    def action_cancel_request(self) -> None:
        """Cancel the in-flight request."""
        if self._current_worker and self._current_worker.is_running:
            self._current_worker.cancel()

    def action_quick_action(self, index: int) -> None:
        """Prefill the input with a quick action."""
        if 0 <= index < len(QUICK_ACTIONS):
            input_bar = self.query_one("#chat-input-bar", ChatInputBar)
            input_bar.prefill(quick_action_prompt(QUICK_ACTIONS[index]))

    def action_clear_chat(self) -> None:
        """Clear the chat history, keeping the greeting."""
        if self._conversation.is_busy:
            self.notify("Cannot clear while answering", severity="warning", timeout=2)
            return
        self._conversation.clear()
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        chat.clear_history()
        for message in self._conversation.messages:
            chat.add_message(message)
        self._update_status()
        self.notify("Chat cleared", timeout=2)

    def _show_log(self, visible: bool) -> None:
        log_panel = self.query_one("#log-panel", LogPanel)
        if visible:
            log_panel.show()
        else:
            log_panel.hide()
        self.query_one("#chat-history", ChatHistoryWidget).set_class(visible, "-with-log")

    def action_toggle_log(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#log-panel", LogPanel)
        visible = not log_panel.display
        self._show_log(visible)
        self.notify(f"Log panel {'shown' if visible else 'hidden'}", timeout=2)

    def action_copy_last_response(self) -> None:
        """Copy last assistant response to clipboard."""
        response = self._conversation.last_response()
        if response:
            self.copy_to_clipboard(response)
            self.notify("Response copied")
        else:
            self.notify("No response to copy", severity="warning")


async def run_textual_tui(provider: ChatProvider, log_level: str | None = None) -> None:
    """Run the Textual TUI.

    Args:
        provider: Chat provider answering the conversation
        log_level: Log level for panel (debug/info/warning/error), None to hide
    """
    app = GenieApp(provider=provider, log_level=log_level)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
