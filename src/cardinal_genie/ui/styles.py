"""CSS styles for the TUI.

Keeps layout and colors out of the widget code. Textual CSS nesting,
pseudo-classes and theme variables are used throughout.

Layout: chat history on the left, a hidden log panel on the right that
takes a third of the width when shown, and a bottom bar with the quick
actions, the status line and the input.
"""

APP_CSS = """
/* Main Screen Layout */
Screen {
    layout: grid;
    grid-size: 2 2;
    grid-columns: 2fr 1fr;
    grid-rows: 1fr auto;
    background: $background;
}

/* Chat History Panel */
#chat-history {
    height: 100%;
    column-span: 2;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus {
        border: round $primary;
    }

    &:focus-within {
        border: round $primary-lighten-1;
    }

    /* Shares the row with the log panel when it is visible */
    &.-with-log {
        column-span: 1;
    }
}

/* Log Panel (hidden by default) */
#log-panel {
    height: 100%;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    overflow-y: scroll;
    overflow-x: auto;
    scrollbar-gutter: stable;

    &:focus {
        border: round $warning;
    }
}

/* Bottom Bar - Quick Actions + Status + Input */
#bottom-bar {
    column-span: 2;
    height: auto;
    padding: 0 1;
    background: $panel;
    border-top: solid $border;
}

#quick-actions {
    height: 1;
    padding: 0 1;
    color: $text-muted;
}

#status-bar {
    height: 1;
    padding: 0 1;
    margin-bottom: 1;
    background: $surface;
    color: $foreground;

    &.-busy {
        color: $warning;
    }
}

ChatInputBar {
    height: 5;
    border: round $primary 60%;
    background: $panel;

    &:focus-within {
        border: round $primary;
    }
}

#chat-input {
    width: 1fr;
    height: 100%;
    border: none;
    padding: 0 1;
    background: transparent;

    &:focus {
        background: transparent;
    }
}

#send-btn {
    width: 10;
    height: 100%;
    margin: 0 0 0 1;
    min-width: 8;
    border: tall $primary;
    background: $primary;
    color: $foreground;
    text-style: bold;

    &:hover {
        background: $primary-lighten-1;
        border: tall $primary-lighten-1;
    }

    &:focus {
        background: $primary-lighten-2;
        border: tall $primary-lighten-2;
        text-style: bold reverse;
    }

    &:disabled {
        background: $surface;
        border: tall $border;
        color: $text-muted;
    }
}

/* Chat Messages */
.chat-message {
    width: 100%;
    height: auto;
    margin: 0 0 1 0;
    padding: 1 2;
    border: none;
    background: transparent;
}

/* User messages - silver accent */
.user-message {
    border-left: tall $secondary;
    background: $secondary 6%;

    & .message-header {
        color: $secondary;
        text-style: bold;
    }
}

/* Assistant messages - cardinal accent */
.assistant-message {
    border-left: tall $primary;
    background: $primary 6%;

    & .message-header {
        color: $accent;
        text-style: bold;
    }

    &.-streaming {
        border-left: tall $warning;
    }
}

.message-header {
    height: auto;
    padding: 0;
}

.message-content {
    height: auto;
    padding: 0;
    margin: 0;
    color: $foreground;
}

/* Notification Toasts */
Toast {
    background: $surface;
    border: tall $border;
    padding: 0 1;

    &.-information {
        border: tall $primary;
        background: $primary 12%;
    }

    &.-error {
        border: tall $error;
        background: $error 12%;
    }

    &.-warning {
        border: tall $warning;
        background: $warning 12%;
    }
}

Header {
    background: $panel;
    color: $primary;
    text-style: bold;
}

Footer {
    background: $background;
}
"""
