"""
Cardinal Genie: a streaming AI business consultant for the terminal.

This package follows Parnas's information hiding principles,
where each module hides a specific design decision.
"""

__version__ = "0.1.0"

from .conversation import APOLOGY, QUICK_ACTIONS, Conversation
from .errors import (
    GenieError,
    MalformedBlock,
    MalformedFrame,
    MissingInformation,
    ParseFailure,
    RequestFailed,
)
from .llm import ChatMessage, ChatProvider, Role, create_chat_provider
from .render import extract_blocks, render_message

__all__ = [
    "APOLOGY",
    "ChatMessage",
    "ChatProvider",
    "Conversation",
    "GenieError",
    "MalformedBlock",
    "MalformedFrame",
    "MissingInformation",
    "ParseFailure",
    "QUICK_ACTIONS",
    "RequestFailed",
    "Role",
    "create_chat_provider",
    "extract_blocks",
    "render_message",
]
