"""Conversation state for the chat view.

Hides how a chat turn is carried out:
- The message list is append-only, in memory, owned by one view
- An optimistic empty assistant message is added when a turn starts
- Each delta replaces that message with the complete-so-far text
- A failed request replaces it with an apology and re-raises once
- A cancelled request removes it
"""

import asyncio
import logging
from collections.abc import Callable

from .errors import GenieError, RequestFailed
from .llm.accumulator import MessageAccumulator
from .llm.base import ChatProvider
from .llm.models import ChatMessage, Role
from .prompts import get_welcome_message

logger = logging.getLogger(__name__)

APOLOGY = "I apologize, but I encountered an error. Please try again."

QUICK_ACTIONS = (
    "Form an LLC",
    "Create a Brand",
    "Tax Structure",
    "Business Plan",
    "Marketing Strategy",
    "Investor Pitch",
    "Financial Projections",
    "Growth Strategy",
)


def quick_action_prompt(action: str) -> str:
    """Input text prefilled by a quick action."""
    return f"Help me with: {action}"


class ConversationBusy(GenieError):
    """A turn was started while another is still in flight."""


class Conversation:
    """An in-memory chat conversation with streaming assistant turns."""

    def __init__(self, provider: ChatProvider, greeting: str | None = None) -> None:
        """Create a conversation.

        Args:
            provider: Backend answering the turns
            greeting: Opening assistant message; the packaged welcome text
                when None, no greeting when empty
        """
        self._provider = provider
        self._messages: list[ChatMessage] = []
        self._busy = False
        if greeting is None:
            greeting = get_welcome_message()
        if greeting:
            self._messages.append(ChatMessage(role=Role.ASSISTANT, content=greeting))

    @property
    def messages(self) -> list[ChatMessage]:
        """A copy of the messages, oldest first."""
        return list(self._messages)

    @property
    def is_busy(self) -> bool:
        """True while a turn is streaming."""
        return self._busy

    def last_response(self) -> str | None:
        """Content of the most recent assistant message."""
        for msg in reversed(self._messages):
            if msg.role == Role.ASSISTANT:
                return msg.content
        return None

    def _replace_last(self, content: str) -> None:
        self._messages[-1] = ChatMessage(role=Role.ASSISTANT, content=content)

    async def send(
        self,
        text: str,
        on_update: Callable[[str], None] | None = None,
    ) -> str:
        """Run one chat turn.

        Args:
            text: The user's message
            on_update: Called with the complete-so-far reply after every delta

        Returns:
            The final assistant text

        Raises:
            ConversationBusy: If a turn is already in flight
            RequestFailed: After the in-progress reply has been replaced
                with an apology; any other error is re-raised the same way
            ValueError: If the message is blank
        """
        if not text.strip():
            raise ValueError("Message is empty")
        if self._busy:
            raise ConversationBusy("A response is still being generated")

        self._busy = True
        self._messages.append(ChatMessage(role=Role.USER, content=text))
        history = list(self._messages)
        self._messages.append(ChatMessage(role=Role.ASSISTANT, content=""))

        def _publish(value: str) -> None:
            self._replace_last(value)
            if on_update is not None:
                on_update(value)

        accumulator = MessageAccumulator(_publish)
        try:
            stream = await self._provider.chat_completion_stream(history)
            async with stream:
                await accumulator.consume(stream)
        except RequestFailed as e:
            logger.warning("Chat request failed: %s", e)
            self._replace_last(APOLOGY)
            raise
        except Exception:
            logger.exception("Chat turn failed")
            self._replace_last(APOLOGY)
            raise
        except asyncio.CancelledError:
            logger.info("Chat turn cancelled after %d deltas", accumulator.delta_count)
            self._messages.pop()
            raise
        finally:
            self._busy = False

        logger.debug("Chat turn complete: %d chars", len(accumulator))
        return accumulator.value

    def clear(self) -> None:
        """Drop every message except the greeting."""
        if self._busy:
            raise ConversationBusy("Cannot clear while a response is being generated")
        greeting = self._messages[:1] if self._messages and self._messages[0].role == Role.ASSISTANT else []
        self._messages = greeting
