"""Common scaffolding for the document-generation workflows.

Each workflow validates its form, renders a prompt template into a single
user message, streams the completion through the provider and parses the
final text. Progress is reported through the same complete-so-far callback
the chat view uses.
"""

import logging
from collections.abc import Callable

from pydantic import BaseModel

from ..errors import MissingInformation, RequestFailed
from ..llm.base import ChatProvider
from ..llm.models import ChatMessage, Role
from ..prompts import render_prompt

logger = logging.getLogger(__name__)


def missing_fields(form: BaseModel, required: tuple[str, ...]) -> list[str]:
    """Names of required fields that are blank."""
    return [name for name in required if not str(getattr(form, name) or "").strip()]


def require(form: BaseModel, required: tuple[str, ...]) -> None:
    """Raise MissingInformation when any required field is blank."""
    missing = missing_fields(form, required)
    if missing:
        raise MissingInformation(missing)


class Workflow:
    """A one-prompt generation run against a chat provider."""

    prompt_name: str = ""

    def __init__(self, provider: ChatProvider):
        """Initialize the workflow.

        Args:
            provider: Backend answering the generation request
        """
        self._provider = provider

    def build_prompt(self, **fields: object) -> str:
        """Render this workflow's prompt template."""
        return render_prompt(self.prompt_name, **fields)

    async def _complete(
        self,
        prompt: str,
        on_update: Callable[[str], None] | None = None,
    ) -> str:
        """Stream a single-message completion and return the final text."""
        logger.info("Running %s workflow", self.prompt_name)
        try:
            response = await self._provider.chat_completion(
                [ChatMessage(role=Role.USER, content=prompt)],
                on_update=on_update,
            )
        except RequestFailed as e:
            logger.warning("%s workflow request failed: %s", self.prompt_name, e)
            raise
        logger.debug("%s workflow produced %d chars", self.prompt_name, len(response.content))
        return response.content
