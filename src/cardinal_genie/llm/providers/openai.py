import logging
from collections.abc import AsyncIterator
from typing import Any

import openai
from openai import AsyncOpenAI

from ...errors import RequestFailed
from ...prompts import get_system_prompt
from ..base import ChatProvider
from ..models import ChatMessage, StreamingResponse

logger = logging.getLogger(__name__)

# Messages the hosted function returns for these gateway statuses
STATUS_MESSAGES = {
    429: "Rate limit exceeded. Please try again in a moment.",
    402: "AI credits depleted. Please add credits to continue.",
}


def _request_failed(error: openai.APIError) -> RequestFailed:
    """Map an OpenAI SDK error to RequestFailed."""
    if isinstance(error, openai.APIStatusError):
        status = error.status_code
        message = STATUS_MESSAGES.get(status, f"AI gateway error: {status}")
        return RequestFailed(message, status_code=status)
    if isinstance(error, openai.APITimeoutError):
        return RequestFailed("Timed out waiting for the AI gateway")
    return RequestFailed(f"Failed to reach the AI gateway: {error}")


class OpenAIGatewayProvider(ChatProvider):
    """Direct provider for an OpenAI-compatible completion gateway.

    Does client-side what the hosted chat function does server-side:
    prepends the Cardinal Genie system prompt and streams the completion.

    Hidden design decisions:
    - OpenAI API client initialization
    - System prompt injection
    - Error mapping (status codes to user-facing messages)
    """

    def __init__(
        self,
        api_key: str,
        model: str = "google/gemini-2.5-flash",
        base_url: str | None = None,
        system_prompt: str | None = None,
        timeout: float = 60.0,
        **client_kwargs: Any
    ):
        """Initialize the gateway provider.

        Args:
            api_key: Gateway API key
            model: Model to request
            base_url: Optional gateway base URL (OpenAI when omitted)
            system_prompt: Override for the packaged system prompt
            timeout: Request timeout in seconds
            **client_kwargs: Additional kwargs for AsyncOpenAI client
        """
        self._model = model
        self._system_prompt = system_prompt
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
            **client_kwargs
        )

    @property
    def model(self) -> str:
        """Get the default model name."""
        return self._model

    def _build_messages(self, messages: list[ChatMessage]) -> list[dict[str, str]]:
        system_prompt = self._system_prompt or get_system_prompt()
        return [{"role": "system", "content": system_prompt}] + [
            msg.to_wire() for msg in messages
        ]

    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        **kwargs: Any
    ) -> StreamingResponse:
        """Start a streaming completion through the gateway.

        Args:
            messages: Conversation history (system prompt is added here)
            **kwargs: Additional OpenAI-specific parameters

        Returns:
            StreamingResponse yielding content deltas

        Raises:
            RequestFailed: On gateway error status or transport failure
        """
        request_params: dict[str, Any] = {
            "model": self._model,
            "messages": self._build_messages(messages),
            "stream": True,
            **kwargs,
        }
        logger.debug("Gateway completion with %d messages", len(messages))

        try:
            stream = await self._client.chat.completions.create(**request_params)
        except openai.APIError as e:
            raise _request_failed(e) from e

        return StreamingResponse(self._chat_stream_generator(stream))

    async def _chat_stream_generator(self, stream: Any) -> AsyncIterator[str]:
        """Internal generator yielding delta content from SDK chunks."""
        try:
            async for chunk in stream:
                if chunk.choices and chunk.choices[0].delta.content:
                    yield chunk.choices[0].delta.content
        except openai.APIError as e:
            raise _request_failed(e) from e
        finally:
            await stream.close()

    async def close(self) -> None:
        """Close the OpenAI client.

        Note: Uses the OpenAI SDK's async context manager for proper cleanup.
        See: https://github.com/openai/openai-python#async-usage
        """
        await self._client.close()
