from abc import ABC, abstractmethod
from typing import Any

from .accumulator import MessageAccumulator, UpdateCallback
from .models import ChatMessage, LLMResponse, LogoRequest, LogoResponse, StreamingResponse


class ChatProvider(ABC):
    """Abstract base class for chat completion backends.

    This module hides the design decision of which endpoint serves completions.
    Implementations must handle endpoint-specific details like:
    - Client setup and authentication
    - Request/response format conversion
    - Mapping transport failures to RequestFailed
    - Bounded timeouts

    Supports async context manager protocol for proper resource cleanup:
        async with provider:
            stream = await provider.chat_completion_stream(messages)
        # Automatically cleaned up
    """

    @property
    @abstractmethod
    def model(self) -> str:
        """Name of the model or endpoint answering requests."""

    @abstractmethod
    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        **kwargs: Any
    ) -> StreamingResponse:
        """Start a streaming chat completion.

        The request is sent before this returns, so a failed request raises
        here rather than during iteration.

        Args:
            messages: Conversation history, oldest first
            **kwargs: Provider-specific parameters

        Returns:
            StreamingResponse yielding content deltas in arrival order

        Raises:
            RequestFailed: Non-success status, missing body or transport error
        """

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        on_update: UpdateCallback | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Run a streaming completion to the end and return the full text.

        Args:
            messages: Conversation history, oldest first
            on_update: Called with the complete-so-far text after every delta
            **kwargs: Provider-specific parameters

        Returns:
            LLMResponse containing the accumulated content
        """
        accumulator = MessageAccumulator(on_update)
        stream = await self.chat_completion_stream(messages, **kwargs)
        async with stream:
            await accumulator.consume(stream)
        return LLMResponse(content=accumulator.value, model=self.model)

    async def generate_logo(self, request: LogoRequest) -> LogoResponse:
        """Generate a logo image for a business.

        Raises:
            NotImplementedError: If the backend has no image generation
        """
        raise NotImplementedError(
            f"{type(self).__name__} does not support logo generation"
        )

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "ChatProvider":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
