from collections.abc import AsyncIterator
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Role(str, Enum):
    """Author of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """Represents a chat message in a conversation."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    role: Role = Field(description="Role of the message sender: 'user' or 'assistant'")
    content: str = Field(description="Content of the message")

    def to_wire(self) -> dict[str, str]:
        """Return the `{"role", "content"}` dict sent to the chat endpoint."""
        return {"role": str(self.role), "content": self.content}


@dataclass(frozen=True)
class StreamEvent:
    """A decoded unit of the completion stream.

    Either a content delta or the end-of-stream signal, never both.
    """

    content: str = ""
    done: bool = False


END_OF_STREAM = StreamEvent(done=True)


class StreamingResponse:
    """Wrapper for a streaming completion that yields text deltas.

    Acts as an async iterator for content deltas. Closing it cancels the
    underlying body read; deltas are never yielded after close.

    Usage:
        stream = await provider.chat_completion_stream(messages)
        async with stream:
            async for delta in stream:
                print(delta, end="")
    """

    def __init__(self, async_iter: AsyncIterator[str]):
        """Initialize with an async iterator of text deltas.

        Args:
            async_iter: Async generator yielding content deltas
        """
        self._iter = async_iter
        self._closed = False

    @property
    def closed(self) -> bool:
        """Whether the stream has been closed."""
        return self._closed

    async def aclose(self) -> None:
        """Stop reading the response body and release the connection."""
        if self._closed:
            return
        self._closed = True
        aclose = getattr(self._iter, "aclose", None)
        if aclose is not None:
            await aclose()

    def __aiter__(self) -> "StreamingResponse":
        """Return self as async iterator."""
        return self

    async def __anext__(self) -> str:
        """Get next delta from the underlying iterator."""
        if self._closed:
            raise StopAsyncIteration
        return await self._iter.__anext__()

    async def __aenter__(self) -> "StreamingResponse":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()


class LLMResponse(BaseModel):
    """A complete (non-streamed) response from a provider."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(description="Generated text content")
    model: str = Field(description="Model or endpoint that generated the response")


class LogoRequest(BaseModel):
    """Body of the one-shot logo generation call."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    business_name: str = Field(min_length=1, description="Business name shown in the logo")
    industry: str = Field(min_length=1, description="Industry of the business")
    style: str = Field(default="modern", description="Visual style, e.g. 'modern', 'elegant'")
    colors: str = Field(
        default="professional color palette",
        description="Free-text color preference"
    )

    def to_wire(self) -> dict[str, str]:
        """Return the camelCase body expected by the logo function."""
        return self.model_dump(by_alias=True)


class LogoResponse(BaseModel):
    """Response of the logo generation call."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    image_url: str = Field(min_length=1, description="Renderable image URL or data URI")
