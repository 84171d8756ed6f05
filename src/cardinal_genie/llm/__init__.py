from .accumulator import MessageAccumulator
from .base import ChatProvider
from .factory import create_chat_provider
from .models import (
    ChatMessage,
    LLMResponse,
    LogoRequest,
    LogoResponse,
    Role,
    StreamEvent,
    StreamingResponse,
)
from .providers import HostedGenieProvider, OpenAIGatewayProvider
from .sse import SSEDecoder, decode_chunks, iter_deltas, parse_line

__all__ = [
    "ChatProvider",
    "create_chat_provider",
    "ChatMessage",
    "LLMResponse",
    "LogoRequest",
    "LogoResponse",
    "MessageAccumulator",
    "Role",
    "SSEDecoder",
    "StreamEvent",
    "StreamingResponse",
    "HostedGenieProvider",
    "OpenAIGatewayProvider",
    "decode_chunks",
    "iter_deltas",
    "parse_line",
]
