import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx
from pydantic import ValidationError

from ...errors import RequestFailed
from ..base import ChatProvider
from ..models import ChatMessage, LogoRequest, LogoResponse, StreamingResponse
from ..sse import iter_deltas

logger = logging.getLogger(__name__)

CHAT_PATH = "/functions/v1/chat"
LOGO_PATH = "/functions/v1/generate-logo"

DEFAULT_FAILURE_MESSAGE = "Failed to get AI response"


def _error_message(response: httpx.Response, default: str) -> str:
    """Extract the `{"error": ...}` message the hosted functions return."""
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict) and isinstance(body.get("error"), str) and body["error"]:
        return body["error"]
    return default


class HostedGenieProvider(ChatProvider):
    """Provider for the hosted Cardinal Genie functions.

    Hidden design decisions:
    - Endpoint layout (`/functions/v1/chat`, `/functions/v1/generate-logo`)
    - Bearer authentication with the publishable key
    - Server-sent-event body decoding
    - Timeout policy and error mapping to RequestFailed
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        read_timeout: float = 60.0,
        connect_timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        **client_kwargs: Any
    ):
        """Initialize the hosted provider.

        Args:
            api_key: Publishable key sent as bearer token
            base_url: Base URL of the hosted functions
            read_timeout: Seconds to wait for the next body chunk
            connect_timeout: Seconds to wait for the connection
            transport: Optional httpx transport (used by tests)
            **client_kwargs: Additional kwargs for httpx.AsyncClient
        """
        if not base_url:
            raise TypeError("Hosted provider requires a non-empty 'base_url'")
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(read_timeout, connect=connect_timeout),
            transport=transport,
            **client_kwargs
        )

    @property
    def model(self) -> str:
        """The hosted function chooses the model; report the endpoint."""
        return f"{self._base_url}{CHAT_PATH}"

    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        **kwargs: Any
    ) -> StreamingResponse:
        """Send the conversation and return a stream of content deltas.

        Args:
            messages: Conversation history
            **kwargs: Extra top-level JSON fields for the request body

        Returns:
            StreamingResponse over the decoded event stream

        Raises:
            RequestFailed: On non-success status, transport error or timeout
        """
        body = {"messages": [msg.to_wire() for msg in messages], **kwargs}
        request = self._client.build_request("POST", CHAT_PATH, json=body)
        logger.debug("POST %s with %d messages", CHAT_PATH, len(messages))

        try:
            response = await self._client.send(request, stream=True)
        except httpx.TimeoutException as e:
            raise RequestFailed("Timed out connecting to the AI service") from e
        except httpx.HTTPError as e:
            raise RequestFailed(f"Failed to connect to the AI service: {e}") from e

        if not response.is_success:
            await response.aread()
            await response.aclose()
            message = _error_message(response, DEFAULT_FAILURE_MESSAGE)
            raise RequestFailed(message, status_code=response.status_code)

        return StreamingResponse(self._stream_deltas(response))

    async def _stream_deltas(self, response: httpx.Response) -> AsyncIterator[str]:
        """Internal generator decoding the body; always closes the response."""
        encoding = response.charset_encoding or "utf-8"
        try:
            async for delta in iter_deltas(response.aiter_bytes(), encoding):
                yield delta
        except httpx.TimeoutException as e:
            raise RequestFailed("Timed out waiting for the AI response") from e
        except httpx.HTTPError as e:
            raise RequestFailed(f"Connection lost while streaming: {e}") from e
        finally:
            await response.aclose()

    async def generate_logo(self, request: LogoRequest) -> LogoResponse:
        """Invoke the logo function once and return the image reference.

        Raises:
            RequestFailed: On failure status, transport error, or a response
                without an image URL
        """
        try:
            response = await self._client.post(LOGO_PATH, json=request.to_wire())
        except httpx.TimeoutException as e:
            raise RequestFailed("Timed out generating logo") from e
        except httpx.HTTPError as e:
            raise RequestFailed(f"Failed to reach the logo service: {e}") from e

        if not response.is_success:
            message = _error_message(response, "Failed to generate logo. Please try again.")
            raise RequestFailed(message, status_code=response.status_code)

        try:
            return LogoResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise RequestFailed("Logo service returned no image") from e

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
