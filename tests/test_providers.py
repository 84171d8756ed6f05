"""Unit tests for chat providers and the provider factory."""
import json

import httpx
import pytest
from conftest import BASE_URL, sse_body
from hypothesis import given
from hypothesis import strategies as st

from cardinal_genie.errors import RequestFailed
from cardinal_genie.llm import (
    ChatMessage,
    ChatProvider,
    HostedGenieProvider,
    LogoRequest,
    OpenAIGatewayProvider,
    Role,
    create_chat_provider,
)

HISTORY = [ChatMessage(role=Role.USER, content="Hello")]

RATE_LIMIT = "Rate limit exceeded. Please try again in a moment."
NO_CREDITS = "AI credits depleted. Please add credits to continue."


class TestChatProvider:
    """Tests for the ChatProvider interface."""

    def test_provider_is_abstract(self):
        """Test that ChatProvider cannot be instantiated directly."""
        with pytest.raises(TypeError):
            ChatProvider()  # type: ignore


class TestHostedProvider:
    """Tests for the hosted functions provider."""

    @pytest.mark.asyncio
    async def test_request_shape(self, make_provider):
        """Test the endpoint, bearer header and message body."""
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["auth"] = request.headers["Authorization"]
            captured["body"] = json.loads(request.read())
            return httpx.Response(200, content=sse_body("ok"))

        async with make_provider(handler) as provider:
            response = await provider.chat_completion(HISTORY)

        assert response.content == "ok"
        assert captured["url"] == f"{BASE_URL}/functions/v1/chat"
        assert captured["auth"] == "Bearer test-key"
        assert captured["body"] == {"messages": [{"role": "user", "content": "Hello"}]}

    @pytest.mark.asyncio
    async def test_streaming_deltas(self, streaming_provider):
        """Test that deltas arrive in order."""
        provider = streaming_provider("Hello", " ", "world")
        stream = await provider.chat_completion_stream(HISTORY)
        async with stream:
            deltas = [d async for d in stream]
        assert deltas == ["Hello", " ", "world"]
        await provider.close()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,message", [
        (429, RATE_LIMIT),
        (402, NO_CREDITS),
    ])
    async def test_error_body_message_used(self, make_provider, status, message):
        """Test that the function's error message is surfaced verbatim."""
        provider = make_provider(lambda r: httpx.Response(status, json={"error": message}))
        with pytest.raises(RequestFailed) as exc_info:
            await provider.chat_completion_stream(HISTORY)
        assert exc_info.value.message == message
        assert exc_info.value.status_code == status
        assert str(exc_info.value) == f"{message} (HTTP {status})"
        await provider.close()

    @pytest.mark.asyncio
    async def test_error_without_body(self, make_provider):
        """Test the default message for an unreadable error body."""
        provider = make_provider(lambda r: httpx.Response(500, text="Internal error"))
        with pytest.raises(RequestFailed) as exc_info:
            await provider.chat_completion_stream(HISTORY)
        assert exc_info.value.message == "Failed to get AI response"
        assert exc_info.value.status_code == 500
        await provider.close()

    @pytest.mark.asyncio
    async def test_transport_error(self, make_provider):
        """Test that connection failures become RequestFailed."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        provider = make_provider(handler)
        with pytest.raises(RequestFailed) as exc_info:
            await provider.chat_completion_stream(HISTORY)
        assert exc_info.value.status_code is None
        await provider.close()

    @pytest.mark.asyncio
    async def test_timeout(self, make_provider):
        """Test that timeouts become RequestFailed."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        provider = make_provider(handler)
        with pytest.raises(RequestFailed, match="Timed out"):
            await provider.chat_completion_stream(HISTORY)
        await provider.close()

    @pytest.mark.asyncio
    async def test_on_update_receives_growing_text(self, streaming_provider):
        """Test chat_completion with a progress callback."""
        seen: list[str] = []
        async with streaming_provider("a", "b") as provider:
            await provider.chat_completion(HISTORY, on_update=seen.append)
        assert seen == ["a", "ab"]

    def test_empty_base_url_rejected(self):
        """Test that a blank base URL is refused."""
        with pytest.raises(TypeError):
            HostedGenieProvider(api_key="k", base_url="")

    def test_model_reports_endpoint(self, make_provider):
        """Test the reported model name."""
        provider = make_provider(lambda r: httpx.Response(200))
        assert provider.model == f"{BASE_URL}/functions/v1/chat"


class TestHostedLogo:
    """Tests for logo generation."""

    @pytest.mark.asyncio
    async def test_logo_request_body(self, make_provider):
        """Test the camelCase body and the returned image URL."""
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["path"] = request.url.path
            captured["body"] = json.loads(request.read())
            return httpx.Response(200, json={"imageUrl": "data:image/png;base64,AAAA"})

        async with make_provider(handler) as provider:
            result = await provider.generate_logo(LogoRequest(business_name="Acme", industry="Tech"))

        assert result.image_url == "data:image/png;base64,AAAA"
        assert captured["path"] == "/functions/v1/generate-logo"
        assert captured["body"] == {
            "businessName": "Acme",
            "industry": "Tech",
            "style": "modern",
            "colors": "professional color palette",
        }

    @pytest.mark.asyncio
    async def test_logo_without_image(self, make_provider):
        """Test that a response without an image is a failure."""
        provider = make_provider(lambda r: httpx.Response(200, json={}))
        with pytest.raises(RequestFailed, match="no image"):
            await provider.generate_logo(LogoRequest(business_name="Acme", industry="Tech"))
        await provider.close()

    @pytest.mark.asyncio
    async def test_logo_error_status(self, make_provider):
        """Test that a failing logo call carries the service message."""
        provider = make_provider(lambda r: httpx.Response(429, json={"error": RATE_LIMIT}))
        with pytest.raises(RequestFailed) as exc_info:
            await provider.generate_logo(LogoRequest(business_name="Acme", industry="Tech"))
        assert exc_info.value.message == RATE_LIMIT
        await provider.close()


def gateway(handler) -> OpenAIGatewayProvider:
    """Gateway provider answering through an httpx.MockTransport."""
    return OpenAIGatewayProvider(
        api_key="gw-key",
        base_url="https://gateway.test/v1",
        system_prompt="You are a test.",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


class TestOpenAIGatewayProvider:
    """Tests for the direct gateway provider."""

    @pytest.mark.asyncio
    async def test_system_prompt_prepended(self):
        """Test that the system prompt leads the sent messages."""
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["body"] = json.loads(request.read())
            return httpx.Response(
                200,
                headers={"Content-Type": "text/event-stream"},
                content=sse_body("Hi", "!"),
            )

        async with gateway(handler) as provider:
            response = await provider.chat_completion(HISTORY)

        assert response.content == "Hi!"
        body = captured["body"]
        assert body["stream"] is True
        assert body["model"] == "google/gemini-2.5-flash"
        assert body["messages"][0] == {"role": "system", "content": "You are a test."}
        assert body["messages"][1] == {"role": "user", "content": "Hello"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,message", [
        (429, RATE_LIMIT),
        (402, NO_CREDITS),
    ])
    async def test_status_messages(self, status, message):
        """Test that gateway statuses map to the user-facing messages."""
        provider = gateway(lambda r: httpx.Response(status, json={"error": {"message": "x"}}))
        with pytest.raises(RequestFailed) as exc_info:
            await provider.chat_completion_stream(HISTORY)
        assert exc_info.value.message == message
        assert exc_info.value.status_code == status
        await provider.close()

    @pytest.mark.asyncio
    async def test_logo_not_supported(self):
        """Test that the gateway cannot generate logos."""
        provider = gateway(lambda r: httpx.Response(200))
        with pytest.raises(NotImplementedError):
            await provider.generate_logo(LogoRequest(business_name="A", industry="B"))
        await provider.close()


class TestProviderFactory:
    """Tests for create_chat_provider."""

    def test_create_hosted(self):
        """Test creating the hosted provider."""
        provider = create_chat_provider("hosted", api_key="k", base_url=BASE_URL)
        assert isinstance(provider, HostedGenieProvider)

    def test_create_openai(self):
        """Test creating the gateway provider."""
        provider = create_chat_provider("OpenAI", api_key="k", model="m")
        assert isinstance(provider, OpenAIGatewayProvider)
        assert provider.model == "m"

    def test_hosted_requires_base_url(self):
        """Test missing configuration."""
        with pytest.raises(TypeError):
            create_chat_provider("hosted", api_key="k")

    def test_openai_requires_api_key(self):
        """Test missing configuration."""
        with pytest.raises(TypeError):
            create_chat_provider("openai")

    @given(st.text().filter(
        lambda s: s.lower() not in ("hosted", "genie", "supabase", "openai", "gateway")
    ))
    def test_unknown_provider_rejected(self, name: str):
        """Property test: unknown provider names raise ValueError."""
        with pytest.raises(ValueError, match="Unsupported provider"):
            create_chat_provider(name, api_key="k", base_url=BASE_URL)
