"""Pytest configuration and shared fixtures."""
import json
from collections.abc import Callable

import httpx
import pytest

from cardinal_genie.llm import HostedGenieProvider

BASE_URL = "https://genie.test"


def sse_frame(content: str) -> str:
    """One `data:` line carrying a content delta."""
    payload = {"choices": [{"delta": {"content": content}}]}
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


def sse_body(*deltas: str, done: bool = True) -> bytes:
    """A complete event-stream body for the given deltas."""
    body = "".join(sse_frame(delta) for delta in deltas)
    if done:
        body += "data: [DONE]\n\n"
    return body.encode("utf-8")


@pytest.fixture
def hello_world_body() -> bytes:
    """Event stream that spells out 'Hello world'."""
    return sse_body("Hello", " ", "world")


@pytest.fixture
def make_provider() -> Callable[..., HostedGenieProvider]:
    """Build a hosted provider answering through an httpx.MockTransport."""
    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> HostedGenieProvider:
        return HostedGenieProvider(
            api_key="test-key",
            base_url=BASE_URL,
            transport=httpx.MockTransport(handler),
        )

    return _make


@pytest.fixture
def streaming_provider(make_provider) -> Callable[..., HostedGenieProvider]:
    """Build a provider whose chat endpoint streams the given deltas."""
    def _make(*deltas: str) -> HostedGenieProvider:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                headers={"Content-Type": "text/event-stream"},
                content=sse_body(*deltas),
            )
        return make_provider(handler)

    return _make
