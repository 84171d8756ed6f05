"""Message rendering with an explicit trust boundary.

Only assistant-authored text is interpreted as structured markup. The two
kinds of content are separate types so the difference in rendering
capability is visible wherever a message is handled:

    UserText       -> plain text, nothing interpreted
    AssistantText  -> prose as markdown, then charts, then metric tiles

Extraction is recomputed from the full text on every render. For a
streaming message this rescans the growing buffer on each update, which is
quadratic in message length overall; assistant replies are a few thousand
characters, and the TUI throttles re-renders (see ui/config.py).
"""

from dataclasses import dataclass

from rich.console import Group, RenderableType

from ..llm.models import ChatMessage, Role
from .blocks import extract_blocks, hide_open_fence
from .charts import render_chart, render_metrics
from .formatting import render_plain, render_prose


@dataclass(frozen=True)
class UserText:
    """Text typed by the user; rendered verbatim."""

    text: str


@dataclass(frozen=True)
class AssistantText:
    """Model-generated text; may carry markdown and embedded blocks."""

    text: str
    streaming: bool = False


MessageBody = UserText | AssistantText


def body_of(message: ChatMessage, streaming: bool = False) -> MessageBody:
    """Wrap a chat message's content in the variant matching its author."""
    if message.role == Role.ASSISTANT:
        return AssistantText(message.content, streaming=streaming)
    return UserText(message.content)


def render_assistant(body: AssistantText) -> RenderableType:
    """Render prose, then each chart in document order, then metric tiles."""
    content = extract_blocks(body.text)
    prose = hide_open_fence(content.prose) if body.streaming else content.prose

    parts: list[RenderableType] = []
    if prose:
        parts.append(render_prose(prose))
    for chart in content.charts:
        rendered = render_chart(chart)
        if rendered is not None:
            parts.append(rendered)
    tiles = render_metrics(content.metrics)
    if tiles is not None:
        parts.append(tiles)
    return Group(*parts)


def render_body(body: MessageBody) -> RenderableType:
    """Render a message body according to its trust level."""
    if isinstance(body, AssistantText):
        return render_assistant(body)
    return render_plain(body.text)


def render_message(message: ChatMessage, streaming: bool = False) -> RenderableType:
    """Render a chat message."""
    return render_body(body_of(message, streaming=streaming))
