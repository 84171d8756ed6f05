"""Rich-text rendering of assistant prose.

Hides the details of markdown rendering. Structure recognized: headings
(levels 1-4), paragraphs, ordered and unordered lists (one row per item),
emphasis and bold, inline and fenced code, block quotes, tables, links
and horizontal rules.
"""

from rich.markdown import Markdown
from rich.text import Text

CODE_THEME = "monokai"


def render_prose(text: str) -> Markdown:
    """Render prose as markdown.

    Links are emitted as terminal hyperlinks; the terminal opens them in
    the browser, outside the application, with no referrer.
    """
    return Markdown(text, code_theme=CODE_THEME, hyperlinks=True)


def render_plain(text: str, style: str = "") -> Text:
    """Render text verbatim: no markup, markdown or Rich tags interpreted."""
    return Text(text, style=style, overflow="fold")
