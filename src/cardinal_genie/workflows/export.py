"""Plain-text exports and logo saving.

Hides the on-disk formats of generated documents: file naming by slug,
the business-plan section layout, the pitch-deck slide layout, and how a
logo URL or data URI becomes a PNG file.
"""

import base64
import binascii
import logging
import re
from pathlib import Path

import httpx

from ..errors import RequestFailed

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")
_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+/-]*)(?P<b64>;base64)?,(?P<data>.*)$", re.DOTALL)

RULE = "=" * 50
SUBRULE = "-" * 30


def slugify(name: str) -> str:
    """File stem for a business name: whitespace runs to '-', lowercased."""
    return _WHITESPACE_RE.sub("-", name).lower()


def export_filename(name: str, suffix: str) -> str:
    """E.g. export_filename("Acme Co", "pitch-deck.txt") -> "acme-co-pitch-deck.txt"."""
    return f"{slugify(name)}-{suffix}"


def write_export(directory: Path, filename: str, text: str) -> Path:
    """Write an export file and return its path."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    path.write_text(text, encoding="utf-8")
    logger.info("Exported %s", path)
    return path


def format_sections(title: str, sections: list[tuple[str, str]]) -> str:
    """Lay out titled sections under a ruled heading."""
    parts = [f"{title}\n{RULE}\n"]
    for heading, body in sections:
        parts.append(f"{heading}\n{SUBRULE}\n{body}\n")
    return "\n".join(parts)


def format_slides(slides: list[tuple[str, str]]) -> str:
    """Lay out slides as numbered 'SLIDE n: TITLE' blocks."""
    blocks = [
        f"SLIDE {number}: {title.upper()}\n{RULE}\n\n{content}\n"
        for number, (title, content) in enumerate(slides, start=1)
    ]
    return "\n\n".join(blocks)


def decode_data_uri(uri: str) -> bytes:
    """Decode a `data:` URI payload.

    Raises:
        ValueError: If the URI is not a data URI or the payload is not valid base64
    """
    match = _DATA_URI_RE.match(uri)
    if match is None:
        raise ValueError("Not a data URI")
    data = match.group("data")
    if not match.group("b64"):
        return data.encode("utf-8")
    try:
        return base64.b64decode(data, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e


async def fetch_image(url: str, client: httpx.AsyncClient | None = None) -> bytes:
    """Return image bytes for a data URI or an http(s) URL.

    Raises:
        RequestFailed: If the download fails
        ValueError: If the URL scheme is not supported or a data URI is malformed
    """
    if url.startswith("data:"):
        return decode_data_uri(url)
    if not url.startswith(("http://", "https://")):
        raise ValueError(f"Unsupported image URL: {url[:40]}")

    owns_client = client is None
    client = client or httpx.AsyncClient(timeout=httpx.Timeout(60.0, connect=10.0))
    try:
        response = await client.get(url)
        response.raise_for_status()
        return response.content
    except httpx.HTTPStatusError as e:
        raise RequestFailed("Failed to download logo", e.response.status_code) from e
    except httpx.HTTPError as e:
        raise RequestFailed(f"Failed to download logo: {e}") from e
    finally:
        if owns_client:
            await client.aclose()


async def save_logo(
    image_url: str,
    business_name: str,
    directory: Path,
    client: httpx.AsyncClient | None = None,
) -> Path:
    """Save a generated logo as `<slug>-logo.png` and return its path."""
    data = await fetch_image(image_url, client=client)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(business_name, "logo.png")
    path.write_bytes(data)
    logger.info("Saved logo to %s (%d bytes)", path, len(data))
    return path
