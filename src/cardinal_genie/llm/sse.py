"""Server-sent-event decoding for the streaming chat endpoint.

Hides the wire format of the completion stream:
- Byte chunks arrive in network order, at arbitrary sizes, not aligned to lines
- Lines are `data: <json>` frames, blank lines and `:` comments are ignored
- `data: [DONE]` ends the stream; anything buffered after it is discarded
- Malformed frames are skipped, never fatal

The decoder is a plain state machine so it can be driven by any byte source
(httpx response, test fixture, file) and tested without a network.
"""

import codecs
import json
import logging
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator

from ..errors import MalformedFrame
from .models import END_OF_STREAM, StreamEvent

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


def parse_line(line: str) -> StreamEvent | None:
    """Interpret one complete line of the event stream.

    Args:
        line: A line with its line terminator already removed

    Returns:
        A content event, END_OF_STREAM for the sentinel, or None for lines
        that carry nothing (blank, comment, non-data, empty delta)

    Raises:
        MalformedFrame: If a data line's payload is not valid JSON
    """
    if line.endswith("\r"):
        line = line[:-1]
    if not line.strip() or line.startswith(":"):
        return None
    if not line.startswith(DATA_PREFIX):
        return None

    payload = line[len(DATA_PREFIX):].strip()
    if payload == DONE_SENTINEL:
        return END_OF_STREAM

    try:
        frame = json.loads(payload)
    except json.JSONDecodeError as e:
        raise MalformedFrame(f"Invalid JSON in data frame: {payload[:80]!r}") from e

    content = _delta_content(frame)
    if content:
        return StreamEvent(content=content)
    return None


def _delta_content(frame: object) -> str | None:
    """Pull `choices[0].delta.content` out of a decoded frame, if present."""
    if not isinstance(frame, dict):
        return None
    choices = frame.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    delta = first.get("delta")
    if not isinstance(delta, dict):
        return None
    content = delta.get("content")
    return content if isinstance(content, str) else None


class SSEDecoder:
    """Incremental decoder from raw byte chunks to content deltas.

    Keeps a carry-over buffer between chunks, so the deltas produced for a
    stream do not depend on where the network split it.

    Usage:
        decoder = SSEDecoder("utf-8")
        for chunk in chunks:
            for delta in decoder.feed(chunk):
                ...
            if decoder.done:
                break
        decoder.close()
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        """Initialize the decoder.

        Args:
            encoding: Character encoding declared by the response
        """
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""
        self._done = False
        self.skipped_frames = 0

    @property
    def done(self) -> bool:
        """True once the `[DONE]` sentinel has been seen or the stream closed."""
        return self._done

    def feed(self, chunk: bytes) -> list[str]:
        """Decode a chunk and return the deltas completed by it.

        Returns an empty list once the decoder is done.
        """
        if self._done:
            return []
        self._buffer += self._decoder.decode(chunk)
        return list(self._drain())

    def close(self) -> list[str]:
        """Signal end of the byte stream.

        Flushes the character decoder and returns any deltas from lines that
        were completed by the flush. A trailing line without a line feed is an
        incomplete frame and is dropped.
        """
        if self._done:
            return []
        self._buffer += self._decoder.decode(b"", final=True)
        deltas = list(self._drain())
        if self._buffer.strip():
            logger.debug("Dropping incomplete trailing frame: %r", self._buffer[:80])
        self._buffer = ""
        self._done = True
        return deltas

    def _drain(self) -> Iterator[str]:
        while not self._done:
            newline_index = self._buffer.find("\n")
            if newline_index == -1:
                return
            line = self._buffer[:newline_index]
            self._buffer = self._buffer[newline_index + 1:]

            try:
                event = parse_line(line)
            except MalformedFrame as e:
                self.skipped_frames += 1
                logger.debug("Skipping malformed frame: %s", e)
                continue

            if event is None:
                continue
            if event.done:
                self._done = True
                self._buffer = ""
                return
            yield event.content


def decode_chunks(chunks: Iterable[bytes], encoding: str = "utf-8") -> Iterator[str]:
    """Decode a synchronous sequence of byte chunks into content deltas."""
    decoder = SSEDecoder(encoding)
    for chunk in chunks:
        yield from decoder.feed(chunk)
        if decoder.done:
            return
    yield from decoder.close()


async def iter_deltas(
    chunks: AsyncIterable[bytes],
    encoding: str = "utf-8",
) -> AsyncIterator[str]:
    """Decode an async byte stream into content deltas.

    Stops reading as soon as the sentinel is seen; the caller is responsible
    for closing the underlying response.
    """
    decoder = SSEDecoder(encoding)
    async for chunk in chunks:
        for delta in decoder.feed(chunk):
            yield delta
        if decoder.done:
            return
    for delta in decoder.close():
        yield delta
