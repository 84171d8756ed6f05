"""Unit tests for the event-stream decoder."""
import pytest
from conftest import sse_body, sse_frame
from hypothesis import given
from hypothesis import strategies as st

from cardinal_genie.errors import MalformedFrame
from cardinal_genie.llm import SSEDecoder, decode_chunks, iter_deltas, parse_line
from cardinal_genie.llm.models import END_OF_STREAM


def split_at(data: bytes, cuts: list[int]) -> list[bytes]:
    """Split bytes at the given offsets."""
    points = sorted({c for c in cuts if 0 < c < len(data)})
    bounds = [0, *points, len(data)]
    return [data[a:b] for a, b in zip(bounds, bounds[1:], strict=False)]


class TestParseLine:
    """Tests for single-line interpretation."""

    def test_content_frame(self):
        """Test that a data frame yields its delta content."""
        event = parse_line(sse_frame("Hi").rstrip("\n"))
        assert event is not None
        assert event.content == "Hi"
        assert not event.done

    def test_done_sentinel(self):
        """Test that the sentinel ends the stream."""
        assert parse_line("data: [DONE]") == END_OF_STREAM

    @pytest.mark.parametrize("line", ["", "   ", ": keep-alive", "event: message", "id: 4"])
    def test_lines_without_content(self, line: str):
        """Test that blank, comment and non-data lines carry nothing."""
        assert parse_line(line) is None

    def test_trailing_carriage_return_removed(self):
        """Test CRLF line endings."""
        event = parse_line(sse_frame("x").rstrip("\n") + "\r")
        assert event is not None and event.content == "x"

    def test_invalid_json_raises(self):
        """Test that a malformed payload is reported."""
        with pytest.raises(MalformedFrame):
            parse_line("data: {not json")

    @pytest.mark.parametrize("payload", [
        '{"choices": []}',
        '{"choices": [{"delta": {}}]}',
        '{"choices": [{"delta": {"content": ""}}]}',
        '{"choices": [{"delta": {"role": "assistant"}}]}',
        '[1, 2, 3]',
    ])
    def test_frames_without_delta_content(self, payload: str):
        """Test that frames lacking delta content are ignored."""
        assert parse_line(f"data: {payload}") is None


class TestSSEDecoder:
    """Tests for the incremental decoder."""

    def test_hello_world(self, hello_world_body: bytes):
        """Test end-to-end decoding of a whole body."""
        assert "".join(decode_chunks([hello_world_body])) == "Hello world"

    def test_every_byte_boundary(self, hello_world_body: bytes):
        """Test that any two-way split decodes to the same deltas."""
        expected = list(decode_chunks([hello_world_body]))
        for cut in range(1, len(hello_world_body)):
            chunks = [hello_world_body[:cut], hello_world_body[cut:]]
            assert list(decode_chunks(chunks)) == expected

    def test_byte_at_a_time(self):
        """Test single-byte chunks, including a multi-byte character."""
        body = sse_body("Café ", "☃")
        chunks = [body[i:i + 1] for i in range(len(body))]
        assert "".join(decode_chunks(chunks)) == "Café ☃"

    @given(st.lists(st.integers(min_value=1, max_value=400), max_size=12))
    def test_split_invariance(self, cuts: list[int]):
        """Property test: chunk boundaries never change the decoded deltas."""
        body = sse_body("Revenue ", "grew **42%**", "\n\n```metrics\n", "[]\n```")
        assert list(decode_chunks(split_at(body, cuts))) == list(decode_chunks([body]))

    def test_done_stops_decoding(self):
        """Test that nothing after the sentinel is delivered."""
        body = sse_body("kept") + sse_frame("ignored").encode()
        decoder = SSEDecoder()
        assert decoder.feed(body) == ["kept"]
        assert decoder.done
        assert decoder.feed(sse_frame("later").encode()) == []

    def test_malformed_frame_is_skipped(self):
        """Test that a bad frame does not stop the stream."""
        body = (sse_frame("a") + "data: {oops\n" + sse_frame("b")).encode()
        decoder = SSEDecoder()
        assert decoder.feed(body) == ["a", "b"]
        assert decoder.skipped_frames == 1

    def test_comments_and_crlf(self):
        """Test keep-alive comments and CRLF separators."""
        body = (": ping\r\n" + sse_frame("x").replace("\n", "\r\n") + "data: [DONE]\r\n").encode()
        assert list(decode_chunks([body])) == ["x"]

    def test_incomplete_trailing_line_dropped(self):
        """Test that a final line without a line feed is not delivered."""
        body = sse_frame("a").encode() + sse_frame("b").rstrip("\n").encode()
        assert list(decode_chunks([body])) == ["a"]

    def test_stream_without_sentinel(self):
        """Test that complete lines are delivered when the body just ends."""
        assert list(decode_chunks([sse_body("a", "b", done=False)])) == ["a", "b"]

    def test_close_is_final(self):
        """Test that a closed decoder is done."""
        decoder = SSEDecoder()
        decoder.close()
        assert decoder.done
        assert decoder.feed(sse_body("x")) == []


class TestIterDeltas:
    """Tests for the async decoding entry point."""

    @pytest.mark.asyncio
    async def test_async_chunks(self, hello_world_body: bytes):
        """Test decoding an async byte source split mid-frame."""
        async def chunks():
            yield hello_world_body[:7]
            yield hello_world_body[7:30]
            yield hello_world_body[30:]

        deltas = [delta async for delta in iter_deltas(chunks())]
        assert "".join(deltas) == "Hello world"

    @pytest.mark.asyncio
    async def test_stops_reading_after_sentinel(self):
        """Test that the source is not read past the sentinel."""
        reads = []

        async def chunks():
            for part in (sse_body("one"), sse_frame("two").encode()):
                reads.append(part)
                yield part

        deltas = [delta async for delta in iter_deltas(chunks())]
        assert deltas == ["one"]
        assert len(reads) == 1
