"""Incremental text accumulation for an in-flight assistant message.

Hides how streamed deltas become the complete-so-far message text:
- Deltas are appended strictly in arrival order
- Every append republishes the full current value, not the delta
- One accumulator per request; it is discarded when the request ends
"""

from collections.abc import AsyncIterable, Callable

UpdateCallback = Callable[[str], None]


class MessageAccumulator:
    """Growing buffer for a single streamed assistant message."""

    def __init__(self, on_update: UpdateCallback | None = None) -> None:
        """Initialize an empty accumulator.

        Args:
            on_update: Called with the full current text after every delta
        """
        self._value = ""
        self._on_update = on_update
        self.delta_count = 0

    @property
    def value(self) -> str:
        """The complete text received so far."""
        return self._value

    def append(self, delta: str) -> str:
        """Append a delta and publish the updated text.

        Returns:
            The full text after the append
        """
        if not delta:
            return self._value
        self._value += delta
        self.delta_count += 1
        if self._on_update is not None:
            self._on_update(self._value)
        return self._value

    async def consume(self, stream: AsyncIterable[str]) -> str:
        """Append every delta of a stream in order.

        Returns:
            The final text once the stream is exhausted
        """
        async for delta in stream:
            self.append(delta)
        return self._value

    def __len__(self) -> int:
        return len(self._value)
