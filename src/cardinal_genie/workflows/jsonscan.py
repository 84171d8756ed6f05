"""Locating JSON values inside free-form model output.

Hides the scanning strategy: models wrap the requested JSON in prose or
code fences, so the first balanced top-level object/array that parses is
taken. The scanner tracks string literals and escapes, so brackets inside
strings do not affect nesting; when a candidate fails to parse, scanning
resumes at the next opener.
"""

import json
from typing import Any

from ..errors import ParseFailure

_CLOSERS = {"{": "}", "[": "]"}


def _balanced_end(text: str, start: int) -> int | None:
    """Index just past the bracket closing the one at `start`, if any."""
    stack = [_CLOSERS[text[start]]]
    in_string = False
    escaped = False
    for index in range(start + 1, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char in _CLOSERS:
            stack.append(_CLOSERS[char])
        elif char in "}]":
            if char != stack.pop():
                return None
            if not stack:
                return index + 1
    return None


def find_json(text: str, opener: str = "{") -> Any:
    """Return the first balanced JSON value starting with `opener`.

    Args:
        text: Model output that contains the value somewhere
        opener: "{" for an object, "[" for an array

    Returns:
        The decoded value

    Raises:
        ParseFailure: If no balanced candidate parses
        ValueError: If opener is not "{" or "["
    """
    if opener not in _CLOSERS:
        raise ValueError(f"Unsupported opener: {opener!r}")

    start = text.find(opener)
    while start != -1:
        end = _balanced_end(text, start)
        if end is not None:
            try:
                return json.loads(text[start:end])
            except json.JSONDecodeError:
                pass
        start = text.find(opener, start + 1)

    kind = "object" if opener == "{" else "array"
    raise ParseFailure(f"No JSON {kind} found in response")
