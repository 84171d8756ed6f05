"""Extraction of embedded chart and metrics blocks from assistant text.

Hides the embedded mini-markup grammar:

    ```chart:<bar|line|pie|area> <optional title>
    <JSON array of records>
    ```

    ```metrics
    <JSON array of {label, value, change?}>
    ```

Extraction is re-run on every render of a still-streaming message, so the
patterns are anchored on literal fence openers and use a lazy body match
that stops at the first closing fence (no nested quantifiers).
"""

import json
import logging
import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ..errors import MalformedBlock

logger = logging.getLogger(__name__)

CHART_PATTERN = r"```chart:(bar|line|pie|area)([ \t][^\n]*)?\n(.*?)```"
METRICS_PATTERN = r"```metrics[ \t]*\n(.*?)```"

FENCE_RE = re.compile(f"{CHART_PATTERN}|{METRICS_PATTERN}", re.DOTALL)
OPEN_FENCE_RE = re.compile(r"```(?:chart:|metrics)")


class ChartType(str, Enum):
    """Chart kinds the renderer knows how to draw."""

    BAR = "bar"
    LINE = "line"
    PIE = "pie"
    AREA = "area"


class ChartBlock(BaseModel):
    """A chart specification embedded in assistant text."""

    model_config = ConfigDict(frozen=True)

    type: ChartType = Field(description="Kind of chart to draw")
    title: str | None = Field(default=None, description="Free-text title from the fence line")
    rows: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Records with a 'name'/'label' field plus numeric series"
    )


class MetricEntry(BaseModel):
    """One metric tile: label, value and an optional signed change."""

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    label: str
    value: str
    change: str | None = None


class ExtractedContent(BaseModel):
    """Result of extraction: residual prose plus the recognized blocks."""

    model_config = ConfigDict(frozen=True)

    prose: str = ""
    charts: list[ChartBlock] = Field(default_factory=list)
    metrics: list[MetricEntry] = Field(default_factory=list)


_ROWS_ADAPTER = TypeAdapter(list[dict[str, Any]])
_METRICS_ADAPTER = TypeAdapter(list[MetricEntry])


def parse_chart(chart_type: str, title: str | None, body: str) -> ChartBlock:
    """Parse the body of a chart fence.

    Raises:
        MalformedBlock: If the body is not a JSON array of objects
    """
    try:
        rows = _ROWS_ADAPTER.validate_python(json.loads(body))
    except (json.JSONDecodeError, ValidationError) as e:
        raise MalformedBlock(f"Invalid chart:{chart_type} body") from e
    title = title.strip() if title else None
    return ChartBlock(type=ChartType(chart_type), title=title or None, rows=rows)


def parse_metrics(body: str) -> list[MetricEntry]:
    """Parse the body of a metrics fence.

    Raises:
        MalformedBlock: If the body is not a JSON array of metric records
    """
    try:
        return _METRICS_ADAPTER.validate_python(json.loads(body))
    except (json.JSONDecodeError, ValidationError) as e:
        raise MalformedBlock("Invalid metrics body") from e


def strip_blocks(text: str) -> str:
    """Remove every chart/metrics fence (valid or not) and trim the result."""
    prose = text
    # A removal can splice backticks into a new fence; strip to a fixed point
    while FENCE_RE.search(prose):
        prose = FENCE_RE.sub("", prose)
    return prose.strip()


def extract_blocks(text: str) -> ExtractedContent:
    """Split text into residual prose, chart blocks and metric entries.

    One pass over the fences decides both what is removed from the prose
    and what is parsed, so every removed fence is the one that was read.
    Malformed blocks are dropped but still removed from the prose.
    Idempotent: extracting the returned prose again yields no blocks and
    the same prose.
    """
    charts: list[ChartBlock] = []
    metrics: list[MetricEntry] = []
    pieces: list[str] = []
    position = 0
    for match in FENCE_RE.finditer(text):
        pieces.append(text[position:match.start()])
        position = match.end()
        chart_type, title, chart_body, metrics_body = match.groups()
        try:
            if chart_type is not None:
                charts.append(parse_chart(chart_type, title, chart_body))
            else:
                metrics.extend(parse_metrics(metrics_body))
        except MalformedBlock as e:
            logger.debug("Dropping block: %s", e)
    pieces.append(text[position:])

    return ExtractedContent(
        prose=strip_blocks("".join(pieces)),
        charts=charts,
        metrics=metrics,
    )


def hide_open_fence(prose: str) -> str:
    """Cut prose at an embedded fence that has not been closed yet.

    Used while a message is still streaming so a half-received chart or
    metrics body is not shown as raw text.
    """
    for match in OPEN_FENCE_RE.finditer(prose):
        if "```" not in prose[match.end():]:
            return prose[:match.start()].rstrip()
    return prose
