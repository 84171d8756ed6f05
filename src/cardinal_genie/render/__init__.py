"""Rendering of assistant content.

Module structure (each module hides a design decision):
- blocks.py: Embedded chart/metrics grammar and extraction
- charts.py: Visual encoding of charts and metric tiles
- formatting.py: Markdown rendering of prose
- message.py: Trust boundary between user and assistant text
"""

from .blocks import (
    ChartBlock,
    ChartType,
    ExtractedContent,
    MetricEntry,
    extract_blocks,
    hide_open_fence,
)
from .charts import (
    CHART_PALETTE,
    PieSlice,
    change_is_positive,
    pie_slices,
    render_chart,
    render_metrics,
    series_color,
    series_keys,
)
from .formatting import render_plain, render_prose
from .message import (
    AssistantText,
    MessageBody,
    UserText,
    body_of,
    render_body,
    render_message,
)

__all__ = [
    "AssistantText",
    "CHART_PALETTE",
    "ChartBlock",
    "ChartType",
    "ExtractedContent",
    "MessageBody",
    "MetricEntry",
    "PieSlice",
    "UserText",
    "body_of",
    "change_is_positive",
    "extract_blocks",
    "hide_open_fence",
    "pie_slices",
    "render_body",
    "render_chart",
    "render_message",
    "render_metrics",
    "render_plain",
    "render_prose",
    "series_color",
    "series_keys",
]
