"""Terminal rendering of chart blocks and metric tiles.

Hides the visual encoding of embedded data:
- Series discovery (every key other than 'name'/'label' is a series)
- Deterministic colors cycling through a fixed palette by series index
- Bar/line/area/pie drawn with block characters as Rich renderables
- Metric tiles with a signed change indicator
"""

import math
from dataclasses import dataclass
from typing import Any

from rich.columns import Columns
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .blocks import ChartBlock, ChartType, MetricEntry

# Cardinal red first, then supporting tones
CHART_PALETTE = (
    "#c2001f",
    "#e6193a",
    "#f25c74",
    "#b3b3b3",
    "#2b9bd9",
    "#2eb872",
)

LABEL_KEYS = ("name", "label")
PIE_VALUE_KEY = "value"

BAR_WIDTH = 40
SPARK_CHARS = "▁▂▃▄▅▆▇█"
AREA_HEIGHT = 8

POSITIVE_STYLE = "green"
NEGATIVE_STYLE = "red"


@dataclass(frozen=True)
class PieSlice:
    """A pie slice with its share of the total, rounded to whole percent."""

    name: str
    value: float
    percent: int
    color: str

    @property
    def label(self) -> str:
        return f"{self.name}: {self.percent}%"


def series_color(index: int) -> str:
    """Color for the series at `index`; cycles through the palette."""
    return CHART_PALETTE[index % len(CHART_PALETTE)]


def row_label(row: dict[str, Any]) -> str:
    """The category label of a row ('name', else 'label')."""
    for key in LABEL_KEYS:
        if key in row:
            return str(row[key])
    return ""


def series_keys(rows: list[dict[str, Any]]) -> list[str]:
    """Series names, taken from the first row's non-label keys."""
    if not rows:
        return []
    return [key for key in rows[0] if key not in LABEL_KEYS]


def as_number(value: Any) -> float | None:
    """Numeric value of a cell, or None when it is not a finite number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        try:
            number = float(value.replace(",", "").strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _format_number(value: float) -> str:
    if value == int(value):
        return f"{int(value):,}"
    return f"{value:,.2f}"


def round_percent(share: float) -> int:
    """Round a 0..1 share to a whole percent, halves away from zero."""
    return int(math.floor(share * 100 + 0.5))


def pie_slices(rows: list[dict[str, Any]]) -> list[PieSlice]:
    """Compute pie slices from the reserved 'value' field of each row."""
    values = [as_number(row.get(PIE_VALUE_KEY)) or 0.0 for row in rows]
    total = sum(values)
    slices = []
    for index, (row, value) in enumerate(zip(rows, values, strict=True)):
        share = value / total if total > 0 else 0.0
        slices.append(PieSlice(
            name=row_label(row),
            value=value,
            percent=round_percent(share),
            color=series_color(index),
        ))
    return slices


def _legend(keys: list[str]) -> Text:
    legend = Text()
    for index, key in enumerate(keys):
        if index:
            legend.append("   ")
        legend.append("■ ", style=series_color(index))
        legend.append(key)
    return legend


def _bar_chart(rows: list[dict[str, Any]]) -> RenderableType:
    keys = series_keys(rows)
    values = [as_number(row.get(key)) for row in rows for key in keys]
    peak = max((abs(v) for v in values if v is not None), default=0.0)

    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("label", style="bold", no_wrap=True)
    table.add_column("bar")
    table.add_column("value", justify="right")

    for row in rows:
        for index, key in enumerate(keys):
            value = as_number(row.get(key))
            if value is None:
                continue
            width = round(abs(value) / peak * BAR_WIDTH) if peak else 0
            bar = Text("█" * max(width, 1), style=series_color(index))
            label = row_label(row) if index == 0 else ""
            table.add_row(label, bar, _format_number(value))

    return Group(table, _legend(keys))


def sparkline(values: list[float | None]) -> str:
    """Render a sequence as a one-line sparkline; gaps become spaces."""
    present = [v for v in values if v is not None]
    if not present:
        return ""
    low, high = min(present), max(present)
    span = high - low
    chars = []
    for value in values:
        if value is None:
            chars.append(" ")
            continue
        level = 0 if span == 0 else round((value - low) / span * (len(SPARK_CHARS) - 1))
        chars.append(SPARK_CHARS[level])
    return "".join(chars)


def _line_chart(rows: list[dict[str, Any]]) -> RenderableType:
    keys = series_keys(rows)
    table = Table(show_header=True, box=None, padding=(0, 1), header_style="dim")
    table.add_column("series", no_wrap=True)
    table.add_column(f"{row_label(rows[0])} → {row_label(rows[-1])}")
    table.add_column("min", justify="right")
    table.add_column("max", justify="right")

    for index, key in enumerate(keys):
        values = [as_number(row.get(key)) for row in rows]
        present = [v for v in values if v is not None]
        if not present:
            continue
        table.add_row(
            Text(key, style=series_color(index)),
            Text(" ".join(sparkline(values)), style=series_color(index)),
            _format_number(min(present)),
            _format_number(max(present)),
        )
    return table


def _area_chart(rows: list[dict[str, Any]]) -> RenderableType:
    keys = series_keys(rows)
    series = [[as_number(row.get(key)) or 0.0 for row in rows] for key in keys]
    peak = max((max(values) for values in series if values), default=0.0)

    lines = []
    for level in range(AREA_HEIGHT, 0, -1):
        threshold = peak * (level - 0.5) / AREA_HEIGHT
        line = Text()
        for column in range(len(rows)):
            cell = Text("  ")
            # Later series are drawn on top of earlier ones
            for index, values in enumerate(series):
                if peak > 0 and values[column] >= threshold:
                    cell = Text("██", style=series_color(index))
            line.append_text(cell)
            line.append(" ")
        lines.append(line)

    axis = Text(" ".join(row_label(row)[:2].ljust(2) for row in rows), style="dim")
    return Group(*lines, axis, _legend(keys))


def _pie_chart(rows: list[dict[str, Any]]) -> RenderableType:
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("slice", no_wrap=True)
    table.add_column("share")
    for piece in pie_slices(rows):
        width = round(piece.percent / 100 * BAR_WIDTH)
        table.add_row(
            Text(f"● {piece.label}", style=piece.color),
            Text("█" * width, style=piece.color),
        )
    return table


_CHART_RENDERERS = {
    ChartType.BAR: _bar_chart,
    ChartType.LINE: _line_chart,
    ChartType.AREA: _area_chart,
    ChartType.PIE: _pie_chart,
}


def render_chart(chart: ChartBlock) -> RenderableType | None:
    """Render a chart block, or None when it has no data rows."""
    if not chart.rows:
        return None
    body = _CHART_RENDERERS[chart.type](chart.rows)
    title = Text(chart.title, style="bold #c2001f") if chart.title else None
    return Panel(body, title=title, title_align="left", border_style="dim", expand=False)


def change_is_positive(change: str | None) -> bool:
    """A change reads as positive only when it starts with '+'."""
    return bool(change) and change.startswith("+")


def render_metric(entry: MetricEntry) -> Panel:
    """Render one metric as a tile: value, label, optional change."""
    tile = Text(justify="center")
    tile.append(entry.value, style="bold #c2001f")
    tile.append("\n")
    tile.append(entry.label, style="dim")
    if entry.change:
        style = POSITIVE_STYLE if change_is_positive(entry.change) else NEGATIVE_STYLE
        tile.append("\n")
        tile.append(entry.change, style=style)
    return Panel(tile, border_style="dim", padding=(0, 2))


def render_metrics(entries: list[MetricEntry]) -> RenderableType | None:
    """Render metric tiles in a grid, or None when there are none."""
    if not entries:
        return None
    return Columns([render_metric(entry) for entry in entries], equal=True)
