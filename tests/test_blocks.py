"""Unit tests for chart and metrics block extraction."""
import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from cardinal_genie.errors import MalformedBlock
from cardinal_genie.render import ChartType, extract_blocks, hide_open_fence
from cardinal_genie.render.blocks import parse_chart, parse_metrics

BAR = '```chart:bar Revenue Projections\n[{"name":"Y1","revenue":50000},{"name":"Y2","revenue":120000}]\n```'
METRICS = '```metrics\n[{"label":"ROI","value":"150%","change":"+25%"},{"label":"Break-even","value":"8 months"}]\n```'


def safe_text(**kwargs):
    """Text that cannot close a fence early."""
    return st.text(alphabet=st.characters(exclude_characters="`"), **kwargs)


class TestExtractBlocks:
    """Tests for extract_blocks."""

    def test_plain_prose(self):
        """Test that text without fences is returned trimmed."""
        content = extract_blocks("  ## Hello\n\nWorld  ")
        assert content.prose == "## Hello\n\nWorld"
        assert content.charts == []
        assert content.metrics == []

    def test_chart_with_title(self):
        """Test extracting a titled bar chart."""
        content = extract_blocks(f"Intro\n\n{BAR}\n\nOutro")
        assert content.prose == "Intro\n\n\n\nOutro"
        assert len(content.charts) == 1
        chart = content.charts[0]
        assert chart.type == ChartType.BAR
        assert chart.title == "Revenue Projections"
        assert chart.rows[1] == {"name": "Y2", "revenue": 120000}

    def test_chart_without_title(self):
        """Test a chart fence with no title."""
        content = extract_blocks('```chart:pie\n[{"name":"A","value":1}]\n```')
        assert content.charts[0].type == ChartType.PIE
        assert content.charts[0].title is None

    def test_metrics(self):
        """Test metric entries and their optional change."""
        content = extract_blocks(METRICS)
        assert [m.label for m in content.metrics] == ["ROI", "Break-even"]
        assert content.metrics[0].change == "+25%"
        assert content.metrics[1].change is None
        assert content.prose == ""

    def test_numeric_metric_values_become_strings(self):
        """Test that numbers in metric values are accepted as text."""
        content = extract_blocks('```metrics\n[{"label":"Users","value":1200}]\n```')
        assert content.metrics[0].value == "1200"

    def test_multiple_blocks_in_order(self):
        """Test several charts keep document order and metrics are flattened."""
        line = '```chart:line Growth\n[{"name":"Q1","users":10}]\n```'
        text = f"{BAR}\ntext\n{METRICS}\n{line}\n{METRICS}"
        content = extract_blocks(text)
        assert [c.type for c in content.charts] == [ChartType.BAR, ChartType.LINE]
        assert len(content.metrics) == 4
        assert content.prose == "text"

    def test_abutting_fences_read_once(self):
        """Test that text is never both extracted and left in the prose."""
        text = '```chart:bar X\n[{"name":"a","v":1}]```metrics\n[{"label":"X","value":"1"}]\n```'
        content = extract_blocks(text)
        assert len(content.charts) == 1
        assert content.metrics == []
        assert '"label":"X"' in content.prose
        again = extract_blocks(content.prose)
        assert again.prose == content.prose
        assert again.metrics == []

    def test_metrics_after_chart_removed(self):
        """Test that metrics after a chart are removed from the prose."""
        text = f"{BAR}\n{METRICS}"
        content = extract_blocks(text)
        assert len(content.metrics) == 2
        assert "ROI" not in content.prose

    def test_malformed_chart_stripped(self):
        """Test that an invalid chart body is dropped and removed from prose."""
        content = extract_blocks("Before\n```chart:bar Broken\n{not json\n```\nAfter")
        assert content.charts == []
        assert "```" not in content.prose
        assert "Before" in content.prose and "After" in content.prose

    @pytest.mark.parametrize("body", ['{"name": "x"}', "[1, 2]", '"text"'])
    def test_wrong_shape_dropped(self, body: str):
        """Test that chart bodies that are not arrays of objects are dropped."""
        assert extract_blocks(f"```chart:bar\n{body}\n```").charts == []

    def test_unknown_chart_type_left_as_prose(self):
        """Test that unsupported chart kinds are not recognized."""
        text = '```chart:radar\n[{"name":"a","v":1}]\n```'
        content = extract_blocks(text)
        assert content.charts == []
        assert content.prose == text

    def test_ordinary_code_fence_kept(self):
        """Test that regular code blocks stay in the prose."""
        text = "```python\nprint('hi')\n```"
        assert extract_blocks(text).prose == text

    def test_unterminated_fence_kept(self):
        """Test that an open chart fence is not extracted."""
        text = 'Look:\n```chart:bar\n[{"name":"a"'
        content = extract_blocks(text)
        assert content.charts == []
        assert content.prose == text

    def test_idempotent(self):
        """Test that extracting the prose again changes nothing."""
        first = extract_blocks(f"A\n{BAR}\nB\n{METRICS}\nC")
        second = extract_blocks(first.prose)
        assert second.prose == first.prose
        assert second.charts == [] and second.metrics == []

    @given(st.lists(st.sampled_from(["`", "``", "```", "chart:bar", "metrics", "\n", "[]", "x", " "]), max_size=30).map("".join))
    def test_idempotent_property(self, text: str):
        """Property test: extraction of the residual prose is a fixed point."""
        prose = extract_blocks(text).prose
        again = extract_blocks(prose)
        assert again.prose == prose
        assert again.charts == []
        assert again.metrics == []

    @given(st.lists(
        st.fixed_dictionaries(
            {"label": safe_text(min_size=1, max_size=20), "value": safe_text(max_size=20)},
            optional={"change": safe_text(max_size=8)},
        ),
        max_size=6,
    ))
    def test_metrics_round_trip(self, entries: list[dict]):
        """Property test: serialized metrics are recovered exactly."""
        block = f"```metrics\n{json.dumps(entries)}\n```"
        content = extract_blocks(block)
        recovered = [m.model_dump(exclude_none=True) for m in content.metrics]
        assert recovered == entries


class TestParsers:
    """Tests for the block body parsers."""

    def test_parse_chart_rejects_invalid(self):
        """Test that parse_chart raises on bad JSON."""
        with pytest.raises(MalformedBlock):
            parse_chart("bar", None, "[{")

    def test_parse_metrics_requires_label(self):
        """Test that metric records need label and value."""
        with pytest.raises(MalformedBlock):
            parse_metrics('[{"value": "1"}]')

    def test_blank_title_is_none(self):
        """Test that a whitespace-only title is treated as absent."""
        assert parse_chart("line", "   ", "[]").title is None


class TestHideOpenFence:
    """Tests for hiding a half-received block while streaming."""

    def test_cuts_unclosed_fence(self):
        """Test that an unterminated chart fence is hidden."""
        assert hide_open_fence('Intro\n\n```chart:bar Sales\n[{"na') == "Intro"

    def test_cuts_unclosed_metrics(self):
        """Test that an unterminated metrics fence is hidden."""
        assert hide_open_fence("Text\n```metrics\n[") == "Text"

    def test_keeps_closed_code(self):
        """Test that complete content is untouched."""
        text = "Text\n```python\nx = 1\n```"
        assert hide_open_fence(text) == text

    def test_keeps_plain_prose(self):
        """Test prose without fences."""
        assert hide_open_fence("Just words") == "Just words"
