"""Unit tests for locating JSON in model output."""
import pytest

from cardinal_genie.errors import ParseFailure
from cardinal_genie.workflows import find_json


class TestFindJson:
    """Tests for find_json."""

    def test_object_in_prose(self):
        """Test an object surrounded by explanation."""
        text = 'Here is your plan:\n{"executiveSummary": "Grow"}\nGood luck!'
        assert find_json(text) == {"executiveSummary": "Grow"}

    def test_array_in_fence(self):
        """Test an array inside a code fence."""
        text = '```json\n[{"title": "Problem", "content": "x"}]\n```'
        assert find_json(text, "[") == [{"title": "Problem", "content": "x"}]

    def test_nested_values(self):
        """Test that nesting is followed to the matching bracket."""
        text = 'x {"a": {"b": [1, {"c": 2}]}} trailing {"d": 3}'
        assert find_json(text) == {"a": {"b": [1, {"c": 2}]}}

    def test_brackets_inside_strings(self):
        """Test that brackets in string literals do not affect nesting."""
        text = '{"content": "use } and ] freely", "n": 1}'
        assert find_json(text) == {"content": "use } and ] freely", "n": 1}

    def test_escaped_quotes(self):
        """Test that escaped quotes do not end a string."""
        text = r'{"quote": "she said \"}\" loudly"}'
        assert find_json(text) == {"quote": 'she said "}" loudly'}

    def test_skips_invalid_candidate(self):
        """Test that scanning resumes after a candidate that does not parse."""
        text = '{not json} then {"ok": true}'
        assert find_json(text) == {"ok": True}

    def test_array_opener_ignores_objects_first(self):
        """Test that the array opener finds the array, not a prior object."""
        text = '{"meta": 1} [{"name": "Nova"}]'
        assert find_json(text, "[") == [{"name": "Nova"}]

    @pytest.mark.parametrize("text", ["", "no json here", "{unclosed", '{"a": 1'])
    def test_nothing_found(self, text: str):
        """Test that missing or unbalanced values raise ParseFailure."""
        with pytest.raises(ParseFailure, match="No JSON object"):
            find_json(text)

    def test_nothing_found_array(self):
        """Test the array wording of the failure."""
        with pytest.raises(ParseFailure, match="No JSON array"):
            find_json("{}", "[")

    def test_bad_opener(self):
        """Test that only { and [ are accepted."""
        with pytest.raises(ValueError):
            find_json("(1)", "(")
