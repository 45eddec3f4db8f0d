"""
Unit tests for output accumulation and escaping.
"""
import pytest

from inkcore.runtime import Output, Runtime, escape_html, to_text


class TestToText:
    """Tests for value to text conversion."""

    @pytest.mark.parametrize("value,expected", [
        (None, ""),
        (True, "true"),
        (False, "false"),
        (2.0, "2"),
        (2.5, "2.5"),
        (0, "0"),
        ("text", "text"),
        ([1, 2], "[1, 2]"),
    ])
    def test_to_text(self, value, expected):
        assert to_text(value) == expected


class TestEscapeHtml:
    """Tests for HTML escaping."""

    def test_special_characters(self):
        """& < > \" and ' should be replaced by entities."""
        assert escape_html('<a href="x">Tom & Jerry\'s</a>') == (
            '&lt;a href=&quot;x&quot;&gt;Tom &amp; Jerry&#x27;s&lt;/a&gt;'
        )

    def test_non_strings(self):
        assert escape_html(None) == ""
        assert escape_html(3) == "3"


class TestOutput:
    """Tests for the output accumulator."""

    def test_accumulates_in_order(self):
        out = Output()
        out.push("a")
        out.push("")
        out.push("b")
        assert out.getvalue() == "ab"

    def test_runtime_defaults(self):
        runtime = Runtime()
        assert runtime.escape is escape_html
        assert isinstance(runtime.output(), Output)
