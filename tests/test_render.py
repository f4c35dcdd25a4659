"""Tests for diagnostic rendering and source positions."""

from lima import parse
from lima.errors import ParseError
from lima.render import render_diagnostic, render_diagnostics
from lima.span import Source, Span


class TestSource:
    def test_location(self):
        source = Source("x", "ab\ncd\n")
        assert source.location(0) == (1, 1)
        assert source.location(4) == (2, 2)
        assert source.location(6) == (3, 1)

    def test_line_text(self):
        source = Source("x", "ab\r\ncd")
        assert source.line_text(1) == "ab"
        assert source.line_text(2) == "cd"
        assert source.line_count == 2

    def test_slice(self):
        assert Source("x", "2024-01-01 open")[Span(11, 15)] == "open"

    def test_byte_span(self):
        """Code point offsets convert to UTF-8 byte offsets."""
        source = Source("x", "é 1")
        assert source.byte_span(Span(2, 3)) == (3, 4)
        assert source.byte_span(Span(0, 1)) == (0, 2)

    def test_spans_count_code_points(self):
        source = Source("x", "café 12")
        assert source[Span(5, 7)] == "12"
        assert source.byte_span(Span(5, 7)) == (6, 8)

    def test_span_union(self):
        assert Span(4, 6).union(Span(1, 2)) == Span(1, 6)
        assert len(Span(1, 6)) == 5


class TestRender:
    def test_single_error(self):
        result = parse("2023-13-01 open Assets:Cash\n", name="ledger.beancount")
        assert result.render() == (
            "error: date out of range\n"
            " --> ledger.beancount:1:1\n"
            "  |\n"
            "1 | 2023-13-01 open Assets:Cash\n"
            "  | ^^^^^^^^^^"
        )

    def test_caret_under_column(self):
        result = parse("2024-01-01 open Asset:Cash\n", name="l")
        assert result.render().splitlines()[-2:] == [
            "1 | 2024-01-01 open Asset:Cash",
            "  | " + " " * 16 + "^^^^^",
        ]

    def test_empty_span_gets_one_caret(self):
        result = parse("2024-01-01 open", name="l")
        lines = result.render().splitlines()
        assert lines[0] == "error: expected account, found end of line"
        assert lines[1] == " --> l:1:16"
        assert lines[-1] == "  | " + " " * 15 + "^"

    def test_multiline_span(self):
        source = Source("x", "ab\ncd\n")
        text = render_diagnostic(source, ParseError("spans lines", Span(1, 4)))
        assert text.splitlines()[3:] == ["1 | ab", "  |  ^", "2 | cd", "  | ^"]

    def test_context_lines(self):
        text = "2024-01-01 close Assets:A\n2024-13-01 close Assets:B\n2024-01-03 close Assets:C\n"
        lines = parse(text, name="l").render(context_lines=1).splitlines()
        assert lines[3:] == [
            "1 | 2024-01-01 close Assets:A",
            "2 | 2024-13-01 close Assets:B",
            "  | ^^^^^^^^^^",
            "3 | 2024-01-03 close Assets:C",
        ]

    def test_gutter_widens(self):
        text = "\n" * 9 + "2024-13-01 close Assets:A\n"
        lines = parse(text, name="l").render().splitlines()
        assert lines[1] == "  --> l:10:1"
        assert lines[3] == "10 | 2024-13-01 close Assets:A"

    def test_tabs_preserved_in_padding(self):
        source = Source("x", "\tab")
        text = render_diagnostic(source, ParseError("m", Span(2, 3)))
        assert text.splitlines()[-1] == "  | \t ^"

    def test_errors_then_warnings(self):
        result = parse("pushtag #t\n2024-13-01 close Assets:A\n", name="l")
        blocks = result.render().split("\n\n")
        assert blocks[0].startswith("error: date out of range")
        assert blocks[1].startswith("warning: pushtag without matching poptag")

    def test_nothing_to_render(self):
        assert render_diagnostics(Source("x", ""), []) == ""
        assert parse("").render() == ""
