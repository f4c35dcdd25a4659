"""Tests for the ledger tokenizer."""

from datetime import date
from decimal import Decimal

import pytest

from lima.errors import ParseError
from lima.lexer import ExtendedDate, Lexer, TokenCursor, TokenType
from lima.span import Span


def types(text):
    return [t.type for t in Lexer(text).tokenize()]


class TestLineStructure:
    """Tests for INDENT/EOL handling, comments and headings."""

    def test_empty_input(self):
        """Empty input produces only EOF."""
        assert types("") == [TokenType.EOF]

    def test_blank_lines_only(self):
        """Whitespace-only lines produce nothing."""
        assert types("   \n\t\n\n") == [TokenType.EOF]

    def test_directive_line(self):
        assert types("2024-01-15 open Assets:Cash USD") == [
            TokenType.DATE,
            TokenType.OPEN,
            TokenType.ACCOUNT,
            TokenType.CURRENCY,
            TokenType.EOL,
            TokenType.EOF,
        ]

    def test_indented_line_gets_indent_token(self):
        tokens = Lexer("2024-01-01 *\n  Assets:Cash 10 USD\n").tokenize()
        assert [t.type for t in tokens] == [
            TokenType.DATE,
            TokenType.STAR,
            TokenType.EOL,
            TokenType.INDENT,
            TokenType.ACCOUNT,
            TokenType.NUMBER,
            TokenType.CURRENCY,
            TokenType.EOL,
            TokenType.EOF,
        ]
        assert tokens[3].value == 2

    def test_comments_skipped(self):
        """Comment lines and trailing comments produce no tokens."""
        text = "; a comment\n2024-01-01 close Assets:Cash ; trailing\n"
        tokens = Lexer(text).tokenize()
        assert [t.type for t in tokens] == [
            TokenType.DATE,
            TokenType.CLOSE,
            TokenType.ACCOUNT,
            TokenType.EOL,
            TokenType.EOF,
        ]

    def test_comments_keep_offsets(self):
        text = "; a comment\n2024-01-01 close Assets:Cash\n"
        tok = Lexer(text).tokenize()[0]
        assert tok.span == Span(12, 22)
        assert text[tok.span.start : tok.span.end] == "2024-01-01"

    def test_indented_comment_line_skipped(self):
        assert types("    ; just a note\n") == [TokenType.EOF]

    @pytest.mark.parametrize("heading", ["* Section", "** Sub", "# Title", ":PROPERTIES:"])
    def test_headings_skipped(self, heading):
        """Column-0 heading lines are ignored entirely."""
        assert types(f"{heading}\n2024-01-01 close Assets:Cash\n")[0] == TokenType.DATE

    def test_crlf_line_endings(self):
        assert types("2024-01-01 close Assets:Cash\r\n") == [
            TokenType.DATE,
            TokenType.CLOSE,
            TokenType.ACCOUNT,
            TokenType.EOL,
            TokenType.EOF,
        ]

    def test_iteration_rescans(self):
        """Iterating the lexer twice yields the same tokens."""
        lexer = Lexer("2024-01-01 * \"x\"\n  Assets:Cash 1 USD\n")
        assert list(lexer) == list(lexer)


class TestLiterals:
    """Tests for literal tokens and their converted values."""

    def test_date(self):
        tok = Lexer("2024-01-15").tokenize()[0]
        assert tok.type == TokenType.DATE
        assert tok.value == date(2024, 1, 15)
        assert tok.error is None

    def test_date_with_slashes(self):
        assert Lexer("2024/01/15").tokenize()[0].value == date(2024, 1, 15)

    def test_date_out_of_range(self):
        tok = Lexer("2024-02-30").tokenize()[0]
        assert tok.type == TokenType.DATE
        assert tok.error == "date out of range"

    def test_date_missing_century(self):
        assert Lexer("24-01-01").tokenize()[0].error == "date missing century"

    def test_date_past_year_9999(self):
        tok = Lexer("10000-12-31").tokenize()[0]
        assert tok.error is None
        assert tok.value == ExtendedDate(10000, 12, 31)

    @pytest.mark.parametrize("text", ["10000-13-01", "10000-04-31", "10000-00-10", "10000-01-00"])
    def test_date_past_year_9999_out_of_range(self, text):
        assert Lexer(text).tokenize()[0].error == "date out of range"

    def test_number(self):
        tok = Lexer("45.30").tokenize()[0]
        assert tok.type == TokenType.NUMBER
        assert tok.value == Decimal("45.30")
        assert str(tok.value) == "45.30"

    def test_number_with_thousands_separators(self):
        tok = Lexer("1,000,000.50").tokenize()[0]
        assert tok.text == "1,000,000.50"
        assert str(tok.value) == "1000000.50"

    def test_number_leading_dot(self):
        assert Lexer(".5").tokenize()[0].value == Decimal("0.5")

    def test_string_escapes(self):
        tok = Lexer(r'"say \"hi\"\n"').tokenize()[0]
        assert tok.type == TokenType.STRING
        assert tok.value == 'say "hi"\n'

    def test_multiline_string(self):
        tokens = Lexer('"line one\nline two"\n').tokenize()
        assert tokens[0].value == "line one\nline two"
        assert [t.type for t in tokens[1:]] == [TokenType.EOL, TokenType.EOF]

    def test_invalid_escape(self):
        assert Lexer(r'"a\qb"').tokenize()[0].error == "invalid escape sequence"

    def test_unterminated_string(self):
        """An unterminated string stops at the end of its line."""
        tokens = Lexer('"abc\n2024-01-01 close Assets:Cash\n').tokenize()
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].error == "unterminated string"
        assert tokens[0].span == Span(0, 4)
        assert tokens[1].type == TokenType.EOL
        assert tokens[2].type == TokenType.DATE

    def test_account_and_currency(self):
        tokens = Lexer("Assets:Bank:Checking USD").tokenize()
        assert tokens[0].type == TokenType.ACCOUNT
        assert tokens[0].value == "Assets:Bank:Checking"
        assert tokens[1].type == TokenType.CURRENCY
        assert tokens[1].value == "USD"

    def test_bool_and_null(self):
        tokens = Lexer("TRUE FALSE NULL").tokenize()
        assert [(t.type, t.value) for t in tokens[:3]] == [
            (TokenType.BOOL, True),
            (TokenType.BOOL, False),
            (TokenType.NULL, None),
        ]

    def test_tag_and_link(self):
        tokens = Lexer("  #trip-2024 ^inv.1").tokenize()
        assert tokens[1].type == TokenType.TAG
        assert tokens[1].value == "trip-2024"
        assert tokens[2].type == TokenType.LINK
        assert tokens[2].value == "inv.1"

    def test_lone_hash(self):
        assert types("  #")[1] == TokenType.HASH

    def test_empty_link(self):
        assert Lexer("  ^ ").tokenize()[1].error == "empty link"

    def test_key(self):
        tokens = Lexer("  opened-by: TRUE").tokenize()
        assert tokens[1].type == TokenType.KEY
        assert tokens[1].value == "opened-by"
        assert tokens[1].text == "opened-by:"

    def test_keywords(self):
        for kw in ("txn", "balance", "open", "close", "pushtag", "popmeta"):
            assert Lexer(f"x {kw}").tokenize()[1].type == TokenType(kw)

    def test_flags(self):
        tokens = Lexer("2024-01-01 ! 'P").tokenize()
        assert [(t.type, t.text) for t in tokens[1:3]] == [
            (TokenType.FLAG, "!"),
            (TokenType.FLAG, "'P"),
        ]

    def test_missing_flag_letter(self):
        assert Lexer("2024-01-01 ' ").tokenize()[1].error == "missing flag letter"

    def test_double_symbols(self):
        assert types("{{ }} @@ @")[:4] == [
            TokenType.LCURLCURL,
            TokenType.RCURLCURL,
            TokenType.ATAT,
            TokenType.AT,
        ]

    def test_unexpected_character(self):
        tok = Lexer("2024-01-01 $").tokenize()[1]
        assert tok.type == TokenType.ERROR
        assert tok.error == "unexpected character '$'"
        assert tok.span == Span(11, 12)

    def test_unexpected_word(self):
        assert Lexer("2024-01-01 foo").tokenize()[1].error == "unexpected word 'foo'"


class TestTokenCursor:
    """Tests for the cursor the grammar walks tokens with."""

    def test_advance_and_peek(self):
        cursor = TokenCursor(Lexer("2024-01-01 close").tokenize())
        assert cursor.peek(1).type == TokenType.CLOSE
        assert cursor.advance().type == TokenType.DATE
        assert cursor.at(TokenType.CLOSE)

    def test_peek_past_end_returns_last(self):
        cursor = TokenCursor(Lexer("").tokenize())
        assert cursor.peek(5).type == TokenType.EOF

    def test_consume_failure_message(self):
        cursor = TokenCursor(Lexer("2024-01-01 close").tokenize())
        with pytest.raises(ParseError) as exc:
            cursor.consume(TokenType.ACCOUNT, "account")
        assert exc.value.message == "expected account, found '2024-01-01'"
        assert exc.value.span == Span(0, 10)

    def test_advance_raises_lexical_error(self):
        """A malformed literal surfaces when the grammar reaches it."""
        cursor = TokenCursor(Lexer("2024-13-01").tokenize())
        with pytest.raises(ParseError, match="date out of range"):
            cursor.advance()

    def test_fail_prefers_lexical_error(self):
        cursor = TokenCursor(Lexer("$").tokenize())
        with pytest.raises(ParseError, match="unexpected character"):
            cursor.fail("expected date")

    def test_match_returns_none(self):
        cursor = TokenCursor(Lexer("USD").tokenize())
        assert cursor.match(TokenType.NUMBER) is None
        assert cursor.match(TokenType.CURRENCY).text == "USD"
