"""Tokenizer for ledger source text.

The lexer never raises. Malformed literals become tokens whose ``error`` is
set, and the grammar reports them when it reaches them, so one bad literal
costs at most the directive it appears in.

Line structure is made explicit: a line that begins with whitespace starts
with an INDENT token, and every line that produced tokens ends with EOL.
Blank lines, comment-only lines and column-0 headings produce nothing.
"""

import calendar
import re
from dataclasses import dataclass
from datetime import MAXYEAR, date
from decimal import Decimal
from enum import Enum
from typing import Any, Iterator

from .errors import ParseError
from .span import Span


class TokenType(Enum):
    # Literals
    DATE = "DATE"
    STRING = "STRING"
    ACCOUNT = "ACCOUNT"
    CURRENCY = "CURRENCY"
    NUMBER = "NUMBER"
    TAG = "TAG"
    LINK = "LINK"
    KEY = "KEY"
    FLAG = "FLAG"
    BOOL = "BOOL"
    NULL = "NULL"

    # Keywords
    TXN = "txn"
    BALANCE = "balance"
    OPEN = "open"
    CLOSE = "close"
    COMMODITY = "commodity"
    PAD = "pad"
    EVENT = "event"
    QUERY = "query"
    PRICE = "price"
    NOTE = "note"
    DOCUMENT = "document"
    OPTION = "option"
    INCLUDE = "include"
    PLUGIN = "plugin"
    PUSHTAG = "pushtag"
    POPTAG = "poptag"
    PUSHMETA = "pushmeta"
    POPMETA = "popmeta"

    # Symbols
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    LPAREN = "("
    RPAREN = ")"
    LCURL = "{"
    RCURL = "}"
    LCURLCURL = "{{"
    RCURLCURL = "}}"
    COMMA = ","
    TILDE = "~"
    AT = "@"
    ATAT = "@@"
    HASH = "#"
    COLON = ":"

    # Structure
    INDENT = "INDENT"
    EOL = "EOL"
    EOF = "EOF"
    ERROR = "ERROR"


KEYWORDS = {
    t.value: t
    for t in (
        TokenType.TXN,
        TokenType.BALANCE,
        TokenType.OPEN,
        TokenType.CLOSE,
        TokenType.COMMODITY,
        TokenType.PAD,
        TokenType.EVENT,
        TokenType.QUERY,
        TokenType.PRICE,
        TokenType.NOTE,
        TokenType.DOCUMENT,
        TokenType.OPTION,
        TokenType.INCLUDE,
        TokenType.PLUGIN,
        TokenType.PUSHTAG,
        TokenType.POPTAG,
        TokenType.PUSHMETA,
        TokenType.POPMETA,
    )
}

SYMBOLS = {
    "{{": TokenType.LCURLCURL,
    "}}": TokenType.RCURLCURL,
    "@@": TokenType.ATAT,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LCURL,
    "}": TokenType.RCURL,
    ",": TokenType.COMMA,
    "~": TokenType.TILDE,
    "@": TokenType.AT,
    ":": TokenType.COLON,
}

SYMBOL_FLAGS = set("!&?%")

# Lines starting with one of these at column 0 are org-mode/markdown headings.
HEADING_CHARS = set("*#!&?%:")

ESCAPES = {"\\": "\\", '"': '"', "n": "\n", "t": "\t"}

DATE_PATTERN = re.compile(r"(\d+)[-/](\d+)[-/](\d+)")
NUMBER_PATTERN = re.compile(r"\d{1,3}(?:,\d{3})+(?!\d)(?:\.\d*)?|\d+(?:\.\d*)?|\.\d+")


@dataclass(frozen=True, order=True)
class ExtendedDate:
    """A calendar date whose year is past datetime.MAXYEAR."""

    year: int
    month: int
    day: int

    def isoformat(self) -> str:
        return f"{self.year}-{self.month:02d}-{self.day:02d}"

    def __str__(self):
        return self.isoformat()


def make_date(year: int, month: int, day: int) -> date | ExtendedDate:
    """Build a date, raising ValueError when it is not on the calendar."""
    if year <= MAXYEAR:
        return date(year, month, day)
    if not 1 <= month <= 12:
        raise ValueError("month must be in 1..12")
    if not 1 <= day <= calendar.monthrange(year, month)[1]:
        raise ValueError("day is out of range for month")
    return ExtendedDate(year, month, day)


def is_tag_char(ch: str) -> bool:
    return ch.isalnum() or ch in "-_/."


def is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch in "'._-:"


def is_key_char(ch: str) -> bool:
    return ch.isalnum() or ch in "_-"


@dataclass(frozen=True)
class Token:
    type: TokenType
    text: str  # raw source text
    span: Span
    value: Any = None  # converted literal value
    error: str | None = None  # set when the literal is malformed

    def __repr__(self):
        if self.error:
            return f"Token({self.type.name}, {self.text!r}, error={self.error!r})"
        return f"Token({self.type.name}, {self.text!r})"


class Lexer:
    """Tokenizer for ledger source text.

    Iterating a Lexer re-scans the source from the start, so the token
    sequence can be re-derived as often as needed.
    """

    def __init__(self, source: str):
        self.source = source

    def __iter__(self) -> Iterator[Token]:
        return self._scan()

    def tokenize(self) -> list[Token]:
        return list(self._scan())

    def _scan(self) -> Iterator[Token]:
        src = self.source
        n = len(src)
        pos = 0
        line_has_tokens = False

        while pos < n:
            # Line start: indentation, headings, blank and comment-only lines
            line_end = src.find("\n", pos)
            if line_end == -1:
                line_end = n
            ch = src[pos]

            if ch in " \t":
                ws_end = pos
                while ws_end < n and src[ws_end] in " \t":
                    ws_end += 1
                if ws_end >= n or src[ws_end] in "\r\n;":
                    pos = line_end + 1
                    continue
                yield Token(TokenType.INDENT, src[pos:ws_end], Span(pos, ws_end), ws_end - pos)
                line_has_tokens = True
                pos = ws_end
            elif ch in HEADING_CHARS or ch == ";" or ch in "\r\n":
                pos = line_end + 1
                continue

            # Rest of the line (strings may carry us past the newline)
            while pos < n:
                ch = src[pos]
                if ch == "\n":
                    if line_has_tokens:
                        yield Token(TokenType.EOL, "\n", Span(pos, pos + 1))
                    line_has_tokens = False
                    pos += 1
                    break
                if ch in " \t\r":
                    pos += 1
                    continue
                if ch == ";":
                    while pos < n and src[pos] != "\n":
                        pos += 1
                    continue

                token = self._read_token(pos)
                line_has_tokens = True
                pos = token.span.end
                yield token

        if line_has_tokens:
            yield Token(TokenType.EOL, "", Span(n, n))
        yield Token(TokenType.EOF, "", Span(n, n))

    def _read_token(self, pos: int) -> Token:
        src = self.source
        ch = src[pos]

        if ch == '"':
            return self._read_string(pos)
        if ch.isdigit() or (ch == "." and pos + 1 < len(src) and src[pos + 1].isdigit()):
            return self._read_date_or_number(pos)
        if ch.isalpha() and ch.isupper():
            return self._read_upper_word(pos)
        if ch.isalpha():
            return self._read_lower_word(pos)
        if ch == "#" or ch == "^":
            return self._read_tag_or_link(pos)
        if ch == "'":
            if pos + 1 < len(src) and not src[pos + 1].isspace():
                return Token(TokenType.FLAG, src[pos : pos + 2], Span(pos, pos + 2))
            return self._error(pos, pos + 1, "missing flag letter")
        if ch in SYMBOL_FLAGS:
            return Token(TokenType.FLAG, ch, Span(pos, pos + 1))

        two = src[pos : pos + 2]
        if two in SYMBOLS:
            return Token(SYMBOLS[two], two, Span(pos, pos + 2))
        if ch in SYMBOLS:
            return Token(SYMBOLS[ch], ch, Span(pos, pos + 1))

        return self._error(pos, pos + 1, f"unexpected character {ch!r}")

    def _error(self, start: int, end: int, message: str) -> Token:
        return Token(TokenType.ERROR, self.source[start:end], Span(start, end), error=message)

    def _read_string(self, start: int) -> Token:
        src = self.source
        n = len(src)
        pos = start + 1
        chars: list[str] = []
        error = None

        while pos < n and src[pos] != '"':
            if src[pos] == "\\":
                escaped = src[pos + 1] if pos + 1 < n else ""
                if escaped in ESCAPES:
                    chars.append(ESCAPES[escaped])
                    pos += 2
                    continue
                if error is None:
                    error = "invalid escape sequence"
                pos += 1
                continue
            chars.append(src[pos])
            pos += 1

        if pos >= n:
            # Unterminated: give up at the end of the opening line
            line_end = src.find("\n", start)
            end = n if line_end == -1 else line_end
            return Token(TokenType.STRING, src[start:end], Span(start, end), error="unterminated string")

        return Token(
            TokenType.STRING, src[start : pos + 1], Span(start, pos + 1), "".join(chars), error
        )

    def _read_date_or_number(self, start: int) -> Token:
        src = self.source
        m = DATE_PATTERN.match(src, start)
        if m:
            span = Span(start, m.end())
            text = m.group(0)
            year, month, day = m.groups()
            if len(year) < 4:
                return Token(TokenType.DATE, text, span, error="date missing century")
            try:
                value = make_date(int(year), int(month), int(day))
            except ValueError:
                return Token(TokenType.DATE, text, span, error="date out of range")
            return Token(TokenType.DATE, text, span, value)

        m = NUMBER_PATTERN.match(src, start)
        text = m.group(0)
        return Token(TokenType.NUMBER, text, Span(start, m.end()), Decimal(text.replace(",", "")))

    def _read_upper_word(self, start: int) -> Token:
        src = self.source
        pos = start
        while pos < len(src) and is_word_char(src[pos]):
            pos += 1
        text = src[start:pos]
        span = Span(start, pos)

        if ":" in text:
            return Token(TokenType.ACCOUNT, text, span, text)
        if text in ("TRUE", "FALSE"):
            return Token(TokenType.BOOL, text, span, text == "TRUE")
        if text == "NULL":
            return Token(TokenType.NULL, text, span)
        return Token(TokenType.CURRENCY, text, span, text)

    def _read_lower_word(self, start: int) -> Token:
        src = self.source
        pos = start
        while pos < len(src) and is_key_char(src[pos]):
            pos += 1
        text = src[start:pos]

        if pos < len(src) and src[pos] == ":":
            return Token(TokenType.KEY, src[start : pos + 1], Span(start, pos + 1), text)
        if text in KEYWORDS:
            return Token(KEYWORDS[text], text, Span(start, pos))
        return self._error(start, pos, f"unexpected word {text!r}")

    def _read_tag_or_link(self, start: int) -> Token:
        src = self.source
        pos = start + 1
        while pos < len(src) and is_tag_char(src[pos]):
            pos += 1
        text = src[start:pos]

        if src[start] == "#":
            if pos == start + 1:
                return Token(TokenType.HASH, "#", Span(start, start + 1))
            return Token(TokenType.TAG, text, Span(start, pos), text[1:])
        if pos == start + 1:
            return self._error(start, start + 1, "empty link")
        return Token(TokenType.LINK, text, Span(start, pos), text[1:])


def describe(tok: Token) -> str:
    if tok.type == TokenType.EOL:
        return "end of line"
    if tok.type == TokenType.EOF:
        return "end of input"
    return repr(tok.text)


class TokenCursor:
    """Position over a token list, with one-token lookahead helpers."""

    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.pos = 0

    def peek(self, offset: int = 0) -> Token:
        idx = self.pos + offset
        if idx >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[idx]

    def at(self, *types: TokenType) -> bool:
        return self.peek().type in types

    def advance(self) -> Token:
        tok = self.peek()
        if tok.error:
            raise ParseError(tok.error, tok.span)
        if self.pos < len(self.tokens):
            self.pos += 1
        return tok

    def match(self, *types: TokenType) -> Token | None:
        if self.at(*types):
            return self.advance()
        return None

    def consume(self, ttype: TokenType, what: str) -> Token:
        if self.at(ttype):
            return self.advance()
        self.fail(f"expected {what}")

    def fail(self, expected: str):
        """Raise for the current token, preferring its own lexical error."""
        tok = self.peek()
        if tok.error:
            raise ParseError(tok.error, tok.span)
        raise ParseError(f"{expected}, found {describe(tok)}", tok.span)
