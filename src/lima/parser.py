"""Grammar parser for ledger files.

Grammar (simplified):
    ledger      = (directive | pragma)*
    directive   = DATE (transaction | keyword fields) tags_links EOL meta_line*
    transaction = flag [STRING [STRING]] tags_links EOL (posting | meta_line)*
    posting     = INDENT [flag] ACCOUNT [expr] [CURRENCY] [cost_spec] [price] EOL meta_line*
    cost_spec   = ("{" | "{{") [component ("," component)*] ("}" | "}}")
    component   = compound_amount | DATE | STRING | "*"
    price       = ("@" | "@@") [expr] [CURRENCY]
    meta_line   = INDENT (KEY [value] | (TAG | LINK)+) EOL
    pragma      = option | include | plugin | pushtag | poptag | pushmeta | popmeta

A header line plus the indented lines below it form a block. Each block is
parsed on its own: a ParseError abandons the block, is recorded, and parsing
skips ahead to the next line that starts a directive (a date or a pragma
keyword). Errors never abort the whole parse.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from . import validators
from .arithmetic import EXPR_START, parse_expr
from .config import ParserOptions
from .errors import ParseError, ParseFailed, ParseWarning
from .lexer import Lexer, Token, TokenCursor, TokenType
from .render import render_diagnostics
from .span import Source, Span, Spanned
from .types import (
    Account,
    Amount,
    AnyFlag,
    Balance,
    BareAmount,
    BareCurrency,
    Close,
    Commodity,
    CostSpec,
    CurrencyAmount,
    Directive,
    DirectiveVariant,
    Document,
    Event,
    Include,
    KeyValue,
    Metadata,
    MetaValue,
    MetaValueKind,
    Note,
    Open,
    Option,
    Pad,
    Plugin,
    Posting,
    Price,
    PriceSpec,
    Query,
    Scope,
    ScopedExprValue,
    Transaction,
)

logger = logging.getLogger(__name__)

PRAGMAS = {
    TokenType.OPTION,
    TokenType.INCLUDE,
    TokenType.PLUGIN,
    TokenType.PUSHTAG,
    TokenType.POPTAG,
    TokenType.PUSHMETA,
    TokenType.POPMETA,
}

FLAG_TOKENS = (TokenType.FLAG, TokenType.STAR, TokenType.HASH)

# Tokens that may follow a bare legacy flag letter
AFTER_LEGACY_FLAG = (
    TokenType.ACCOUNT,
    TokenType.STRING,
    TokenType.TAG,
    TokenType.LINK,
    TokenType.EOL,
)


@dataclass
class ParseResult:
    """Everything one parse produced. Directives and errors may both be non-empty."""

    source: Source
    directives: list[Directive] = field(default_factory=list)
    errors: list[ParseError] = field(default_factory=list)
    warnings: list[ParseWarning] = field(default_factory=list)
    options: list[Option] = field(default_factory=list)
    includes: list[Include] = field(default_factory=list)
    plugins: list[Plugin] = field(default_factory=list)
    config: ParserOptions = field(default_factory=ParserOptions, compare=False, repr=False)

    @property
    def ok(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        if self.errors:
            raise ParseFailed(self.errors)

    def render(self, context_lines: int | None = None) -> str:
        """All diagnostics rendered against the source text."""
        if context_lines is None:
            context_lines = self.config.render_context_lines
        return render_diagnostics(self.source, self.errors, self.warnings, context_lines)


class _MetadataBuilder:
    """Accumulates tags, links and key/values for one directive or posting."""

    def __init__(self, problems: list[ParseError]):
        self.problems = problems  # non-fatal errors for the current block
        self.tags: dict[str, Spanned[str]] = {}
        self.links: dict[str, Spanned[str]] = {}
        self.key_values: list[KeyValue] = []
        self.keys: set[str] = set()

    def add_tag(self, tag: Spanned[str]) -> None:
        self.tags.setdefault(tag.item, tag)

    def add_link(self, link: Spanned[str]) -> None:
        self.links.setdefault(link.item, link)

    def add_key_value(self, kv: KeyValue) -> None:
        if kv.key is None:
            self.key_values.append(kv)
        elif kv.key.item in self.keys:
            self.problems.append(ParseError("duplicate key", kv.key.span))
        else:
            self.keys.add(kv.key.item)
            self.key_values.append(kv)

    def add_default(self, kv: KeyValue) -> None:
        """Add a pushed key/value unless the key is already set."""
        if kv.key.item not in self.keys:
            self.keys.add(kv.key.item)
            self.key_values.append(kv)

    def build(self) -> Metadata:
        return Metadata(
            tags=tuple(self.tags.values()),
            links=tuple(self.links.values()),
            key_values=tuple(self.key_values),
        )


@dataclass
class _OpenPosting:
    """A posting whose metadata lines may still follow."""

    indent: int
    fields: dict
    span: Span
    meta: _MetadataBuilder

    def build(self) -> Spanned[Posting]:
        return Spanned(Posting(**self.fields, metadata=self.meta.build()), self.span)


def _line_span(line: list[Token]) -> Span:
    # Every line ends with EOL; the span stops before it
    return line[0].span.union(line[-2].span) if len(line) > 1 else line[0].span


def _pop(pushed: dict[str, list], name: str) -> None:
    stack = pushed[name]
    stack.pop()
    if not stack:
        del pushed[name]


class Parser:
    """Recursive descent parser over a token list, collecting errors as it goes."""

    def __init__(self, tokens: list[Token], config: ParserOptions | None = None):
        self.tokens = tokens
        self.config = config or ParserOptions()
        self.directives: list[Directive] = []
        self.errors: list[ParseError] = []
        self.warnings: list[ParseWarning] = []
        self.options: list[Option] = []
        self.includes: list[Include] = []
        self.plugins: list[Plugin] = []
        # Push/pop pragmas nest: each name maps to a stack of pushes
        self._pushed_tags: dict[str, list[Spanned[str]]] = {}
        self._pushed_meta: dict[str, list[KeyValue]] = {}
        self._problems: list[ParseError] = []

        self._field_parsers = {
            TokenType.PRICE: self._parse_price,
            TokenType.BALANCE: self._parse_balance,
            TokenType.OPEN: self._parse_open,
            TokenType.CLOSE: self._parse_close,
            TokenType.COMMODITY: self._parse_commodity,
            TokenType.PAD: self._parse_pad,
            TokenType.DOCUMENT: self._parse_document,
            TokenType.NOTE: self._parse_note,
            TokenType.EVENT: self._parse_event,
            TokenType.QUERY: self._parse_query,
        }

    # ------------------------------------------------------------------
    # Blocks and recovery
    # ------------------------------------------------------------------

    def _lines(self) -> list[list[Token]]:
        lines: list[list[Token]] = []
        current: list[Token] = []
        for tok in self.tokens:
            if tok.type == TokenType.EOF:
                break
            current.append(tok)
            if tok.type == TokenType.EOL:
                lines.append(current)
                current = []
        return lines

    def _blocks(self) -> list[list[list[Token]]]:
        blocks: list[list[list[Token]]] = []
        for line in self._lines():
            if line[0].type == TokenType.INDENT and blocks:
                blocks[-1].append(line)
            else:
                blocks.append([line])
        return blocks

    @staticmethod
    def _starts_directive(tok: Token) -> bool:
        return tok.type == TokenType.DATE or tok.type in PRAGMAS

    def parse(self) -> None:
        skipping = False
        skipped = 0

        for block in self._blocks():
            if skipping:
                if not self._starts_directive(block[0][0]):
                    skipped += len(block)
                    continue
                logger.debug(
                    "resuming at offset %d after skipping %d line(s)", block[0][0].span.start, skipped
                )
                skipping = False

            self._problems = []
            try:
                self._parse_block(block)
            except ParseError as e:
                self.errors.append(e)
                skipping = True
                skipped = 0
            else:
                self.errors.extend(self._problems)

        for stack in self._pushed_tags.values():
            for tag in stack:
                self.warnings.append(ParseWarning("pushtag without matching poptag", tag.span))
        for stack in self._pushed_meta.values():
            for kv in stack:
                self.warnings.append(ParseWarning("pushmeta without matching popmeta", kv.key.span))

    def _parse_block(self, block: list[list[Token]]) -> None:
        header = TokenCursor(block[0])
        body = block[1:]

        if header.at(TokenType.INDENT):
            # Indented lines before any directive
            raise ParseError("unexpected indented line", _line_span(block[0]))
        if header.at(*PRAGMAS):
            if body:
                raise ParseError("unexpected indented line", _line_span(body[0]))
            self._parse_pragma(header)
            return

        date_tok = header.consume(TokenType.DATE, "date")
        meta = _MetadataBuilder(self._problems)
        variant: DirectiveVariant

        if header.at(TokenType.TXN) or self._at_flag(header):
            variant = self._parse_transaction(header, body, meta)
            for stack in self._pushed_tags.values():
                meta.add_tag(stack[-1])
        else:
            parse_fields = self._field_parsers.get(header.peek().type)
            if parse_fields is None:
                header.fail("expected directive keyword or flag")
            header.advance()
            variant = parse_fields(header)
            self._parse_header_end(header, meta)
            for line in body:
                cursor = TokenCursor(line)
                cursor.advance()
                self._parse_meta_line(cursor, meta)

        for stack in self._pushed_meta.values():
            meta.add_default(stack[-1])

        self.directives.append(
            Directive(
                date=Spanned(date_tok.value, date_tok.span),
                variant=variant,
                span=date_tok.span.union(_line_span(block[-1])),
                metadata=meta.build(),
            )
        )

    # ------------------------------------------------------------------
    # Pragmas
    # ------------------------------------------------------------------

    def _parse_pragma(self, cursor: TokenCursor) -> None:
        tok = cursor.advance()

        if tok.type == TokenType.OPTION:
            name = self._string(cursor, "option name")
            value = self._string(cursor, "option value")
            cursor.consume(TokenType.EOL, "end of line")
            self.options.append(Option(name=name, value=value))
        elif tok.type == TokenType.INCLUDE:
            path = self._string(cursor, "include path")
            cursor.consume(TokenType.EOL, "end of line")
            self.includes.append(Include(path=path))
        elif tok.type == TokenType.PLUGIN:
            module_name = self._string(cursor, "plugin module name")
            config = self._string(cursor, "plugin config") if cursor.at(TokenType.STRING) else None
            cursor.consume(TokenType.EOL, "end of line")
            self.plugins.append(Plugin(module_name=module_name, config=config))
        elif tok.type == TokenType.PUSHTAG:
            tag = cursor.consume(TokenType.TAG, "tag")
            cursor.consume(TokenType.EOL, "end of line")
            self._pushed_tags.setdefault(tag.value, []).append(Spanned(tag.value, tag.span))
        elif tok.type == TokenType.POPTAG:
            tag = cursor.consume(TokenType.TAG, "tag")
            cursor.consume(TokenType.EOL, "end of line")
            if tag.value not in self._pushed_tags:
                raise ParseError("poptag without matching pushtag", tag.span)
            _pop(self._pushed_tags, tag.value)
        elif tok.type == TokenType.PUSHMETA:
            if not cursor.at(TokenType.KEY):
                cursor.fail("expected metadata key")
            kv = self._parse_key_value(cursor)
            cursor.consume(TokenType.EOL, "end of line")
            self._pushed_meta.setdefault(kv.key.item, []).append(kv)
        elif tok.type == TokenType.POPMETA:
            key = cursor.consume(TokenType.KEY, "metadata key")
            cursor.consume(TokenType.EOL, "end of line")
            if key.value not in self._pushed_meta:
                raise ParseError("popmeta without matching pushmeta", key.span)
            _pop(self._pushed_meta, key.value)

    # ------------------------------------------------------------------
    # Transactions and postings
    # ------------------------------------------------------------------

    def _at_flag(self, cursor: TokenCursor) -> bool:
        tok = cursor.peek()
        if tok.type in FLAG_TOKENS:
            return True
        return (
            tok.type == TokenType.CURRENCY
            and tok.text in validators.LEGACY_FLAG_LETTERS
            and cursor.peek(1).type in AFTER_LEGACY_FLAG
        )

    def _flag(self, cursor: TokenCursor) -> Spanned[AnyFlag]:
        tok = cursor.advance()
        return Spanned(validators.flag(tok.text, tok.span), tok.span)

    def _parse_transaction(
        self, header: TokenCursor, body: list[list[Token]], meta: _MetadataBuilder
    ) -> Transaction:
        flag = self._flag(header)

        strings: list[Spanned[str]] = []
        while header.at(TokenType.STRING):
            tok = header.advance()
            if len(strings) == 2:
                raise ParseError("too many strings, expected at most payee and narration", tok.span)
            strings.append(Spanned(tok.value, tok.span))
        payee = strings[0] if len(strings) == 2 else None
        narration = strings[-1] if strings else None

        self._parse_header_end(header, meta)

        postings: list[Spanned[Posting]] = []
        posting: _OpenPosting | None = None
        for line in body:
            cursor = TokenCursor(line)
            indent = cursor.advance().value

            if posting and indent > posting.indent and cursor.at(TokenType.KEY, TokenType.TAG, TokenType.LINK):
                self._parse_meta_line(cursor, posting.meta)
                posting.span = posting.span.union(_line_span(line))
                continue

            if posting:
                postings.append(posting.build())
                posting = None

            if cursor.at(TokenType.KEY, TokenType.TAG, TokenType.LINK):
                self._parse_meta_line(cursor, meta)
            elif cursor.at(TokenType.ACCOUNT) or self._at_flag(cursor):
                posting = self._parse_posting(cursor, indent)
            else:
                cursor.fail("expected posting or metadata")

        if posting:
            postings.append(posting.build())

        return Transaction(flag=flag, payee=payee, narration=narration, postings=tuple(postings))

    def _parse_posting(self, cursor: TokenCursor, indent: int) -> _OpenPosting:
        start = cursor.peek().span
        fields: dict = {}

        if self._at_flag(cursor):
            fields["flag"] = self._flag(cursor)
        fields["account"] = self._account(cursor)
        if cursor.at(*EXPR_START):
            fields["amount"] = parse_expr(cursor, self.config)
        if cursor.at(TokenType.CURRENCY):
            fields["currency"] = self._currency(cursor)
        if cursor.at(TokenType.LCURL, TokenType.LCURLCURL):
            fields["cost_spec"] = self._parse_cost_spec(cursor)
        if cursor.at(TokenType.AT, TokenType.ATAT):
            fields["price_annotation"] = self._parse_price_annotation(cursor)

        end = cursor.tokens[cursor.pos - 1].span
        cursor.consume(TokenType.EOL, "end of line")
        return _OpenPosting(indent, fields, start.union(end), _MetadataBuilder(self._problems))

    def _parse_cost_spec(self, cursor: TokenCursor) -> Spanned[CostSpec]:
        open_tok = cursor.advance()
        total_braces = open_tok.type == TokenType.LCURLCURL
        close_type = TokenType.RCURLCURL if total_braces else TokenType.RCURL
        fields: dict = {}

        def set_once(name: str, value, span: Span):
            if name in fields:
                raise ParseError(f"duplicate cost {name.replace('_', '-')}", span)
            fields[name] = value

        if not cursor.at(close_type):
            while True:
                tok = cursor.peek()
                if tok.type == TokenType.DATE:
                    cursor.advance()
                    set_once("date", Spanned(tok.value, tok.span), tok.span)
                elif tok.type == TokenType.STRING:
                    cursor.advance()
                    set_once("label", Spanned(tok.value, tok.span), tok.span)
                elif tok.type == TokenType.STAR:
                    cursor.advance()
                    set_once("merge", True, tok.span)
                elif tok.type in EXPR_START or tok.type in (TokenType.HASH, TokenType.CURRENCY):
                    self._parse_compound_amount(cursor, set_once, total_braces)
                else:
                    cursor.fail("expected cost component")
                if not cursor.match(TokenType.COMMA):
                    break

        close_tok = cursor.consume(close_type, repr(close_type.value))
        return Spanned(CostSpec(**fields), open_tok.span.union(close_tok.span))

    def _parse_compound_amount(self, cursor: TokenCursor, set_once, total_braces: bool) -> None:
        """``per_unit [# total] [CURRENCY]``, ``# total [CURRENCY]`` or ``CURRENCY``."""
        if cursor.at(*EXPR_START):
            value = parse_expr(cursor, self.config)
            set_once("total" if total_braces else "per_unit", value, value.span)
        if cursor.at(TokenType.HASH):
            hash_tok = cursor.advance()
            if total_braces:
                raise ParseError("'#' not allowed in a total cost", hash_tok.span)
            if cursor.at(*EXPR_START):
                value = parse_expr(cursor, self.config)
                set_once("total", value, value.span)
        if cursor.at(TokenType.CURRENCY):
            currency = self._currency(cursor)
            set_once("currency", currency, currency.span)

    def _parse_price_annotation(self, cursor: TokenCursor) -> Spanned[PriceSpec]:
        at_tok = cursor.advance()
        scope = Scope.TOTAL if at_tok.type == TokenType.ATAT else Scope.PER_UNIT

        amount = None
        if cursor.at(*EXPR_START):
            value = parse_expr(cursor, self.config)
            amount = Spanned(ScopedExprValue(scope, value.item), value.span)
        currency = self._currency(cursor) if cursor.at(TokenType.CURRENCY) else None

        span = at_tok.span.union(cursor.tokens[cursor.pos - 1].span)
        if amount and currency:
            return Spanned(CurrencyAmount(amount=amount, currency=currency), span)
        if amount:
            return Spanned(BareAmount(amount=amount), span)
        if currency:
            return Spanned(BareCurrency(currency=currency), span)
        cursor.fail("expected price amount or currency")

    # ------------------------------------------------------------------
    # Other directives: fields after the keyword
    # ------------------------------------------------------------------

    def _parse_price(self, cursor: TokenCursor) -> Price:
        return Price(currency=self._currency(cursor), amount=self._amount(cursor))

    def _parse_balance(self, cursor: TokenCursor) -> Balance:
        account = self._account(cursor)
        number = parse_expr(cursor, self.config)
        tolerance = None
        if cursor.match(TokenType.TILDE):
            tolerance = parse_expr(cursor, self.config)
        currency = self._currency(cursor)
        amount = Spanned(Amount(number=number, currency=currency), number.span.union(currency.span))
        return Balance(account=account, amount=amount, tolerance=tolerance)

    def _parse_open(self, cursor: TokenCursor) -> Open:
        account = self._account(cursor)
        currencies = []
        if cursor.at(TokenType.CURRENCY):
            currencies.append(self._currency(cursor))
            while cursor.match(TokenType.COMMA):
                currencies.append(self._currency(cursor))
        booking = None
        if cursor.at(TokenType.STRING):
            tok = cursor.advance()
            booking = Spanned(validators.booking(tok.value, tok.span), tok.span)
        return Open(account=account, currencies=tuple(currencies), booking=booking)

    def _parse_close(self, cursor: TokenCursor) -> Close:
        return Close(account=self._account(cursor))

    def _parse_commodity(self, cursor: TokenCursor) -> Commodity:
        return Commodity(currency=self._currency(cursor))

    def _parse_pad(self, cursor: TokenCursor) -> Pad:
        return Pad(account=self._account(cursor), source=self._account(cursor))

    def _parse_document(self, cursor: TokenCursor) -> Document:
        return Document(account=self._account(cursor), path=self._string(cursor, "document path"))

    def _parse_note(self, cursor: TokenCursor) -> Note:
        return Note(account=self._account(cursor), comment=self._string(cursor, "note comment"))

    def _parse_event(self, cursor: TokenCursor) -> Event:
        return Event(
            event_type=self._string(cursor, "event type"),
            description=self._string(cursor, "event description"),
        )

    def _parse_query(self, cursor: TokenCursor) -> Query:
        return Query(name=self._string(cursor, "query name"), content=self._string(cursor, "query content"))

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def _parse_header_end(self, cursor: TokenCursor, meta: _MetadataBuilder) -> None:
        """Trailing tags and links on a header line, then EOL."""
        while tok := cursor.match(TokenType.TAG, TokenType.LINK):
            if tok.type == TokenType.TAG:
                meta.add_tag(Spanned(tok.value, tok.span))
            else:
                meta.add_link(Spanned(tok.value, tok.span))
        cursor.consume(TokenType.EOL, "end of line")

    def _parse_meta_line(self, cursor: TokenCursor, meta: _MetadataBuilder) -> None:
        """An indented ``key: value`` line, or a line of tags and links."""
        if cursor.at(TokenType.KEY):
            meta.add_key_value(self._parse_key_value(cursor))
        elif cursor.at(TokenType.TAG, TokenType.LINK):
            while tok := cursor.match(TokenType.TAG, TokenType.LINK):
                item = Spanned(tok.value, tok.span)
                if tok.type == TokenType.TAG:
                    meta.add_tag(item)
                    kind = MetaValueKind.TAG
                else:
                    meta.add_link(item)
                    kind = MetaValueKind.LINK
                meta.add_key_value(KeyValue(key=None, value=Spanned(MetaValue(kind, tok.value), tok.span)))
        else:
            cursor.fail("expected metadata")
        cursor.consume(TokenType.EOL, "end of line")

    def _parse_key_value(self, cursor: TokenCursor) -> KeyValue:
        key_tok = cursor.advance()
        key = Spanned(key_tok.value, key_tok.span)
        tok = cursor.peek()

        if tok.type == TokenType.EOL:
            value = Spanned(MetaValue(MetaValueKind.NONE), Span(key_tok.span.end, key_tok.span.end))
        elif tok.type == TokenType.ACCOUNT:
            account = self._account(cursor)
            value = Spanned(MetaValue(MetaValueKind.ACCOUNT, account.item), account.span)
        elif tok.type == TokenType.CURRENCY:
            currency = self._currency(cursor)
            value = Spanned(MetaValue(MetaValueKind.CURRENCY, currency.item), currency.span)
        elif tok.type in EXPR_START:
            number = parse_expr(cursor, self.config)
            if cursor.at(TokenType.CURRENCY):
                currency = self._currency(cursor)
                amount = Amount(number=number, currency=currency)
                value = Spanned(MetaValue(MetaValueKind.AMOUNT, amount), number.span.union(currency.span))
            else:
                value = Spanned(MetaValue(MetaValueKind.NUMBER, number.item), number.span)
        else:
            simple = {
                TokenType.STRING: MetaValueKind.TEXT,
                TokenType.TAG: MetaValueKind.TAG,
                TokenType.LINK: MetaValueKind.LINK,
                TokenType.DATE: MetaValueKind.DATE,
                TokenType.BOOL: MetaValueKind.BOOLEAN,
                TokenType.NULL: MetaValueKind.NONE,
            }
            if tok.type not in simple:
                cursor.fail("expected metadata value")
            cursor.advance()
            value = Spanned(MetaValue(simple[tok.type], tok.value), tok.span)

        return KeyValue(key=key, value=value)

    # ------------------------------------------------------------------
    # Leaf values
    # ------------------------------------------------------------------

    def _account(self, cursor: TokenCursor) -> Spanned[Account]:
        tok = cursor.consume(TokenType.ACCOUNT, "account")
        return Spanned(validators.account(tok.text, tok.span), tok.span)

    def _currency(self, cursor: TokenCursor) -> Spanned[str]:
        tok = cursor.consume(TokenType.CURRENCY, "currency")
        return Spanned(validators.currency(tok.text, tok.span), tok.span)

    def _string(self, cursor: TokenCursor, what: str) -> Spanned[str]:
        tok = cursor.consume(TokenType.STRING, what)
        return Spanned(tok.value, tok.span)

    def _amount(self, cursor: TokenCursor) -> Spanned[Amount]:
        number = parse_expr(cursor, self.config)
        currency = self._currency(cursor)
        return Spanned(Amount(number=number, currency=currency), number.span.union(currency.span))

    def result(self, source: Source) -> ParseResult:
        return ParseResult(
            source=source,
            directives=self.directives,
            errors=self.errors,
            warnings=self.warnings,
            options=self.options,
            includes=self.includes,
            plugins=self.plugins,
            config=self.config,
        )


def parse(
    source: str | Source, name: str = "<string>", options: ParserOptions | None = None
) -> ParseResult:
    """Parse ledger source into directives, collecting every error on the way."""
    if not isinstance(source, Source):
        source = Source(name=name, text=source)
    parser = Parser(Lexer(source.text).tokenize(), options)
    parser.parse()
    result = parser.result(source)
    logger.debug(
        "parsed %s: %d directive(s), %d error(s), %d warning(s)",
        source.name,
        len(result.directives),
        len(result.errors),
        len(result.warnings),
    )
    return result


def parse_file(filepath: str | Path, options: ParserOptions | None = None) -> ParseResult:
    """Parse a ledger file. I/O errors propagate as OSError."""
    return parse(Source.from_file(filepath), options=options)
