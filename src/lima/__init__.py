"""Lima: parse plain-text ledger files into typed directives.

Pipeline: lex source -> parse directives (recovering from errors) -> render diagnostics.

Example:
    from lima import parse

    result = parse(open("books.beancount").read(), name="books.beancount")
    for directive in result.directives:
        print(directive.date.item, directive.variant.type)
    if not result.ok:
        print(result.render())
"""

__version__ = "0.1.0"

from .arithmetic import BinOp, Expr, ExprValue, Literal, Paren, UnaryOp, evaluate
from .config import ParserOptions
from .errors import ParseError, ParseFailed, ParseWarning
from .lexer import ExtendedDate, Lexer, Token, TokenType
from .parser import ParseResult, Parser, parse, parse_file
from .render import render_diagnostic, render_diagnostics
from .span import Source, Span, Spanned
from .types import (
    Account,
    AccountType,
    Amount,
    AnyFlag,
    Balance,
    BareAmount,
    BareCurrency,
    Booking,
    Close,
    Commodity,
    CostSpec,
    CurrencyAmount,
    DateValue,
    Directive,
    DirectiveVariant,
    Document,
    Event,
    Flag,
    FlagLetter,
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

__all__ = [
    # Parse
    "parse",
    "parse_file",
    "ParseResult",
    "Parser",
    "Lexer",
    "Token",
    "TokenType",
    "ParserOptions",
    # Diagnostics
    "ParseError",
    "ParseWarning",
    "ParseFailed",
    "render_diagnostic",
    "render_diagnostics",
    "Source",
    "Span",
    "Spanned",
    # Expressions
    "Expr",
    "ExprValue",
    "Literal",
    "BinOp",
    "UnaryOp",
    "Paren",
    "evaluate",
    # Directives
    "Directive",
    "DirectiveVariant",
    "Transaction",
    "Price",
    "Balance",
    "Open",
    "Close",
    "Commodity",
    "Pad",
    "Document",
    "Note",
    "Event",
    "Query",
    "Option",
    "Include",
    "Plugin",
    # Values
    "Account",
    "AccountType",
    "Amount",
    "AnyFlag",
    "Flag",
    "FlagLetter",
    "Booking",
    "DateValue",
    "ExtendedDate",
    "Posting",
    "CostSpec",
    "PriceSpec",
    "BareAmount",
    "BareCurrency",
    "CurrencyAmount",
    "Scope",
    "ScopedExprValue",
    "Metadata",
    "MetaValue",
    "MetaValueKind",
    "KeyValue",
]
