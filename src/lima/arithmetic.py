"""Amount expressions and their exact-decimal evaluation.

Grammar:
    expr    = term (("+" | "-") term)*
    term    = unary (("*" | "/") unary)*
    unary   = ("-" | "+") unary | primary
    primary = NUMBER | "(" expr ")"

Literals keep the digits and scale they were written with. Addition,
subtraction, multiplication and negation are computed under an unbounded
context and are always exact. Division is the only operation that can
round; it uses the precision and rounding mode from ParserOptions
(28 significant digits, half-even, by default).
"""

from dataclasses import dataclass, field
from decimal import (
    MAX_EMAX,
    MAX_PREC,
    MIN_EMIN,
    ROUND_HALF_EVEN,
    Context,
    Decimal,
    DivisionByZero,
    DivisionUndefined,
    InvalidOperation,
    Overflow,
)
from typing import Union

from .config import ParserOptions
from .errors import ParseError
from .lexer import TokenCursor, TokenType
from .span import Span, Spanned

EXACT = Context(
    prec=MAX_PREC,
    rounding=ROUND_HALF_EVEN,
    Emax=MAX_EMAX,
    Emin=MIN_EMIN,
    traps=[InvalidOperation, DivisionByZero, Overflow],
)

EXPR_START = (TokenType.NUMBER, TokenType.MINUS, TokenType.PLUS, TokenType.LPAREN)


@dataclass(frozen=True)
class Literal:
    value: Decimal
    span: Span = field(compare=False)

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class BinOp:
    op: str  # +, -, *, /
    left: "Expr"
    right: "Expr"
    span: Span = field(compare=False)  # the operator

    def __str__(self):
        return f"{self.left} {self.op} {self.right}"


@dataclass(frozen=True)
class UnaryOp:
    op: str  # -, +
    operand: "Expr"
    span: Span = field(compare=False)

    def __str__(self):
        return f"{self.op}{self.operand}"


@dataclass(frozen=True)
class Paren:
    expr: "Expr"
    span: Span = field(compare=False)

    def __str__(self):
        return f"({self.expr})"


Expr = Union[Literal, BinOp, UnaryOp, Paren]


@dataclass(frozen=True)
class ExprValue:
    """An evaluated expression: the exact result plus the expression it came from."""

    value: Decimal
    expr: Expr

    def __str__(self):
        return str(self.expr)


def evaluate(expr: Expr, options: ParserOptions | None = None) -> Decimal:
    """Evaluate an expression tree exactly (division per ``options``)."""
    match expr:
        case Literal(value=v):
            return v
        case Paren(expr=inner):
            return evaluate(inner, options)
        case UnaryOp(op="-", operand=operand):
            return evaluate(operand, options).copy_negate()
        case UnaryOp(operand=operand):
            return evaluate(operand, options)
        case BinOp(op=op, left=left, right=right):
            a = evaluate(left, options)
            b = evaluate(right, options)
            if op == "+":
                return EXACT.add(a, b)
            if op == "-":
                return EXACT.subtract(a, b)
            if op == "*":
                return EXACT.multiply(a, b)
            return _divide(a, b, expr.span, options or ParserOptions())
    raise TypeError(f"not an expression: {expr!r}")


def _divide(a: Decimal, b: Decimal, span: Span, options: ParserOptions) -> Decimal:
    try:
        return options.division_context().divide(a, b)
    except (DivisionByZero, DivisionUndefined):
        raise ParseError("division by zero", span) from None
    except InvalidOperation:
        # 0 / 0 is reported as InvalidOperation on some platforms
        if not b:
            raise ParseError("division by zero", span) from None
        raise


class ExpressionParser:
    """Recursive descent over an arithmetic sub-expression of the token stream."""

    def __init__(self, cursor: TokenCursor, options: ParserOptions | None = None):
        self.cursor = cursor
        self.options = options or ParserOptions()

    def parse(self) -> Spanned[ExprValue]:
        start = self.cursor.peek().span
        expr = self._parse_sum()
        end = self.cursor.tokens[self.cursor.pos - 1].span
        return Spanned(ExprValue(evaluate(expr, self.options), expr), start.union(end))

    def _parse_sum(self) -> Expr:
        left = self._parse_product()
        while tok := self.cursor.match(TokenType.PLUS, TokenType.MINUS):
            right = self._parse_product()
            left = BinOp(op=tok.text, left=left, right=right, span=tok.span)
        return left

    def _parse_product(self) -> Expr:
        left = self._parse_unary()
        while tok := self.cursor.match(TokenType.STAR, TokenType.SLASH):
            right = self._parse_unary()
            left = BinOp(op=tok.text, left=left, right=right, span=tok.span)
        return left

    def _parse_unary(self) -> Expr:
        if tok := self.cursor.match(TokenType.MINUS, TokenType.PLUS):
            operand = self._parse_unary()
            return UnaryOp(op=tok.text, operand=operand, span=tok.span)
        return self._parse_primary()

    def _parse_primary(self) -> Expr:
        if tok := self.cursor.match(TokenType.NUMBER):
            return Literal(value=tok.value, span=tok.span)
        if lparen := self.cursor.match(TokenType.LPAREN):
            inner = self._parse_sum()
            rparen = self.cursor.consume(TokenType.RPAREN, "')'")
            return Paren(expr=inner, span=lparen.span.union(rparen.span))
        self.cursor.fail("expected number")


def parse_expr(cursor: TokenCursor, options: ParserOptions | None = None) -> Spanned[ExprValue]:
    """Parse and evaluate the expression starting at the cursor."""
    return ExpressionParser(cursor, options).parse()
