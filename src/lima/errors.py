"""Parse diagnostics: a message anchored to a span."""

from .span import Span


class ParseError(Exception):
    def __init__(self, message: str, span: Span):
        super().__init__(message)
        self.message = message
        self.span = span

    def __eq__(self, other):
        if not isinstance(other, ParseError):
            return NotImplemented
        return (self.message, self.span) == (other.message, other.span)

    def __hash__(self):
        return hash((self.message, self.span))

    def __repr__(self):
        return f"ParseError({self.message!r}, {self.span!r})"


class ParseWarning:
    """Same shape as ParseError, but never makes a parse unsuccessful."""

    def __init__(self, message: str, span: Span):
        self.message = message
        self.span = span

    def __str__(self):
        return self.message

    def __eq__(self, other):
        if not isinstance(other, ParseWarning):
            return NotImplemented
        return (self.message, self.span) == (other.message, other.span)

    def __hash__(self):
        return hash((self.message, self.span))

    def __repr__(self):
        return f"ParseWarning({self.message!r}, {self.span!r})"


class ParseFailed(Exception):
    """Raised by ParseResult.raise_for_errors() when any error was collected."""

    def __init__(self, errors: list[ParseError]):
        self.errors = errors
        noun = "error" if len(errors) == 1 else "errors"
        super().__init__(f"{len(errors)} parse {noun}: " + "; ".join(e.message for e in errors))
