"""Domain value validators.

Each function turns the text of a literal into a domain value, or raises a
ParseError scoped to that literal's span.
"""

import string

from .errors import ParseError
from .span import Span
from .types import Account, AccountType, AnyFlag, Booking, Flag, FlagLetter

ACCOUNT_TYPES = {t.value: t for t in AccountType}
BOOKINGS = {b.value: b for b in Booking}
SYMBOL_FLAGS = {f.value: f for f in Flag}

# Letters usable as flags without a quote, e.g. "P" for padding transactions.
LEGACY_FLAG_LETTERS = set("PSTCURM")
FLAG_LETTERS = set(string.ascii_uppercase)

CURRENCY_MAX_LEN = 24
CURRENCY_INNER_CHARS = set(string.ascii_uppercase + string.digits + "'._-")
CURRENCY_END_CHARS = set(string.ascii_uppercase + string.digits)


def account_type(name: str, span: Span) -> AccountType:
    try:
        return ACCOUNT_TYPES[name]
    except KeyError:
        expected = ", ".join(ACCOUNT_TYPES)
        raise ParseError(f"invalid account type {name!r}, expected one of {expected}", span) from None


def is_valid_subaccount(name: str) -> bool:
    if not name:
        return False
    first, rest = name[0], name[1:]
    if not (first.isupper() or first.isdigit()):
        return False
    return all(c.isalnum() or c in "-_" for c in rest)


def account(text: str, span: Span) -> Account:
    """Validate ``Type:Sub1:Sub2...``; errors point at the offending component."""
    parts = text.split(":")
    offset = span.start
    acc_type = account_type(parts[0], Span(offset, offset + len(parts[0])))
    offset += len(parts[0]) + 1

    subaccounts = []
    for part in parts[1:]:
        part_span = Span(offset, offset + len(part))
        if not is_valid_subaccount(part):
            if not part:
                raise ParseError("empty subaccount name", part_span)
            raise ParseError(f"invalid subaccount name {part!r}", part_span)
        subaccounts.append(part)
        offset += len(part) + 1

    if not subaccounts:
        raise ParseError("account requires at least one subaccount", span)
    return Account(acc_type, tuple(subaccounts))


def is_valid_currency(text: str) -> bool:
    if not 1 <= len(text) <= CURRENCY_MAX_LEN:
        return False
    if len(text) == 1:
        return text in string.ascii_uppercase
    first, inner, last = text[0], text[1:-1], text[-1]
    return (
        first in string.ascii_uppercase
        and last in CURRENCY_END_CHARS
        and all(c in CURRENCY_INNER_CHARS for c in inner)
    )


def currency(text: str, span: Span) -> str:
    if not is_valid_currency(text):
        if len(text) > CURRENCY_MAX_LEN:
            raise ParseError(f"currency too long, maximum length is {CURRENCY_MAX_LEN}", span)
        raise ParseError(f"invalid currency {text!r}", span)
    return text


def booking(text: str, span: Span) -> Booking:
    try:
        return BOOKINGS[text]
    except KeyError:
        raise ParseError(f"unknown booking method {text!r}", span) from None


def flag(text: str, span: Span) -> AnyFlag:
    """Flag from its source text: ``txn``, a symbol, ``'X``, or a legacy letter."""
    if text == "txn":
        return Flag.ASTERISK
    if text in SYMBOL_FLAGS:
        return SYMBOL_FLAGS[text]
    if text.startswith("'") and len(text) == 2:
        letter = text[1]
        if letter not in FLAG_LETTERS:
            raise ParseError(f"invalid flag letter {letter!r}", span)
        return FlagLetter(letter)
    if text in LEGACY_FLAG_LETTERS:
        return FlagLetter(text)
    raise ParseError(f"invalid flag {text!r}", span)
