"""Data model for parsed ledger directives.

Everything here is immutable and created once per parse. Leaf values that
come from the source are wrapped in ``Spanned`` so that any part of a
directive can be traced back to its text.
"""

import datetime
from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from typing import Any, Union

from .arithmetic import ExprValue
from .lexer import ExtendedDate
from .span import Span, Spanned


# Years past 9999 do not fit datetime.date
DateValue = Union[datetime.date, ExtendedDate]

class AccountType(Enum):
    ASSETS = "Assets"
    LIABILITIES = "Liabilities"
    EQUITY = "Equity"
    INCOME = "Income"
    EXPENSES = "Expenses"

    def __str__(self):
        return self.value


@total_ordering
@dataclass(frozen=True)
class Account:
    """An account: its type plus one or more subaccount names.

    Equality and ordering are structural; ordering follows the declaration
    order of AccountType, then the subaccount names.
    """

    account_type: AccountType
    subaccounts: tuple[str, ...]

    def __post_init__(self):
        if not self.subaccounts:
            raise ValueError("account requires at least one subaccount")

    def _sort_key(self):
        return (list(AccountType).index(self.account_type), self.subaccounts)

    def __lt__(self, other):
        if not isinstance(other, Account):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self):
        return ":".join((self.account_type.value, *self.subaccounts))


class Flag(Enum):
    ASTERISK = "*"
    HASH = "#"
    EXCLAMATION = "!"
    AMPERSAND = "&"
    QUESTION = "?"
    PERCENT = "%"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class FlagLetter:
    """A letter flag, written ``'X`` (or as a bare legacy letter)."""

    letter: str

    def __str__(self):
        return f"'{self.letter}"


AnyFlag = Union[Flag, FlagLetter]


class Booking(Enum):
    STRICT = "STRICT"
    STRICT_WITH_SIZE = "STRICT_WITH_SIZE"
    NONE = "NONE"
    AVERAGE = "AVERAGE"
    FIFO = "FIFO"
    LIFO = "LIFO"


@dataclass(frozen=True)
class Amount:
    number: Spanned[ExprValue]
    currency: Spanned[str]

    def __str__(self):
        return f"{self.number.item} {self.currency.item}"


class Scope(Enum):
    PER_UNIT = "per_unit"
    TOTAL = "total"


@dataclass(frozen=True)
class ScopedExprValue:
    """A price or cost amount marked as per-unit (default) or total."""

    scope: Scope
    value: ExprValue

    @property
    def is_total(self) -> bool:
        return self.scope is Scope.TOTAL


@dataclass(frozen=True)
class BareCurrency:
    currency: Spanned[str]


@dataclass(frozen=True)
class BareAmount:
    amount: Spanned[ScopedExprValue]


@dataclass(frozen=True)
class CurrencyAmount:
    amount: Spanned[ScopedExprValue]
    currency: Spanned[str]


PriceSpec = Union[BareCurrency, BareAmount, CurrencyAmount]


@dataclass(frozen=True)
class CostSpec:
    """Cost annotation. Every field is independently optional."""

    per_unit: Spanned[ExprValue] | None = None
    total: Spanned[ExprValue] | None = None
    currency: Spanned[str] | None = None
    date: Spanned[DateValue] | None = None
    label: Spanned[str] | None = None
    merge: bool = False


class MetaValueKind(Enum):
    TEXT = "text"
    CURRENCY = "currency"
    ACCOUNT = "account"
    TAG = "tag"
    LINK = "link"
    DATE = "date"
    BOOLEAN = "boolean"
    NUMBER = "number"
    AMOUNT = "amount"
    NONE = "none"


@dataclass(frozen=True)
class MetaValue:
    """A metadata value. ``value``'s type follows ``kind``:

    TEXT/CURRENCY/TAG/LINK -> str, ACCOUNT -> Account, DATE -> DateValue,
    BOOLEAN -> bool, NUMBER -> ExprValue, AMOUNT -> Amount, NONE -> None.
    """

    kind: MetaValueKind
    value: Any = None


@dataclass(frozen=True)
class KeyValue:
    """One metadata line. Tag and link lines have no key."""

    key: Spanned[str] | None
    value: Spanned[MetaValue]


@dataclass(frozen=True)
class Metadata:
    tags: tuple[Spanned[str], ...] = ()  # duplicate-free, first-seen order
    links: tuple[Spanned[str], ...] = ()
    key_values: tuple[KeyValue, ...] = ()

    def tag_names(self) -> frozenset[str]:
        return frozenset(t.item for t in self.tags)

    def link_names(self) -> frozenset[str]:
        return frozenset(link.item for link in self.links)

    def keyed(self) -> dict[str, MetaValue]:
        """Keyed entries only, in source order."""
        return {kv.key.item: kv.value.item for kv in self.key_values if kv.key is not None}

    def get(self, key: str) -> MetaValue | None:
        return self.keyed().get(key)


@dataclass(frozen=True)
class Posting:
    account: Spanned[Account]
    flag: Spanned[AnyFlag] | None = None
    amount: Spanned[ExprValue] | None = None
    currency: Spanned[str] | None = None
    cost_spec: Spanned[CostSpec] | None = None
    price_annotation: Spanned[PriceSpec] | None = None
    metadata: Metadata = field(default_factory=Metadata)


# Directive variants - the "type" tag names the directive keyword
@dataclass(frozen=True)
class Transaction:
    flag: Spanned[AnyFlag]
    payee: Spanned[str] | None = None
    narration: Spanned[str] | None = None
    postings: tuple[Spanned[Posting], ...] = ()
    type: str = field(default="transaction", init=False)


@dataclass(frozen=True)
class Price:
    currency: Spanned[str]
    amount: Spanned[Amount]
    type: str = field(default="price", init=False)


@dataclass(frozen=True)
class Balance:
    account: Spanned[Account]
    amount: Spanned[Amount]
    tolerance: Spanned[ExprValue] | None = None
    type: str = field(default="balance", init=False)


@dataclass(frozen=True)
class Open:
    account: Spanned[Account]
    currencies: tuple[Spanned[str], ...] = ()
    booking: Spanned[Booking] | None = None
    type: str = field(default="open", init=False)


@dataclass(frozen=True)
class Close:
    account: Spanned[Account]
    type: str = field(default="close", init=False)


@dataclass(frozen=True)
class Commodity:
    currency: Spanned[str]
    type: str = field(default="commodity", init=False)


@dataclass(frozen=True)
class Pad:
    account: Spanned[Account]
    source: Spanned[Account]
    type: str = field(default="pad", init=False)


@dataclass(frozen=True)
class Document:
    account: Spanned[Account]
    path: Spanned[str]
    type: str = field(default="document", init=False)


@dataclass(frozen=True)
class Note:
    account: Spanned[Account]
    comment: Spanned[str]
    type: str = field(default="note", init=False)


@dataclass(frozen=True)
class Event:
    event_type: Spanned[str]
    description: Spanned[str]
    type: str = field(default="event", init=False)


@dataclass(frozen=True)
class Query:
    name: Spanned[str]
    content: Spanned[str]
    type: str = field(default="query", init=False)


DirectiveVariant = Union[
    Transaction, Price, Balance, Open, Close, Commodity, Pad, Document, Note, Event, Query
]


@dataclass(frozen=True)
class Directive:
    """A dated directive. ``span`` covers the header line and its indented block."""

    date: Spanned[DateValue]
    variant: DirectiveVariant
    span: Span
    metadata: Metadata = field(default_factory=Metadata)


# Pragmas (undated top-level statements)
@dataclass(frozen=True)
class Option:
    name: Spanned[str]
    value: Spanned[str]


@dataclass(frozen=True)
class Include:
    path: Spanned[str]


@dataclass(frozen=True)
class Plugin:
    module_name: Spanned[str]
    config: Spanned[str] | None = None
