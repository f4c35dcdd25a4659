"""Source buffers and spans.

A Span is a half-open ``[start, end)`` offset range into the text of a
Source. Spans never hold references to the text itself, so parsed values can
outlive (or be pickled independently of) the buffer they came from.
"""

from bisect import bisect_right
from dataclasses import dataclass, field
from pathlib import Path
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, order=True)
class Span:
    """Half-open range of code point offsets into Source.text.

    Offsets count characters of the decoded str, not bytes. Use
    Source.byte_span() for UTF-8 byte offsets.
    """

    start: int
    end: int

    def __post_init__(self):
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid span [{self.start}, {self.end})")

    def __len__(self) -> int:
        return self.end - self.start

    def union(self, other: "Span") -> "Span":
        """Smallest span covering both."""
        return Span(min(self.start, other.start), max(self.end, other.end))


@dataclass(frozen=True)
class Spanned(Generic[T]):
    """A parsed value together with the span it came from."""

    item: T
    span: Span


@dataclass(frozen=True)
class Source:
    """A named, immutable source buffer."""

    name: str
    text: str
    _line_starts: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        starts = [0]
        for i, ch in enumerate(self.text):
            if ch == "\n":
                starts.append(i + 1)
        object.__setattr__(self, "_line_starts", tuple(starts))

    @classmethod
    def from_file(cls, filepath: str | Path) -> "Source":
        filepath = Path(filepath)
        return cls(name=str(filepath), text=filepath.read_text(encoding="utf-8"))

    def __getitem__(self, span: Span) -> str:
        return self.text[span.start : span.end]

    def location(self, offset: int) -> tuple[int, int]:
        """1-based (line, column) of an offset."""
        offset = max(0, min(offset, len(self.text)))
        line_idx = bisect_right(self._line_starts, offset) - 1
        return line_idx + 1, offset - self._line_starts[line_idx] + 1

    def line_start(self, line: int) -> int:
        """Offset of the first character of a 1-based line."""
        return self._line_starts[line - 1]

    def line_text(self, line: int) -> str:
        """Text of a 1-based line, without its newline."""
        start = self._line_starts[line - 1]
        if line < len(self._line_starts):
            end = self._line_starts[line] - 1
        else:
            end = len(self.text)
        return self.text[start:end].rstrip("\r")

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def byte_span(self, span: Span) -> tuple[int, int]:
        """Convert a span to UTF-8 byte offsets."""
        start = len(self.text[: span.start].encode("utf-8"))
        return start, start + len(self[span].encode("utf-8"))
