"""Render diagnostics against their source text.

    error: date out of range
     --> ledger.beancount:1:1
      |
    1 | 2023-13-01 open Assets:Cash
      | ^^^^^^^^^^
"""

from typing import Iterable, Protocol

from .span import Source, Span


class Diagnostic(Protocol):
    message: str
    span: Span


def _padding(text: str) -> str:
    # Keep tabs so carets line up under tab-indented text
    return "".join("\t" if c == "\t" else " " for c in text)


def render_diagnostic(
    source: Source, diagnostic: Diagnostic, severity: str = "error", context_lines: int = 0
) -> str:
    span = diagnostic.span
    start_line, start_col = source.location(span.start)
    end_line, _ = source.location(max(span.start, span.end - 1))
    first = max(1, start_line - context_lines)
    last = min(source.line_count, end_line + context_lines)
    gutter = " " * len(str(last))

    out = [
        f"{severity}: {diagnostic.message}",
        f"{gutter}--> {source.name}:{start_line}:{start_col}",
        f"{gutter} |",
    ]
    for line in range(first, last + 1):
        text = source.line_text(line)
        out.append(f"{line:>{len(gutter)}} | {text}".rstrip())
        if start_line <= line <= end_line:
            line_start = source.line_start(line)
            lo = span.start - line_start if line == start_line else 0
            hi = span.end - line_start if line == end_line else len(text)
            hi = min(hi, len(text))
            out.append(f"{gutter} | {_padding(text[:lo])}{'^' * max(1, hi - lo)}")
    return "\n".join(out)


def render_diagnostics(
    source: Source,
    errors: Iterable[Diagnostic],
    warnings: Iterable[Diagnostic] = (),
    context_lines: int = 0,
) -> str:
    """All errors, then all warnings, separated by blank lines."""
    blocks = [render_diagnostic(source, e, "error", context_lines) for e in errors]
    blocks += [render_diagnostic(source, w, "warning", context_lines) for w in warnings]
    return "\n\n".join(blocks)
