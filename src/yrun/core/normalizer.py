"""normalizer.py - Rewrite forward slashes for back-slash shells.

Manifests declare portable, forward-slash paths. On Windows shells those
paths need native separators, but a `&` or `|` that sits inside a quoted
literal must not be treated as the start of a new command.

The quoted-literal test is a heuristic, not a shell lexer: for each quote
character, the span runs from its first occurrence to its last occurrence
on the same line. Anything with three or more of the same quote character
can be misclassified.
"""

from __future__ import annotations

import os
import re
import sys
from dataclasses import dataclass

QUOTE_CHARS = ('"', "'")

# Optional command separator (optionally surrounded by whitespace), then a
# double-quoted token, a single-quoted token, or a run of non-whitespace.
_TOKEN_RE = re.compile(
    r"""(?P<pre>(?:\s*(?:&&|\|\||&|\|))?\s*)(?P<body>".*?"|'.*?'|\S+)"""
)


@dataclass(frozen=True, slots=True)
class QuoteSpan:
    """Offsets of a quoted region; `end` is one past the closing quote."""

    start: int
    end: int

    def covers(self, offset: int) -> bool:
        return self.start <= offset <= self.end


def find_quote_spans(command: str) -> list[QuoteSpan]:
    """Locate the greedy first-to-last span for each quote character."""
    spans: list[QuoteSpan] = []
    for quote in QUOTE_CHARS:
        found = re.search(f"{quote}.*{quote}", command)
        if found:
            spans.append(QuoteSpan(found.start(), found.end()))
    return spans


def normalize(command: str) -> str:
    """Replace `/` with `\\` in command tokens, leaving separator tokens that
    fall inside a quoted span untouched.

    Total: never raises, whatever the input.
    """
    spans = find_quote_spans(command)

    def _replace(match: re.Match[str]) -> str:
        pre = match.group("pre")
        operator = pre.lstrip()
        if operator[:1] in ("&", "|"):
            offset = match.start() + len(pre) - len(operator)
            if any(span.covers(offset) for span in spans):
                return match.group(0)
        return pre + match.group("body").replace("/", "\\")

    return _TOKEN_RE.sub(_replace, command)


def uses_backslash_paths() -> bool:
    """True on hosts whose native shell uses back-slash path separators."""
    return os.sep == "\\" or sys.platform == "win32"


def normalize_for_host(command: str, backslash: bool | None = None) -> str:
    """Apply `normalize` only on back-slash hosts."""
    if backslash is None:
        backslash = uses_backslash_paths()
    return normalize(command) if backslash else command


__all__ = [
    "QuoteSpan",
    "find_quote_spans",
    "normalize",
    "normalize_for_host",
    "uses_backslash_paths",
]
