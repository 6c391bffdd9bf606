"""matcher.py - Fuzzy filter for the script picker.

The query is split on whitespace. Every token must occur in the candidate
text at a word boundary (start of text, or right after a non-word
character), case-insensitively. Tokens are independent of each other, so
"run test" matches both "test:run" and "run:test".
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from functools import lru_cache
from typing import TypeVar

T = TypeVar("T")


@lru_cache(maxsize=256)
def _token_pattern(token: str) -> re.Pattern[str]:
    return re.compile(r"(?:^|(?<=\W))" + re.escape(token), re.IGNORECASE)


def matches(candidate: str, query: str) -> bool:
    """Return True if every whitespace-separated token of `query` occurs in
    `candidate` at a word boundary. An empty or blank query matches anything.
    """
    return all(_token_pattern(token).search(candidate) for token in query.split())


def filter_matches(items: Iterable[T], query: str, key=str) -> list[T]:
    """Keep the items whose `key(item)` matches `query`, preserving order."""
    return [item for item in items if matches(key(item), query)]


__all__ = ["filter_matches", "matches"]
