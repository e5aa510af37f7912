"""Turn a free-text supply-chain question into search keywords."""

from __future__ import annotations

from typing import Iterable, List

# Filler words, analysis verbs and company codes (ICL/ISL/MBS) that would match
# nearly every row if used as substring filters.
STOP_WORDS = frozenset(
    {
        "show",
        "me",
        "the",
        "last",
        "compare",
        "price",
        "history",
        "for",
        "of",
        "trend",
        "cost",
        "unit",
        "true",
        "and",
        "qty",
        "quote",
        "quotes",
        "po",
        "pos",
        "is",
        "what",
        "are",
        "icl",
        "isl",
        "mbs",
    }
)

MIN_KEYWORD_LENGTH = 2


def extract_keywords(query: str) -> List[str]:
    """Lowercase, split on whitespace, drop stop words and one-character tokens.

    Order and duplicates are preserved.
    """

    if not query:
        return []
    return [
        token
        for token in query.lower().split()
        if token not in STOP_WORDS and len(token) >= MIN_KEYWORD_LENGTH
    ]


def without_terms(keywords: Iterable[str], excluded: Iterable[str]) -> List[str]:
    """Return ``keywords`` minus ``excluded`` terms, keeping order."""

    blocked = frozenset(excluded)
    return [keyword for keyword in keywords if keyword not in blocked]


__all__ = ["MIN_KEYWORD_LENGTH", "STOP_WORDS", "extract_keywords", "without_terms"]
