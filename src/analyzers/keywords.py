"""Frequency-based keyword extraction."""

import re
from collections import Counter

from analyzers.models import KeywordRecord
from config import settings

NON_WORD_RE = re.compile(r"[^\w\s]")


def tokenize(text: str, stop_words: set[str]) -> list[str]:
    """Lowercase tokens longer than two characters, stop-words removed."""
    words = NON_WORD_RE.sub(" ", text.lower()).split()
    return [word for word in words if len(word) > 2 and word not in stop_words]


def extract_keywords(
    title: str,
    headings: list[str],
    meta_description: str,
    visible_text: str,
    limit: int | None = None,
    text_limit: int | None = None,
    stop_words: list[str] | None = None,
) -> tuple[list[KeywordRecord], int]:
    """
    Rank the terms of a page by frequency.

    All sources are pooled before counting; no field is weighted. Only terms
    seen more than once are kept. Ties keep first-seen order.

    Returns:
        (keywords, word_count) where word_count is the number of tokens left
        after filtering
    """
    limit = settings.keyword_limit if limit is None else limit
    text_limit = settings.keyword_text_limit if text_limit is None else text_limit
    stop = set(settings.stop_words if stop_words is None else stop_words)

    pooled = " ".join(
        [
            title or "",
            *headings,
            meta_description or "",
            (visible_text or "")[:text_limit],
        ]
    )
    tokens = tokenize(pooled, stop)

    # Counter preserves insertion order and sorted() is stable
    counts = Counter(tokens)
    ranked = sorted(
        ((word, count) for word, count in counts.items() if count > 1),
        key=lambda item: item[1],
        reverse=True,
    )

    keywords = [
        KeywordRecord(keyword=word, frequency=count) for word, count in ranked[:limit]
    ]
    return keywords, len(tokens)
