"""Quality heuristics for chunk retention."""

import re
from collections.abc import Iterable

from ..rules import DOMAIN_KEYWORDS, NOISE_PHRASES

_WS = re.compile(r"\s+")


def distinct_chars(text: str) -> int:
    """Number of distinct non-whitespace characters."""
    return len(set(_WS.sub("", text)))


def has_domain_keyword(text: str, keywords: Iterable[str] = DOMAIN_KEYWORDS) -> bool:
    return any(keyword in text for keyword in keywords)


def repetition_ratio(text: str) -> float:
    """1 - unique/total over whitespace-separated words."""
    words = text.split()
    if not words:
        return 0.0
    return 1 - len(set(words)) / len(words)


def noise_phrase_dominates(
    text: str,
    phrases: Iterable[str] = NOISE_PHRASES,
    min_repeats: int = 3,
    max_share: float = 0.5,
) -> bool:
    """True when some tracked phrase repeats more than `min_repeats` times
    and its occurrences cover more than `max_share` of the text."""
    if not text:
        return False
    for phrase in phrases:
        count = text.count(phrase)
        if count > min_repeats and count * len(phrase) / len(text) > max_share:
            return True
    return False


def score_quality(
    text: str,
    keywords: Iterable[str] = DOMAIN_KEYWORDS,
    min_length: int = 20,
    min_distinct: int = 5,
) -> int:
    """Score cleaned chunk content from 0 (drop) to 3 (domain content).

    - fewer than `min_distinct` distinct characters: 0
    - a domain keyword: 3
    - shorter than `min_length`: 0
    - word repetition ratio > 0.8: 0, > 0.6: 1, otherwise 2
    """
    text = text.strip()
    if distinct_chars(text) < min_distinct:
        return 0
    if has_domain_keyword(text, keywords):
        return 3
    if len(text) < min_length:
        return 0

    ratio = repetition_ratio(text)
    if ratio > 0.8:
        return 0
    if ratio > 0.6:
        return 1
    return 2
