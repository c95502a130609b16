from .content_filter import ContentFilter, FilterResult
from .quality import has_domain_keyword, noise_phrase_dominates, repetition_ratio, score_quality

__all__ = [
    "ContentFilter",
    "FilterResult",
    "has_domain_keyword",
    "noise_phrase_dominates",
    "repetition_ratio",
    "score_quality",
]
