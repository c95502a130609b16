"""Text normalizer: whitespace collapse, boilerplate line removal, garbled-text detection."""

import re
from dataclasses import dataclass, field

from loguru import logger

from ..rules import NORMALIZER_RULES, RuleTable

# Characters a clean extraction is expected to consist of
_ACCEPTED_CHARS = re.compile(
    r"[一-鿿㐀-䶿"  # CJK ideographs
    r"A-Za-zÀ-ɏ"          # Latin letters
    r"0-9"
    r"\s"
    r"!-/:-@\[-`{-~"                # ASCII punctuation
    r"　-〿＀-￯"   # CJK punctuation, full-width forms
    r"‐-‧·]"         # dashes, quotes, ellipsis, middle dot
)
_HORIZONTAL_WS = re.compile(r"[^\S\n]+")
_LINE_BREAKS = re.compile(r"\s*\n\s*")


def collapse_whitespace(text: str) -> str:
    """Collapse runs of spaces to one space and runs of line breaks to one newline."""
    if not text:
        return ""
    text = text.replace("\0", "")
    text = _HORIZONTAL_WS.sub(" ", text)
    text = _LINE_BREAKS.sub("\n", text)
    return text.strip()


def garbled_ratio(text: str) -> float:
    """Share of characters outside the accepted character set."""
    if not text:
        return 0.0
    accepted = len(_ACCEPTED_CHARS.findall(text))
    return (len(text) - accepted) / len(text)


@dataclass
class NormalizationResult:
    cleaned_text: str
    needs_review: bool
    garbled_ratio: float = 0.0
    removed_lines: int = 0
    fallback: bool = False
    rule_hits: dict[str, int] = field(default_factory=dict)


class TextNormalizer:
    """Strips publisher/author/header-footer boilerplate from extracted text.

    Rules are applied per line (multiline mode) in table order. The
    normalizer never raises on bad input; it flags the text for review.

    Attributes:
        rules: Ordered removal rule table
        garbled_threshold: Ratio of unexpected characters that flags review
        min_length: Collapsed texts shorter than this short-circuit
        min_retained_ratio: Over-cleaning guard ratio (cleaned / raw)
    """

    def __init__(
        self,
        rules: RuleTable = NORMALIZER_RULES,
        garbled_threshold: float = 0.2,
        min_length: int = 10,
        min_retained_ratio: float = 0.1,
    ):
        if not 0.0 <= garbled_threshold <= 1.0:
            raise ValueError("garbled_threshold must be between 0 and 1")
        self.rules = rules
        self.garbled_threshold = garbled_threshold
        self.min_length = min_length
        self.min_retained_ratio = min_retained_ratio

    def normalize(self, raw_text: str | None) -> NormalizationResult:
        raw_text = raw_text or ""
        cleaned = collapse_whitespace(raw_text)

        if len(cleaned) < self.min_length:
            logger.debug(f"Text too short to normalize ({len(cleaned)} chars), flagging for review")
            return NormalizationResult(cleaned_text=cleaned, needs_review=True)

        rule_hits: dict[str, int] = {}
        for rule in self.rules:
            cleaned, hits = rule.apply(cleaned)
            if hits:
                rule_hits[rule.name] = hits
        cleaned = collapse_whitespace(cleaned)

        ratio = garbled_ratio(cleaned)
        needs_review = ratio > self.garbled_threshold
        if needs_review:
            logger.warning(f"Possible garbled text detected, ratio={ratio:.1%}")

        if len(cleaned) < len(raw_text) * self.min_retained_ratio:
            logger.warning(
                f"Over-cleaning detected ({len(cleaned)}/{len(raw_text)} chars kept), "
                f"falling back to whitespace-collapsed original"
            )
            return NormalizationResult(
                cleaned_text=collapse_whitespace(raw_text),
                needs_review=True,
                garbled_ratio=ratio,
                removed_lines=sum(rule_hits.values()),
                fallback=True,
                rule_hits=rule_hits,
            )

        return NormalizationResult(
            cleaned_text=cleaned,
            needs_review=needs_review,
            garbled_ratio=ratio,
            removed_lines=sum(rule_hits.values()),
            rule_hits=rule_hits,
        )
