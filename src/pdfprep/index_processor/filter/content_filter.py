"""Two-phase content filter: full removal, partial cleaning, then quality scoring."""

import re
from dataclasses import dataclass, field

from loguru import logger

from pdfprep.entities.chunk import Chunk, reindex

from ..rules import (
    DOMAIN_KEYWORDS,
    FULL_REMOVAL_RULES,
    NOISE_PHRASES,
    PARTIAL_CLEANING_RULES,
    RuleTable,
)
from .quality import distinct_chars, has_domain_keyword, noise_phrase_dominates, score_quality

_WS = re.compile(r"\s+")


@dataclass
class FilterResult:
    chunks: list[Chunk] = field(default_factory=list)
    removed: int = 0
    cleaned: int = 0
    preserved: int = 0
    original: int = 0

    def as_stats(self) -> dict[str, int]:
        return {
            "originalChunks": self.original,
            "filteredChunks": len(self.chunks),
            "removedChunks": self.removed,
            "cleanedChunks": self.cleaned,
            "preservedChunks": self.preserved,
        }


class ContentFilter:
    """Removes noise chunks and excises noise spans from the rest.

    Attributes:
        min_content_length: Stripped length below which a chunk is dropped outright
        min_quality_length: Cleaned length below which only a domain keyword saves a chunk
        min_distinct_chars: Distinct-character floor, never overridden
        keywords: Domain keywords
    """

    def __init__(
        self,
        min_content_length: int = 5,
        min_quality_length: int = 20,
        min_distinct_chars: int = 5,
        keywords: tuple[str, ...] = DOMAIN_KEYWORDS,
        noise_phrases: tuple[str, ...] = NOISE_PHRASES,
        removal_rules: RuleTable = FULL_REMOVAL_RULES,
        cleaning_rules: RuleTable = PARTIAL_CLEANING_RULES,
    ):
        self.min_content_length = min_content_length
        self.min_quality_length = min_quality_length
        self.min_distinct_chars = min_distinct_chars
        self.keywords = keywords
        self.noise_phrases = noise_phrases
        self.removal_rules = removal_rules
        self.cleaning_rules = cleaning_rules

    def filter(self, chunks: list[Chunk]) -> FilterResult:
        result = FilterResult(original=len(chunks))

        for chunk in chunks:
            stripped = chunk.content.strip()

            reason = self.removal_reason(stripped)
            if reason:
                logger.debug(f"Dropping chunk {chunk.index}: {reason}")
                result.removed += 1
                continue

            cleaned_text, hits = self.clean(stripped)

            if len(cleaned_text) < self.min_quality_length and self._keeps_original(stripped):
                chunk.content = stripped
                chunk.provenance.quality_score = 3
                chunk.provenance.content_preserved = True
                chunk.provenance.cleaned = False
                result.preserved += 1
                result.chunks.append(chunk)
                continue

            score = score_quality(
                cleaned_text,
                keywords=self.keywords,
                min_length=self.min_quality_length,
                min_distinct=self.min_distinct_chars,
            )
            if score == 0:
                logger.debug(f"Dropping chunk {chunk.index}: quality score 0")
                result.removed += 1
                continue

            chunk.content = cleaned_text
            chunk.provenance.quality_score = score
            chunk.provenance.cleaned = hits > 0
            if hits:
                result.cleaned += 1
            result.chunks.append(chunk)

        reindex(result.chunks)
        logger.debug(
            f"Filter kept {len(result.chunks)}/{result.original} chunks "
            f"(removed={result.removed}, cleaned={result.cleaned}, preserved={result.preserved})"
        )
        return result

    def removal_reason(self, content: str) -> str | None:
        """Name of the first full-removal check the content trips, if any."""
        if len(content) < self.min_content_length:
            return "too short"
        for rule in self.removal_rules:
            if rule.matches(content):
                return rule.name
        if noise_phrase_dominates(content, self.noise_phrases):
            return "noise phrase"
        return None

    def clean(self, content: str) -> tuple[str, int]:
        """Apply the partial-cleaning rules, then collapse whitespace."""
        hits = 0
        for rule in self.cleaning_rules:
            content, count = rule.apply(content)
            hits += count
        return _WS.sub(" ", content).strip(), hits

    def _keeps_original(self, original: str) -> bool:
        return (
            distinct_chars(original) >= self.min_distinct_chars
            and has_domain_keyword(original, self.keywords)
        )
