"""Chunk optimizer enforcing a [min_length, max_length] band on chunk content.

Runs left to right over a document's chunks with a single pending
accumulator:

- empty content is dropped
- short content grows a short accumulator; once the accumulator reaches
  min_length the next short piece starts a fresh one
- in-band content flushes the accumulator, absorbing it first when the
  accumulator is still short and the combination fits
- oversized content is cut at sentence terminators into parts of at most
  max_length

A short accumulator with no partner merges into the previous emitted chunk
when that fits; otherwise it is emitted and tagged `below_min_length`.
"""

import re
from dataclasses import dataclass, field

from loguru import logger

from pdfprep.entities.chunk import Chunk, ChunkProvenance, reindex

_SENTENCE_END = re.compile(r"[。！？；\n]|[.!?;](?=\s|$)")


def split_sentences(text: str) -> list[str]:
    """Cut text after every CJK or Latin sentence terminator, keeping the terminator."""
    sentences = []
    start = 0
    for match in _SENTENCE_END.finditer(text):
        sentences.append(text[start:match.end()])
        start = match.end()
    if start < len(text):
        sentences.append(text[start:])
    return [s for s in sentences if s.strip()]


def split_long_content(content: str, max_length: int) -> list[str]:
    """Split content into sentence-bounded parts no longer than max_length.

    A sentence longer than max_length is hard-cut at max_length.
    """
    parts: list[str] = []
    current = ""

    for sentence in split_sentences(content):
        if len(sentence) > max_length:
            if current.strip():
                parts.append(current.strip())
            slices = [sentence[i:i + max_length] for i in range(0, len(sentence), max_length)]
            parts.extend(s.strip() for s in slices[:-1] if s.strip())
            current = slices[-1]
            continue

        if len(current) + len(sentence) <= max_length:
            current += sentence
        else:
            if current.strip():
                parts.append(current.strip())
            current = sentence

    if current.strip():
        parts.append(current.strip())

    return parts or [content[:max_length]]


@dataclass
class OptimizationResult:
    chunks: list[Chunk] = field(default_factory=list)
    merged: int = 0
    removed: int = 0
    split: int = 0

    def as_stats(self) -> dict[str, int]:
        return {
            "optimizedChunks": len(self.chunks),
            "mergedChunks": self.merged,
            "removedChunks": self.removed,
            "splitChunks": self.split,
        }


class ChunkOptimizer:
    """Merges undersized and splits oversized chunks.

    Attributes:
        min_length: Lower bound of the length band
        max_length: Upper bound of the length band
        separator: Joiner placed between merged contents
    """

    def __init__(self, min_length: int = 50, max_length: int = 8000, separator: str = " "):
        if min_length < 1:
            raise ValueError("min_length must be at least 1")
        if max_length < min_length:
            raise ValueError("max_length must be >= min_length")
        self.min_length = min_length
        self.max_length = max_length
        self.separator = separator

    def optimize(self, chunks: list[Chunk]) -> OptimizationResult:
        result = OptimizationResult()
        emitted: list[Chunk] = []
        pending: Chunk | None = None

        for chunk in chunks:
            content = chunk.content.strip()
            if not content:
                result.removed += 1
                continue

            length = len(content)

            if length < self.min_length:
                if pending is None:
                    pending = self._copy(chunk, content)
                elif self._is_short(pending) and self._fits(pending.content, content):
                    self._absorb(pending, content)
                    result.merged += 1
                else:
                    result.merged += self._flush(pending, emitted)
                    pending = self._copy(chunk, content)

            elif length <= self.max_length:
                current = self._copy(chunk, content)
                if pending is not None:
                    if self._is_short(pending) and self._fits(pending.content, content):
                        current.content = pending.content + self.separator + content
                        current.provenance.merged = True
                        current.provenance.merged_count += pending.provenance.merged_count + 1
                        result.merged += 1
                    else:
                        result.merged += self._flush(pending, emitted)
                pending = current

            else:
                if pending is not None:
                    result.merged += self._flush(pending, emitted)
                    pending = None

                parts = split_long_content(content, self.max_length)
                for number, part in enumerate(parts, start=1):
                    emitted.append(Chunk(
                        content=part,
                        source_id=chunk.source_id,
                        # Placeholder carry-through; embeddings are regenerated downstream
                        embedding=chunk.embedding,
                        provenance=ChunkProvenance(
                            split=True,
                            split_part=number,
                            total_parts=len(parts),
                            below_min_length=len(part) < self.min_length,
                        ),
                    ))
                result.split += 1
                logger.debug(f"Split oversized chunk ({length} chars) into {len(parts)} parts")

        if pending is not None:
            result.merged += self._flush(pending, emitted)

        result.chunks = reindex(emitted)
        return result

    def _is_short(self, chunk: Chunk) -> bool:
        return len(chunk.content) < self.min_length

    def _fits(self, left: str, right: str) -> bool:
        return len(left) + len(self.separator) + len(right) <= self.max_length

    def _absorb(self, target: Chunk, content: str) -> None:
        target.content = target.content + self.separator + content
        target.provenance.merged = True
        target.provenance.merged_count += 1

    def _flush(self, pending: Chunk, emitted: list[Chunk]) -> int:
        """Emit the accumulator; returns 1 when it was merged into the previous chunk."""
        if self._is_short(pending) and emitted and self._fits(emitted[-1].content, pending.content):
            last = emitted[-1]
            last.content = last.content + self.separator + pending.content
            last.provenance.merged = True
            last.provenance.merged_count += pending.provenance.merged_count + 1
            last.provenance.below_min_length = self._is_short(last)
            return 1

        pending.provenance.below_min_length = self._is_short(pending)
        emitted.append(pending)
        return 0

    @staticmethod
    def _copy(chunk: Chunk, content: str) -> Chunk:
        copy = chunk.model_copy(deep=True)
        copy.content = content
        return copy
