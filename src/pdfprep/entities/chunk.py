"""Chunk entity representing a bounded span of a document's text."""

from typing import Any

from pydantic import BaseModel, Field


class ChunkProvenance(BaseModel):
    """Record of what the optimizer and filter did to a chunk.

    Attributes:
        merged: Short neighbours were absorbed into this chunk
        merged_count: Number of absorbed neighbours
        split: This chunk is one part of an oversized chunk
        split_part: 1-based part number (0 when not split)
        total_parts: Number of parts the original was cut into
        quality_score: Score assigned by the content filter
        cleaned: The content filter rewrote the content
        content_preserved: Kept verbatim because of a domain keyword
        below_min_length: Emitted shorter than min_len for lack of a partner
    """

    merged: bool = False
    merged_count: int = Field(default=0, ge=0)
    split: bool = False
    split_part: int = Field(default=0, ge=0)
    total_parts: int = Field(default=0, ge=0)
    quality_score: int = Field(default=0, ge=0)
    cleaned: bool = False
    content_preserved: bool = False
    below_min_length: bool = False


class Chunk(BaseModel):
    """A chunk of text from a single source document.

    Attributes:
        content: The text content of this chunk
        index: Zero-based position in the document's chunk sequence
        source_id: Reference to the source document (never reassigned)
        embedding: Optional vector embedding (populated by the generator)
        provenance: Merge/split/filter bookkeeping
    """

    content: str
    index: int = Field(default=0, ge=0)
    source_id: str
    embedding: list[float] | None = None
    provenance: ChunkProvenance = Field(default_factory=ChunkProvenance)

    model_config = {
        "frozen": False,
        "validate_assignment": False,
    }

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the artifact's camelCase key convention."""
        p = self.provenance
        data: dict[str, Any] = {
            "content": self.content,
            "metadata": {
                "chunkIndex": self.index,
                "source": self.source_id,
                "merged": p.merged,
                "mergedCount": p.merged_count,
                "split": p.split,
                "splitPart": p.split_part,
                "totalParts": p.total_parts,
                "qualityScore": p.quality_score,
                "cleaned": p.cleaned,
                "contentPreserved": p.content_preserved,
                "belowMinLength": p.below_min_length,
            },
        }
        if self.embedding is not None:
            data["embedding"] = self.embedding
        return data


def reindex(chunks: list[Chunk]) -> list[Chunk]:
    """Assign contiguous zero-based indices in sequence order."""
    for i, chunk in enumerate(chunks):
        chunk.index = i
    return chunks
