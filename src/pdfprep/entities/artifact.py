"""Output artifact persisted for every processed document."""

from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from pdfprep.entities.chunk import Chunk


class DocumentStatus(StrEnum):
    SUCCEEDED = "succeeded"
    NEEDS_REVIEW = "needs_review"
    FAILED = "failed"


class ProcessingStats(BaseModel):
    original_text_length: int = 0
    cleaned_text_length: int = 0
    average_chunk_size: int = 0
    embedding_model: str | None = None
    processing_date: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    truncated: bool = False
    optimization: dict[str, int] = Field(default_factory=dict)
    filtering: dict[str, int] = Field(default_factory=dict)
    embedding_failures: int = 0


class ProcessedDocument(BaseModel):
    """
    The durable per-document record handed to the storage collaborator.

    `to_dict()` produces the camelCase structure consumers rely on:
    `{filename, totalPages, totalChunks, chunks, metadata, processingStats}`.
    """

    filename: str
    total_pages: int = 0
    chunks: list[Chunk] = Field(default_factory=list)

    file_size: int = 0
    processing_time_ms: int = 0
    needs_review: bool = False
    title: str | None = None
    author: str | None = None

    stats: ProcessingStats = Field(default_factory=ProcessingStats)

    @property
    def total_chunks(self) -> int:
        return len(self.chunks)

    @property
    def status(self) -> DocumentStatus:
        return DocumentStatus.NEEDS_REVIEW if self.needs_review else DocumentStatus.SUCCEEDED

    @property
    def embedded_chunks(self) -> int:
        return sum(1 for c in self.chunks if c.embedding is not None)

    def to_dict(self) -> dict[str, Any]:
        s = self.stats
        return {
            "filename": self.filename,
            "status": self.status.value,
            "totalPages": self.total_pages,
            "totalChunks": self.total_chunks,
            "chunks": [c.to_dict() for c in self.chunks],
            "metadata": {
                "title": self.title,
                "author": self.author,
                "fileSize": self.file_size,
                "processingTimeMs": self.processing_time_ms,
                "needsReview": self.needs_review,
                "cleanedText": True,
            },
            "processingStats": {
                "originalTextLength": s.original_text_length,
                "cleanedTextLength": s.cleaned_text_length,
                "averageChunkSize": s.average_chunk_size,
                "embeddingModel": s.embedding_model,
                "processingDate": s.processing_date,
                "truncated": s.truncated,
                "optimization": dict(s.optimization),
                "filtering": dict(s.filtering),
                "embeddingFailures": s.embedding_failures,
            },
        }
