"""Configuration models for the preprocessing pipeline.

The pipeline never reads the environment itself; it is handed a
`PipelineConfig`, usually built from the global `Settings`.
"""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from .settings import Settings


class PipelineConfig(BaseModel):
    """Configuration surface consumed by the document pipeline.

    Attributes:
        chunk_size: Splitter target size in characters
        chunk_overlap: Characters repeated at the head of the next chunk
        max_chunks: Chunks kept per document after splitting
        min_chunk_length: Optimizer lower bound
        max_chunk_length: Optimizer upper bound
        concurrency_limit: Documents per concurrency group
        embedding_model: Model registry identifier
        embedding_backend: Embedder factory type ("sentence_transformers", "mock")
        generate_embeddings: Whether stage 5 runs at all
        garbled_threshold: Normalizer review threshold
        min_content_length: Content filter full-removal floor
    """

    chunk_size: int = Field(default=2000, gt=0)
    chunk_overlap: int = Field(default=400, ge=0)
    max_chunks: int = Field(default=500, ge=1)

    min_chunk_length: int = Field(default=50, ge=1)
    max_chunk_length: int = Field(default=8000, ge=1)

    concurrency_limit: int = Field(default=3, ge=1)

    embedding_model: str = "all-MiniLM-L6-v2"
    embedding_backend: str = "sentence_transformers"
    embedding_params: dict[str, Any] = Field(default_factory=dict)
    generate_embeddings: bool = True

    garbled_threshold: float = Field(default=0.2, ge=0.0, le=1.0)
    min_content_length: int = Field(default=5, ge=0)

    model_config = {
        "frozen": True,
    }

    @model_validator(mode="after")
    def _check_bounds(self) -> "PipelineConfig":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        if self.min_chunk_length > self.max_chunk_length:
            raise ValueError("min_chunk_length must be <= max_chunk_length")
        return self

    @classmethod
    def from_settings(cls, settings: Settings) -> "PipelineConfig":
        return cls(
            chunk_size=settings.CHUNK_SIZE,
            chunk_overlap=settings.CHUNK_OVERLAP,
            max_chunks=settings.MAX_CHUNKS_PER_DOCUMENT,
            min_chunk_length=settings.MIN_CHUNK_LENGTH,
            max_chunk_length=settings.MAX_CHUNK_LENGTH,
            concurrency_limit=settings.CONCURRENCY_LIMIT,
            embedding_model=settings.EMBEDDING_MODEL,
            embedding_backend=settings.EMBEDDING_BACKEND,
            generate_embeddings=settings.GENERATE_EMBEDDINGS,
            garbled_threshold=settings.GARBLED_THRESHOLD,
        )

    def summary(self) -> dict[str, Any]:
        """Configuration block written into the run report."""
        return {
            "embeddingModel": self.embedding_model,
            "embeddingBackend": self.embedding_backend,
            "generateEmbeddings": self.generate_embeddings,
            "chunkSize": self.chunk_size,
            "chunkOverlap": self.chunk_overlap,
            "maxChunksPerDocument": self.max_chunks,
            "minChunkLength": self.min_chunk_length,
            "maxChunkLength": self.max_chunk_length,
            "concurrencyLimit": self.concurrency_limit,
        }
