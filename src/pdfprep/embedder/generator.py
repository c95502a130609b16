"""Per-chunk embedding generation over a lazily loaded backend.

The backend is the only long-lived shared resource in a run: it is loaded
once per generator, behind an asyncio.Lock, and shared by all documents
afterwards. Model calls are blocking, run in a worker thread, and go
through a second lock so only one is in flight at a time.
"""

import asyncio
from dataclasses import dataclass
from typing import Any

import numpy as np
from loguru import logger

from pdfprep.entities.chunk import Chunk
from pdfprep.errors import EmbeddingError, EmbeddingShapeError

from .base import BaseEmbedder
from .factory import EmbedderFactory
from .profiles import DEFAULT_MODEL_ID, MODEL_REGISTRY, ModelProfile, ModelRegistry


@dataclass
class EmbeddingStats:
    embedded: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.embedded + self.failed


class EmbeddingGenerator:
    """
    Produces one vector per chunk using the resolved model profile.

    A failing chunk (backend exception, malformed output, wrong dimension)
    is logged and left without an embedding; the remaining chunks are
    still embedded.

    Example:
        >>> generator = EmbeddingGenerator("bge-base-zh-v1.5", backend="mock")
        >>> stats = await generator.embed_chunks(chunks)
        >>> await generator.close()
    """

    def __init__(
        self,
        model_id: str = DEFAULT_MODEL_ID,
        backend: str = "sentence_transformers",
        backend_params: dict[str, Any] | None = None,
        registry: ModelRegistry = MODEL_REGISTRY,
    ):
        self.profile: ModelProfile = registry.resolve(model_id)
        self.backend = backend
        self.backend_params = backend_params or {}
        self._embedder: BaseEmbedder | None = None
        self._lock = asyncio.Lock()
        # Model calls are serialized; the backend is not assumed thread-safe
        self._call_lock = asyncio.Lock()

    @property
    def model_id(self) -> str:
        return self.profile.model_id

    @property
    def loaded(self) -> bool:
        return self._embedder is not None

    async def get_embedder(self) -> BaseEmbedder:
        """Load the backend on first use; later callers share it."""
        if self._embedder is None:
            async with self._lock:
                if self._embedder is None:
                    self._embedder = await asyncio.to_thread(self._create_embedder)
        return self._embedder

    def _create_embedder(self) -> BaseEmbedder:
        params = {
            "model_name": self.profile.name,
            "dimension": self.profile.dimensions,
            **self.backend_params,
        }
        try:
            embedder = EmbedderFactory.create(self.backend, **params)
        except EmbeddingError:
            raise
        except Exception as e:
            raise EmbeddingError(
                f"Failed to create embedder '{self.backend}'",
                details={"model": self.profile.model_id},
                original_error=e,
            ) from e

        logger.info(f"Embedding backend ready: {self.backend} / {self.profile.model_id}")
        return embedder

    async def embed(self, text: str) -> list[float]:
        """Embed one text, prefixed with the profile's instruction.

        Raises:
            EmbeddingError: If the backend fails
            EmbeddingShapeError: If the vector does not match the profile dimension
        """
        embedder = await self.get_embedder()
        payload = self.profile.instruction_prefix + text

        try:
            async with self._call_lock:
                vectors = await asyncio.to_thread(embedder.embed, [payload])
        except Exception as e:
            raise EmbeddingError(
                "Embedding backend call failed",
                details={"model": self.profile.model_id},
                original_error=e,
            ) from e

        return self._validate(vectors)

    def _validate(self, vectors: Any) -> list[float]:
        expected = self.profile.dimensions
        try:
            count = len(vectors)
        except TypeError:
            count = None
        if count != 1:
            raise EmbeddingShapeError(expected, None, details={"reason": "expected one vector"})

        try:
            vector = np.asarray(vectors[0], dtype=float)
        except (TypeError, ValueError) as e:
            raise EmbeddingShapeError(expected, None, details={"reason": str(e)}) from e

        if vector.ndim != 1:
            raise EmbeddingShapeError(expected, None, details={"shape": list(vector.shape)})
        if vector.shape[0] != expected:
            raise EmbeddingShapeError(expected, int(vector.shape[0]))
        if not np.all(np.isfinite(vector)):
            raise EmbeddingShapeError(expected, expected, details={"reason": "non-finite values"})

        return vector.tolist()

    async def embed_chunks(self, chunks: list[Chunk]) -> EmbeddingStats:
        """Embed chunks sequentially, attaching vectors in place.

        A backend that cannot be loaded at all raises EmbeddingError; the
        caller treats that as a document failure.
        """
        stats = EmbeddingStats()
        if not chunks:
            return stats

        await self.get_embedder()

        for chunk in chunks:
            try:
                chunk.embedding = await self.embed(chunk.content)
                stats.embedded += 1
            except EmbeddingError as e:
                chunk.embedding = None
                stats.failed += 1
                logger.warning(f"Embedding failed for chunk {chunk.index} of {chunk.source_id}: {e}")

        if stats.failed:
            logger.warning(f"{stats.failed}/{stats.total} chunks left without embedding")
        return stats

    async def close(self) -> None:
        async with self._lock, self._call_lock:
            if self._embedder is not None:
                await asyncio.to_thread(self._embedder.close)
                self._embedder = None
                logger.debug(f"Closed embedding backend for {self.profile.model_id}")
