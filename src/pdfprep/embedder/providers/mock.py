"""Mock embedder for tests and offline runs (no model download)."""

import hashlib

import numpy as np
from loguru import logger

from ..base import BaseEmbedder


class MockEmbedder(BaseEmbedder):
    """Generates deterministic unit vectors seeded from the text.

    WARNING: This embedder is NOT suitable for production use.

    Attributes:
        dimension: Embedding vector dimension
        seed: Seed mixed into every text digest
    """

    def __init__(self, dimension: int = 384, seed: int = 42, model_name: str | None = None):
        """
        Args:
            dimension: Size of embedding vectors
            seed: Seed for deterministic output
            model_name: Name of the profile being imitated (logging only)
        """
        self._dimension = dimension
        self.seed = seed
        self.model_name = model_name
        logger.warning(
            f"Using MockEmbedder for {model_name or 'unnamed model'} - NOT for production use!"
        )

    def embed(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            raise ValueError("texts cannot be empty")

        logger.debug(f"Generating {len(texts)} mock embeddings")

        embeddings = []
        for text in texts:
            # Stable across processes, unlike hash()
            digest = hashlib.sha256(f"{self.seed}:{text}".encode()).digest()
            rng = np.random.default_rng(int.from_bytes(digest[:8], "big"))
            vec = rng.standard_normal(self._dimension)

            norm = np.linalg.norm(vec)
            vec = vec / norm if norm > 0 else np.zeros(self._dimension)
            embeddings.append(vec.tolist())

        return embeddings

    @property
    def dimension(self) -> int:
        return self._dimension
