"""Local embedder backed by sentence-transformers.

sentence-transformers pulls in torch, so it is an optional extra
(`pip install pdfprep[embeddings]`) imported only when this embedder is
constructed.
"""

from loguru import logger

from pdfprep.errors import EmbeddingError

from ..base import BaseEmbedder


class SentenceTransformerEmbedder(BaseEmbedder):
    """Runs a sentence-transformers model in process.

    Example:
        >>> embedder = SentenceTransformerEmbedder("sentence-transformers/all-MiniLM-L6-v2")
        >>> len(embedder.embed(["hello"])[0])
        384
    """

    def __init__(
        self,
        model_name: str = "sentence-transformers/all-MiniLM-L6-v2",
        dimension: int | None = None,
        device: str | None = None,
        normalize: bool = True,
    ):
        """
        Args:
            model_name: Hugging Face model name
            dimension: Expected dimension; read from the model when None
            device: Torch device, None lets the library pick
            normalize: Return unit-length vectors

        Raises:
            EmbeddingError: If sentence-transformers is missing or the model cannot load
        """
        try:
            from sentence_transformers import SentenceTransformer
        except ImportError as e:
            raise EmbeddingError(
                "sentence-transformers is required for SentenceTransformerEmbedder. "
                "Install with: pip install 'pdfprep[embeddings]'",
                original_error=e,
            ) from e

        logger.info(f"Loading embedding model {model_name}")
        try:
            self._model = SentenceTransformer(model_name, device=device)
        except Exception as e:
            raise EmbeddingError(
                f"Failed to load embedding model {model_name}",
                details={"model": model_name},
                original_error=e,
            ) from e

        self.model_name = model_name
        self.normalize = normalize
        self._dimension = dimension or self._model.get_sentence_embedding_dimension()
        logger.info(f"Loaded {model_name} (dimension={self._dimension})")

    def embed(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            raise ValueError("texts cannot be empty")
        if self._model is None:
            raise EmbeddingError(f"Embedding model {self.model_name} has been closed")

        vectors = self._model.encode(
            texts,
            normalize_embeddings=self.normalize,
            convert_to_numpy=True,
            show_progress_bar=False,
        )
        return vectors.tolist()

    @property
    def dimension(self) -> int:
        return self._dimension

    def close(self) -> None:
        self._model = None
        logger.debug(f"Released embedding model {self.model_name}")
