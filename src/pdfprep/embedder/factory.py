"""Lookup of embedding backends by the name used in configuration."""

from typing import Any

from loguru import logger

from pdfprep.errors import ConfigurationError

from .base import BaseEmbedder
from .providers.mock import MockEmbedder
from .providers.sentence_transformer import SentenceTransformerEmbedder


class EmbedderFactory:
    """Maps EMBEDDING_BACKEND values to BaseEmbedder classes.

    The generator asks for a backend once per run; the model name and
    dimension come from the resolved ModelProfile.
    """

    _registry: dict[str, type[BaseEmbedder]] = {
        "mock": MockEmbedder,
        "sentence_transformers": SentenceTransformerEmbedder,
    }

    @classmethod
    def create(cls, backend: str, **params: Any) -> BaseEmbedder:
        """Instantiate the backend registered under `backend`.

        Raises:
            ConfigurationError: If no backend is registered under that name
        """
        embedder_class = cls._registry.get(backend)
        if embedder_class is None:
            raise ConfigurationError(
                f"Unknown embedder type: '{backend}'",
                details={"available": sorted(cls._registry)},
            )

        logger.debug(f"Loading {embedder_class.__name__} (model={params.get('model_name')})")
        return embedder_class(**params)

    @classmethod
    def register(cls, backend: str, embedder_class: type[BaseEmbedder]) -> None:
        if not (isinstance(embedder_class, type) and issubclass(embedder_class, BaseEmbedder)):
            raise TypeError(f"{embedder_class!r} is not a BaseEmbedder")

        cls._registry[backend] = embedder_class
        logger.info(f"Registered embedding backend '{backend}': {embedder_class.__name__}")
