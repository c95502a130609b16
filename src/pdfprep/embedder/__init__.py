"""Embedder module for vector generation.

This module provides embedding backends, the model profile registry and
the per-chunk EmbeddingGenerator.
"""

from .base import BaseEmbedder
from .factory import EmbedderFactory
from .generator import EmbeddingGenerator, EmbeddingStats
from .profiles import DEFAULT_MODEL_ID, MODEL_REGISTRY, ModelProfile, ModelRegistry
from .providers.mock import MockEmbedder

__all__ = [
    "BaseEmbedder",
    "DEFAULT_MODEL_ID",
    "EmbedderFactory",
    "EmbeddingGenerator",
    "EmbeddingStats",
    "MODEL_REGISTRY",
    "MockEmbedder",
    "ModelProfile",
    "ModelRegistry",
]
