from .mock import MockEmbedder
from .sentence_transformer import SentenceTransformerEmbedder

__all__ = ["MockEmbedder", "SentenceTransformerEmbedder"]
