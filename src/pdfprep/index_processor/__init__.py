"""Index processor: the per-document text stages that run before embedding."""

from .cleaner import NormalizationResult, TextNormalizer
from .extractor import BaseExtractor, ExtractorFactory
from .filter import ContentFilter, FilterResult
from .optimizer import ChunkOptimizer, OptimizationResult
from .splitter import BaseSplitter, RecursiveCharacterSplitter, SplitResult

__all__ = [
    "BaseExtractor",
    "BaseSplitter",
    "ChunkOptimizer",
    "ContentFilter",
    "ExtractorFactory",
    "FilterResult",
    "NormalizationResult",
    "OptimizationResult",
    "RecursiveCharacterSplitter",
    "SplitResult",
    "TextNormalizer",
]
