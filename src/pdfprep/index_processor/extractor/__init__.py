"""Extractor module: reads source files into SourceDocuments."""

from .base import BaseExtractor
from .factory import ExtractorFactory
from .providers.pdf import PdfExtractor
from .providers.simple_text import SimpleTextExtractor

__all__ = [
    "BaseExtractor",
    "ExtractorFactory",
    "PdfExtractor",
    "SimpleTextExtractor",
]
