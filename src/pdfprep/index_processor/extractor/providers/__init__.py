from .pdf import PdfExtractor
from .simple_text import SimpleTextExtractor

__all__ = ["PdfExtractor", "SimpleTextExtractor"]
