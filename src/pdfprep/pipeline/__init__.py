from .processor import DocumentProcessor

__all__ = ["DocumentProcessor"]
