from .artifact import DocumentStatus, ProcessedDocument, ProcessingStats
from .chunk import Chunk, ChunkProvenance, reindex
from .document import SourceDocument
from .report import DocumentOutcome, FileError, RunReport, format_duration

__all__ = [
    "Chunk",
    "ChunkProvenance",
    "DocumentOutcome",
    "DocumentStatus",
    "FileError",
    "ProcessedDocument",
    "ProcessingStats",
    "RunReport",
    "SourceDocument",
    "format_duration",
    "reindex",
]
