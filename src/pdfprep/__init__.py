"""
pdfprep - PDF text to RAG-ready chunk preprocessing.

Normalizes extracted document text, splits it into size-bounded chunks,
optimizes chunk boundaries, filters noise, attaches embeddings and runs
the whole pipeline over document collections with bounded concurrency.
"""

__version__ = "0.1.0"

from .batch import BatchOrchestrator, BatchProgress, LoggingProgressReporter, discover
from .config import PipelineConfig, Settings, load_settings
from .embedder import (
    MODEL_REGISTRY,
    BaseEmbedder,
    EmbedderFactory,
    EmbeddingGenerator,
    MockEmbedder,
    ModelProfile,
    ModelRegistry,
)
from .entities import (
    Chunk,
    ChunkProvenance,
    DocumentStatus,
    FileError,
    ProcessedDocument,
    RunReport,
    SourceDocument,
)
from .errors import (
    ConfigurationError,
    DocumentProcessingError,
    EmbeddingError,
    EmbeddingShapeError,
    ExtractionError,
    PdfPrepError,
    SourceEnumerationError,
    ValidationError,
)
from .index_processor import (
    ChunkOptimizer,
    ContentFilter,
    ExtractorFactory,
    RecursiveCharacterSplitter,
    TextNormalizer,
)
from .pipeline import DocumentProcessor
from .storage import ArtifactStore
from .validation import RagRequirements, validate_artifacts, validate_chunk, validate_document

__all__ = [
    "__version__",
    # Entities
    "Chunk",
    "ChunkProvenance",
    "DocumentStatus",
    "FileError",
    "ProcessedDocument",
    "RunReport",
    "SourceDocument",
    # Stages
    "ChunkOptimizer",
    "ContentFilter",
    "ExtractorFactory",
    "RecursiveCharacterSplitter",
    "TextNormalizer",
    # Embeddings
    "BaseEmbedder",
    "EmbedderFactory",
    "EmbeddingGenerator",
    "MODEL_REGISTRY",
    "MockEmbedder",
    "ModelProfile",
    "ModelRegistry",
    # Pipeline and batch
    "ArtifactStore",
    "BatchOrchestrator",
    "BatchProgress",
    "DocumentProcessor",
    "LoggingProgressReporter",
    "discover",
    # Config
    "PipelineConfig",
    "Settings",
    "load_settings",
    # Validation
    "RagRequirements",
    "validate_artifacts",
    "validate_chunk",
    "validate_document",
    # Errors
    "ConfigurationError",
    "DocumentProcessingError",
    "EmbeddingError",
    "EmbeddingShapeError",
    "ExtractionError",
    "PdfPrepError",
    "SourceEnumerationError",
    "ValidationError",
]
