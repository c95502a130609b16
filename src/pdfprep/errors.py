"""
pdfprep error hierarchy.

Error Categories:
-----------------
1. Input errors: unreadable or empty source text. These never raise out of
   the normalizer; the document is flagged for review instead.

2. Embedding errors: per-chunk failures (backend exception, wrong vector
   shape). Recorded and skipped, the document still completes.

3. Document-level errors: anything a stage raises for one document. Caught
   by the batch orchestrator and recorded in the run report.

4. Configuration errors: unknown model identifiers and invalid settings.
   Unknown models fall back to the default profile with a warning.

5. Batch-fatal errors: no document root can be enumerated at all.

Usage:
------
    from pdfprep.errors import PdfPrepError, SourceEnumerationError

    try:
        report = await orchestrator.run_batch()
    except SourceEnumerationError as e:
        logger.error(f"Nothing to process: {e}")
"""

from typing import Any


class PdfPrepError(Exception):
    """
    Base exception for all pdfprep errors.

    Attributes:
        message: Human-readable error description
        details: Additional context about the error (optional)
        original_error: The underlying exception that caused this error (optional)
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.original_error = original_error

    def __str__(self) -> str:
        base = self.message
        if self.details:
            base += f" | Details: {self.details}"
        if self.original_error:
            base += f" | Caused by: {type(self.original_error).__name__}: {self.original_error}"
        return base

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "details": self.details,
            "original_error": str(self.original_error) if self.original_error else None
        }


class ConfigurationError(PdfPrepError):
    """
    Raised when there's a configuration problem.

    Common causes:
    - Invalid chunk size / overlap combination
    - Unknown embedder backend
    """

    def __init__(
        self,
        message: str = "Configuration error",
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None
    ):
        super().__init__(message, details, original_error)


class ExtractionError(PdfPrepError):
    """Raised when text cannot be extracted from a source file."""
    pass


class EmbeddingError(PdfPrepError):
    """Raised when an embedding operation fails."""
    pass


class EmbeddingShapeError(EmbeddingError):
    """
    Raised when the backend returns a vector of the wrong shape.

    Attributes:
        expected: Dimension declared by the model profile
        actual: Length of the vector actually returned (None if not a vector)
    """

    def __init__(
        self,
        expected: int,
        actual: int | None,
        details: dict[str, Any] | None = None
    ):
        details = details or {}
        details["expected"] = expected
        details["actual"] = actual
        super().__init__(
            f"Embedding dimension mismatch: expected {expected}, got {actual}",
            details=details,
        )
        self.expected = expected
        self.actual = actual


class DocumentProcessingError(PdfPrepError):
    """Raised when a pipeline stage fails for a single document."""
    pass


class SourceEnumerationError(PdfPrepError):
    """
    Raised when none of the configured document roots can be enumerated.

    This is the only error that aborts a whole batch run.
    """
    pass


class ValidationError(PdfPrepError):
    """Raised when an output artifact is structurally invalid."""
    pass
