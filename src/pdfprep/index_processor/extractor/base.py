"""Base extractor interface."""

from abc import ABC, abstractmethod
from pathlib import Path

from pdfprep.entities.document import SourceDocument


class BaseExtractor(ABC):
    """Abstract base class for text extraction.

    Extractors read a file and convert it into a single SourceDocument.
    """

    @abstractmethod
    def extract(self, file_path: str | Path) -> SourceDocument:
        """Extract text and file-level metadata.

        Args:
            file_path: Path to the file to read

        Returns:
            The extracted document

        Raises:
            ExtractionError: If the file is missing or unreadable
        """
        pass
