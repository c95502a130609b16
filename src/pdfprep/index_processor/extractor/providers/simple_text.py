"""Plain text extractor."""

from pathlib import Path

from loguru import logger

from pdfprep.entities.document import SourceDocument
from pdfprep.errors import ExtractionError

from ..base import BaseExtractor


class SimpleTextExtractor(BaseExtractor):
    """Reads a text file as one document with a single page.

    Attributes:
        encoding: Character encoding to use (default: utf-8)
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def extract(self, file_path: str | Path) -> SourceDocument:
        path = Path(file_path)

        if not path.is_file():
            raise ExtractionError(f"File not found: {path}", details={"path": str(path)})

        try:
            content = path.read_text(encoding=self.encoding, errors="ignore")
        except OSError as e:
            raise ExtractionError(
                f"Failed to read {path.name}",
                details={"path": str(path)},
                original_error=e,
            ) from e

        logger.debug(f"Extracted {path.name}: {len(content)} characters")

        return SourceDocument(
            text=content,
            filename=path.name,
            total_pages=1,
            file_size=path.stat().st_size,
            metadata={
                "source": str(path.absolute()),
                "extension": path.suffix,
                "encoding": self.encoding,
                "extractor": "SimpleTextExtractor",
            },
        )
