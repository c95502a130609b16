"""PDF text extractor backed by pypdf."""

from pathlib import Path

from loguru import logger
from pypdf import PdfReader

from pdfprep.entities.document import SourceDocument
from pdfprep.errors import ExtractionError

from ..base import BaseExtractor


class PdfExtractor(BaseExtractor):
    """Extracts the text of every page plus the document info metadata.

    Pages that fail to extract are logged and skipped; an unreadable file
    raises ExtractionError.

    Usage:
        >>> extractor = PdfExtractor()
        >>> doc = extractor.extract("textbook.pdf")
    """

    def __init__(self, pages: tuple[int, int] | None = None):
        """
        Args:
            pages: (start, end) page range, None for all pages
        """
        self.pages = pages

    def extract(self, file_path: str | Path) -> SourceDocument:
        path = Path(file_path)

        if not path.is_file():
            raise ExtractionError(f"File not found: {path}", details={"path": str(path)})

        logger.info(f"Extracting PDF: {path.name}")

        try:
            with open(path, "rb") as file:
                reader = PdfReader(file)
                total_pages = len(reader.pages)

                if self.pages:
                    start, end = self.pages
                    start = max(0, start)
                    end = min(total_pages, end)
                else:
                    start, end = 0, total_pages

                text_content = []
                for page_num in range(start, end):
                    try:
                        text = reader.pages[page_num].extract_text()
                        if text and text.strip():
                            text_content.append(text)
                    except Exception as e:
                        logger.warning(f"Failed to extract page {page_num} of {path.name}: {e}")

                info = reader.metadata
                title = info.title if info else None
                author = info.author if info else None

        except Exception as e:
            logger.error(f"Failed to read PDF {path.name}: {e}")
            raise ExtractionError(
                f"Invalid PDF file: {path.name}",
                details={"path": str(path)},
                original_error=e,
            ) from e

        content = "\n".join(text_content)
        if not content.strip():
            logger.warning(f"No text content extracted from {path.name}")

        logger.info(f"Extracted PDF {path.name}: {total_pages} pages, {len(content)} characters")

        return SourceDocument(
            text=content,
            filename=path.name,
            title=title or None,
            author=author or None,
            total_pages=total_pages,
            file_size=path.stat().st_size,
            metadata={
                "source": str(path.absolute()),
                "extension": path.suffix,
                "extracted_pages": f"{start}-{end}",
                "extractor": "PdfExtractor",
            },
        )
