"""Base splitter interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from loguru import logger


@dataclass
class SplitResult:
    """Raw chunk strings for one document.

    Attributes:
        chunks: Ordered chunk strings, at most `max_chunks`
        truncated: True when the cap cut chunks off
        original_count: Number of chunks before the cap
    """

    chunks: list[str] = field(default_factory=list)
    truncated: bool = False
    original_count: int = 0


class BaseSplitter(ABC):
    """Abstract base class for text splitting.

    Splitters break normalized text into ordered pieces suitable
    for embedding and retrieval.
    """

    @abstractmethod
    def split_text(self, text: str) -> list[str]:
        """Split text into ordered chunk strings.

        Args:
            text: Normalized document text

        Returns:
            List of chunk strings in document order
        """
        pass

    def split(self, text: str, max_chunks: int | None = None) -> SplitResult:
        """Split text and cap the number of chunks.

        Exceeding `max_chunks` is not an error: the first `max_chunks`
        pieces are kept and a warning is logged.
        """
        chunks = self.split_text(text)
        original_count = len(chunks)

        if max_chunks is not None and original_count > max_chunks:
            logger.warning(
                f"Chunk count {original_count} exceeds limit, keeping first {max_chunks}"
            )
            return SplitResult(
                chunks=chunks[:max_chunks],
                truncated=True,
                original_count=original_count,
            )

        return SplitResult(chunks=chunks, truncated=False, original_count=original_count)
