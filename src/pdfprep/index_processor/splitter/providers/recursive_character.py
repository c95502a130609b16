"""Recursive character-based text splitter with CJK-aware separators.

Implements a hierarchical splitting strategy similar to LangChain's
RecursiveCharacterTextSplitter, prioritizing semantic boundaries.
"""

from loguru import logger

from ..base import BaseSplitter


class RecursiveCharacterSplitter(BaseSplitter):
    """Recursively splits text using a hierarchy of separators.

    The splitter keeps text coherent by cutting at natural boundaries in
    order of preference:
    1. Double newlines (paragraphs)
    2. Single newlines (lines)
    3. CJK sentence endings
    4. Latin sentence endings
    5. Spaces (words)
    6. Characters (last resort, guarantees termination)

    Attributes:
        chunk_size: Target maximum characters per chunk
        chunk_overlap: Number of characters to overlap between chunks
        separators: List of separator strings in order of preference
        keep_separator: Whether to keep the separator in the chunks
    """

    DEFAULT_SEPARATORS = [
        "\n\n",  # Paragraphs
        "\n",  # Lines
        "。",  # CJK full stop
        "！",
        "？",
        "；",
        ". ",  # Latin sentence endings
        "! ",
        "? ",
        "; ",
        " ",  # Spaces (words)
        "",  # Characters (fallback)
    ]

    def __init__(
        self,
        chunk_size: int = 2000,
        chunk_overlap: int = 400,
        separators: list[str] | None = None,
        keep_separator: bool = True,
    ):
        """Initialize the recursive character splitter.

        Args:
            chunk_size: Target maximum characters per chunk
            chunk_overlap: Characters to overlap between chunks
            separators: Custom separator list (uses defaults if None)
            keep_separator: Whether to keep separators in chunks

        Raises:
            ValueError: If chunk_size <= 0 or overlap not in [0, chunk_size)
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if chunk_overlap < 0 or chunk_overlap >= chunk_size:
            raise ValueError("overlap must be in [0, chunk_size)")

        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.separators = separators if separators else self.DEFAULT_SEPARATORS
        self.keep_separator = keep_separator

        logger.debug(
            f"Initialized RecursiveCharacterSplitter: "
            f"size={chunk_size}, overlap={chunk_overlap}, "
            f"separators={len(self.separators)}"
        )

    def split_text(self, text: str) -> list[str]:
        if not text or not text.strip():
            return []

        pieces = self._split_text_recursive(text, self.separators)
        chunks = [p.strip() for p in pieces]
        chunks = [c for c in chunks if c]

        logger.debug(
            f"Split {len(text)} chars into {len(chunks)} chunks "
            f"(avg size: {sum(len(c) for c in chunks) / max(len(chunks), 1):.0f})"
        )
        return chunks

    def _split_text_recursive(self, text: str, separators: list[str]) -> list[str]:
        """Recursively split text using a hierarchy of separators.

        Args:
            text: Text to split
            separators: List of separators to try in order

        Returns:
            List of text chunks
        """
        final_chunks = []

        separator = separators[0] if separators else ""
        new_separators = separators[1:] if len(separators) > 1 else []

        splits = self._split_by_separator(text, separator)
        joiner_len = 0 if self.keep_separator else len(separator)

        current_chunk: list[str] = []
        current_length = 0

        for split in splits:
            split_len = len(split)

            # A single piece that is still too large goes one level down
            if split_len > self.chunk_size:
                if current_chunk:
                    final_chunks.append(self._merge_chunks(current_chunk, separator))
                    current_chunk = []
                    current_length = 0

                if new_separators:
                    final_chunks.extend(self._split_text_recursive(split, new_separators))
                else:
                    final_chunks.extend(self._split_by_character(split))
                continue

            potential_length = current_length + split_len + (joiner_len if current_chunk else 0)

            if current_chunk and potential_length > self.chunk_size:
                final_chunks.append(self._merge_chunks(current_chunk, separator))

                # Start the next chunk with the tail of this one
                current_chunk = self._get_overlap_chunks(current_chunk, separator)
                current_length = self._joined_length(current_chunk, joiner_len)

                # Overlap plus the new piece may still be too long
                while current_chunk and current_length + joiner_len + split_len > self.chunk_size:
                    current_chunk.pop(0)
                    current_length = self._joined_length(current_chunk, joiner_len)

            current_chunk.append(split)
            current_length = self._joined_length(current_chunk, joiner_len)

        if current_chunk:
            final_chunks.append(self._merge_chunks(current_chunk, separator))

        return final_chunks

    def _split_by_separator(self, text: str, separator: str) -> list[str]:
        """Split text by a separator, keeping the separator at the end of each piece.

        Returns:
            List of split pieces (non-empty)
        """
        if separator == "":
            return list(text)

        if self.keep_separator:
            splits = text.split(separator)
            result = []
            for split in splits[:-1]:
                if split:
                    result.append(split + separator)
            if splits[-1]:
                result.append(splits[-1])
            return result

        return [s for s in text.split(separator) if s]

    def _merge_chunks(self, chunks: list[str], separator: str) -> str:
        if not chunks:
            return ""
        if self.keep_separator:
            # Pieces already carry their separators
            return "".join(chunks)
        return separator.join(chunks)

    @staticmethod
    def _joined_length(chunks: list[str], joiner_len: int) -> int:
        if not chunks:
            return 0
        return sum(len(c) for c in chunks) + joiner_len * (len(chunks) - 1)

    def _get_overlap_chunks(self, chunks: list[str], separator: str) -> list[str]:
        """Trailing pieces of the finished chunk that fit within the overlap size."""
        if self.chunk_overlap == 0:
            return []

        joiner_len = 0 if self.keep_separator else len(separator)
        overlap_chunks: list[str] = []
        overlap_length = 0

        for chunk in reversed(chunks):
            potential_length = overlap_length + len(chunk)
            if overlap_chunks:
                potential_length += joiner_len
            if potential_length > self.chunk_overlap:
                break
            overlap_chunks.insert(0, chunk)
            overlap_length = potential_length

        return overlap_chunks

    def _split_by_character(self, text: str) -> list[str]:
        """Hard slice by character count when no separator is left."""
        chunks = []
        start = 0
        step = self.chunk_size - self.chunk_overlap

        while start < len(text):
            chunks.append(text[start:start + self.chunk_size])
            if start + self.chunk_size >= len(text):
                break
            start += step

        return chunks
