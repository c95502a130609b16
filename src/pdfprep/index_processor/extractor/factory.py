"""Extractor factory keyed by file extension."""

from pathlib import Path
from typing import Any

from loguru import logger

from .base import BaseExtractor
from .providers.pdf import PdfExtractor
from .providers.simple_text import SimpleTextExtractor


class ExtractorFactory:
    """Creates extractors for recognized input extensions.

    Built in:
    - .pdf: PdfExtractor (pypdf)
    - .txt: SimpleTextExtractor
    """

    _registry: dict[str, type[BaseExtractor]] = {
        ".pdf": PdfExtractor,
        ".txt": SimpleTextExtractor,
    }

    @classmethod
    def create(cls, extension: str, **params: Any) -> BaseExtractor:
        """Create an extractor for a file extension.

        Raises:
            ValueError: If no extractor is registered for the extension
        """
        key = cls._normalize(extension)
        if key not in cls._registry:
            available = ", ".join(cls._registry.keys())
            raise ValueError(
                f"No extractor for extension '{extension}'. Available: {available}"
            )

        extractor_class = cls._registry[key]
        logger.debug(f"Creating {extractor_class.__name__} with params: {params}")
        return extractor_class(**params)

    @classmethod
    def for_path(cls, path: str | Path, **params: Any) -> BaseExtractor:
        return cls.create(Path(path).suffix, **params)

    @classmethod
    def register(cls, extension: str, extractor_class: type[BaseExtractor]):
        """Register an extractor class for an extension.

        Raises:
            TypeError: If extractor_class is not a subclass of BaseExtractor
        """
        if not issubclass(extractor_class, BaseExtractor):
            raise TypeError(f"{extractor_class.__name__} must be a subclass of BaseExtractor")

        cls._registry[cls._normalize(extension)] = extractor_class
        logger.info(f"Registered extractor for '{extension}': {extractor_class.__name__}")

    @classmethod
    def extensions(cls) -> tuple[str, ...]:
        return tuple(cls._registry.keys())

    @staticmethod
    def _normalize(extension: str) -> str:
        extension = extension.lower()
        return extension if extension.startswith(".") else f".{extension}"
