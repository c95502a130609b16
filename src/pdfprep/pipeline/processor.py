"""
Per-document pipeline.

Runs the stages strictly in order for one document:
normalize -> split -> optimize -> filter -> embed, and builds the
ProcessedDocument artifact. The processor owns the EmbeddingGenerator, so
one processor (and one loaded model) is shared by every document in a run.
"""

import asyncio
import logging
from pathlib import Path

from pdfprep.config.models import PipelineConfig
from pdfprep.embedder.generator import EmbeddingGenerator
from pdfprep.entities.artifact import ProcessedDocument, ProcessingStats
from pdfprep.entities.chunk import Chunk
from pdfprep.entities.document import SourceDocument
from pdfprep.errors import DocumentProcessingError, PdfPrepError
from pdfprep.index_processor.cleaner import TextNormalizer
from pdfprep.index_processor.extractor import ExtractorFactory
from pdfprep.index_processor.filter import ContentFilter
from pdfprep.index_processor.optimizer import ChunkOptimizer
from pdfprep.index_processor.splitter import RecursiveCharacterSplitter
from pdfprep.utils.performance import timer

logger = logging.getLogger(__name__)


class DocumentProcessor:
    """
    Turns one SourceDocument into a ProcessedDocument.

    Stage components are built from the PipelineConfig unless injected,
    which keeps them swappable in tests.

    Example:
        >>> async with DocumentProcessor(PipelineConfig()) as processor:
        ...     document = await processor.process_file("input/textbook.pdf")
        >>> document.to_dict()["totalChunks"]
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        normalizer: TextNormalizer | None = None,
        splitter: RecursiveCharacterSplitter | None = None,
        optimizer: ChunkOptimizer | None = None,
        content_filter: ContentFilter | None = None,
        generator: EmbeddingGenerator | None = None,
    ):
        self.config = config or PipelineConfig()
        c = self.config

        self.normalizer = normalizer or TextNormalizer(garbled_threshold=c.garbled_threshold)
        self.splitter = splitter or RecursiveCharacterSplitter(
            chunk_size=c.chunk_size,
            chunk_overlap=c.chunk_overlap,
        )
        self.optimizer = optimizer or ChunkOptimizer(
            min_length=c.min_chunk_length,
            max_length=c.max_chunk_length,
        )
        self.content_filter = content_filter or ContentFilter(min_content_length=c.min_content_length)

        if generator is None and c.generate_embeddings:
            generator = EmbeddingGenerator(
                model_id=c.embedding_model,
                backend=c.embedding_backend,
                backend_params=c.embedding_params,
            )
        self.generator = generator

    async def __aenter__(self) -> "DocumentProcessor":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self.generator is not None:
            await self.generator.close()

    async def extract(self, path: str | Path) -> SourceDocument:
        extractor = ExtractorFactory.for_path(path)
        return await asyncio.to_thread(extractor.extract, path)

    async def process_file(self, path: str | Path) -> ProcessedDocument:
        source = await self.extract(path)
        return await self.process(source)

    async def process(self, source: SourceDocument) -> ProcessedDocument:
        """Run every stage over one document.

        Raises:
            DocumentProcessingError: If any stage fails; carries the stage name
        """
        with timer(f"Processing {source.filename}", log_level="DEBUG") as timing:
            stage = "normalize"
            try:
                normalized = self.normalizer.normalize(source.text)

                stage = "split"
                split = self.splitter.split(normalized.cleaned_text, max_chunks=self.config.max_chunks)
                chunks = [
                    Chunk(content=text, index=i, source_id=source.source_id)
                    for i, text in enumerate(split.chunks)
                ]

                stage = "optimize"
                optimized = self.optimizer.optimize(chunks)

                stage = "filter"
                filtered = self.content_filter.filter(optimized.chunks)
                chunks = filtered.chunks

                stage = "embed"
                embedding_failures = 0
                if self.generator is not None and chunks:
                    embedding = await self.generator.embed_chunks(chunks)
                    embedding_failures = embedding.failed

            except PdfPrepError as e:
                raise DocumentProcessingError(
                    f"Stage '{stage}' failed for {source.filename}",
                    details={"stage": stage, "file": source.filename},
                    original_error=e,
                ) from e
            except Exception as e:
                logger.exception(f"Unexpected error in stage '{stage}' for {source.filename}")
                raise DocumentProcessingError(
                    f"Stage '{stage}' failed for {source.filename}: {e}",
                    details={"stage": stage, "file": source.filename},
                    original_error=e,
                ) from e

        average = round(sum(len(c.content) for c in chunks) / len(chunks)) if chunks else 0

        document = ProcessedDocument(
            filename=source.filename,
            total_pages=source.total_pages,
            chunks=chunks,
            file_size=source.file_size,
            processing_time_ms=round(timing.elapsed_ms),
            needs_review=normalized.needs_review,
            title=source.title,
            author=source.author,
            stats=ProcessingStats(
                original_text_length=len(source.text),
                cleaned_text_length=len(normalized.cleaned_text),
                average_chunk_size=average,
                embedding_model=self.generator.model_id if self.generator else None,
                truncated=split.truncated,
                optimization=optimized.as_stats(),
                filtering=filtered.as_stats(),
                embedding_failures=embedding_failures,
            ),
        )

        logger.info(
            f"Processed {source.filename}: {document.total_chunks} chunks "
            f"({split.original_count} split, {optimized.merged} merged, {filtered.removed} removed), "
            f"status={document.status.value}"
        )
        return document
