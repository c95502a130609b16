"""
Batch orchestrator for processing document collections.

Runs the per-document pipeline over many documents with bounded
concurrency:
- Discovers documents under the configured roots
- Skips documents that already have an output artifact
- Processes consecutive groups of `concurrency_limit` documents; a group
  starts only after the previous one has fully settled
- Records per-document failures without stopping the run
- Folds per-document deltas into one RunReport and persists it
"""

import asyncio
import logging
import uuid
from collections.abc import Iterable, Sequence
from pathlib import Path

from pdfprep.batch.discovery import discover
from pdfprep.batch.progress import (
    BatchProgress,
    BatchStage,
    CallbackProgressReporter,
    ProgressCallback,
)
from pdfprep.config.models import PipelineConfig
from pdfprep.entities.report import DocumentOutcome, RunReport
from pdfprep.pipeline.processor import DocumentProcessor
from pdfprep.storage.artifacts import ArtifactStore, source_stem

logger = logging.getLogger(__name__)


class BatchOrchestrator:
    """
    Drives a batch run and owns its RunReport.

    Workers never touch the report. Each returns a DocumentOutcome (or
    raises), and the orchestrator folds the results after the group
    settles, so there is a single writer.

    Attributes:
        config: Pipeline configuration
        store: Artifact persistence
        processor: Per-document pipeline
        input_dirs: Roots scanned when no explicit sources are given

    Example:
        >>> async with BatchOrchestrator(config, ArtifactStore("output"), input_dirs=["input"]) as orchestrator:
        ...     report = await orchestrator.run_batch()
        ...     report = await orchestrator.reprocess(["textbook.pdf"])  # same loaded model
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        store: ArtifactStore | None = None,
        processor: DocumentProcessor | None = None,
        input_dirs: Sequence[str | Path] = (),
        on_progress: ProgressCallback | None = None,
    ):
        self.config = config or PipelineConfig()
        self.store = store or ArtifactStore("output")
        self._owns_processor = processor is None
        self.processor = processor or DocumentProcessor(self.config)
        self.input_dirs = list(input_dirs)
        self._reporter = CallbackProgressReporter(on_progress) if on_progress else None
        self._stop_requested = False
        self.last_report_path: Path | None = None

    async def __aenter__(self) -> "BatchOrchestrator":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Release the processor (and its model) if this orchestrator created it."""
        if self._owns_processor:
            await self.processor.close()

    def stop(self) -> None:
        """Stop scheduling further groups; the running group still settles."""
        self._stop_requested = True
        logger.info("Stop requested, no further groups will be scheduled")

    @property
    def stopped(self) -> bool:
        return self._stop_requested

    async def run_batch(
        self,
        sources: Iterable[str | Path] | None = None,
        concurrency_limit: int | None = None,
    ) -> RunReport:
        """
        Process every source (or every discovered document) once.

        Raises:
            SourceEnumerationError: If sources is None and no root can be enumerated
            ValueError: If concurrency_limit < 1
        """
        if sources is not None:
            paths = [Path(s) for s in sources]
        else:
            paths = await asyncio.to_thread(discover, self.input_dirs)
        return await self._run(paths, concurrency_limit, skip_existing=True)

    async def reprocess(
        self,
        filenames: Iterable[str],
        concurrency_limit: int | None = None,
    ) -> RunReport:
        """
        Re-run only the named documents, replacing their artifacts.

        Names are matched against discovered files by filename or stem.
        Stale artifacts are removed first and the idempotency skip is off.
        """
        wanted = set(filenames)
        discovered = await asyncio.to_thread(discover, self.input_dirs)
        paths = [p for p in discovered if p.name in wanted or p.stem in wanted]

        matched = {p.name for p in paths} | {p.stem for p in paths}
        for name in sorted(wanted - matched):
            logger.warning(f"Reprocess target not found under input roots: {name}")

        for path in paths:
            await self.store.remove(source_stem(path.name))

        return await self._run(paths, concurrency_limit, skip_existing=False)

    async def _run(
        self,
        paths: list[Path],
        concurrency_limit: int | None,
        skip_existing: bool,
    ) -> RunReport:
        limit = concurrency_limit if concurrency_limit is not None else self.config.concurrency_limit
        if limit < 1:
            raise ValueError("concurrency_limit must be at least 1")

        request_id = uuid.uuid4().hex[:8]
        self._stop_requested = False

        configuration = self.config.summary()
        configuration["concurrencyLimit"] = limit
        configuration["inputDirs"] = [str(d) for d in self.input_dirs]
        configuration["outputDir"] = str(self.store.output_dir)
        report = RunReport(request_id=request_id, total=len(paths), configuration=configuration)

        groups = [paths[i:i + limit] for i in range(0, len(paths), limit)]
        logger.info(
            f"[{request_id}] Batch started: documents={len(paths)}, "
            f"concurrency_limit={limit}, groups={len(groups)}"
        )
        self._report_progress(BatchProgress.create(
            stage=BatchStage.DISCOVERY,
            current=0,
            total=len(paths),
            message=f"Found {len(paths)} documents",
            total_groups=len(groups),
        ))

        for group_num, group in enumerate(groups, start=1):
            if self._stop_requested:
                logger.warning(f"[{request_id}] Stopped before group {group_num}/{len(groups)}")
                break

            logger.debug(f"[{request_id}] Group {group_num}/{len(groups)}: {[p.name for p in group]}")

            results = await asyncio.gather(
                *(self._process_one(path, skip_existing, request_id) for path in group),
                return_exceptions=True,
            )

            for path, result in zip(group, results):
                if isinstance(result, DocumentOutcome):
                    report.fold(result)
                elif isinstance(result, Exception):
                    logger.error(f"[{request_id}] Failed: {path.name}: {type(result).__name__}: {result}")
                    report.record_failure(path.name, result)
                else:
                    raise result

            settled = report.processed + report.failed + report.skipped
            self._report_progress(BatchProgress.create(
                stage=BatchStage.PROCESSING,
                current=settled,
                total=len(paths),
                message=f"Group {group_num}/{len(groups)} settled",
                errors=report.failed,
                skipped=report.skipped,
                group_num=group_num,
                total_groups=len(groups),
            ))

        report.finalize()
        self.last_report_path = await self.store.save_report(report)

        self._report_progress(BatchProgress.create(
            stage=BatchStage.COMPLETE,
            current=report.processed + report.failed + report.skipped,
            total=len(paths),
            message=f"Complete: {report.processed} processed, {report.failed} failed, {report.skipped} skipped",
            errors=report.failed,
            skipped=report.skipped,
        ))
        logger.info(
            f"[{request_id}] Batch complete: processed={report.processed}/{report.total}, "
            f"failed={report.failed}, skipped={report.skipped}, "
            f"duration={report.total_duration_ms}ms"
        )
        return report

    async def _process_one(self, path: Path, skip_existing: bool, request_id: str) -> DocumentOutcome:
        if skip_existing and await asyncio.to_thread(self.store.exists, source_stem(path.name)):
            logger.info(f"[{request_id}] Skipping {path.name}: artifact exists")
            return DocumentOutcome(file=path.name, skipped=True)

        document = await self.processor.process_file(path)
        artifact = await self.store.save(document)

        optimization = document.stats.optimization
        filtering = document.stats.filtering
        return DocumentOutcome(
            file=path.name,
            needs_review=document.needs_review,
            chunks=document.total_chunks,
            merged=optimization.get("mergedChunks", 0),
            removed=optimization.get("removedChunks", 0) + filtering.get("removedChunks", 0),
            cleaned=filtering.get("cleanedChunks", 0),
            preserved=filtering.get("preservedChunks", 0),
            embedding_failures=document.stats.embedding_failures,
            processing_time_ms=document.processing_time_ms,
            artifact_path=str(artifact),
        )

    def _report_progress(self, progress: BatchProgress) -> None:
        if self._reporter:
            self._reporter.report(progress)
