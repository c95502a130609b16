"""Tests for BatchOrchestrator."""

import asyncio
from pathlib import Path

import pytest

from pdfprep.batch import BatchOrchestrator, BatchProgress, BatchStage
from pdfprep.batch.discovery import discover
from pdfprep.entities import Chunk, ProcessedDocument
from pdfprep.errors import SourceEnumerationError


class RecordingProcessor:
    """Stands in for DocumentProcessor and records start/end order."""

    def __init__(self, fail_on=(), delay=0.01):
        self.fail_on = set(fail_on)
        self.delay = delay
        self.events: list[tuple[str, str]] = []
        self.closed = False

    async def process_file(self, path):
        name = Path(path).name
        self.events.append(("start", name))
        await asyncio.sleep(self.delay)
        self.events.append(("end", name))
        if name in self.fail_on:
            raise RuntimeError(f"cannot parse {name}")
        return ProcessedDocument(
            filename=name,
            chunks=[Chunk(content=f"{name} 的内容", source_id=name)],
        )

    async def close(self):
        self.closed = True


def _paths(count):
    return [Path(f"doc{i}.pdf") for i in range(count)]


class TestBatchOrchestrator:

    @pytest.fixture
    def processor(self):
        return RecordingProcessor()

    @pytest.fixture
    def orchestrator(self, test_config, store, processor):
        return BatchOrchestrator(config=test_config, store=store, processor=processor)

    @pytest.mark.asyncio
    async def test_groups_run_one_after_another(self, orchestrator, processor):
        report = await orchestrator.run_batch(_paths(7), concurrency_limit=3)

        assert report.processed == 7
        groups = [["doc0.pdf", "doc1.pdf", "doc2.pdf"], ["doc3.pdf", "doc4.pdf", "doc5.pdf"], ["doc6.pdf"]]
        position = {event: i for i, event in enumerate(processor.events)}
        for current, following in zip(groups, groups[1:]):
            last_end = max(position[("end", name)] for name in current)
            first_start = min(position[("start", name)] for name in following)
            assert last_end < first_start

    @pytest.mark.asyncio
    async def test_documents_in_a_group_overlap(self, orchestrator, processor):
        await orchestrator.run_batch(_paths(3), concurrency_limit=3)
        kinds = [kind for kind, _ in processor.events]
        assert kinds == ["start"] * 3 + ["end"] * 3

    @pytest.mark.asyncio
    async def test_failure_is_isolated(self, test_config, store):
        processor = RecordingProcessor(fail_on={"doc1.pdf"})
        orchestrator = BatchOrchestrator(config=test_config, store=store, processor=processor)

        report = await orchestrator.run_batch(_paths(4))

        assert (report.processed, report.failed, report.total) == (3, 1, 4)
        assert report.errors[0].file == "doc1.pdf"
        assert "cannot parse" in report.errors[0].error
        assert not store.exists("doc1")
        assert store.exists("doc3")

    @pytest.mark.asyncio
    async def test_existing_artifacts_skipped(self, orchestrator, store):
        first = await orchestrator.run_batch(_paths(2))
        second = await orchestrator.run_batch(_paths(3))

        assert first.processed == 2
        assert (second.processed, second.skipped) == (1, 2)
        assert len(store.find("doc0")) == 1

    @pytest.mark.asyncio
    async def test_stop_prevents_next_group(self, test_config, store, processor):
        def on_progress(progress: BatchProgress):
            if progress.stage == BatchStage.PROCESSING and progress.group_num == 1:
                orchestrator.stop()

        orchestrator = BatchOrchestrator(
            config=test_config, store=store, processor=processor, on_progress=on_progress
        )
        report = await orchestrator.run_batch(_paths(5), concurrency_limit=2)

        assert orchestrator.stopped
        assert report.processed == 2
        assert report.total == 5
        assert report.finalized

    @pytest.mark.asyncio
    async def test_progress_reports(self, test_config, store, processor):
        seen: list[BatchProgress] = []
        orchestrator = BatchOrchestrator(
            config=test_config, store=store, processor=processor, on_progress=seen.append
        )
        await orchestrator.run_batch(_paths(3), concurrency_limit=2)

        assert [p.stage for p in seen] == [
            BatchStage.DISCOVERY,
            BatchStage.PROCESSING,
            BatchStage.PROCESSING,
            BatchStage.COMPLETE,
        ]
        assert [p.current for p in seen] == [0, 2, 3, 3]
        assert seen[-1].percent == 1.0

    @pytest.mark.asyncio
    async def test_report_saved(self, orchestrator, store):
        report = await orchestrator.run_batch(_paths(2))

        assert orchestrator.last_report_path is not None
        data = store.load(orchestrator.last_report_path)
        assert data["requestId"] == report.request_id
        assert data["summary"]["processed"] == 2
        assert data["configuration"]["concurrencyLimit"] == 2
        assert data["configuration"]["outputDir"] == str(store.output_dir)

    @pytest.mark.asyncio
    async def test_invalid_concurrency_limit(self, orchestrator):
        with pytest.raises(ValueError):
            await orchestrator.run_batch(_paths(1), concurrency_limit=0)

    @pytest.mark.asyncio
    async def test_empty_run(self, orchestrator):
        report = await orchestrator.run_batch([])
        assert report.total == 0
        assert report.finalized

    @pytest.mark.asyncio
    async def test_injected_processor_left_open(self, orchestrator, processor):
        async with orchestrator:
            await orchestrator.run_batch(_paths(1))
        assert not processor.closed

    @pytest.mark.asyncio
    async def test_owned_processor_closed_on_exit_only(self, mocker, test_config, store):
        orchestrator = BatchOrchestrator(config=test_config, store=store)
        close = mocker.patch.object(orchestrator.processor, "close", new=mocker.AsyncMock())

        async with orchestrator:
            await orchestrator.run_batch([])
            await orchestrator.run_batch([])
            close.assert_not_awaited()

        close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_discovery_runs_off_the_event_loop(self, mocker, orchestrator, input_dir):
        orchestrator.input_dirs = [input_dir]
        to_thread = mocker.spy(asyncio, "to_thread")

        await orchestrator.run_batch()

        assert to_thread.call_args_list[0].args[0] is discover

    @pytest.mark.asyncio
    async def test_unreadable_roots_abort(self, test_config, store, temp_dir):
        orchestrator = BatchOrchestrator(
            config=test_config, store=store, input_dirs=[temp_dir / "missing"]
        )
        with pytest.raises(SourceEnumerationError):
            await orchestrator.run_batch()

    @pytest.mark.asyncio
    async def test_reprocess_replaces_artifact(self, test_config, store, processor, input_dir):
        orchestrator = BatchOrchestrator(
            config=test_config, store=store, processor=processor, input_dirs=[input_dir]
        )
        first = await orchestrator.run_batch()
        report = await orchestrator.reprocess(["lesson_a", "unknown.pdf"])

        assert first.processed == 2
        assert (report.total, report.processed, report.skipped) == (1, 1, 0)
        assert processor.events.count(("start", "lesson_a.txt")) == 2
        assert processor.events.count(("start", "lesson_b.txt")) == 1
        assert len(store.find("lesson_a")) == 1
        assert len(store.find("lesson_b")) == 1
