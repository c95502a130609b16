"""Run report accumulated by the batch orchestrator."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, PrivateAttr


def _now() -> datetime:
    return datetime.now(timezone.utc)


def format_duration(ms: float) -> str:
    """Render a millisecond duration as e.g. '1h 2m 3s'."""
    seconds = int(ms // 1000)
    minutes = seconds // 60
    hours = minutes // 60
    if hours > 0:
        return f"{hours}h {minutes % 60}m {seconds % 60}s"
    if minutes > 0:
        return f"{minutes}m {seconds % 60}s"
    return f"{seconds}s"


class FileError(BaseModel):
    """One failed document: which file, what went wrong, and when."""

    file: str
    error: str
    timestamp: str = Field(default_factory=lambda: _now().isoformat())


class DocumentOutcome(BaseModel):
    """
    Delta returned by one document worker.

    Workers never touch the report; the orchestrator folds outcomes in
    after each concurrency group settles.
    """

    file: str
    skipped: bool = False
    needs_review: bool = False
    chunks: int = 0
    merged: int = 0
    removed: int = 0
    cleaned: int = 0
    preserved: int = 0
    embedding_failures: int = 0
    processing_time_ms: int = 0
    artifact_path: str | None = None


class RunReport(BaseModel):
    """
    Aggregate counters, timing, configuration and errors of a batch run.

    Created at orchestration start and finalized once at the end; any
    mutation after `finalize()` raises RuntimeError.
    """

    request_id: str = ""
    total: int = 0
    processed: int = 0
    failed: int = 0
    skipped: int = 0
    needs_review: int = 0

    chunks: int = 0
    merged: int = 0
    removed: int = 0
    cleaned: int = 0
    preserved: int = 0
    embedding_failures: int = 0

    start: datetime = Field(default_factory=_now)
    end: datetime | None = None

    configuration: dict[str, Any] = Field(default_factory=dict)
    errors: list[FileError] = Field(default_factory=list)

    _finalized: bool = PrivateAttr(default=False)

    @property
    def finalized(self) -> bool:
        return self._finalized

    @property
    def total_duration_ms(self) -> int:
        end = self.end or _now()
        return int((end - self.start).total_seconds() * 1000)

    @property
    def average_per_document_ms(self) -> int:
        if self.processed == 0:
            return 0
        return round(self.total_duration_ms / self.processed)

    @property
    def success_rate(self) -> float:
        return self.processed / self.total if self.total else 0.0

    def _check_mutable(self) -> None:
        if self._finalized:
            raise RuntimeError("RunReport is finalized and can no longer be modified")

    def fold(self, outcome: DocumentOutcome) -> None:
        """Add one worker's delta to the aggregate counters."""
        self._check_mutable()
        if outcome.skipped:
            self.skipped += 1
            return
        self.processed += 1
        if outcome.needs_review:
            self.needs_review += 1
        self.chunks += outcome.chunks
        self.merged += outcome.merged
        self.removed += outcome.removed
        self.cleaned += outcome.cleaned
        self.preserved += outcome.preserved
        self.embedding_failures += outcome.embedding_failures

    def record_failure(self, file: str, error: BaseException | str) -> FileError:
        self._check_mutable()
        entry = FileError(file=file, error=str(error) or type(error).__name__)
        self.failed += 1
        self.errors.append(entry)
        return entry

    def finalize(self) -> "RunReport":
        self._check_mutable()
        self.end = _now()
        self._finalized = True
        return self

    def to_dict(self) -> dict[str, Any]:
        total_ms = self.total_duration_ms
        return {
            "requestId": self.request_id,
            "summary": {
                "total": self.total,
                "processed": self.processed,
                "failed": self.failed,
                "skipped": self.skipped,
                "needsReview": self.needs_review,
                "successRate": round(self.success_rate * 100, 1),
            },
            "chunks": {
                "total": self.chunks,
                "merged": self.merged,
                "removed": self.removed,
                "cleaned": self.cleaned,
                "preserved": self.preserved,
                "embeddingFailures": self.embedding_failures,
            },
            "timing": {
                "start": self.start.isoformat(),
                "end": self.end.isoformat() if self.end else None,
                "totalDuration": total_ms,
                "totalDurationFormatted": format_duration(total_ms),
                "averagePerDocument": self.average_per_document_ms,
            },
            "configuration": dict(self.configuration),
            "errors": [e.model_dump() for e in self.errors],
        }
