"""
Progress tracking for batch runs.

The orchestrator reports once after discovery and once after every
concurrency group settles, so callers can drive a progress bar or a log.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol


class BatchStage(Enum):
    """Stages of a batch run."""
    DISCOVERY = "discovery"
    PROCESSING = "processing"
    COMPLETE = "complete"


@dataclass
class BatchProgress:
    """
    Progress information for a batch run.

    Attributes:
        stage: Current stage
        current: Documents settled so far (processed, failed or skipped)
        total: Documents in the run
        percent: Completion ratio (0.0 to 1.0)
        message: Human-readable progress message
        errors: Documents failed so far
        skipped: Documents skipped by the idempotency check
        group_num: Current concurrency group (1-indexed)
        total_groups: Number of concurrency groups

    Example:
        >>> progress = BatchProgress.create(BatchStage.PROCESSING, current=3, total=7)
        >>> print(f"{progress.percent:.0%} - {progress.message}")
        43% - processing: 3/7
    """

    stage: BatchStage
    current: int
    total: int
    percent: float
    message: str
    errors: int = 0
    skipped: int = 0
    group_num: int = 0
    total_groups: int = 0

    @classmethod
    def create(
        cls,
        stage: BatchStage,
        current: int,
        total: int,
        message: str = "",
        errors: int = 0,
        skipped: int = 0,
        group_num: int = 0,
        total_groups: int = 0
    ) -> "BatchProgress":
        """Create a BatchProgress instance with auto-calculated percent."""
        percent = current / total if total > 0 else 0.0
        return cls(
            stage=stage,
            current=current,
            total=total,
            percent=percent,
            message=message or f"{stage.value}: {current}/{total}",
            errors=errors,
            skipped=skipped,
            group_num=group_num,
            total_groups=total_groups
        )


# Type alias for progress callback functions
ProgressCallback = Callable[[BatchProgress], None]


class ProgressReporter(Protocol):
    """Protocol for progress reporting implementations."""

    def report(self, progress: BatchProgress) -> None:
        ...


class LoggingProgressReporter:
    """
    Progress reporter that logs to Python logging.

    Used by the command-line entry point.
    """

    def __init__(self, logger_name: str = "pdfprep.batch"):
        self.logger = logging.getLogger(logger_name)

    def report(self, progress: BatchProgress) -> None:
        group = f" [group {progress.group_num}/{progress.total_groups}]" if progress.total_groups else ""
        self.logger.info(
            f"{progress.stage.value}: {progress.current}/{progress.total} "
            f"({progress.percent:.1%}){group}"
            + (f" [errors: {progress.errors}]" if progress.errors else "")
            + (f" [skipped: {progress.skipped}]" if progress.skipped else "")
        )


class CallbackProgressReporter:
    """Progress reporter that calls a user-provided callback."""

    def __init__(self, callback: ProgressCallback):
        self.callback = callback

    def report(self, progress: BatchProgress) -> None:
        self.callback(progress)
