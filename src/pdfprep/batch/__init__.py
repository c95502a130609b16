"""
Batch processing: discovery, bounded-concurrency orchestration and progress.

Example:
    >>> from pdfprep.batch import BatchOrchestrator
    >>> async with BatchOrchestrator(config, store, input_dirs=["input"]) as orchestrator:
    ...     report = await orchestrator.run_batch()
"""

from .discovery import discover
from .orchestrator import BatchOrchestrator
from .progress import (
    BatchProgress,
    BatchStage,
    CallbackProgressReporter,
    LoggingProgressReporter,
    ProgressCallback,
    ProgressReporter,
)

__all__ = [
    "BatchOrchestrator",
    "BatchProgress",
    "BatchStage",
    "CallbackProgressReporter",
    "LoggingProgressReporter",
    "ProgressCallback",
    "ProgressReporter",
    "discover",
]
