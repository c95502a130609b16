"""Timing helpers for pipeline stages."""

import time
from contextlib import contextmanager
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Iterator

from loguru import logger


@dataclass
class Timing:
    """Elapsed time of a `timer` block, filled in when the block exits."""

    operation: str
    elapsed_ms: float = 0.0


@contextmanager
def timer(operation: str, log_level: str = "INFO", threshold_ms: float = 0) -> Iterator[Timing]:
    """Measure a block and log its duration at `log_level`.

    Blocks faster than `threshold_ms` are measured but not logged. The
    duration is recorded even when the block raises.

    Example:
        >>> with timer("Processing textbook.pdf", log_level="DEBUG") as t:
        ...     document = await processor.process(source)
        >>> document.processing_time_ms = int(t.elapsed_ms)
    """
    timing = Timing(operation)
    start = time.perf_counter()
    try:
        yield timing
    finally:
        timing.elapsed_ms = (time.perf_counter() - start) * 1000
        if timing.elapsed_ms >= threshold_ms:
            logger.log(log_level.upper(), f"{operation} took {timing.elapsed_ms:.2f}ms")


def timed(operation: str | None = None, threshold_ms: float = 100, log_level: str = "DEBUG"):
    """Decorator form of `timer` for synchronous functions."""
    def decorator(func: Callable) -> Callable:
        name = operation or f"{func.__module__}.{func.__name__}"

        @wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            with timer(name, log_level=log_level, threshold_ms=threshold_ms):
                return func(*args, **kwargs)

        return wrapper
    return decorator
