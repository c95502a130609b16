"""Recursive discovery of source documents under configured roots."""

import logging
from collections.abc import Iterable
from pathlib import Path

from pdfprep.errors import SourceEnumerationError
from pdfprep.index_processor.extractor import ExtractorFactory
from pdfprep.utils.performance import timed

logger = logging.getLogger(__name__)


@timed("Source discovery", threshold_ms=200)
def discover(roots: Iterable[str | Path], extensions: Iterable[str] | None = None) -> list[Path]:
    """
    Find every file under the given roots with a recognized extension.

    Roots that are missing or unreadable are logged and skipped. Results
    are sorted per root and deduplicated across roots.

    Raises:
        SourceEnumerationError: If not a single root could be enumerated
    """
    roots = [Path(r) for r in roots]
    wanted = {e.lower() for e in (extensions or ExtractorFactory.extensions())}

    found: list[Path] = []
    seen: set[Path] = set()
    enumerated = 0

    for root in roots:
        if not root.is_dir():
            logger.warning(f"Document root not found, skipping: {root}")
            continue

        try:
            files = sorted(p for p in root.rglob("*") if p.is_file() and p.suffix.lower() in wanted)
        except OSError as e:
            logger.warning(f"Failed to enumerate {root}: {e}")
            continue

        enumerated += 1
        for path in files:
            key = path.resolve()
            if key not in seen:
                seen.add(key)
                found.append(path)

        logger.info(f"Found {len(files)} documents under {root}")

    if enumerated == 0:
        raise SourceEnumerationError(
            "No document root could be enumerated",
            details={"roots": [str(r) for r in roots]},
        )

    return found
