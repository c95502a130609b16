"""JSON persistence for output artifacts and run reports.

Layout under the output root:

    <output_dir>/processed/<ms-timestamp>_<source filename>.json
    <output_dir>/batch_report_<ms-timestamp>.json

An artifact exists for a source document when some file in `processed/`
carries the same filename stem after its timestamp prefix.
"""

import asyncio
import json
import re
import time
from pathlib import Path
from typing import Any

from loguru import logger

from pdfprep.entities.artifact import ProcessedDocument
from pdfprep.entities.report import RunReport

_ARTIFACT_NAME = re.compile(r"^(\d+)_(.+)\.json$")


def _timestamp_ms() -> int:
    return time.time_ns() // 1_000_000


def source_stem(filename: str) -> str:
    return Path(filename).stem


class ArtifactStore:
    """Reads and writes pipeline output under one output directory."""

    def __init__(self, output_dir: str | Path):
        self.output_dir = Path(output_dir)
        self.processed_dir = self.output_dir / "processed"

    def ensure_dirs(self) -> None:
        self.processed_dir.mkdir(parents=True, exist_ok=True)

    def find(self, stem: str) -> list[Path]:
        """Artifacts produced for documents with this filename stem."""
        if not self.processed_dir.is_dir():
            return []
        found = []
        for path in sorted(self.processed_dir.glob("*.json")):
            match = _ARTIFACT_NAME.match(path.name)
            if match and source_stem(match.group(2)) == stem:
                found.append(path)
        return found

    def exists(self, stem: str) -> bool:
        return bool(self.find(stem))

    def artifact_path(self, filename: str) -> Path:
        ts = _timestamp_ms()
        path = self.processed_dir / f"{ts}_{filename}.json"
        while path.exists():
            ts += 1
            path = self.processed_dir / f"{ts}_{filename}.json"
        return path

    async def save(self, document: ProcessedDocument) -> Path:
        return await asyncio.to_thread(self._save_sync, document)

    def _save_sync(self, document: ProcessedDocument) -> Path:
        self.ensure_dirs()
        path = self.artifact_path(document.filename)
        self._write_json(path, document.to_dict())
        logger.debug(f"Saved artifact {path.name} ({document.total_chunks} chunks)")
        return path

    async def remove(self, stem: str) -> int:
        """Delete every artifact for a stem; returns how many were removed."""
        return await asyncio.to_thread(self._remove_sync, stem)

    def _remove_sync(self, stem: str) -> int:
        paths = self.find(stem)
        for path in paths:
            path.unlink(missing_ok=True)
            logger.info(f"Removed stale artifact {path.name}")
        return len(paths)

    async def save_report(self, report: RunReport) -> Path:
        return await asyncio.to_thread(self._save_report_sync, report)

    def _save_report_sync(self, report: RunReport) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / f"batch_report_{_timestamp_ms()}.json"
        self._write_json(path, report.to_dict())
        logger.info(f"Run report written to {path}")
        return path

    def load(self, path: str | Path) -> dict[str, Any]:
        with open(path, encoding="utf-8") as f:
            return json.load(f)

    def list_artifacts(self) -> list[Path]:
        if not self.processed_dir.is_dir():
            return []
        return sorted(p for p in self.processed_dir.glob("*.json") if _ARTIFACT_NAME.match(p.name))

    @staticmethod
    def _write_json(path: Path, data: dict[str, Any]) -> None:
        tmp = path.with_name(path.name + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        tmp.replace(path)
