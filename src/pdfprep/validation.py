"""RAG-readiness validation of persisted output artifacts.

Checks a serialized artifact (the dict produced by
`ProcessedDocument.to_dict()`) the way a downstream retrieval system would
consume it: required fields, content length band, embedding dimension,
required metadata and index contiguity.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

from pdfprep.config.models import PipelineConfig
from pdfprep.embedder.profiles import MODEL_REGISTRY, ModelRegistry
from pdfprep.errors import ValidationError
from pdfprep.storage.artifacts import ArtifactStore


@dataclass(frozen=True)
class RagRequirements:
    min_chunk_length: int = 50
    max_chunk_length: int = 8000
    embedding_dimension: int = 384
    required_fields: tuple[str, ...] = ("content", "embedding", "metadata")
    required_metadata: tuple[str, ...] = ("chunkIndex", "source")

    @classmethod
    def for_config(cls, config: PipelineConfig, registry: ModelRegistry = MODEL_REGISTRY) -> "RagRequirements":
        return cls(
            min_chunk_length=config.min_chunk_length,
            max_chunk_length=config.max_chunk_length,
            embedding_dimension=registry.resolve(config.embedding_model).dimensions,
        )


@dataclass
class ChunkValidation:
    index: int
    issues: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.issues


@dataclass
class DocumentValidation:
    filename: str
    issues: list[str] = field(default_factory=list)
    total_chunks: int = 0
    valid_chunks: int = 0

    @property
    def rag_ready(self) -> bool:
        return not self.issues

    def to_dict(self) -> dict[str, Any]:
        return {
            "filename": self.filename,
            "ragReady": self.rag_ready,
            "totalChunks": self.total_chunks,
            "validChunks": self.valid_chunks,
            "issues": list(self.issues),
        }


@dataclass
class ValidationSummary:
    documents: list[DocumentValidation] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        return len(self.documents)

    @property
    def rag_ready_files(self) -> int:
        return sum(1 for d in self.documents if d.rag_ready)

    @property
    def rag_ready(self) -> bool:
        return bool(self.documents) and self.rag_ready_files == self.total_files

    def to_dict(self) -> dict[str, Any]:
        total_chunks = sum(d.total_chunks for d in self.documents)
        valid_chunks = sum(d.valid_chunks for d in self.documents)
        return {
            "totalFiles": self.total_files,
            "ragReadyFiles": self.rag_ready_files,
            "ragReady": self.rag_ready,
            "totalChunks": total_chunks,
            "validChunks": valid_chunks,
            "documents": [d.to_dict() for d in self.documents if not d.rag_ready],
        }


def validate_chunk(chunk: dict[str, Any], position: int, requirements: RagRequirements = RagRequirements()) -> ChunkValidation:
    result = ChunkValidation(index=position)
    issues = result.issues

    for name in requirements.required_fields:
        if name not in chunk:
            issues.append(f"missing field: {name}")

    content = chunk.get("content")
    metadata = chunk.get("metadata")
    metadata = metadata if isinstance(metadata, dict) else {}

    if not content:
        issues.append("empty content")
    else:
        length = len(content)
        # Chunks tagged below_min_length had no merge partner; accepted as-is
        if length < requirements.min_chunk_length and not metadata.get("belowMinLength"):
            issues.append(f"content too short: {length} < {requirements.min_chunk_length}")
        if length > requirements.max_chunk_length:
            issues.append(f"content too long: {length} > {requirements.max_chunk_length}")

    embedding = chunk.get("embedding")
    if embedding is not None:
        if not isinstance(embedding, list):
            issues.append("embedding is not a list")
        elif len(embedding) != requirements.embedding_dimension:
            issues.append(
                f"embedding dimension {len(embedding)} != {requirements.embedding_dimension}"
            )

    for name in requirements.required_metadata:
        if name not in metadata:
            issues.append(f"missing metadata: {name}")

    return result


def validate_document(data: dict[str, Any], requirements: RagRequirements = RagRequirements()) -> DocumentValidation:
    result = DocumentValidation(filename=str(data.get("filename", "<unknown>")))

    chunks = data.get("chunks")
    if not isinstance(chunks, list):
        result.issues.append("missing chunks array")
        return result
    if not chunks:
        result.issues.append("no chunks")
        return result

    result.total_chunks = len(chunks)
    if data.get("totalChunks") not in (None, len(chunks)):
        result.issues.append(f"totalChunks {data.get('totalChunks')} != {len(chunks)}")

    for position, chunk in enumerate(chunks):
        if not isinstance(chunk, dict):
            result.issues.append(f"chunk {position}: not an object")
            continue

        checked = validate_chunk(chunk, position, requirements)
        index = (chunk.get("metadata") or {}).get("chunkIndex")
        if index is not None and index != position:
            checked.issues.append(f"chunkIndex {index} at position {position}")

        if checked.valid:
            result.valid_chunks += 1
        else:
            result.issues.append(f"chunk {position}: {', '.join(checked.issues)}")

    return result


def ensure_rag_ready(data: dict[str, Any], requirements: RagRequirements = RagRequirements()) -> DocumentValidation:
    """Validate and raise ValidationError when the artifact is not RAG-ready."""
    result = validate_document(data, requirements)
    if not result.rag_ready:
        raise ValidationError(
            f"{result.filename} is not RAG-ready",
            details={"issues": result.issues[:10], "issueCount": len(result.issues)},
        )
    return result


def validate_artifacts(
    store: ArtifactStore,
    requirements: RagRequirements = RagRequirements(),
    paths: Iterable[Path] | None = None,
) -> ValidationSummary:
    """Validate every artifact in the store (or the given paths)."""
    summary = ValidationSummary()
    for path in paths if paths is not None else store.list_artifacts():
        try:
            data = store.load(path)
        except (OSError, ValueError) as e:
            logger.warning(f"Unreadable artifact {path}: {e}")
            summary.documents.append(DocumentValidation(filename=Path(path).name, issues=[f"unreadable: {e}"]))
            continue
        summary.documents.append(validate_document(data, requirements))

    logger.info(f"Validated {summary.total_files} artifacts, {summary.rag_ready_files} RAG-ready")
    return summary
