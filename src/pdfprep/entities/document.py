"""Source document entity produced by the text-extraction collaborator."""

from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field


class SourceDocument(BaseModel):
    """
    One extracted text body plus file-level metadata.

    Immutable once extracted; a pipeline run reads it and discards it after
    the output artifact has been built.
    """

    text: str = Field(default="")
    filename: str

    # Identifier carried by every chunk cut from this document
    source_id: str = Field(default_factory=lambda: str(uuid4()))

    title: str | None = None
    author: str | None = None
    total_pages: int = Field(default=0, ge=0)
    file_size: int = Field(default=0, ge=0)

    metadata: dict[str, Any] = Field(default_factory=dict)

    def get_meta(self, key: str, default: Any = None) -> Any:
        return self.metadata.get(key, default)

    model_config = {
        "frozen": True,
        "arbitrary_types_allowed": True
    }
