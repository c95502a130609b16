"""Embedding model profiles and the read-only registry that serves them."""

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from loguru import logger
from pydantic import BaseModel, Field

DEFAULT_MODEL_ID = "all-MiniLM-L6-v2"

# Retrieval instruction expected by the BGE Chinese models
BGE_ZH_INSTRUCTION = "为这个句子生成表示以用于检索相关文章："


class ModelProfile(BaseModel):
    """
    Static description of an embedding model.

    `dimensions` is the length every vector produced with this profile
    must have.
    """

    model_id: str
    name: str
    display_name: str
    dimensions: int = Field(gt=0)
    max_tokens: int = Field(gt=0)
    description: str = ""
    instruction_prefix: str = ""

    model_config = {
        "frozen": True,
    }

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "displayName": self.display_name,
            "dimensions": self.dimensions,
            "maxTokens": self.max_tokens,
            "description": self.description,
            "instructionPrefix": self.instruction_prefix,
        }


class ModelRegistry:
    """Read-only view over a fixed set of model profiles.

    Unknown identifiers resolve to the default profile with a warning
    instead of raising.
    """

    def __init__(self, profiles: Mapping[str, ModelProfile], default_id: str = DEFAULT_MODEL_ID):
        if default_id not in profiles:
            raise ValueError(f"Default model '{default_id}' is not in the registry")
        self._profiles: Mapping[str, ModelProfile] = MappingProxyType(dict(profiles))
        self.default_id = default_id

    @property
    def profiles(self) -> Mapping[str, ModelProfile]:
        return self._profiles

    @property
    def default(self) -> ModelProfile:
        return self._profiles[self.default_id]

    def __contains__(self, model_id: object) -> bool:
        return model_id in self._profiles

    def __iter__(self) -> Iterator[str]:
        return iter(self._profiles)

    def __len__(self) -> int:
        return len(self._profiles)

    def get(self, model_id: str) -> ModelProfile | None:
        return self._profiles.get(model_id)

    def is_supported(self, model_id: str) -> bool:
        return model_id in self._profiles

    def resolve(self, model_id: str | None) -> ModelProfile:
        if model_id and model_id in self._profiles:
            return self._profiles[model_id]
        logger.warning(f"Unknown embedding model '{model_id}', using default {self.default_id}")
        return self.default

    def list_models(self) -> dict[str, dict[str, Any]]:
        return {model_id: profile.to_dict() for model_id, profile in self._profiles.items()}


def _profile(model_id: str, **fields: Any) -> tuple[str, ModelProfile]:
    return model_id, ModelProfile(model_id=model_id, **fields)


MODEL_REGISTRY = ModelRegistry(dict([
    _profile(
        "bge-large-zh-v1.5",
        name="BAAI/bge-large-zh-v1.5",
        display_name="BGE Large ZH v1.5",
        dimensions=1024,
        max_tokens=512,
        description="Large Chinese retrieval model, best quality",
        instruction_prefix=BGE_ZH_INSTRUCTION,
    ),
    _profile(
        "bge-base-zh-v1.5",
        name="BAAI/bge-base-zh-v1.5",
        display_name="BGE Base ZH v1.5",
        dimensions=768,
        max_tokens=512,
        description="Chinese retrieval model balancing quality and speed",
        instruction_prefix=BGE_ZH_INSTRUCTION,
    ),
    _profile(
        "bge-m3",
        name="BAAI/bge-m3",
        display_name="BGE M3",
        dimensions=1024,
        max_tokens=8192,
        description="Multilingual long-context model",
    ),
    _profile(
        "all-MiniLM-L6-v2",
        name="sentence-transformers/all-MiniLM-L6-v2",
        display_name="MiniLM L6 v2",
        dimensions=384,
        max_tokens=256,
        description="Small fast English model",
    ),
    _profile(
        "all-mpnet-base-v2",
        name="sentence-transformers/all-mpnet-base-v2",
        display_name="MPNet Base v2",
        dimensions=768,
        max_tokens=384,
        description="High quality English model",
    ),
    _profile(
        "all-MiniLM-L12-v2",
        name="sentence-transformers/all-MiniLM-L12-v2",
        display_name="MiniLM L12 v2",
        dimensions=384,
        max_tokens=256,
        description="Medium size English model",
    ),
    _profile(
        "gte-qwen2-1.5b",
        name="Alibaba-NLP/gte-Qwen2-1.5B-instruct",
        display_name="GTE Qwen2 1.5B",
        dimensions=1536,
        max_tokens=32000,
        description="Lightweight multilingual instruct model",
    ),
]))
