import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load .env file from the project root
# This file: src/pdfprep/config/settings.py
SERVER_ROOT = Path(__file__).resolve().parent.parent.parent.parent
ENV_PATH = SERVER_ROOT / ".env"

if ENV_PATH.exists():
    load_dotenv(ENV_PATH)
else:
    # Fallback to simple load_dotenv which looks in cwd
    load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() not in ("false", "0", "no", "off", "")


def _env_list(name: str, default: list[str]) -> list[str]:
    value = os.getenv(name)
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseModel):
    """Global Application Settings"""

    # Environment
    ENV: str = Field(default="development", description="Environment: development, production, testing")
    LOG_LEVEL: str = Field(default="INFO", description="Log level")

    # Project Paths
    ROOT_DIR: Path = Field(default=SERVER_ROOT, description="Project root directory")
    INPUT_DIRS: list[str] = Field(default_factory=lambda: ["input"], description="Document roots scanned by the batch run")
    OUTPUT_DIR: str = Field(default="output", description="Where artifacts and reports are written")

    # Splitter
    CHUNK_SIZE: int = Field(default=2000, description="Target chunk size in characters")
    CHUNK_OVERLAP: int = Field(default=400, description="Characters shared by consecutive chunks")
    MAX_CHUNKS_PER_DOCUMENT: int = Field(default=500, description="Chunks kept per document")

    # Optimizer
    MIN_CHUNK_LENGTH: int = Field(default=50, description="Lower bound of the chunk length band")
    MAX_CHUNK_LENGTH: int = Field(default=8000, description="Upper bound of the chunk length band")

    # Normalizer / filter tuning
    GARBLED_THRESHOLD: float = Field(default=0.2, description="Non-standard character ratio that flags review")

    # Embeddings
    EMBEDDING_MODEL: str = Field(default="all-MiniLM-L6-v2", description="Model registry identifier")
    EMBEDDING_BACKEND: str = Field(default="sentence_transformers", description="Embedder factory type")
    GENERATE_EMBEDDINGS: bool = Field(default=True, description="Toggle embedding generation")

    # Batch
    CONCURRENCY_LIMIT: int = Field(default=3, description="Documents processed concurrently per group")

    model_config = {
        "frozen": True,
        "arbitrary_types_allowed": True
    }


def load_settings() -> Settings:
    """Load settings from environment variables."""
    return Settings(
        ENV=os.getenv("ENV", "development"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        ROOT_DIR=SERVER_ROOT,
        INPUT_DIRS=_env_list("INPUT_DIRS", ["input"]),
        OUTPUT_DIR=os.getenv("OUTPUT_DIR", "output"),
        CHUNK_SIZE=int(os.getenv("CHUNK_SIZE", "2000")),
        CHUNK_OVERLAP=int(os.getenv("CHUNK_OVERLAP", "400")),
        MAX_CHUNKS_PER_DOCUMENT=int(os.getenv("MAX_CHUNKS_PER_DOCUMENT", "500")),
        MIN_CHUNK_LENGTH=int(os.getenv("MIN_CHUNK_LENGTH", "50")),
        MAX_CHUNK_LENGTH=int(os.getenv("MAX_CHUNK_LENGTH", "8000")),
        GARBLED_THRESHOLD=float(os.getenv("GARBLED_THRESHOLD", "0.2")),
        EMBEDDING_MODEL=os.getenv("EMBEDDING_MODEL", "all-MiniLM-L6-v2"),
        EMBEDDING_BACKEND=os.getenv("EMBEDDING_BACKEND", "sentence_transformers"),
        GENERATE_EMBEDDINGS=_env_bool("GENERATE_EMBEDDINGS", True),
        CONCURRENCY_LIMIT=int(os.getenv("CONCURRENCY_LIMIT", "3")),
    )


# Global settings instance
settings = load_settings()
