"""Pytest configuration and global fixtures for pdfprep tests."""

import tempfile
import threading
import time
from pathlib import Path

import pytest

from pdfprep.config.models import PipelineConfig
from pdfprep.embedder.base import BaseEmbedder
from pdfprep.embedder.generator import EmbeddingGenerator
from pdfprep.entities.chunk import Chunk
from pdfprep.storage.artifacts import ArtifactStore

LESSON_TEXT = """第一单元 汉语拼音

本单元的学习目标是掌握声母和韵母的读音，学生需要在老师的带领下完成课堂练习。

课文一：小小的船。弯弯的月儿小小的船，小小的船儿两头尖。我在小小的船里坐，只看见闪闪的星星蓝蓝的天。

课后作业：朗读课文三遍，并把生字抄写在练习本上。家长签字后第二天交给老师检查。

Reading practice helps students build vocabulary. Teachers should encourage daily reading at home and in class.
"""


@pytest.fixture
def temp_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def lesson_text() -> str:
    return LESSON_TEXT


@pytest.fixture
def make_chunks():
    """Build a chunk list from plain strings."""
    def _make(contents: list[str], source_id: str = "doc-1") -> list[Chunk]:
        return [Chunk(content=c, index=i, source_id=source_id) for i, c in enumerate(contents)]
    return _make


@pytest.fixture
def input_dir(temp_dir, lesson_text) -> Path:
    root = temp_dir / "input"
    (root / "grade1").mkdir(parents=True)
    (root / "lesson_a.txt").write_text(lesson_text, encoding="utf-8")
    (root / "grade1" / "lesson_b.txt").write_text(lesson_text.replace("第一单元", "第二单元"), encoding="utf-8")
    (root / "notes.md").write_text("ignored", encoding="utf-8")
    return root


@pytest.fixture
def store(temp_dir) -> ArtifactStore:
    return ArtifactStore(temp_dir / "output")


@pytest.fixture
def test_config() -> PipelineConfig:
    """Small chunks and the mock embedding backend."""
    return PipelineConfig(
        chunk_size=200,
        chunk_overlap=20,
        max_chunks=50,
        min_chunk_length=30,
        max_chunk_length=400,
        embedding_model="all-MiniLM-L6-v2",
        embedding_backend="mock",
        concurrency_limit=2,
    )


@pytest.fixture
def mock_generator() -> EmbeddingGenerator:
    return EmbeddingGenerator(model_id="all-MiniLM-L6-v2", backend="mock")


@pytest.fixture
def fixed_embedder():
    """An embedder returning constant vectors of a chosen dimension."""
    class FixedEmbedder(BaseEmbedder):
        def __init__(self, dimension=384, **_kwargs):
            self._dimension = dimension
            self.calls: list[list[str]] = []

        def embed(self, texts: list[str]) -> list[list[float]]:
            self.calls.append(list(texts))
            return [[0.1] * self._dimension for _ in texts]

        @property
        def dimension(self) -> int:
            return self._dimension

    return FixedEmbedder


@pytest.fixture
def slow_embedder():
    """An embedder that counts loads and records how many calls overlap."""
    class SlowEmbedder(BaseEmbedder):
        loads = 0
        in_flight = 0
        peak = 0
        _guard = threading.Lock()

        def __init__(self, dimension=384, **_kwargs):
            self._dimension = dimension
            type(self).loads += 1

        def embed(self, texts: list[str]) -> list[list[float]]:
            cls = type(self)
            with cls._guard:
                cls.in_flight += 1
                cls.peak = max(cls.peak, cls.in_flight)
            time.sleep(0.005)
            with cls._guard:
                cls.in_flight -= 1
            return [[0.1] * self._dimension for _ in texts]

        @property
        def dimension(self) -> int:
            return self._dimension

    return SlowEmbedder


# ==================== Pytest Configuration ====================

def pytest_configure(config):
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")


def pytest_collection_modifyitems(config, items):
    for item in items:
        rel_path = Path(item.fspath).relative_to(Path(__file__).parent)
        if "unit" in rel_path.parts:
            item.add_marker(pytest.mark.unit)
        elif "integration" in rel_path.parts:
            item.add_marker(pytest.mark.integration)
