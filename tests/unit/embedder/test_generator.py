"""Tests for EmbeddingGenerator."""

import asyncio

import pytest

from pdfprep.embedder import EmbedderFactory, EmbeddingGenerator
from pdfprep.embedder.base import BaseEmbedder
from pdfprep.embedder.profiles import BGE_ZH_INSTRUCTION
from pdfprep.errors import EmbeddingError, EmbeddingShapeError


@pytest.fixture
def fixed_backend(mocker, fixed_embedder):
    mocker.patch.dict(EmbedderFactory._registry, {"fixed": fixed_embedder})
    return "fixed"


class FlakyEmbedder(BaseEmbedder):
    def __init__(self, dimension=384, **_kwargs):
        self._dimension = dimension

    def embed(self, texts):
        if any("fail" in t for t in texts):
            raise RuntimeError("backend hiccup")
        return [[0.2] * self._dimension for _ in texts]

    @property
    def dimension(self):
        return self._dimension


class TestEmbeddingGenerator:

    def test_unknown_model_uses_default_profile(self):
        generator = EmbeddingGenerator(model_id="unknown-model", backend="mock")
        assert generator.model_id == "all-MiniLM-L6-v2"
        assert not generator.loaded

    @pytest.mark.asyncio
    async def test_mock_backend_vector_matches_profile(self):
        generator = EmbeddingGenerator(model_id="bge-large-zh-v1.5", backend="mock")
        vector = await generator.embed("语文课堂练习")
        assert len(vector) == 1024
        await generator.close()

    @pytest.mark.asyncio
    async def test_instruction_prefix_applied(self, fixed_backend):
        generator = EmbeddingGenerator(model_id="bge-base-zh-v1.5", backend=fixed_backend)
        await generator.embed("课文")
        embedder = await generator.get_embedder()
        assert embedder.calls == [[BGE_ZH_INSTRUCTION + "课文"]]

    @pytest.mark.asyncio
    async def test_no_prefix_for_plain_models(self, fixed_backend):
        generator = EmbeddingGenerator(model_id="all-MiniLM-L6-v2", backend=fixed_backend)
        await generator.embed("text")
        embedder = await generator.get_embedder()
        assert embedder.calls == [["text"]]

    @pytest.mark.asyncio
    async def test_dimension_mismatch(self, fixed_backend):
        generator = EmbeddingGenerator(
            model_id="all-MiniLM-L6-v2",
            backend=fixed_backend,
            backend_params={"dimension": 8},
        )
        with pytest.raises(EmbeddingShapeError) as exc_info:
            await generator.embed("text")
        assert exc_info.value.expected == 384
        assert exc_info.value.actual == 8

    @pytest.mark.asyncio
    async def test_failing_chunk_is_skipped(self, mocker, make_chunks):
        mocker.patch.dict(EmbedderFactory._registry, {"flaky": FlakyEmbedder})
        generator = EmbeddingGenerator(backend="flaky")
        chunks = make_chunks(["one", "two", "please fail", "four", "five"])

        stats = await generator.embed_chunks(chunks)

        assert (stats.embedded, stats.failed, stats.total) == (4, 1, 5)
        assert chunks[2].embedding is None
        assert all(len(c.embedding) == 384 for i, c in enumerate(chunks) if i != 2)

    @pytest.mark.asyncio
    async def test_backend_loaded_once_under_concurrency(self, mocker, fixed_backend):
        spy = mocker.spy(EmbedderFactory, "create")
        generator = EmbeddingGenerator(backend=fixed_backend)

        await asyncio.gather(*(generator.embed(f"text {i}") for i in range(10)))

        assert spy.call_count == 1
        embedder = await generator.get_embedder()
        assert len(embedder.calls) == 10

    @pytest.mark.asyncio
    async def test_model_calls_never_overlap(self, mocker, slow_embedder):
        mocker.patch.dict(EmbedderFactory._registry, {"slow": slow_embedder})
        generator = EmbeddingGenerator(backend="slow")

        await asyncio.gather(*(generator.embed(f"text {i}") for i in range(6)))

        assert slow_embedder.peak == 1
        assert slow_embedder.loads == 1

    @pytest.mark.asyncio
    async def test_unloadable_backend_raises(self, make_chunks):
        generator = EmbeddingGenerator(backend="does-not-exist")
        with pytest.raises(EmbeddingError, match="Failed to create embedder"):
            await generator.embed_chunks(make_chunks(["text"]))

    @pytest.mark.asyncio
    async def test_empty_chunk_list_does_not_load(self):
        generator = EmbeddingGenerator(backend="mock")
        stats = await generator.embed_chunks([])
        assert stats.total == 0
        assert not generator.loaded

    @pytest.mark.asyncio
    async def test_close_releases_backend(self, fixed_backend):
        generator = EmbeddingGenerator(backend=fixed_backend)
        await generator.get_embedder()
        assert generator.loaded
        await generator.close()
        assert not generator.loaded

    def test_validate_rejects_non_finite(self):
        generator = EmbeddingGenerator(backend="mock")
        bad = [[float("nan")] * 384]
        with pytest.raises(EmbeddingShapeError):
            generator._validate(bad)

    def test_validate_rejects_batch_of_two(self):
        generator = EmbeddingGenerator(backend="mock")
        with pytest.raises(EmbeddingShapeError):
            generator._validate([[0.0] * 384, [0.0] * 384])
