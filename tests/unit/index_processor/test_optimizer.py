"""Tests for the ChunkOptimizer."""

import pytest

from pdfprep.entities.chunk import Chunk, ChunkProvenance
from pdfprep.index_processor.optimizer import ChunkOptimizer, split_long_content, split_sentences


def _lengths(chunks):
    return [len(c.content) for c in chunks]


class TestSentenceSplitting:

    def test_split_sentences_keeps_terminators(self):
        assert split_sentences("一。二！Three. Four") == ["一。", "二！", "Three.", " Four"]

    def test_decimal_point_is_not_a_boundary(self):
        assert split_sentences("pi is 3.14 roughly.") == ["pi is 3.14 roughly."]

    def test_split_long_content_hard_cuts_without_terminators(self):
        parts = split_long_content("x" * 25, 10)
        assert parts == ["x" * 10, "x" * 10, "x" * 5]


class TestChunkOptimizer:

    @pytest.fixture
    def optimizer(self):
        return ChunkOptimizer(min_length=50, max_length=8000)

    def test_ten_short_chunks_merge_in_pairs(self, optimizer, make_chunks):
        result = optimizer.optimize(make_chunks(["a" * 30] * 10))
        assert _lengths(result.chunks) == [61] * 5
        assert result.merged == 5
        assert all(c.provenance.merged and c.provenance.merged_count == 1 for c in result.chunks)

    def test_length_band_and_contiguous_indices(self, optimizer, make_chunks):
        contents = ["b" * 10, "c" * 200, "d" * 5, "e" * 5, "x" * 9000, "f" * 40, "g" * 3000, "h" * 20]
        result = optimizer.optimize(make_chunks(contents))

        assert _lengths(result.chunks) == [223, 8000, 1000, 3062]
        assert [c.index for c in result.chunks] == list(range(len(result.chunks)))
        assert all(50 <= len(c.content) <= 8000 for c in result.chunks)
        assert result.split == 1
        assert result.merged == 5

    def test_idempotent_on_in_band_input(self, optimizer, make_chunks):
        first = optimizer.optimize(make_chunks(["a" * 30] * 10 + ["z" * 120]))
        second = optimizer.optimize(first.chunks)
        assert [c.content for c in second.chunks] == [c.content for c in first.chunks]
        assert second.merged == 0 and second.split == 0 and second.removed == 0

    def test_empty_content_removed(self, optimizer, make_chunks):
        result = optimizer.optimize(make_chunks(["", "   ", "y" * 60]))
        assert result.removed == 2
        assert _lengths(result.chunks) == [60]
        assert result.chunks[0].index == 0

    def test_merge_into_already_merged_chunk_keeps_count(self, optimizer):
        chunks = [
            Chunk(content="a" * 10, index=0, source_id="doc-1"),
            Chunk(
                content="b" * 60,
                index=1,
                source_id="doc-1",
                provenance=ChunkProvenance(merged=True, merged_count=2),
            ),
        ]
        result = optimizer.optimize(chunks)

        assert _lengths(result.chunks) == [71]
        assert result.chunks[0].provenance.merged_count == 3

    def test_lone_short_chunk_tagged(self, optimizer, make_chunks):
        result = optimizer.optimize(make_chunks(["short"]))
        assert len(result.chunks) == 1
        assert result.chunks[0].provenance.below_min_length is True

    def test_trailing_short_chunk_without_room_is_tagged(self, make_chunks):
        optimizer = ChunkOptimizer(min_length=50, max_length=100)
        result = optimizer.optimize(make_chunks(["y" * 95, "z" * 10]))
        assert _lengths(result.chunks) == [95, 10]
        assert result.chunks[0].provenance.below_min_length is False
        assert result.chunks[1].provenance.below_min_length is True

    def test_trailing_short_chunk_merges_backwards(self, optimizer, make_chunks):
        result = optimizer.optimize(make_chunks(["m" * 100, "n" * 10]))
        assert _lengths(result.chunks) == [111]
        assert result.chunks[0].content.endswith(" " + "n" * 10)

    def test_oversized_chunk_split_at_sentences(self, make_chunks):
        optimizer = ChunkOptimizer(min_length=5, max_length=30)
        text = "这是第一句话。这是第二句话。这是第三句话。这是第四句话。这是第五句话。"
        result = optimizer.optimize(make_chunks([text]))

        assert [c.content for c in result.chunks] == [
            "这是第一句话。这是第二句话。这是第三句话。这是第四句话。",
            "这是第五句话。",
        ]
        parts = [(c.provenance.split, c.provenance.split_part, c.provenance.total_parts) for c in result.chunks]
        assert parts == [(True, 1, 2), (True, 2, 2)]

    def test_split_parts_inherit_embedding(self, make_chunks):
        optimizer = ChunkOptimizer(min_length=5, max_length=10)
        chunk = Chunk(content="x" * 25, source_id="doc-1", embedding=[0.5, 0.5])
        result = optimizer.optimize([chunk])
        assert len(result.chunks) == 3
        assert all(c.embedding == [0.5, 0.5] for c in result.chunks)
        assert all(c.source_id == "doc-1" for c in result.chunks)

    def test_input_chunks_not_mutated(self, optimizer, make_chunks):
        chunks = make_chunks(["a" * 30, "b" * 30])
        optimizer.optimize(chunks)
        assert [c.content for c in chunks] == ["a" * 30, "b" * 30]

    def test_invalid_bounds(self):
        with pytest.raises(ValueError):
            ChunkOptimizer(min_length=100, max_length=50)
        with pytest.raises(ValueError):
            ChunkOptimizer(min_length=0)
