"""Tests for RecursiveCharacterSplitter."""

import pytest

from pdfprep.index_processor.splitter import RecursiveCharacterSplitter


class TestConstruction:

    @pytest.mark.parametrize("size,overlap", [(0, 0), (-5, 0), (100, 100), (100, 150), (100, -1)])
    def test_invalid_parameters(self, size, overlap):
        with pytest.raises(ValueError):
            RecursiveCharacterSplitter(chunk_size=size, chunk_overlap=overlap)

    def test_defaults(self):
        splitter = RecursiveCharacterSplitter()
        assert splitter.chunk_size == 2000
        assert splitter.chunk_overlap == 400
        assert splitter.separators[:3] == ["\n\n", "\n", "。"]
        assert splitter.separators[-1] == ""


class TestSplitText:

    def test_empty_text(self):
        assert RecursiveCharacterSplitter(chunk_size=50, chunk_overlap=0).split_text("   ") == []

    def test_short_text_single_chunk(self):
        splitter = RecursiveCharacterSplitter(chunk_size=100, chunk_overlap=10)
        assert splitter.split_text("一句话。") == ["一句话。"]

    def test_chunks_respect_size(self, lesson_text):
        splitter = RecursiveCharacterSplitter(chunk_size=60, chunk_overlap=10)
        chunks = splitter.split_text(lesson_text)
        assert len(chunks) > 1
        assert all(0 < len(c) <= 60 for c in chunks)

    def test_prefers_cjk_sentence_boundaries(self):
        text = "这是第一句话。这是第二句话。这是第三句话。"
        splitter = RecursiveCharacterSplitter(chunk_size=10, chunk_overlap=0)
        assert splitter.split_text(text) == ["这是第一句话。", "这是第二句话。", "这是第三句话。"]

    def test_consecutive_chunks_overlap(self):
        text = "alpha beta gamma delta epsilon zeta eta theta iota kappa"
        splitter = RecursiveCharacterSplitter(chunk_size=20, chunk_overlap=8)
        chunks = splitter.split_text(text)
        assert len(chunks) > 2
        for previous, current in zip(chunks, chunks[1:]):
            assert previous.split()[-1] == current.split()[0]

    def test_unbroken_text_hard_sliced(self):
        splitter = RecursiveCharacterSplitter(chunk_size=10, chunk_overlap=2)
        chunks = splitter.split_text("x" * 35)
        assert all(len(c) <= 10 for c in chunks)
        assert "".join(c[2:] if i else c for i, c in enumerate(chunks)) == "x" * 35


class TestSplitCap:

    def test_max_chunks_truncates_with_flag(self):
        splitter = RecursiveCharacterSplitter(chunk_size=10, chunk_overlap=0)
        text = "。".join(f"第{i}句话" for i in range(20))
        result = splitter.split(text, max_chunks=5)
        assert result.truncated is True
        assert len(result.chunks) == 5
        assert result.original_count > 5
        assert result.chunks == splitter.split_text(text)[:5]

    def test_under_cap_not_truncated(self):
        splitter = RecursiveCharacterSplitter(chunk_size=10, chunk_overlap=0)
        result = splitter.split("短句。", max_chunks=5)
        assert result.truncated is False
        assert result.original_count == 1
