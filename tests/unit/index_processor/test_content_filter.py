"""Tests for the ContentFilter and its quality heuristics."""

import pytest

from pdfprep.index_processor.filter import (
    ContentFilter,
    has_domain_keyword,
    noise_phrase_dominates,
    repetition_ratio,
    score_quality,
)

MATH_PASSAGE = "这是一段关于数学学习的重要内容，请同学们认真完成课后的练习题目。"


class TestQualityHeuristics:

    def test_keyword_scores_three(self):
        assert score_quality(MATH_PASSAGE) == 3

    def test_short_without_keyword_scores_zero(self):
        assert score_quality("今天天气很好啊") == 0

    def test_low_distinct_characters_scores_zero_even_with_keyword(self):
        assert score_quality("学习" * 20) == 0

    @pytest.mark.parametrize("text,expected", [
        ("alpha beta " * 10, 0),
        ("alpha beta gamma alpha beta gamma alpha beta gamma alpha", 1),
        ("The river flows quietly past the old mill every spring morning.", 2),
    ])
    def test_repetition_bands(self, text, expected):
        assert score_quality(text) == expected

    def test_repetition_ratio(self):
        assert repetition_ratio("a a a a") == pytest.approx(0.75)
        assert repetition_ratio("") == 0.0

    def test_keyword_lookup(self):
        assert has_domain_keyword("三年级语文")
        assert not has_domain_keyword("天气预报", keywords=("语文",))

    def test_noise_phrase_needs_repeats_and_share(self):
        assert noise_phrase_dominates("关注微信公众号" * 5 + "abc")
        # Enough share but only three repeats
        assert not noise_phrase_dominates("关注微信公众号" * 3)
        # Enough repeats but a small share of a long text
        assert not noise_phrase_dominates("关注微信公众号" * 4 + "正" * 100)


class TestContentFilter:

    @pytest.fixture
    def content_filter(self):
        return ContentFilter()

    def test_read_count_chunk_dropped(self, content_filter, make_chunks):
        result = content_filter.filter(make_chunks(["阅读(123)"]))
        assert result.chunks == []
        assert result.removed == 1

    def test_removal_reasons(self, content_filter):
        assert content_filter.removal_reason("ab") == "too short"
        assert content_filter.removal_reason("点赞 (9)") == "like_count"
        assert content_filter.removal_reason("。。。。，，，") == "punctuation_only"
        assert content_filter.removal_reason("关注微信公众号" * 5 + "abc") == "noise phrase"
        assert content_filter.removal_reason(MATH_PASSAGE) is None

    def test_repeated_promotion_block_dropped(self, content_filter, make_chunks):
        promo = "关注微信公众号小学资源站，获取更多学习资料！" * 2
        result = content_filter.filter(make_chunks([promo]))
        assert result.removed == 1

    def test_embedded_noise_excised(self, content_filter, make_chunks):
        text = "这是一段关于数学学习的重要内容，阅读(12)  请认真完成练习题目。"
        result = content_filter.filter(make_chunks([text]))

        assert len(result.chunks) == 1
        chunk = result.chunks[0]
        assert chunk.content == "这是一段关于数学学习的重要内容， 请认真完成练习题目。"
        assert chunk.provenance.cleaned is True
        assert chunk.provenance.quality_score == 3
        assert result.cleaned == 1

    def test_short_chunk_with_keyword_preserved_verbatim(self, content_filter, make_chunks):
        result = content_filter.filter(make_chunks(["第一课  汉语拼音"]))
        assert len(result.chunks) == 1
        chunk = result.chunks[0]
        assert chunk.content == "第一课  汉语拼音"
        assert chunk.provenance.content_preserved is True
        assert result.preserved == 1

    def test_short_chunk_without_keyword_dropped(self, content_filter, make_chunks):
        result = content_filter.filter(make_chunks(["今天天气很好啊"]))
        assert result.chunks == []
        assert result.removed == 1

    def test_single_glyph_noise_dropped_despite_keyword(self, content_filter, make_chunks):
        result = content_filter.filter(make_chunks(["学习学习学习学习学习学习"]))
        assert result.removed == 1

    def test_counts_and_reindexing(self, content_filter, make_chunks):
        contents = [
            MATH_PASSAGE,
            "阅读(5)",
            "The river flows quietly past the old mill every spring morning.",
            "  ",
            "第一课 汉语拼音",
            "alpha beta " * 10,
        ]
        result = content_filter.filter(make_chunks(contents))

        assert result.original == 6
        assert result.removed + len(result.chunks) == result.original
        assert [c.index for c in result.chunks] == [0, 1, 2]
        assert result.as_stats()["removedChunks"] == 3

    def test_thresholds_are_configurable(self, make_chunks):
        lenient = ContentFilter(min_quality_length=5, keywords=())
        result = lenient.filter(make_chunks(["今天天气很好啊"]))
        assert len(result.chunks) == 1
        assert result.chunks[0].provenance.quality_score == 2
