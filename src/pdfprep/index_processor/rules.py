"""Versioned rule tables used by the text normalizer and the content filter.

Rules are data: each entry names a compiled pattern, what to do with a match
(drop the whole chunk, or replace the matched span) and the replacement.
Tables are ordered; rules apply in sequence.
"""

import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Iterator


class RuleAction(StrEnum):
    DROP = "drop"        # Whole content matches: discard it
    REPLACE = "replace"  # Substitute every match with `replacement`


@dataclass(frozen=True)
class CleaningRule:
    """A single pattern rule.

    Attributes:
        name: Stable identifier, used in logs and tests
        pattern: Compiled regular expression
        action: DROP or REPLACE
        replacement: Substitution text for REPLACE rules
        category: Free-form grouping (publisher, copyright, page, ...)
    """

    name: str
    pattern: re.Pattern
    action: RuleAction = RuleAction.REPLACE
    replacement: str = ""
    category: str = ""

    def matches(self, text: str) -> bool:
        """DROP rules match the whole (stripped) content; REPLACE rules anywhere."""
        if self.action is RuleAction.DROP:
            return self.pattern.fullmatch(text) is not None
        return self.pattern.search(text) is not None

    def apply(self, text: str) -> tuple[str, int]:
        """Apply a REPLACE rule, returning the new text and the match count."""
        if self.action is not RuleAction.REPLACE:
            raise ValueError(f"Rule '{self.name}' is not a replace rule")
        return self.pattern.subn(self.replacement, text)


@dataclass(frozen=True)
class RuleTable:
    name: str
    version: str
    rules: tuple[CleaningRule, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[CleaningRule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def get(self, name: str) -> CleaningRule:
        for rule in self.rules:
            if rule.name == name:
                return rule
        raise KeyError(name)

    def by_category(self, category: str) -> tuple[CleaningRule, ...]:
        return tuple(r for r in self.rules if r.category == category)


def _line(pattern: str, flags: int = 0) -> re.Pattern:
    return re.compile(pattern, re.MULTILINE | flags)


# Line-anchored removal rules. The length lookaheads keep them from eating
# long body lines that merely mention a publisher or a page.
NORMALIZER_RULES = RuleTable(
    name="normalizer",
    version="2",
    rules=(
        CleaningRule(
            "publisher_cn",
            _line(r"^(?=[^\n]{0,60}$)[^\n]*出版社[^\n]*$"),
            category="publisher",
        ),
        CleaningRule(
            "publisher_en",
            _line(r"^(?=[^\n]{0,80}$)[^\n]*\b(?:Publishing|Publishers?|Press)\b[^\n]*$"),
            category="publisher",
        ),
        CleaningRule(
            "copyright_en",
            _line(r"^(?=[^\n]{0,120}$)[ \t]*(?:Copyright|©|\(c\))[^\n]*\d{4}[^\n]*$", re.IGNORECASE),
            category="copyright",
        ),
        CleaningRule(
            "copyright_cn",
            _line(r"^[ \t]*版权所有[^\n]*$"),
            category="copyright",
        ),
        CleaningRule(
            "author_cn",
            _line(r"^[ \t]*(?:作者|编著|主编|编者|责任编辑)[ \t]*[：:][ \t]*[\u4e00-\u9fa5A-Za-z·、 \t]+$"),
            category="author",
        ),
        CleaningRule(
            "author_en",
            _line(r"^[ \t]*(?:Authors?|Editors?)[ \t]*[：:][ \t]*[A-Za-z.,& \t]+$", re.IGNORECASE),
            category="author",
        ),
        CleaningRule(
            "author_by",
            _line(r"^[ \t]*By[ \t]+[A-Z][A-Za-z.]*(?:[ \t]+[A-Z][A-Za-z.]*){0,4}[ \t]*$"),
            category="author",
        ),
        CleaningRule(
            "page_cn",
            _line(r"^[ \t]*第[ \t]*\d+[ \t]*页[ \t]*$"),
            category="page",
        ),
        CleaningRule(
            "page_en",
            _line(r"^[ \t]*Page[ \t]*\d+(?:[ \t]*(?:of|/)[ \t]*\d+)?[ \t]*$", re.IGNORECASE),
            category="page",
        ),
        CleaningRule(
            "page_fraction",
            _line(r"^[ \t]*\d+[ \t]*/[ \t]*\d+[ \t]*$"),
            category="page",
        ),
        CleaningRule(
            "page_dashed",
            _line(r"^[ \t]*[-–—][ \t]*\d+[ \t]*[-–—][ \t]*$"),
            category="page",
        ),
        CleaningRule(
            "page_bare",
            _line(r"^[ \t]*\d+[ \t]*$"),
            category="page",
        ),
    ),
)


_SHARE_COPYRIGHT = (
    r"本公众账号分享的资源版权属于原出版机构，本资源为电子载体，传播分享仅.*?限于家庭使用"
    r".*?不得以任何理由在商业行为.*?中使用.*?若喜欢此资源，建议购买实体产品"
)
_PLATFORM_ATTRIBUTION = (
    r"返回搜狐，查看更多.*?声明：该文观点仅代表作者本人，搜狐号系信息发布平台，"
    r"搜狐仅提供信息存储空间服务"
)
_PROMOTION = r"关注微信公众号.{0,40}?获取更多学习资料[！!]"
_COUNT = r"[（(][ \t]*\d+[ \t]*[)）]"


# Whole-content rules. Content is stripped before matching.
FULL_REMOVAL_RULES = RuleTable(
    name="full_removal",
    version="3",
    rules=(
        CleaningRule(
            "share_copyright_block",
            re.compile(_SHARE_COPYRIGHT + r"[。.！!\s]*", re.DOTALL),
            action=RuleAction.DROP,
            category="copyright",
        ),
        CleaningRule(
            "platform_attribution_block",
            re.compile(_PLATFORM_ATTRIBUTION + r"[。.\s]*", re.DOTALL),
            action=RuleAction.DROP,
            category="platform",
        ),
        CleaningRule(
            "read_count",
            re.compile(r"阅读\s*" + _COUNT),
            action=RuleAction.DROP,
            category="engagement",
        ),
        CleaningRule(
            "like_count",
            re.compile(r"点赞\s*" + _COUNT),
            action=RuleAction.DROP,
            category="engagement",
        ),
        CleaningRule(
            "repeated_promotion",
            re.compile(r"(?:" + _PROMOTION + r"\s*){2,}", re.DOTALL),
            action=RuleAction.DROP,
            category="promotion",
        ),
        CleaningRule(
            "repeated_copyright",
            re.compile(r"(?:[^\n]{0,30}?版权所有\s*){2,}"),
            action=RuleAction.DROP,
            category="copyright",
        ),
        CleaningRule(
            "whitespace_only",
            re.compile(r"[\s\u3000]*"),
            action=RuleAction.DROP,
            category="empty",
        ),
        CleaningRule(
            "punctuation_only",
            re.compile(r"[.。，,；;：:!！?？、…·\s\u3000]*"),
            action=RuleAction.DROP,
            category="empty",
        ),
        CleaningRule(
            "dashes_only",
            re.compile(r"[－—–\-_=\s\u3000]*"),
            action=RuleAction.DROP,
            category="empty",
        ),
    ),
)


# Span rules. Order matters: repeated blocks go before single occurrences.
PARTIAL_CLEANING_RULES = RuleTable(
    name="partial_cleaning",
    version="3",
    rules=(
        CleaningRule(
            "repeated_promotion",
            re.compile(r"(?:" + _PROMOTION + r"\s*){2,}", re.DOTALL),
            category="promotion",
        ),
        CleaningRule(
            "repeated_copyright_line",
            re.compile(r"([^\s，。,.]{0,20}版权所有)(?:\s*\1)+"),
            category="copyright",
        ),
        CleaningRule(
            "share_copyright_block",
            re.compile(_SHARE_COPYRIGHT + r"[。.]?", re.DOTALL),
            category="copyright",
        ),
        CleaningRule(
            "platform_attribution_block",
            re.compile(_PLATFORM_ATTRIBUTION + r"[。.]?", re.DOTALL),
            category="platform",
        ),
        CleaningRule(
            "engagement_counts",
            re.compile(r"(?:阅读|点赞)\s*" + _COUNT),
            category="engagement",
        ),
    ),
)


# Phrases whose repetition marks a chunk as boilerplate.
NOISE_PHRASES: tuple[str, ...] = (
    "关注微信公众号",
    "获取更多学习资料",
    "版权所有",
)


# Domain keywords that override the length heuristics of the content filter.
DOMAIN_KEYWORDS: tuple[str, ...] = (
    "课本", "教材", "学习", "练习", "作业", "考试", "题目", "答案",
    "数学", "语文", "英语", "物理", "化学", "生物", "历史", "地理",
    "政治", "科学", "音乐", "美术", "体育", "道德", "法治",
    "年级", "单元", "章节", "课时", "知识", "技能", "能力",
    "教学", "学生", "老师", "教师", "课堂", "教育", "目录",
    "第一课", "第二课", "汉语拼音", "识字", "课文",
)
