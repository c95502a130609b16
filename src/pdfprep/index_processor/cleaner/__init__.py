from .cleaner import NormalizationResult, TextNormalizer, collapse_whitespace, garbled_ratio

__all__ = ["NormalizationResult", "TextNormalizer", "collapse_whitespace", "garbled_ratio"]
