"""Splitter module: breaks normalized text into ordered, size-bounded chunks."""

from .base import BaseSplitter, SplitResult
from .providers.recursive_character import RecursiveCharacterSplitter

__all__ = ["BaseSplitter", "RecursiveCharacterSplitter", "SplitResult"]
