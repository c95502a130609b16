from .recursive_character import RecursiveCharacterSplitter

__all__ = ["RecursiveCharacterSplitter"]
