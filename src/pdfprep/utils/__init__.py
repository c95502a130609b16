"""Utility functions for pdfprep."""

from .performance import Timing, timed, timer

__all__ = ["Timing", "timed", "timer"]
