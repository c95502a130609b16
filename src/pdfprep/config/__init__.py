"""Configuration system for pdfprep."""

from .models import PipelineConfig
from .settings import Settings, load_settings

__all__ = ["PipelineConfig", "Settings", "load_settings"]
