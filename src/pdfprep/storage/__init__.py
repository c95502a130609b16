from .artifacts import ArtifactStore, source_stem

__all__ = ["ArtifactStore", "source_stem"]
