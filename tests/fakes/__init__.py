"""Exports for test fakes."""

from .embedder import FixedEmbedder
from .filesystem import InMemoryFileSystem

__all__ = [
    "FixedEmbedder",
    "InMemoryFileSystem",
]
