"""Compression primitives for language identification."""

from .compression import SUPPORTED_ALGORITHMS, Compressor

__all__ = [
    "Compressor",
    "SUPPORTED_ALGORITHMS",
]
