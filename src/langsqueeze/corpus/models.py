"""Reference corpus data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class ReferenceDocument:
    """One language's reference text and its standalone compressed length.

    ``compressed_length`` is computed once by the loader with the store's
    compressor and never recomputed; the content is immutable.
    """

    language_id: str
    content: bytes = field(repr=False)
    compressed_length: int
    path: Optional[Path] = None
