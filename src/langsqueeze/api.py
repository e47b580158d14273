"""Clean public API for langsqueeze.

Usage:
    from langsqueeze import detect_language

    ranking = detect_language("Everyone has the right to life.", "references/")
    ranking[0].language_id
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional, Union

from .config import DetectorConfig
from .corpus.store import ReferenceCorpusStore, load_store
from .engine import Detector, Sample
from .math.compression import Compressor
from .ranking import ScoredCandidate

References = Union[str, Path, Mapping[str, Union[bytes, str]]]


def build_store(
    references: References, config: Optional[DetectorConfig] = None
) -> ReferenceCorpusStore:
    """Load every reference (sparsity 1 unless configured) from a directory or mapping."""
    config = config or DetectorConfig()
    compressor = Compressor(config.algorithm, config.level)
    if isinstance(references, Mapping):
        return ReferenceCorpusStore.from_mapping(references, compressor=compressor)
    return load_store(
        references,
        sparsity=config.resolved_sparsity(interactive=True),
        also_include=config.also_include,
        compressor=compressor,
        workers=config.workers,
    )


def detect_language(
    text: Sample,
    references: References,
    top_n: int = 5,
    config: Optional[DetectorConfig] = None,
) -> list[ScoredCandidate]:
    """One-shot ranking of ``text`` against ``references``.

    Args:
        text: Sample to identify (str is encoded as UTF-8)
        references: Directory of reference files, or {language_id: text}
        top_n: Number of candidates to return
        config: Optional configuration (codec, workers, ...)

    Returns:
        Up to top_n ScoredCandidates, highest confidence first

    Raises:
        EmptyInputError: If ``text`` is empty.
        NoReferenceFilesError: If no usable reference is found.
    """
    store = build_store(references, config)
    workers = config.workers if config is not None else None
    with Detector(store, workers=workers) as detector:
        return detector.rank(text, top_n)
