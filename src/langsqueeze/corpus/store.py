"""ReferenceCorpusStore: the immutable set of per-language reference documents.

Usage:
    store = load_store(Path("languages_udhr"), sparsity=30, desired_language="english")
    store.mean_compressed_length

Selection rules for a directory of reference files (enumerated in sorted
file-name order, subdirectories ignored), for the file at index i:
    1. i % sparsity == 0, or
    2. the file is the desired language, or
    3. the file is named in also_include (comma-separated).

A file matches a name when the name equals either its file name or its full
path. Unreadable and empty files are logged and skipped.
"""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, Iterator, Mapping, Optional, Union

import numpy as np

from ..cache import LengthCache
from ..exceptions import InvalidPathError, NoReferenceFilesError, ReferenceLoadError
from ..logging_config import get_logger
from ..math.compression import Compressor
from .models import ReferenceDocument

logger = get_logger(__name__)

# CPU count capped at 8, same as the scorer pool
_DEFAULT_WORKERS = min(os.cpu_count() or 4, 8)

# Below this many files, parallel overhead is not worth it
_PARALLEL_MIN_FILES = 8


class ReferenceCorpusStore:
    """Read-only mapping of language id to ReferenceDocument.

    Attributes:
        compressor: The codec every stored length was computed with. Samples
            must be scored with the same compressor.
        mean_compressed_length: Arithmetic mean of the documents'
            compressed lengths, fixed at construction.
    """

    def __init__(self, documents: Iterable[ReferenceDocument], compressor: Compressor):
        self._documents: dict[str, ReferenceDocument] = {}
        for document in documents:
            if document.language_id in self._documents:
                raise ValueError(f"Duplicate language id: {document.language_id}")
            self._documents[document.language_id] = document

        if not self._documents:
            raise NoReferenceFilesError()

        self.compressor = compressor
        self.mean_compressed_length = float(
            np.mean([doc.compressed_length for doc in self._documents.values()])
        )

    @classmethod
    def from_mapping(
        cls,
        references: Mapping[str, Union[bytes, str]],
        compressor: Optional[Compressor] = None,
        cache: Optional[LengthCache] = None,
    ) -> ReferenceCorpusStore:
        """Build a store from in-memory references, e.g. supplied by an embedding host.

        Text values are encoded as UTF-8. Empty references are skipped.

        Raises:
            NoReferenceFilesError: If no non-empty reference remains.
        """
        compressor = compressor or Compressor()
        documents = []
        for language_id, data in references.items():
            content = data.encode("utf-8") if isinstance(data, str) else bytes(data)
            if not content:
                logger.warning(f"Skipping empty reference: {language_id}")
                continue
            documents.append(_make_document(language_id, content, compressor, cache))
        return cls(documents, compressor)

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[ReferenceDocument]:
        return iter(self._documents.values())

    def __contains__(self, language_id: object) -> bool:
        return language_id in self._documents

    def __getitem__(self, language_id: str) -> ReferenceDocument:
        return self._documents[language_id]

    def get(self, language_id: str) -> Optional[ReferenceDocument]:
        return self._documents.get(language_id)

    @property
    def documents(self) -> list[ReferenceDocument]:
        """Documents in insertion order."""
        return list(self._documents.values())

    @property
    def language_ids(self) -> list[str]:
        return list(self._documents)

    def __repr__(self) -> str:
        return (
            f"ReferenceCorpusStore(documents={len(self)}, "
            f"mean_compressed_length={self.mean_compressed_length:.1f}, "
            f"compressor={self.compressor!r})"
        )


def parse_also_include(also_include: Optional[str]) -> list[str]:
    """Split a comma-separated name list, dropping blanks."""
    if not also_include:
        return []
    return [name.strip() for name in also_include.split(",") if name.strip()]


def list_reference_files(directory: Path) -> list[Path]:
    """Regular files directly under ``directory``, sorted by name."""
    if not directory.is_dir():
        raise InvalidPathError(directory, "not a directory")
    return sorted((p for p in directory.iterdir() if p.is_file()), key=lambda p: p.name)


def select_reference_files(
    files: list[Path],
    sparsity: int = 1,
    desired_language: Optional[str] = None,
    also_include: Optional[str] = None,
) -> list[Path]:
    """Apply the sparsity stride and the two inclusion overrides.

    Args:
        files: Candidate files in enumeration order
        sparsity: Keep every sparsity-th file (1 keeps all)
        desired_language: File name or path that is always kept
        also_include: Comma-separated file names or paths that are always kept

    Returns:
        Selected files, in enumeration order
    """
    if sparsity < 1:
        raise ValueError("sparsity must be at least 1")

    pinned = set(parse_also_include(also_include))
    if desired_language:
        pinned.add(desired_language)

    return [
        path
        for index, path in enumerate(files)
        if index % sparsity == 0 or path.name in pinned or str(path) in pinned
    ]


def load_store(
    directory: Union[str, Path],
    sparsity: int = 1,
    desired_language: Optional[str] = None,
    also_include: Optional[str] = None,
    compressor: Optional[Compressor] = None,
    workers: Optional[int] = None,
    cache: Optional[LengthCache] = None,
) -> ReferenceCorpusStore:
    """Load a reference directory into a store.

    Each selected file's compressed length is computed eagerly, in parallel
    for larger selections. Language ids are file names.

    Args:
        directory: Directory whose direct children are reference files
        sparsity: Subsampling stride (1 = exhaustive)
        desired_language: Language never dropped by subsampling
        also_include: Comma-separated names never dropped by subsampling
        compressor: Codec for all lengths (default zlib level 9)
        workers: Thread pool size (default: CPU count, max 8)
        cache: Optional persistent length cache

    Returns:
        A frozen ReferenceCorpusStore

    Raises:
        InvalidPathError: If ``directory`` is not a directory.
        NoReferenceFilesError: If no usable reference remains.
    """
    directory = Path(directory)
    compressor = compressor or Compressor()

    files = list_reference_files(directory)
    selected = select_reference_files(files, sparsity, desired_language, also_include)
    logger.debug(f"Selected {len(selected)}/{len(files)} reference files from {directory}")

    def _load(path: Path) -> Optional[ReferenceDocument]:
        try:
            return load_reference(path, compressor, cache)
        except ReferenceLoadError as e:
            logger.warning(f"Skipping reference: {e}")
            return None

    max_workers = workers or _DEFAULT_WORKERS
    if max_workers == 1 or len(selected) < _PARALLEL_MIN_FILES:
        loaded = [_load(path) for path in selected]
    else:
        # map() keeps enumeration order, which is the ranking tie-break order
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            loaded = list(executor.map(_load, selected))

    documents = [doc for doc in loaded if doc is not None]
    if not documents:
        raise NoReferenceFilesError(directory, considered=len(selected))

    store = ReferenceCorpusStore(documents, compressor)
    logger.info(
        f"Loaded {len(store)} reference documents "
        f"({len(selected) - len(store)} skipped, "
        f"mean compressed length {store.mean_compressed_length:.1f})"
    )
    return store


def load_reference(
    path: Path, compressor: Compressor, cache: Optional[LengthCache] = None
) -> ReferenceDocument:
    """Read one reference file and compute its compressed length.

    Raises:
        ReferenceLoadError: If the file cannot be read or is empty.
    """
    try:
        content = path.read_bytes()
    except OSError as e:
        raise ReferenceLoadError(path, str(e)) from e
    if not content:
        raise ReferenceLoadError(path, "empty file")
    return _make_document(path.name, content, compressor, cache, path=path)


def _make_document(
    language_id: str,
    content: bytes,
    compressor: Compressor,
    cache: Optional[LengthCache],
    path: Optional[Path] = None,
) -> ReferenceDocument:
    if cache is not None:
        length = cache.compressed_length(content, compressor)
    else:
        length = compressor.compressed_length(content)
    return ReferenceDocument(
        language_id=language_id, content=content, compressed_length=length, path=path
    )
