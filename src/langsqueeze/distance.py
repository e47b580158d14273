"""Compression-ratio distance between a sample and reference documents.

For a sample s and reference document d:
    ratio(s, d) = C(d ++ s) / (C(d) + C(s))

Where C(x) is the compressed length under the store's compressor. Shared
statistical structure lets the concatenation compress below the sum of the
parts, so a lower ratio means stronger affinity. Unrelated languages share
little and stay near 1.

Unlike NCD, the ratio is not clamped: values slightly above 1 are kept so
that the worst reference can serve as a normalization ceiling.
"""

from __future__ import annotations

from concurrent.futures import Executor
from typing import Optional

from .corpus.models import ReferenceDocument
from .corpus.store import ReferenceCorpusStore
from .exceptions import EmptyInputError
from .math.compression import Compressor


def raw_ratio(
    sample: bytes,
    document: ReferenceDocument,
    compressor: Compressor,
    sample_length: Optional[int] = None,
) -> float:
    """Compute the compression ratio of ``sample`` against one reference.

    Args:
        sample: Raw sample bytes
        document: Reference document (its compressed length is reused)
        compressor: Compressor the document's length was computed with
        sample_length: Precomputed C(sample), to avoid recompressing it
            once per reference

    Returns:
        C(document ++ sample) / (C(document) + C(sample)). Lower = more similar.

    Raises:
        EmptyInputError: If both the sample and the document are empty.
    """
    together = compressor.compressed_length_of_concat(document.content, sample)
    if sample_length is None:
        sample_length = compressor.compressed_length(sample)
    return together / (document.compressed_length + sample_length)


def raw_ratios(
    sample: bytes,
    store: ReferenceCorpusStore,
    executor: Optional[Executor] = None,
) -> list[float]:
    """Compute ratios of ``sample`` against every document in the store.

    Args:
        sample: Raw sample bytes, must be non-empty
        store: Reference store; its compressor is used throughout
        executor: Optional pool to fan the per-document work out on

    Returns:
        Ratios aligned with ``store.documents``.

    Raises:
        EmptyInputError: If the sample is empty.
    """
    if not sample:
        raise EmptyInputError("sample is empty")

    compressor = store.compressor
    sample_length = compressor.compressed_length(sample)

    def _ratio(document: ReferenceDocument) -> float:
        return raw_ratio(sample, document, compressor, sample_length)

    if executor is None:
        return [_ratio(document) for document in store]
    return list(executor.map(_ratio, store.documents))
