"""Confidence normalization and ranking of candidate languages.

Given raw ratios r_i for one sample against every reference:

    worst     = max(r_i)
    adjusted  = (1 - r_i) / (1 - worst)
    length    = C(doc_i) / mean(C(doc))
    confidence_i = adjusted * length

Rescaling by the worst match makes confidences comparable across reference
sets. The length factor suppresses the advantage larger references get from
their bigger dictionary window.

Edge Cases:
    - 1 - worst == 0: every confidence is 0.0 (all references tie)
    - Ties keep the store's insertion order
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .corpus.models import ReferenceDocument


@dataclass(frozen=True)
class ScoredCandidate:
    """One reference language scored against one sample.

    Attributes:
        language_id: Id of the reference document
        raw_ratio: Compression ratio, lower = more similar
        confidence: Relative score, higher = more confident; only meaningful
            in rank order
    """

    language_id: str
    raw_ratio: float
    confidence: float

    @property
    def display_name(self) -> str:
        return self.language_id.rstrip("/").split("/")[-1]


def compute_confidences(
    ratios: Sequence[float],
    compressed_lengths: Sequence[int],
    mean_compressed_length: float,
) -> np.ndarray:
    """Convert raw ratios into length-bias-corrected confidences.

    Args:
        ratios: Raw ratios, one per reference
        compressed_lengths: Standalone compressed length of each reference
        mean_compressed_length: Mean of all references' compressed lengths

    Returns:
        Confidence array aligned with ``ratios``
    """
    r = np.asarray(ratios, dtype=float)
    if r.size == 0:
        return r

    ceiling_complement = 1.0 - r.max()
    if ceiling_complement == 0.0:
        return np.zeros_like(r)

    adjusted = (1.0 - r) / ceiling_complement
    length_ratio = np.asarray(compressed_lengths, dtype=float) / mean_compressed_length
    return adjusted * length_ratio


def rank_candidates(
    ratios: Sequence[float],
    documents: Sequence[ReferenceDocument],
    mean_compressed_length: float,
) -> list[ScoredCandidate]:
    """Score and sort candidates, highest confidence first.

    Args:
        ratios: Raw ratios aligned with ``documents``
        documents: Reference documents in store order
        mean_compressed_length: The store's mean compressed length

    Returns:
        ScoredCandidates in non-increasing confidence order; equal
        confidences keep document order.
    """
    if len(ratios) != len(documents):
        raise ValueError(
            f"Got {len(ratios)} ratios for {len(documents)} reference documents"
        )

    confidences = compute_confidences(
        ratios, [doc.compressed_length for doc in documents], mean_compressed_length
    )
    # Stable sort on negated values = descending with insertion-order ties
    order = np.argsort(-confidences, kind="stable")

    return [
        ScoredCandidate(
            language_id=documents[i].language_id,
            raw_ratio=float(ratios[i]),
            confidence=float(confidences[i]),
        )
        for i in order
    ]
