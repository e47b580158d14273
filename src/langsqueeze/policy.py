"""Accept/reject policies applied to one sample's ranking.

Two mutually exclusive policies:

    Ratio policy (confidence_ratio set):
        accept iff best is the desired language
               and best.confidence / second.confidence > confidence_ratio
               and best.confidence > min_confidence

    Threshold policy (confidence_ratio unset):
        accept iff the desired language is within the top_n candidates
               and its confidence > min_confidence

Both are pure functions of the ranking; no state carries between samples.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence

from .exceptions import InvalidConfigError
from .ranking import ScoredCandidate

if TYPE_CHECKING:
    from .config import DetectorConfig


@dataclass(frozen=True)
class AcceptPolicy:
    """Decision knobs for filtering samples down to one language."""

    top_n: int = 5
    min_confidence: float = 2.0
    confidence_ratio: Optional[float] = None

    def __post_init__(self) -> None:
        if self.top_n < 1:
            raise InvalidConfigError("top_n", self.top_n, "must be at least 1")
        if self.confidence_ratio is not None and self.confidence_ratio <= 0:
            raise InvalidConfigError("confidence_ratio", self.confidence_ratio, "must be positive")

    @classmethod
    def from_config(cls, config: DetectorConfig) -> AcceptPolicy:
        return cls(
            top_n=config.top_n,
            min_confidence=config.min_confidence,
            confidence_ratio=config.confidence_ratio,
        )

    def decide(self, ranking: Sequence[ScoredCandidate], desired_language: str) -> bool:
        """Apply the policy to a full ranking (highest confidence first)."""
        if not ranking:
            return False
        if self.confidence_ratio is not None:
            return _ratio_decision(
                ranking, desired_language, self.min_confidence, self.confidence_ratio
            )
        return _threshold_decision(ranking, desired_language, self.top_n, self.min_confidence)


def confidence_margin(best: ScoredCandidate, second: Optional[ScoredCandidate]) -> float:
    """Ratio of the best confidence to the runner-up's.

    A missing runner-up cannot be confused with the best, so the margin is
    infinite. A zero runner-up gives an infinite margin for a positive best,
    otherwise 1.0 (a tie).
    """
    if second is None:
        return math.inf
    if second.confidence == 0.0:
        return math.inf if best.confidence > 0.0 else 1.0
    return best.confidence / second.confidence


def _ratio_decision(
    ranking: Sequence[ScoredCandidate],
    desired_language: str,
    min_confidence: float,
    confidence_ratio: float,
) -> bool:
    best = ranking[0]
    second = ranking[1] if len(ranking) > 1 else None
    return (
        best.language_id == desired_language
        and confidence_margin(best, second) > confidence_ratio
        and best.confidence > min_confidence
    )


def _threshold_decision(
    ranking: Sequence[ScoredCandidate],
    desired_language: str,
    top_n: int,
    min_confidence: float,
) -> bool:
    return any(
        candidate.language_id == desired_language and candidate.confidence > min_confidence
        for candidate in ranking[:top_n]
    )
