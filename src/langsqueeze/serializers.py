"""JSON summaries of rankings for embedding hosts.

Each entry has the shape {"language_name": str, "likelihood": float},
ordered highest likelihood first.
"""

from __future__ import annotations

import json
from typing import Any, Optional, Sequence

from .engine import Detector, Sample
from .ranking import ScoredCandidate


def summarize(ranking: Sequence[ScoredCandidate]) -> list[dict[str, Any]]:
    """Convert a ranking into JSON-ready dicts."""
    return [
        {"language_name": candidate.language_id, "likelihood": candidate.confidence}
        for candidate in ranking
    ]


def detect_summary(
    detector: Detector, sample: Sample, top_n: Optional[int] = None
) -> list[dict[str, Any]]:
    """Rank ``sample`` and summarize it; all candidates when top_n is None."""
    ranking = detector.score(sample) if top_n is None else detector.rank(sample, top_n)
    return summarize(ranking)


def to_json(
    detector: Detector, sample: Sample, top_n: Optional[int] = None, indent: Optional[int] = None
) -> str:
    """Render detect_summary() as a JSON string."""
    return json.dumps(detect_summary(detector, sample, top_n), ensure_ascii=False, indent=indent)
