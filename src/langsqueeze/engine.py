"""Detector: the decision engine surrounding code talks to.

Usage:
    store = load_store(Path("references"), sparsity=1)
    with Detector(store) as detector:
        detector.rank(b"Everyone has the right to life.", top_n=3)
        detector.accept(sample, "english", top_n=5, min_confidence=2.0)

Data flows one way: store -> distance ratios -> confidences -> decision.
Every call builds its ranking from scratch; nothing is cached between
samples, so a Detector may be shared across threads.
"""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from threading import Lock
from typing import Iterable, Iterator, Optional, Union

from .corpus.store import ReferenceCorpusStore
from .distance import raw_ratios
from .exceptions import EmptyInputError
from .logging_config import get_logger
from .policy import AcceptPolicy
from .ranking import ScoredCandidate, rank_candidates

logger = get_logger(__name__)

# CPU count capped at 8 to avoid oversubscribing the codecs
_DEFAULT_WORKERS = min(os.cpu_count() or 4, 8)

# Below this many references, scoring runs sequentially
_PARALLEL_MIN_DOCUMENTS = 16

Sample = Union[bytes, str]


class Detector:
    """Ranks candidate languages for samples and filters streams by language.

    Attributes:
        store: The frozen reference store every sample is scored against
    """

    def __init__(self, store: ReferenceCorpusStore, workers: Optional[int] = None) -> None:
        """Initialize detector.

        Args:
            store: Loaded reference store
            workers: Threads for per-reference scoring. Defaults to CPU count
                (max 8) for stores of 16+ documents, sequential otherwise.
        """
        self.store = store
        if workers is None:
            workers = _DEFAULT_WORKERS if len(store) >= _PARALLEL_MIN_DOCUMENTS else 1
        self._workers = workers
        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = Lock()

    def __enter__(self) -> Detector:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Shut down the scoring pool, if one was started."""
        with self._executor_lock:
            if self._executor is not None:
                self._executor.shutdown(wait=True)
                self._executor = None

    def _get_executor(self) -> Optional[ThreadPoolExecutor]:
        if self._workers <= 1:
            return None
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._workers, thread_name_prefix="langsqueeze"
                )
            return self._executor

    def score(self, sample: Sample) -> list[ScoredCandidate]:
        """Full ranking of every reference for ``sample``, highest confidence first.

        Raises:
            EmptyInputError: If the sample is empty.
        """
        data = _as_bytes(sample)
        ratios = raw_ratios(data, self.store, executor=self._get_executor())
        return rank_candidates(ratios, self.store.documents, self.store.mean_compressed_length)

    def rank(self, sample: Sample, top_n: int = 5) -> list[ScoredCandidate]:
        """Return the ``top_n`` best candidates for ``sample``.

        Raises:
            EmptyInputError: If the sample is empty.
            ValueError: If top_n is less than 1.
        """
        if top_n < 1:
            raise ValueError("top_n must be at least 1")
        return self.score(sample)[:top_n]

    def accept(
        self,
        sample: Sample,
        desired_language: str,
        top_n: int = 5,
        min_confidence: float = 2.0,
        confidence_ratio: Optional[float] = None,
    ) -> bool:
        """Decide whether ``sample`` is in ``desired_language``.

        Uses the ratio policy when ``confidence_ratio`` is given, the
        threshold policy otherwise (see langsqueeze.policy).

        Raises:
            EmptyInputError: If the sample is empty.
        """
        policy = AcceptPolicy(
            top_n=top_n, min_confidence=min_confidence, confidence_ratio=confidence_ratio
        )
        return self.accept_with(sample, desired_language, policy)

    def accept_with(self, sample: Sample, desired_language: str, policy: AcceptPolicy) -> bool:
        """Same as accept(), with the knobs bundled in an AcceptPolicy."""
        return policy.decide(self.score(sample), desired_language)

    def filter_lines(
        self,
        lines: Iterable[bytes],
        desired_language: str,
        policy: AcceptPolicy,
    ) -> Iterator[bytes]:
        """Yield the lines accepted for ``desired_language``, in input order.

        Lines are scored without their trailing line break and yielded
        unchanged. A line that cannot be scored (e.g. an empty line) does
        not pass; it never aborts the stream.
        """
        seen = 0
        kept = 0
        for line in lines:
            seen += 1
            sample = line.rstrip(b"\r\n")
            try:
                accepted = self.accept_with(sample, desired_language, policy)
            except EmptyInputError:
                logger.debug(f"Line {seen}: empty sample rejected")
                accepted = False
            if accepted:
                kept += 1
                yield line
        logger.info(f"Kept {kept}/{seen} lines for {desired_language}")


def _as_bytes(sample: Sample) -> bytes:
    if isinstance(sample, str):
        return sample.encode("utf-8")
    return bytes(sample)
