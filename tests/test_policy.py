"""Tests for accept/reject policies."""

import math

import pytest

from langsqueeze.config import DetectorConfig
from langsqueeze.exceptions import InvalidConfigError
from langsqueeze.policy import AcceptPolicy, confidence_margin
from langsqueeze.ranking import ScoredCandidate


def _ranking(*pairs):
    return [ScoredCandidate(language_id=l, raw_ratio=0.9, confidence=c) for l, c in pairs]


class TestThresholdPolicy:
    """Threshold policy: desired within top_n and above min_confidence."""

    def test_accepts_within_top_n(self):
        policy = AcceptPolicy(top_n=2, min_confidence=1.0)
        assert policy.decide(_ranking(("fr", 4.0), ("en", 3.0), ("es", 1.0)), "en")

    def test_rejects_outside_top_n(self):
        policy = AcceptPolicy(top_n=1, min_confidence=1.0)
        assert not policy.decide(_ranking(("fr", 4.0), ("en", 3.0)), "en")

    def test_rejects_below_min_confidence(self):
        policy = AcceptPolicy(top_n=3, min_confidence=3.0)
        assert not policy.decide(_ranking(("fr", 4.0), ("en", 3.0)), "en")

    def test_unknown_language_rejected(self):
        assert not AcceptPolicy(min_confidence=0.0).decide(_ranking(("fr", 4.0)), "de")

    def test_empty_ranking_rejected(self):
        assert not AcceptPolicy().decide([], "en")


class TestRatioPolicy:
    """Ratio policy: best must be desired and clear the runner-up."""

    def test_accepts_clear_winner(self):
        policy = AcceptPolicy(min_confidence=1.0, confidence_ratio=1.5)
        assert policy.decide(_ranking(("en", 4.0), ("fr", 2.0)), "en")

    def test_rejects_ambiguous(self):
        policy = AcceptPolicy(min_confidence=1.0, confidence_ratio=1.5)
        assert not policy.decide(_ranking(("en", 4.0), ("fr", 3.0)), "en")

    def test_rejects_equal_confidences(self):
        for ratio in (1.0, 1.2, 5.0):
            policy = AcceptPolicy(min_confidence=0.0, confidence_ratio=ratio)
            assert not policy.decide(_ranking(("en", 2.0), ("en2", 2.0)), "en")

    def test_rejects_when_best_is_other_language(self):
        policy = AcceptPolicy(min_confidence=0.0, confidence_ratio=1.1)
        assert not policy.decide(_ranking(("fr", 4.0), ("en", 1.0)), "en")

    def test_rejects_below_min_confidence(self):
        policy = AcceptPolicy(min_confidence=5.0, confidence_ratio=1.1)
        assert not policy.decide(_ranking(("en", 4.0), ("fr", 1.0)), "en")

    def test_single_candidate_has_no_ambiguity(self):
        policy = AcceptPolicy(min_confidence=1.0, confidence_ratio=2.0)
        assert policy.decide(_ranking(("en", 4.0)), "en")

    def test_ignores_top_n(self):
        policy = AcceptPolicy(top_n=1, min_confidence=0.0, confidence_ratio=1.1)
        assert policy.decide(_ranking(("en", 4.0), ("fr", 1.0)), "en")


class TestConfidenceMargin:
    def test_plain_ratio(self):
        best, second = _ranking(("en", 3.0), ("fr", 2.0))
        assert confidence_margin(best, second) == 1.5

    def test_missing_runner_up(self):
        (best,) = _ranking(("en", 3.0))
        assert confidence_margin(best, None) == math.inf

    def test_zero_runner_up(self):
        best, second = _ranking(("en", 3.0), ("fr", 0.0))
        assert confidence_margin(best, second) == math.inf
        best, second = _ranking(("en", 0.0), ("fr", 0.0))
        assert confidence_margin(best, second) == 1.0


class TestAcceptPolicyConfig:
    def test_from_config(self):
        config = DetectorConfig(top_n=3, min_confidence=1.5, confidence_ratio=1.2)
        assert AcceptPolicy.from_config(config) == AcceptPolicy(3, 1.5, 1.2)

    @pytest.mark.parametrize("kwargs", [{"top_n": 0}, {"confidence_ratio": 0.0}])
    def test_invalid(self, kwargs):
        with pytest.raises(InvalidConfigError):
            AcceptPolicy(**kwargs)
