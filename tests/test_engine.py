"""Tests for the Detector decision engine."""

import pytest

from langsqueeze.corpus.store import ReferenceCorpusStore, load_store
from langsqueeze.engine import Detector
from langsqueeze.exceptions import EmptyInputError, NoReferenceFilesError
from langsqueeze.policy import AcceptPolicy


class TestRank:
    """Test Detector.rank."""

    def test_english_sentence_ranks_english_first(self, detector, english_sample):
        assert detector.rank(english_sample, 3)[0].language_id == "english"

    def test_french_sentence_ranks_french_first(self, detector, french_sample):
        assert detector.rank(french_sample, 3)[0].language_id == "french"

    def test_returns_at_most_top_n(self, detector, english_sample):
        assert len(detector.rank(english_sample, 2)) == 2
        assert len(detector.rank(english_sample, 10)) == 3

    def test_sorted_by_confidence(self, detector, english_sample):
        confidences = [c.confidence for c in detector.rank(english_sample, 3)]
        assert confidences == sorted(confidences, reverse=True)

    def test_idempotent(self, detector, english_sample):
        first = detector.rank(english_sample, 3)
        second = detector.rank(english_sample, 3)
        assert first == second

    def test_str_sample_encoded(self, detector, english_sample):
        assert detector.rank(english_sample.decode("utf-8"), 3) == detector.rank(english_sample, 3)

    def test_empty_sample_raises(self, detector):
        with pytest.raises(EmptyInputError):
            detector.rank(b"", 3)

    def test_invalid_top_n(self, detector, english_sample):
        with pytest.raises(ValueError):
            detector.rank(english_sample, 0)

    def test_worker_count_does_not_change_result(self, store, english_sample):
        with Detector(store, workers=1) as sequential, Detector(store, workers=4) as parallel:
            assert sequential.score(english_sample) == parallel.score(english_sample)


class TestAccept:
    """Test Detector.accept under both policies."""

    def test_threshold_accepts_english(self, detector, english_sample):
        assert detector.accept(english_sample, "english", top_n=1, min_confidence=0.0)

    def test_threshold_rejects_other_language(self, detector, english_sample):
        assert not detector.accept(english_sample, "french", top_n=1, min_confidence=0.0)

    def test_threshold_monotonic_in_min_confidence(self, detector, english_sample):
        floors = [-10.0, 0.0, 0.5, 1.0, 2.0, 4.0, 8.0, 1e9]
        results = [
            detector.accept(english_sample, "english", top_n=3, min_confidence=floor)
            for floor in floors
        ]
        # once rejected, never accepted again at a higher floor
        assert results == sorted(results, reverse=True)
        assert results[0] is True
        assert results[-1] is False

    def test_ratio_policy_accepts_clear_winner(self, detector, english_sample):
        assert detector.accept(
            english_sample, "english", min_confidence=0.0, confidence_ratio=1.1
        )

    def test_ratio_policy_rejects_identical_references(self, languages_dir, english_sample):
        english = (languages_dir / "english").read_bytes()
        store = ReferenceCorpusStore.from_mapping(
            {
                "english": english,
                "english_copy": english,
                "french": (languages_dir / "french").read_bytes(),
            }
        )
        detector = Detector(store)
        ranking = detector.rank(english_sample, 2)
        assert ranking[0].confidence == ranking[1].confidence
        assert not detector.accept(
            english_sample, ranking[0].language_id, min_confidence=0.0, confidence_ratio=1.0
        )

    def test_empty_sample_raises(self, detector):
        with pytest.raises(EmptyInputError):
            detector.accept(b"", "english", top_n=3, min_confidence=0.0, confidence_ratio=None)

    def test_accept_with_policy(self, detector, english_sample):
        policy = AcceptPolicy(top_n=1, min_confidence=0.0)
        assert detector.accept_with(english_sample, "english", policy)


class TestFilterLines:
    """Test the batch stream filter."""

    def test_keeps_only_desired_language(self, detector, english_sample, french_sample):
        lines = [
            english_sample + b"\n",
            french_sample + b"\n",
            b"\n",
            b"No one shall be held in slavery, and everyone has the right to liberty.\n",
        ]
        policy = AcceptPolicy(top_n=1, min_confidence=0.0)
        kept = list(detector.filter_lines(lines, "english", policy))
        assert kept == [lines[0], lines[3]]

    def test_empty_line_does_not_abort(self, detector, english_sample):
        policy = AcceptPolicy(top_n=3, min_confidence=-1e9)
        kept = list(detector.filter_lines([b"", b"\r\n", english_sample], "english", policy))
        assert kept == [english_sample]

    def test_preserves_order(self, detector, french_sample):
        lines = [french_sample + bytes(f" {i}\n", "ascii") for i in range(5)]
        policy = AcceptPolicy(top_n=1, min_confidence=0.0)
        assert list(detector.filter_lines(lines, "french", policy)) == lines


class TestEndToEnd:
    def test_empty_directory(self, tmp_path):
        with pytest.raises(NoReferenceFilesError):
            load_store(tmp_path, sparsity=1)

    @pytest.mark.slow
    def test_large_reference_set_parallel(self, make_reference_dir, languages_dir, english_sample):
        french = (languages_dir / "french").read_text(encoding="utf-8")
        spanish = (languages_dir / "spanish").read_text(encoding="utf-8")
        files = {f"french{i:02d}": f"{french} {i}" for i in range(15)}
        files.update({f"spanish{i:02d}": f"{spanish} {i}" for i in range(15)})
        files["english"] = (languages_dir / "english").read_bytes()
        directory = make_reference_dir(files)
        store = load_store(directory, workers=8)
        with Detector(store) as detector:
            assert detector.rank(english_sample, 1)[0].language_id == "english"
