"""Tests for the one-shot detect_language API."""

import pytest

from langsqueeze import build_store, detect_language
from langsqueeze.config import DetectorConfig
from langsqueeze.exceptions import EmptyInputError, NoReferenceFilesError


class TestDetectLanguage:
    """Test the detect_language entry point."""

    def test_from_directory(self, languages_dir, english_sample):
        ranking = detect_language(english_sample, languages_dir, top_n=3)
        assert ranking[0].language_id == "english"

    def test_from_mapping(self, languages_dir):
        references = {
            "en": (languages_dir / "english").read_text(encoding="utf-8"),
            "es": (languages_dir / "spanish").read_text(encoding="utf-8"),
        }
        ranking = detect_language(
            "Toda persona tiene derecho a la libertad de pensamiento y de religión.", references
        )
        assert ranking[0].language_id == "es"

    def test_with_other_codec(self, languages_dir, english_sample):
        ranking = detect_language(
            english_sample, languages_dir, config=DetectorConfig(algorithm="zstd", level=19)
        )
        assert ranking[0].language_id == "english"

    def test_empty_text(self, languages_dir):
        with pytest.raises(EmptyInputError):
            detect_language("", languages_dir)


class TestBuildStore:
    """Test build_store over both reference sources."""

    def test_directory_loads_every_file(self, languages_dir):
        store = build_store(languages_dir)
        assert store.language_ids == ["english", "french", "spanish"]

    def test_mapping_skips_empty_texts(self, languages_dir):
        store = build_store(
            {"en": (languages_dir / "english").read_bytes(), "empty": ""},
            config=DetectorConfig(algorithm="bzip2"),
        )
        assert "en" in store
        assert "empty" not in store

    def test_empty_directory(self, tmp_path):
        with pytest.raises(NoReferenceFilesError):
            build_store(tmp_path)
