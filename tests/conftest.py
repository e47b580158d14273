"""Shared test fixtures for langsqueeze tests."""

from pathlib import Path

import pytest

from langsqueeze.corpus.store import load_store
from langsqueeze.engine import Detector

LANG_FIXTURES = Path(__file__).parent / "lang_fixtures"


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def languages_dir():
    """Directory with English, French and Spanish reference paragraphs."""
    return LANG_FIXTURES


@pytest.fixture
def store(languages_dir):
    """Store over every reference file."""
    return load_store(languages_dir, sparsity=1)


@pytest.fixture
def detector(store):
    with Detector(store) as d:
        yield d


@pytest.fixture
def english_sample():
    return b"Everyone has the right to education, and no one shall be held without the freedom of thought and religion."


@pytest.fixture
def french_sample():
    return "Toute personne a droit à la liberté de pensée et à la sûreté de sa personne.".encode("utf-8")


@pytest.fixture
def make_reference_dir(tmp_path):
    """Factory: write {name: text} into a fresh directory and return it."""

    def _make(files, name="refs"):
        directory = tmp_path / name
        directory.mkdir()
        for file_name, text in files.items():
            data = text.encode("utf-8") if isinstance(text, str) else text
            (directory / file_name).write_bytes(data)
        return directory

    return _make
