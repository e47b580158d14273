"""
langsqueeze - language identification by compression distance.

Ranks candidate languages for a text sample by how well the sample
compresses together with a small reference document per language, and
filters line streams down to a single language.
"""

__version__ = "0.1.0"

from .api import build_store, detect_language
from .corpus import ReferenceCorpusStore, ReferenceDocument, load_store
from .engine import Detector
from .math.compression import Compressor
from .policy import AcceptPolicy
from .ranking import ScoredCandidate

__all__ = [
    "detect_language",  # One-shot entry point
    "build_store",
    "load_store",
    "Detector",
    "AcceptPolicy",
    "Compressor",
    "ReferenceCorpusStore",
    "ReferenceDocument",
    "ScoredCandidate",
]
