"""Reference corpus loading and storage."""

from .models import ReferenceDocument
from .store import (
    ReferenceCorpusStore,
    list_reference_files,
    load_reference,
    load_store,
    parse_also_include,
    select_reference_files,
)

__all__ = [
    "ReferenceDocument",
    "ReferenceCorpusStore",
    "load_store",
    "load_reference",
    "list_reference_files",
    "select_reference_files",
    "parse_also_include",
]
