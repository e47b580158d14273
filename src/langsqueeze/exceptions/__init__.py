"""Exception hierarchy for langsqueeze."""

from .base import LangSqueezeError
from .config import ConfigurationError, InvalidConfigError, InvalidPathError
from .detection import (
    DetectionError,
    EmptyInputError,
    NoReferenceFilesError,
    ReferenceLoadError,
)

__all__ = [
    "LangSqueezeError",
    "ConfigurationError",
    "InvalidConfigError",
    "InvalidPathError",
    "DetectionError",
    "EmptyInputError",
    "NoReferenceFilesError",
    "ReferenceLoadError",
]
