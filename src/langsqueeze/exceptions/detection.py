"""Detection exceptions: empty samples, missing or unreadable references."""

from pathlib import Path
from typing import Dict, Optional

from .base import LangSqueezeError


class DetectionError(LangSqueezeError):
    """Base class for errors raised while loading references or scoring samples."""

    pass


class EmptyInputError(DetectionError):
    """Raised when a compression ratio would be computed over no bytes at all."""

    def __init__(self, reason: str = "both operands are empty"):
        super().__init__(f"Empty input: {reason}", details={"reason": reason})
        self.reason = reason


class NoReferenceFilesError(DetectionError):
    """Raised when a store ends up with zero usable reference documents."""

    def __init__(self, directory: Optional[Path] = None, considered: int = 0):
        details: Dict[str, str] = {"considered": str(considered)}
        if directory is not None:
            details["directory"] = str(directory)
        super().__init__("No usable reference files", details=details)
        self.directory = directory
        self.considered = considered


class ReferenceLoadError(DetectionError):
    """Raised when a single reference file cannot be read."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Cannot load reference: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason
