"""Compressed-length oracle used as a Kolmogorov complexity approximation.

Reference: Li & Vitanyi, "An Introduction to Kolmogorov Complexity
and Its Applications", 2008.

Only lengths matter here, never the compressed bytes themselves:
    C(x)  = len(compress(x))
    C(xy) = len(compress(x ++ y))

Every length is produced by the same streaming compressor object, so
C(x) and C(xy) share framing overhead and C(x ++ b"") == C(x).
"""

import bz2
import zlib
from typing import Literal

import zstandard

from ..exceptions import EmptyInputError, InvalidConfigError

Algorithm = Literal["zlib", "gzip", "bzip2", "zstd"]

SUPPORTED_ALGORITHMS = ("zlib", "gzip", "bzip2", "zstd")

_LEVEL_RANGES = {
    "zlib": (0, 9),
    "gzip": (0, 9),
    "bzip2": (1, 9),
    "zstd": (1, 22),
}

# wbits selecting the gzip container in zlib.compressobj
_GZIP_WBITS = 31


class Compressor:
    """Deterministic compressed-length oracle over one codec.

    Instances hold no mutable state; a fresh compressor object is created per
    call, so one Compressor may be shared across threads.
    """

    def __init__(self, algorithm: Algorithm = "zlib", level: int = 9):
        if algorithm not in _LEVEL_RANGES:
            raise InvalidConfigError(
                "algorithm", algorithm, f"expected one of {', '.join(SUPPORTED_ALGORITHMS)}"
            )
        low, high = _LEVEL_RANGES[algorithm]
        if not low <= level <= high:
            raise InvalidConfigError("level", level, f"{algorithm} accepts {low}-{high}")
        self.algorithm = algorithm
        self.level = level

    def __repr__(self) -> str:
        return f"Compressor(algorithm={self.algorithm!r}, level={self.level})"

    def compressed_length(self, content: bytes) -> int:
        """Length of the compressed form of ``content``."""
        return self._stream_length(content)

    def compressed_length_of_concat(self, first: bytes, second: bytes) -> int:
        """Length of ``compress(first ++ second)`` without building the concatenation.

        Raises:
            EmptyInputError: If both operands are empty.
        """
        if not first and not second:
            raise EmptyInputError()
        return self._stream_length(first, second)

    def _stream_length(self, *chunks: bytes) -> int:
        compressor = self._new_stream()
        total = 0
        for chunk in chunks:
            if chunk:
                total += len(compressor.compress(chunk))
        total += len(compressor.flush())
        return total

    def _new_stream(self):
        if self.algorithm == "zlib":
            return zlib.compressobj(self.level)
        if self.algorithm == "gzip":
            return zlib.compressobj(self.level, zlib.DEFLATED, _GZIP_WBITS)
        if self.algorithm == "bzip2":
            return bz2.BZ2Compressor(self.level)
        return zstandard.ZstdCompressor(level=self.level).compressobj()
