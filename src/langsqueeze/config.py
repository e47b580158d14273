"""Configuration loading and management for langsqueeze.

Configuration sources are merged in priority order:
    1. Defaults (defined in DetectorConfig)
    2. Global config (~/.langsqueeze.toml)
    3. Project config (./langsqueeze.toml)
    4. Explicit config file
    5. Environment variables (LANGSQUEEZE_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(top_n=3, min_confidence=1.5)
    >>> config.top_n
    3
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import InvalidConfigError, LangSqueezeError
from .math.compression import SUPPORTED_ALGORITHMS

Verbosity = Literal["quiet", "normal", "verbose"]

ENV_PREFIX = "LANGSQUEEZE_"

# Per-command sparsity when none is configured
DEFAULT_FILTER_SPARSITY = 30
DEFAULT_RANK_SPARSITY = 1


@dataclass(frozen=True)
class DetectorConfig:
    """Configuration for reference loading and decisions.

    Attributes:
        Reference corpus:
            references: Directory holding one reference file per language
            sparsity: Subsampling stride (1 = every file, None = command default)
            also_include: Comma-separated file names never dropped by sparsity

        Compressor:
            algorithm: Codec used for every length (zlib, gzip, bzip2, zstd)
            level: Codec compression level

        Decision policy:
            top_n: Ranking breadth for display and the threshold policy
            min_confidence: Absolute confidence floor
            confidence_ratio: Best/second-best margin; enables the ratio policy

        Performance:
            workers: Thread pool size (None = auto-detect)
            cache_enabled: Persist reference compressed lengths across runs
            cache_dir: Directory for the length cache
            cache_ttl_hours: Length cache time-to-live in hours

        Output control:
            verbosity: Logging verbosity level
    """

    references: Optional[str] = None
    sparsity: Optional[int] = None
    also_include: Optional[str] = None

    algorithm: str = "zlib"
    level: int = 9

    top_n: int = 5
    min_confidence: float = 2.0
    confidence_ratio: Optional[float] = None

    workers: Optional[int] = None
    cache_enabled: bool = False
    cache_dir: str = ".langsqueeze-cache"
    cache_ttl_hours: int = 720

    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.algorithm not in SUPPORTED_ALGORITHMS:
            raise InvalidConfigError(
                "algorithm", self.algorithm, f"expected one of {', '.join(SUPPORTED_ALGORITHMS)}"
            )
        if self.sparsity is not None and self.sparsity < 1:
            raise InvalidConfigError("sparsity", self.sparsity, "must be at least 1")
        if self.top_n < 1:
            raise InvalidConfigError("top_n", self.top_n, "must be at least 1")
        if self.confidence_ratio is not None and self.confidence_ratio <= 0:
            raise InvalidConfigError(
                "confidence_ratio", self.confidence_ratio, "must be positive"
            )
        if self.workers is not None and self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if self.cache_ttl_hours < 0:
            raise InvalidConfigError(
                "cache_ttl_hours", self.cache_ttl_hours, "must be non-negative"
            )
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError(
                "verbosity", self.verbosity, "expected quiet, normal or verbose"
            )

    @property
    def cache_ttl_seconds(self) -> int:
        """Get cache TTL in seconds."""
        return self.cache_ttl_hours * 3600

    def resolved_sparsity(self, interactive: bool) -> int:
        """Sparsity to load with, falling back to the per-command default."""
        if self.sparsity is not None:
            return self.sparsity
        return DEFAULT_RANK_SPARSITY if interactive else DEFAULT_FILTER_SPARSITY


def load_config(config_file: Optional[Path] = None, **overrides) -> DetectorConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags); None values
            are ignored so unset flags never mask file settings

    Returns:
        Validated DetectorConfig instance

    Raises:
        LangSqueezeError: If a config file is invalid or missing
        InvalidConfigError: If a merged value fails validation
    """
    merged: dict = {}

    global_config = Path.home() / ".langsqueeze.toml"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except Exception as e:
            raise LangSqueezeError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / "langsqueeze.toml"
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except Exception as e:
            raise LangSqueezeError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise LangSqueezeError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except Exception as e:
            raise LangSqueezeError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    # Convert verbosity boolean flags to string
    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return DetectorConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise LangSqueezeError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from LANGSQUEEZE_* environment variables.

    Every DetectorConfig field maps to LANGSQUEEZE_<FIELD>, e.g.
    LANGSQUEEZE_TOP_N=3 or LANGSQUEEZE_CACHE_ENABLED=true.

    Returns:
        Dict of field_name -> parsed_value for any LANGSQUEEZE_* vars found.
    """
    type_hints = get_type_hints(DetectorConfig)

    result: dict[str, Any] = {}

    for field_name in DetectorConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise LangSqueezeError(f"Invalid {env_key}: {e}")

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    # String (including Literal types like Verbosity)
    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict."""
    with open(path, "rb") as f:
        return tomllib.load(f)
