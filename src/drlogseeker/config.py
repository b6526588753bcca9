"""Configuration loading and management for drlogseeker.

This module provides configuration discovery and validation. Configuration
sources are merged in priority order:
    1. Defaults (defined in ScanConfig / ParsePolicy)
    2. Global config (~/.drlogseeker.toml)
    3. Project config (./drlogseeker.toml)
    4. Explicit config file
    5. Environment variables (DRLOG_* prefix)
    6. Keyword overrides (CLI flags)

Example:
    >>> config = load_config(worker_count=4, extensions=[".log"])
    >>> config.worker_count
    4
    >>> config.extensions
    ('.log',)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import DRLogSeekerError, InvalidConfigError, InvalidPathError

RoundingRule = Literal["half_away_from_zero", "half_even", "floor", "truncate"]

ROUNDING_RULES: tuple[str, ...] = ("half_away_from_zero", "half_even", "floor", "truncate")

ENV_PREFIX = "DRLOG_"
GLOBAL_CONFIG_NAME = ".drlogseeker.toml"
PROJECT_CONFIG_NAME = "drlogseeker.toml"

# Upper bound for the auto-detected pool size; reads are I/O bound
MAX_AUTO_WORKERS = 32


@dataclass(frozen=True)
class ParsePolicy:
    """Numeric policy applied when turning a DR token into a band value.

    Attributes:
        rounding: How fractional DR values become integers.
            ``half_away_from_zero`` (default) maps 9.5 -> 10 and 9.4 -> 9.
        ambiguity_tolerance: Largest spread (max - min) between the rounded
            values of one file that still counts as agreement.
        compare_clamped: Judge agreement on band values (clamped to 0-14).
            When False, the rounded values are compared before clamping, so
            15 and 20 conflict.
        fallback_encoding: Codec used when content is neither BOM-marked nor
            valid UTF-8. Decoding always uses replacement, never fails.
    """

    rounding: RoundingRule = "half_away_from_zero"
    ambiguity_tolerance: int = 0
    compare_clamped: bool = True
    fallback_encoding: str = "cp1251"

    def __post_init__(self) -> None:
        if self.rounding not in ROUNDING_RULES:
            raise ValueError(
                f"rounding must be one of {', '.join(ROUNDING_RULES)}, got '{self.rounding}'"
            )
        if self.ambiguity_tolerance < 0:
            raise ValueError("ambiguity_tolerance must be non-negative")
        try:
            "".encode(self.fallback_encoding)
        except LookupError:
            raise ValueError(f"unknown fallback_encoding '{self.fallback_encoding}'")


DEFAULT_POLICY = ParsePolicy()


@dataclass(frozen=True)
class ScanConfig:
    """Configuration for one scan.

    Attributes:
        Discovery:
            extensions: File suffixes that make a file a candidate (case-insensitive)
            follow_symlinks: Descend into symlinked directories and read symlinked files
            allow_hidden_files: Include dot-files and dot-directories
            exclude_patterns: Glob patterns (Path.match) to skip during discovery

        Performance tuning:
            worker_count: Number of parallel workers (None = auto-detect)
            queue_size: Maximum discovered-but-unfinished files (None = 4 per worker)
            max_file_size_mb: Larger files are reported unreadable instead of read

        Parsing:
            policy: Rounding, ambiguity and decoding policy
    """

    # Discovery
    extensions: tuple[str, ...] = (".txt", ".log")
    follow_symlinks: bool = True
    allow_hidden_files: bool = True
    exclude_patterns: tuple[str, ...] = ()

    # Performance tuning
    worker_count: Optional[int] = None  # None = auto-detect from CPU cores
    queue_size: Optional[int] = None
    max_file_size_mb: float = 16.0

    # Parsing
    policy: ParsePolicy = field(default_factory=ParsePolicy)

    def __post_init__(self) -> None:
        """Validate and normalize configuration after initialization."""
        if isinstance(self.extensions, str):
            raise ValueError("extensions must be a collection of suffixes, not a string")
        normalized = tuple(
            dict.fromkeys(_normalize_extension(ext) for ext in self.extensions if ext.strip())
        )
        if not normalized:
            raise ValueError("extensions must contain at least one suffix")
        object.__setattr__(self, "extensions", normalized)
        object.__setattr__(self, "exclude_patterns", tuple(self.exclude_patterns))

        if self.worker_count is not None and self.worker_count < 1:
            raise ValueError("worker_count must be at least 1")
        if self.queue_size is not None and self.queue_size < 1:
            raise ValueError("queue_size must be at least 1")
        if self.max_file_size_mb <= 0:
            raise ValueError("max_file_size_mb must be positive")

    @property
    def effective_workers(self) -> int:
        """Worker pool size, resolving auto-detection."""
        if self.worker_count is not None:
            return self.worker_count
        return max(1, min(os.cpu_count() or 1, MAX_AUTO_WORKERS))

    @property
    def effective_queue_size(self) -> int:
        """Bound on in-flight files."""
        if self.queue_size is not None:
            return self.queue_size
        return self.effective_workers * 4

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)

    def matches_extension(self, path: Path) -> bool:
        return path.suffix.lower() in self.extensions


def _normalize_extension(ext: str) -> str:
    ext = ext.strip().lower()
    return ext if ext.startswith(".") else f".{ext}"


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> ScanConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options keep lower-priority values.

    Returns:
        Validated ScanConfig instance

    Raises:
        DRLogSeekerError: If a config file is invalid or a value fails validation
        InvalidPathError: If the explicit config file does not exist
    """
    merged: dict[str, Any] = {}
    policy: dict[str, Any] = {}

    candidates = [Path.home() / GLOBAL_CONFIG_NAME, Path.cwd() / PROJECT_CONFIG_NAME]
    for path in candidates:
        if path.exists():
            _merge_file(path, merged, policy)

    if config_file is not None:
        if not config_file.exists():
            raise InvalidPathError(config_file, "Config file not found")
        _merge_file(config_file, merged, policy)

    env_main, env_policy = _load_env_vars()
    merged.update(env_main)
    policy.update(env_policy)

    override_policy = overrides.pop("policy", None)
    if isinstance(override_policy, ParsePolicy):
        policy = {f.name: getattr(override_policy, f.name) for f in fields(ParsePolicy)}
    elif isinstance(override_policy, dict):
        policy.update(override_policy)
    merged.update({k: v for k, v in overrides.items() if v is not None})

    for key in ("extensions", "exclude_patterns"):
        if key in merged and isinstance(merged[key], str):
            merged[key] = _split_list(merged[key])

    try:
        merged["policy"] = ParsePolicy(**policy)
        return ScanConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise DRLogSeekerError(f"Invalid configuration: {e}")
    except ValueError as e:
        raise DRLogSeekerError(f"Invalid configuration: {e}")


def _merge_file(path: Path, merged: dict[str, Any], policy: dict[str, Any]) -> None:
    try:
        data = _load_toml_file(path)
    except DRLogSeekerError:
        raise
    except Exception as e:
        raise DRLogSeekerError(f"Invalid config file '{path}': {e}")

    section = data.pop("policy", None)
    if section is not None:
        if not isinstance(section, dict):
            raise DRLogSeekerError(f"Invalid [policy] section in '{path}': expected a table")
        policy.update(section)
    merged.update(data)


def _load_env_vars() -> tuple[dict[str, Any], dict[str, Any]]:
    """Load configuration from DRLOG_* environment variables.

    Top-level fields use ``DRLOG_<FIELD>`` (e.g. ``DRLOG_WORKER_COUNT=4``,
    ``DRLOG_EXTENSIONS=.txt,.log``); policy fields use
    ``DRLOG_POLICY_<FIELD>`` (e.g. ``DRLOG_POLICY_ROUNDING=half_even``).

    Returns:
        (scan_config_values, policy_values) for any variables found.
    """
    main = _collect_env(ScanConfig, ENV_PREFIX, skip={"policy"})
    policy = _collect_env(ParsePolicy, f"{ENV_PREFIX}POLICY_", skip=set())
    return main, policy


def _collect_env(cls: type, prefix: str, skip: set[str]) -> dict[str, Any]:
    type_hints = get_type_hints(cls)
    result: dict[str, Any] = {}

    for f in fields(cls):
        if f.name in skip:
            continue
        env_key = f"{prefix}{f.name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hints[f.name])
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            result[f.name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Args:
        value: Raw string from environment
        type_hint: Type annotation from dataclass

    Returns:
        Parsed value or None if the type is not settable from the environment

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)
    args = getattr(type_hint, "__args__", ())

    # Optional[X] is Union[X, None]
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if value.strip().lower() in ("", "none", "auto"):
            return None
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if origin is tuple:
        return _split_list(value)

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

    if type_hint is str or origin is Literal:
        return value

    return None


def _split_list(value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        DRLogSeekerError: If neither tomllib nor tomli is available
        Exception: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            # Fallback to tomli for Python 3.9-3.10
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise DRLogSeekerError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
