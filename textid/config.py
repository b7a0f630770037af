"""Config loading for textid.

Reads `.textid/config.yaml` (or `~/.textid/config.yaml`).
Raises SystemExit on parse errors, a missing `version` field or invalid values.
If no config file is found, returns default values (safe to run without config).

Config search order:
  1. `config_path` argument (if provided — for testing or explicit override)
  2. TEXTID_CONFIG environment variable (if set)
  3. `.textid/config.yaml` (working directory)
  4. `~/.textid/config.yaml` (home directory)

Environment variable overrides:
  TEXTID_MAX_WORKERS — overrides engine.max_workers
  TEXTID_LOG_LEVEL   — overrides logging.level
  TEXTID_CONFIG      — sets an explicit config file path to try first

Example::

    version: 1
    identify:
      min_rarity: 0.1
      boundaryless: true
      file_support: true
      exclude_tags: [Phone Number]
    extraction:
      min_length: 4
    engine:
      max_workers: 4
    catalog:
      path: ./my-patterns.json
    logging:
      level: INFO
      json: false
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from typing import Any, NoReturn, Optional

import yaml

from textid.constants import MAX_RARITY, MIN_RARITY, MIN_STRING_LENGTH, PARALLEL_MIN_CANDIDATES
from textid.utils.logger import VALID_LOG_LEVELS, configure_logging, get_logger

logger = get_logger(__name__)

# ─── Version constants ────────────────────────────────────────────────────────

SUPPORTED_CONFIG_VERSION = 1

SUPPORTED_VERSIONS: frozenset[int] = frozenset({1})

DEFAULT_CONFIG_PATHS = [
    ".textid/config.yaml",
    os.path.expanduser("~/.textid/config.yaml"),
]


# ─── Dataclasses ─────────────────────────────────────────────────────────────


@dataclass
class IdentifyConfig:
    """Default query options (see IdentifyOptions.from_config)."""

    min_rarity: float = MIN_RARITY
    max_rarity: float = MAX_RARITY
    include_tags: list[str] = field(default_factory=list)
    exclude_tags: list[str] = field(default_factory=list)
    boundaryless: bool = False
    file_support: bool = False


@dataclass
class ExtractionConfig:
    """Printable-string extraction from files."""

    min_length: int = MIN_STRING_LENGTH
    keep_trailing: bool = False


@dataclass
class EngineConfig:
    """Multi-candidate matching."""

    max_workers: Optional[int] = None  # None → min(8, cpu_count + 4)
    parallel_threshold: int = PARALLEL_MIN_CANDIDATES


@dataclass
class CatalogConfig:
    """Pattern catalog source."""

    path: Optional[str] = None  # None → bundled catalog


@dataclass
class LoggingConfig:
    """structlog output settings."""

    level: str = "WARNING"
    json: bool = False


@dataclass
class Config:
    """Root configuration object populated from .textid/config.yaml.

    All fields have safe defaults — textid runs without any config file.
    """

    version: int = SUPPORTED_CONFIG_VERSION
    identify: IdentifyConfig = field(default_factory=IdentifyConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    path: Optional[str] = None  # Path to the loaded config file

    @classmethod
    def defaults(cls) -> "Config":
        """Return a fully-default Config (no file required)."""
        return cls()

    @classmethod
    def from_dict(cls, raw: dict, path: Optional[str] = None) -> "Config":
        """Construct Config from a parsed YAML dict.

        Merges user-supplied values onto defaults; unknown keys are silently ignored.

        Raises:
            SystemExit(1): On values of the wrong type or out of range.
        """
        # ── Identify ──────────────────────────────────────────────────────────
        identify_raw = _section(raw, "identify")
        identify = IdentifyConfig(
            min_rarity=_rarity(identify_raw, "min_rarity", MIN_RARITY),
            max_rarity=_rarity(identify_raw, "max_rarity", MAX_RARITY),
            include_tags=_tag_list(identify_raw, "include_tags"),
            exclude_tags=_tag_list(identify_raw, "exclude_tags"),
            boundaryless=_bool(identify_raw, "identify.boundaryless", False),
            file_support=_bool(identify_raw, "identify.file_support", False),
        )
        if identify.min_rarity > identify.max_rarity:
            _fail(
                f"identify.min_rarity ({identify.min_rarity}) is greater than "
                f"identify.max_rarity ({identify.max_rarity})."
            )

        # ── Extraction ────────────────────────────────────────────────────────
        extraction_raw = _section(raw, "extraction")
        extraction = ExtractionConfig(
            min_length=_positive_int(extraction_raw.get("min_length", MIN_STRING_LENGTH),
                                     "extraction.min_length"),
            keep_trailing=_bool(extraction_raw, "extraction.keep_trailing", False),
        )

        # ── Engine ────────────────────────────────────────────────────────────
        engine_raw = _section(raw, "engine")
        max_workers = engine_raw.get("max_workers")
        engine = EngineConfig(
            max_workers=None if max_workers is None else _positive_int(max_workers, "engine.max_workers"),
            parallel_threshold=_positive_int(
                engine_raw.get("parallel_threshold", PARALLEL_MIN_CANDIDATES),
                "engine.parallel_threshold",
            ),
        )

        # ── Catalog ───────────────────────────────────────────────────────────
        catalog_raw = _section(raw, "catalog")
        catalog_path = catalog_raw.get("path")
        if catalog_path is not None:
            catalog_path = os.path.expanduser(str(catalog_path))
        catalog = CatalogConfig(path=catalog_path)

        # ── Logging ───────────────────────────────────────────────────────────
        logging_raw = _section(raw, "logging")
        logging_config = LoggingConfig(
            level=_log_level(logging_raw.get("level", "WARNING"), "logging.level"),
            json=_bool(logging_raw, "logging.json", False),
        )

        return cls(
            version=raw.get("version", SUPPORTED_CONFIG_VERSION),
            identify=identify,
            extraction=extraction,
            engine=engine,
            catalog=catalog,
            logging=logging_config,
            path=path,
        )


# ─── Config loading ───────────────────────────────────────────────────────────


def load_config(config_path: Optional[str] = None) -> Config:
    """Load and validate textid configuration.

    Search order:
      1. ``config_path`` argument (if provided)
      2. ``TEXTID_CONFIG`` environment variable (if set)
      3. ``.textid/config.yaml`` (current working directory)
      4. ``~/.textid/config.yaml`` (home directory)

    If no file is found at any of these paths, returns default Config (not an error).
    If a file is found but invalid, writes error to stderr and raises SystemExit(1).

    After loading (or defaulting), ``TEXTID_MAX_WORKERS`` and ``TEXTID_LOG_LEVEL``
    are applied as overrides regardless of whether a config file was found.

    Raises:
        SystemExit(1): On YAML parse error, missing ``version`` field, unsupported
                       version, invalid values, or invalid environment overrides.
    """
    search_paths: list[str] = []
    if config_path:
        search_paths.append(config_path)
    env_config = os.environ.get("TEXTID_CONFIG")
    if env_config:
        search_paths.append(env_config)
    search_paths.extend(DEFAULT_CONFIG_PATHS)

    found_path: Optional[str] = None
    for candidate in search_paths:
        expanded = os.path.expanduser(candidate)
        if os.path.isfile(expanded):
            found_path = expanded
            break

    # ── No config file found ─────────────────────────────────────────────────
    if found_path is None:
        logger.debug("No config file found — using defaults", searched=search_paths)
        config = Config.defaults()
        _apply_env_overrides(config)
        return config

    # ── Parse config file ─────────────────────────────────────────────────────
    logger.debug("Loading config", path=found_path)

    try:
        with open(found_path) as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        _fail(
            f"Failed to parse {found_path}: {exc}\n"
            "Check the YAML syntax and try again."
        )
    except OSError as exc:
        _fail(f"Could not read {found_path}: {exc}")

    # Empty file or non-mapping YAML (e.g. plain scalar)
    if not isinstance(raw, dict):
        if raw is None:
            _fail(
                f"{found_path} is missing the required 'version' field.\n"
                "Add 'version: 1' to the top of your config file."
            )
        _fail(
            f"{found_path} is not a valid YAML mapping.\n"
            "The config file must be a YAML dictionary at the top level."
        )

    # ── Version validation ────────────────────────────────────────────────────
    version = raw.get("version")
    if version is None:
        _fail(
            f"{found_path} is missing the required 'version' field.\n"
            "Add 'version: 1' to the top of your config file."
        )
    if version not in SUPPORTED_VERSIONS:
        _fail(
            f"Unsupported config version: {version}. "
            f"Supported versions: {sorted(SUPPORTED_VERSIONS)}."
        )

    config = Config.from_dict(raw, path=found_path)
    _apply_env_overrides(config)

    if config.identify.include_tags and config.identify.exclude_tags:
        overlap = set(config.identify.include_tags) & set(config.identify.exclude_tags)
        if overlap:
            logger.warning(
                "Tags are both included and excluded — no pattern can match them",
                tags=sorted(overlap),
            )

    logger.debug(
        "Config loaded",
        path=found_path,
        version=config.version,
        catalog=config.catalog.path or "bundled",
    )
    return config


def _apply_env_overrides(config: Config) -> None:
    """Apply environment variable overrides to a Config object in-place.

    Raises:
        SystemExit(1): If an override is set but invalid.
    """
    env_workers = os.environ.get("TEXTID_MAX_WORKERS")
    if env_workers is not None:
        try:
            workers = int(env_workers)
        except ValueError:
            _fail(
                "TEXTID_MAX_WORKERS environment variable is not a valid "
                f"integer: '{env_workers}'"
            )
        config.engine.max_workers = _positive_int(workers, "TEXTID_MAX_WORKERS")

    env_level = os.environ.get("TEXTID_LOG_LEVEL")
    if env_level is not None:
        config.logging.level = _log_level(env_level, "TEXTID_LOG_LEVEL")


def apply_logging_config(config: Config) -> None:
    """Configure textid's standalone stderr logging from ``config.logging``."""
    configure_logging(log_level=config.logging.level, json_output=config.logging.json)


# ─── Validation helpers ───────────────────────────────────────────────────────


def _fail(message: str) -> NoReturn:
    print(f"CONFIG ERROR: {message}", file=sys.stderr)
    raise SystemExit(1)


def _section(raw: dict, name: str) -> dict:
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        _fail(f"'{name}' must be a mapping, got {type(value).__name__}.")
    return value


def _rarity(section: dict, key: str, default: float) -> float:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        _fail(f"identify.{key} must be a number, got {value!r}.")
    if not MIN_RARITY <= value <= MAX_RARITY:
        _fail(f"identify.{key} must be between {MIN_RARITY} and {MAX_RARITY}, got {value}.")
    return float(value)


def _tag_list(section: dict, key: str) -> list[str]:
    value = section.get(key) or []
    if isinstance(value, str):
        # Accept the comma-separated form used on command lines.
        value = [tag.strip() for tag in value.split(",") if tag.strip()]
    if not isinstance(value, list) or not all(isinstance(tag, str) for tag in value):
        _fail(f"identify.{key} must be a list of tag names, got {value!r}.")
    return list(value)


def _bool(section: dict, name: str, default: bool) -> bool:
    key = name.rsplit(".", 1)[-1]
    value = section.get(key, default)
    if not isinstance(value, bool):
        _fail(f"{name} must be true or false, got {value!r}.")
    return value


def _positive_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        _fail(f"{name} must be a positive integer, got {value!r}.")
    return value


def _log_level(value: Any, name: str) -> str:
    level = str(value).upper()
    if level not in VALID_LOG_LEVELS:
        _fail(f"{name} must be one of {sorted(VALID_LOG_LEVELS)}, got {value!r}.")
    return level
