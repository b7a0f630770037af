"""Catalog loader — parses catalog JSON into ordered Pattern records.

The bundled catalog ships as package data (``textid/catalog/data/regex.json``).
An alternate catalog file can be supplied through ``catalog.path`` in the
config file or by passing ``path=`` directly.

Record schema (one JSON object per pattern)::

    {
      "Name": "YouTube Channel ID",
      "Regex": "^UC[0-9A-Za-z_-]{21}[AQgw]$",
      "plural_name": false,
      "Description": null,
      "Rarity": 1,
      "URL": "https://www.youtube.com/channel/",
      "Tags": ["Media", "YouTube"],
      "Exploit": null,                       # optional
      "Examples": {"Valid": [], "Invalid": []}   # optional, self-test only
    }

Malformed records are skipped with a warning; they never abort a load.
Priority order is enforced here: records are stable-sorted by descending
rarity, so ties keep their authored order.
"""

from __future__ import annotations

import json
from importlib import resources
from typing import Any, Iterable, Optional

from textid.constants import MAX_RARITY, MIN_RARITY
from textid.models.pattern import Pattern
from textid.utils.logger import get_logger

logger = get_logger(__name__)

BUNDLED_CATALOG_PACKAGE = "textid.catalog"
BUNDLED_CATALOG_FILE = "data/regex.json"

_REQUIRED_FIELDS: tuple[str, ...] = ("Name", "Regex", "Rarity", "Tags")


class CatalogLoadError(Exception):
    """Catalog file could not be read or is not a JSON array of records."""


def read_records(path: Optional[str] = None) -> list[dict[str, Any]]:
    """Read raw catalog records from ``path`` or from the bundled catalog.

    Raises:
        CatalogLoadError: On read failure, invalid JSON, or a non-array document.
    """
    source = path or f"{BUNDLED_CATALOG_PACKAGE}/{BUNDLED_CATALOG_FILE}"
    try:
        if path is None:
            text = (
                resources.files(BUNDLED_CATALOG_PACKAGE)
                .joinpath(BUNDLED_CATALOG_FILE)
                .read_text(encoding="utf-8")
            )
        else:
            with open(path, encoding="utf-8") as fh:
                text = fh.read()
    except OSError as exc:
        raise CatalogLoadError(f"Could not read catalog {source}: {exc}") from exc

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CatalogLoadError(f"Catalog {source} is not valid JSON: {exc}") from exc

    if not isinstance(raw, list):
        raise CatalogLoadError(
            f"Catalog {source} must be a JSON array of records, got {type(raw).__name__}"
        )
    return raw


def parse_records(records: Iterable[Any]) -> list[Pattern]:
    """Convert raw records to Patterns in priority order (descending rarity).

    Regexes are not compiled here. Compilation and the drop policy for
    non-compiling regexes live in the registry.
    """
    patterns: list[Pattern] = []
    skipped = 0
    for index, record in enumerate(records):
        pattern = _parse_record(index, record)
        if pattern is None:
            skipped += 1
            continue
        patterns.append(pattern)

    if skipped:
        logger.warning("Skipped malformed catalog records", skipped=skipped)

    # sorted() is stable: equal rarities keep authored order.
    return sorted(patterns, key=lambda p: p.rarity, reverse=True)


def load_patterns(path: Optional[str] = None) -> list[Pattern]:
    """Read and parse a catalog file (bundled catalog when ``path`` is None)."""
    return parse_records(read_records(path))


def _parse_record(index: int, record: Any) -> Optional[Pattern]:
    if not isinstance(record, dict):
        logger.warning("Catalog record is not an object", index=index)
        return None

    missing = [key for key in _REQUIRED_FIELDS if key not in record]
    if missing:
        logger.warning(
            "Catalog record missing required fields",
            index=index,
            name=record.get("Name"),
            missing=missing,
        )
        return None

    name = record["Name"]
    regex = record["Regex"]
    rarity = record["Rarity"]
    tags = record["Tags"]

    if not isinstance(name, str) or not isinstance(regex, str):
        logger.warning("Catalog record has non-string Name/Regex", index=index)
        return None
    # bool is an int subclass; a boolean rarity is an authoring mistake.
    if isinstance(rarity, bool) or not isinstance(rarity, (int, float)):
        logger.warning("Catalog record has non-numeric Rarity", index=index, name=name)
        return None
    if not MIN_RARITY <= rarity <= MAX_RARITY:
        logger.warning(
            "Catalog record Rarity out of range", index=index, name=name, rarity=rarity
        )
        return None
    if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
        logger.warning("Catalog record Tags must be a list of strings", index=index, name=name)
        return None

    return Pattern.create(
        name=name,
        regex=regex,
        rarity=rarity,
        tags=tags,
        plural_name=bool(record.get("plural_name", False)),
        description=_optional_str(record.get("Description")),
        url=_optional_str(record.get("URL")),
        exploit=_optional_str(record.get("Exploit")),
    )


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)
