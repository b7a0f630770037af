"""Root test configuration for textid.

Every test starts from a clean slate: the lazily built default catalog is
forgotten, TEXTID_* environment overrides are cleared and logging is returned
to its unconfigured state, so tests never see state leaked by an earlier test
or by the developer's shell.

Small hand-written catalogs are provided as fixtures for tests that need exact
control over pattern order, rarity and tags.
"""

from __future__ import annotations

import logging
from typing import Any

import pytest
import structlog

from textid.catalog.registry import PatternCatalog, reset_default_catalog


def make_record(
    name: str,
    regex: str,
    rarity: float = 0.5,
    tags: list[str] | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Build one raw catalog record in the bundled JSON schema."""
    record: dict[str, Any] = {
        "Name": name,
        "Regex": regex,
        "plural_name": False,
        "Description": None,
        "Rarity": rarity,
        "URL": None,
        "Tags": tags if tags is not None else [],
    }
    record.update(extra)
    return record


@pytest.fixture
def record_factory():
    """The make_record helper, for tests building their own catalogs."""
    return make_record


@pytest.fixture(autouse=True)
def clean_textid_state(monkeypatch: pytest.MonkeyPatch):
    """Reset the default catalog and strip TEXTID_* env vars for each test."""
    for var in ("TEXTID_CONFIG", "TEXTID_MAX_WORKERS", "TEXTID_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    reset_default_catalog()
    yield
    reset_default_catalog()


@pytest.fixture(autouse=True)
def clean_logging_state():
    """Undo any structlog or ``textid`` stdlib logger setup a test performed."""
    yield
    structlog.reset_defaults()
    library_logger = logging.getLogger("textid")
    for handler in list(library_logger.handlers):
        library_logger.removeHandler(handler)
    library_logger.setLevel(logging.NOTSET)
    library_logger.propagate = True


@pytest.fixture
def small_records() -> list[dict[str, Any]]:
    """Five records covering rarity ties, tags and an embedded-anchor class."""
    return [
        make_record("Digits", r"^[0-9]+$", rarity=0.2, tags=["Numbers"]),
        make_record("Flag", r"^flag\{.*\}$", rarity=1.0, tags=["CTF Flag", "Secret"]),
        make_record("Hex", r"^[0-9a-f]+$", rarity=0.4, tags=["Numbers", "Encoding"]),
        make_record("Key", r"^key-[A-Za-z0-9]{8}$", rarity=1.0, tags=["Secret", "Credentials"]),
        make_record("Caret Word", r"^[\^]word$", rarity=0.6, tags=["Misc"]),
    ]


@pytest.fixture
def small_catalog(small_records: list[dict[str, Any]]) -> PatternCatalog:
    """PatternCatalog built from ``small_records``.

    Priority order: Flag, Key (1.0, authored order), Caret Word (0.6),
    Hex (0.4), Digits (0.2).
    """
    return PatternCatalog.from_records(small_records)
