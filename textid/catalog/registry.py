"""Pattern catalog registry — compiles catalog patterns with google-re2.

Provides:
  - ``CompiledPattern``: a Pattern paired with one compiled regex variant.
  - ``PatternCatalog``: immutable registry holding four priority-ordered tables
    (text/bytes x anchored/boundaryless).
  - ``get_default_catalog()``: the lazily built, process-wide bundled catalog.
  - ``reset_default_catalog()``: drop the default catalog (tests only).

IMPORT RULES:
  - ``import re2`` ONLY. Every pattern is compiled by google-re2, whose
    linear-time matching keeps externally authored patterns from backtracking
    catastrophically. Constructs re2 rejects (lookaround, backreferences)
    surface as ``re2.error`` at build time and are dropped by policy:

    - anchored regex fails     → the pattern is dropped from every table
    - boundaryless regex fails → the pattern is dropped from the
                                 boundaryless tables only
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional

import re2  # google-re2, NOT stdlib re

from textid.catalog.loader import load_patterns, parse_records
from textid.constants import CATALOG_BUILD_WARN_MS
from textid.identifier.filters import is_eligible
from textid.models.options import IdentifyOptions
from textid.models.pattern import Pattern
from textid.utils.logger import PerformanceLogger, get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CompiledPattern:
    """A catalog Pattern and one of its compiled regex variants.

    Fields:
        pattern: The catalog entry (metadata handed to Match objects).
        regex:   Pre-compiled re2 pattern. Compiled once at catalog build.
    """
    pattern: Pattern
    regex: Any  # re2._Regexp

    def search(self, text: Any) -> bool:
        """True if the regex matches anywhere in ``text`` (str or bytes)."""
        return self.regex.search(text) is not None


def _compile(regex: str) -> tuple[Any, Any]:
    """Compile ``regex`` for str and bytes subjects. Raises re2.error."""
    return re2.compile(regex), re2.compile(regex.encode("utf-8"))


class PatternCatalog:
    """Immutable, priority-ordered registry of compiled patterns.

    Usage::

        catalog = PatternCatalog.from_file()          # bundled catalog
        table = catalog.table(boundaryless=True)      # text, anchors stripped
        eligible = catalog.eligible(options)          # filtered for a query

    Thread-safety:
        All state is built in ``__init__`` and never mutated afterwards, so a
        catalog may be shared freely between threads.
    """

    def __init__(self, patterns: Iterable[Pattern]) -> None:
        """Compile ``patterns`` into the four matching tables.

        Args:
            patterns: Catalog entries in any order.
        """
        text_anchored: list[CompiledPattern] = []
        text_boundaryless: list[CompiledPattern] = []
        bytes_anchored: list[CompiledPattern] = []
        bytes_boundaryless: list[CompiledPattern] = []
        kept: list[Pattern] = []
        dropped: list[str] = []
        anchored_only: list[str] = []

        # Priority is descending rarity; sorted() is stable so ties keep input order.
        for pattern in sorted(patterns, key=lambda p: p.rarity, reverse=True):
            try:
                text_re, bytes_re = _compile(pattern.regex)
            except re2.error as exc:
                logger.debug(
                    "Dropping pattern: regex does not compile",
                    name=pattern.name,
                    error=str(exc),
                )
                dropped.append(pattern.name)
                continue

            kept.append(pattern)
            text_anchored.append(CompiledPattern(pattern, text_re))
            bytes_anchored.append(CompiledPattern(pattern, bytes_re))

            try:
                text_bl, bytes_bl = _compile(pattern.boundaryless)
            except re2.error as exc:
                logger.debug(
                    "Pattern excluded from boundaryless mode: regex does not compile",
                    name=pattern.name,
                    boundaryless=pattern.boundaryless,
                    error=str(exc),
                )
                anchored_only.append(pattern.name)
                continue

            text_boundaryless.append(CompiledPattern(pattern, text_bl))
            bytes_boundaryless.append(CompiledPattern(pattern, bytes_bl))

        self._patterns: tuple[Pattern, ...] = tuple(kept)
        self._tables: dict[tuple[bool, bool], tuple[CompiledPattern, ...]] = {
            (False, False): tuple(text_anchored),
            (True, False): tuple(text_boundaryless),
            (False, True): tuple(bytes_anchored),
            (True, True): tuple(bytes_boundaryless),
        }
        self.dropped: tuple[str, ...] = tuple(dropped)
        self.anchored_only: tuple[str, ...] = tuple(anchored_only)

        logger.info(
            "Pattern catalog built",
            patterns=len(kept),
            dropped=len(dropped),
            anchored_only=len(anchored_only),
        )

    # ── Constructors ──────────────────────────────────────────────────────────

    @classmethod
    def from_file(cls, path: Optional[str] = None) -> "PatternCatalog":
        """Build from a catalog JSON file (bundled catalog when ``path`` is None)."""
        with PerformanceLogger(
            "Catalog build", logger, warn_ms=CATALOG_BUILD_WARN_MS, path=path or "bundled"
        ):
            return cls(load_patterns(path))

    @classmethod
    def from_records(cls, records: Iterable[Any]) -> "PatternCatalog":
        """Build from raw catalog records (same schema as the JSON file)."""
        return cls(parse_records(records))

    # ── Read API ──────────────────────────────────────────────────────────────

    @property
    def patterns(self) -> tuple[Pattern, ...]:
        """Every usable pattern (anchored regex compiles), in priority order."""
        return self._patterns

    def table(self, boundaryless: bool = False, binary: bool = False) -> tuple[CompiledPattern, ...]:
        """Compiled entries for one matching mode, in priority order."""
        return self._tables[(boundaryless, binary)]

    def eligible(self, options: IdentifyOptions, binary: bool = False) -> tuple[CompiledPattern, ...]:
        """The table selected by ``options.boundaryless``, filtered by ``options``."""
        return tuple(
            entry
            for entry in self.table(boundaryless=options.boundaryless, binary=binary)
            if is_eligible(options, entry.pattern)
        )

    def get(self, name: str) -> Optional[Pattern]:
        """First pattern named ``name``, or None."""
        for pattern in self._patterns:
            if pattern.name == name:
                return pattern
        return None

    def tags(self) -> list[str]:
        """Sorted list of every tag used in the catalog."""
        return sorted({tag for pattern in self._patterns for tag in pattern.tags})

    def __len__(self) -> int:
        return len(self._patterns)

    def __iter__(self) -> Iterator[Pattern]:
        return iter(self._patterns)

    def __repr__(self) -> str:
        return f"PatternCatalog(patterns={len(self._patterns)}, dropped={len(self.dropped)})"


# ─── Default catalog ──────────────────────────────────────────────────────────

_default_catalog: Optional[PatternCatalog] = None
_default_lock = threading.Lock()


def get_default_catalog() -> PatternCatalog:
    """Return the bundled catalog, building it on first use.

    Concurrent first callers block on a lock; exactly one builds the catalog
    and every caller receives the same fully built instance.
    """
    global _default_catalog
    catalog = _default_catalog
    if catalog is not None:
        return catalog
    with _default_lock:
        if _default_catalog is None:
            _default_catalog = PatternCatalog.from_file()
        return _default_catalog


def reset_default_catalog() -> None:
    """Forget the default catalog so the next call rebuilds it (tests only)."""
    global _default_catalog
    with _default_lock:
        _default_catalog = None
