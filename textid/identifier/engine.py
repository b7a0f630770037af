"""Identification engine — matches candidates against the pattern catalog.

Provides:
  - ``Identifier``: text identifier. ``identify()`` is the caller-facing entry
    point (text or, with file support, a file path); ``identify_text()``,
    ``first_match()``, ``identify_many()`` and ``identify_file()`` are the
    building blocks.
  - ``BaseIdentifier``: the matching loop shared with ``BytesIdentifier``
    (textid/identifier/bytes.py).

Matching order:
  Patterns are tried in catalog priority order (descending rarity). Within one
  candidate the returned matches keep that order; across candidates the
  output is grouped by candidate, in candidate order. ``first_match()``
  therefore returns the most specific eligible pattern.

Regex tests are substring searches: a pattern matches if it matches anywhere
in the candidate. Only the pattern's own anchors pin it to the start or end,
and boundaryless mode removes those.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING, Any, Generic, Iterable, Optional, Sequence, TypeVar

from textid.catalog.registry import CompiledPattern, PatternCatalog, get_default_catalog
from textid.constants import MIN_STRING_LENGTH, PARALLEL_MIN_CANDIDATES
from textid.identifier.files import FileAccess, FileScanError, LocalFileAccess, read_file
from textid.identifier.pool import map_candidates
from textid.identifier.strings import extract_strings
from textid.models.match import Match
from textid.models.options import IdentifyOptions
from textid.models.pattern import Pattern
from textid.utils.logger import PerformanceLogger, get_logger

if TYPE_CHECKING:
    from textid.config import Config

logger = get_logger(__name__)

#: Default file access capability: the local filesystem.
LOCAL_FILE_ACCESS: FileAccess = LocalFileAccess()

T = TypeVar("T", str, bytes)
M = TypeVar("M")
IdentifierT = TypeVar("IdentifierT", bound="BaseIdentifier[Any, Any]")


class BaseIdentifier(Generic[T, M]):
    """Matching loop shared by the text and bytes identifiers.

    Subclasses set ``binary`` (which compiled tables to use) and implement
    ``_make_match()``.

    Args:
        options:            Query options (defaults: full rarity range, no tag
                            filter, anchored matching, no file support).
        catalog:            Pattern catalog. None → the bundled default
                            catalog, built on first use.
        file_access:        Filesystem capability for file scanning. None
                            disables file support whatever ``options`` say.
        max_workers:        Thread cap for multi-candidate matching.
        parallel_threshold: Candidate count at which matching goes parallel.
        min_string_length:  Shortest printable run extracted from files.
        keep_trailing:      Emit the final extracted run regardless of length.
    """

    binary: bool = False

    def __init__(
        self,
        options: Optional[IdentifyOptions] = None,
        catalog: Optional[PatternCatalog] = None,
        file_access: Optional[FileAccess] = LOCAL_FILE_ACCESS,
        max_workers: Optional[int] = None,
        parallel_threshold: int = PARALLEL_MIN_CANDIDATES,
        min_string_length: int = MIN_STRING_LENGTH,
        keep_trailing: bool = False,
    ) -> None:
        self._options = options or IdentifyOptions()
        self._catalog = catalog
        self._file_access = file_access
        self.max_workers = max_workers
        self.parallel_threshold = parallel_threshold
        self.min_string_length = min_string_length
        self.keep_trailing = keep_trailing

    # ── Configuration ─────────────────────────────────────────────────────────

    @property
    def options(self) -> IdentifyOptions:
        return self._options

    @property
    def catalog(self) -> PatternCatalog:
        """The catalog in use; resolving it may build the default catalog."""
        if self._catalog is None:
            return get_default_catalog()
        return self._catalog

    @property
    def file_support(self) -> bool:
        """True when file paths are scanned: enabled in options AND a capability exists."""
        return self._options.file_support and self._file_access is not None

    def with_options(self: IdentifierT, **changes: Any) -> IdentifierT:
        """A copy of this identifier with ``options.replace(**changes)`` applied."""
        return type(self)(
            options=self._options.replace(**changes),
            catalog=self._catalog,
            file_access=self._file_access,
            max_workers=self.max_workers,
            parallel_threshold=self.parallel_threshold,
            min_string_length=self.min_string_length,
            keep_trailing=self.keep_trailing,
        )

    @classmethod
    def from_config(
        cls: type[IdentifierT],
        config: "Config",
        file_access: Optional[FileAccess] = LOCAL_FILE_ACCESS,
    ) -> IdentifierT:
        """Build an identifier from a loaded Config (see textid.config.load_config)."""
        catalog = None
        if config.catalog.path:
            catalog = PatternCatalog.from_file(config.catalog.path)
        return cls(
            options=IdentifyOptions.from_config(config.identify),
            catalog=catalog,
            file_access=file_access,
            max_workers=config.engine.max_workers,
            parallel_threshold=config.engine.parallel_threshold,
            min_string_length=config.extraction.min_length,
            keep_trailing=config.extraction.keep_trailing,
        )

    # ── Matching ──────────────────────────────────────────────────────────────

    def eligible_patterns(self) -> tuple[CompiledPattern, ...]:
        """Compiled patterns passing the options' filter, in priority order."""
        return self.catalog.eligible(self._options, binary=self.binary)

    def _make_match(self, text: T, pattern: Pattern) -> M:
        raise NotImplementedError

    def _scan(self, eligible: Sequence[CompiledPattern], text: T) -> list[M]:
        return [
            self._make_match(text, entry.pattern)
            for entry in eligible
            if entry.search(text)
        ]

    def identify_text(self, text: T) -> list[M]:
        """Every eligible pattern matching ``text``, in priority order.

        ``text`` is always treated as the candidate itself, never as a path.
        """
        return self._scan(self.eligible_patterns(), text)

    def first_match(self, text: T) -> Optional[M]:
        """The highest-priority eligible match for ``text``, or None."""
        for entry in self.eligible_patterns():
            if entry.search(text):
                return self._make_match(text, entry.pattern)
        return None

    def identify_many(self, candidates: Iterable[T]) -> list[M]:
        """Identify every candidate; matches grouped by candidate, in candidate order.

        Lists of at least ``parallel_threshold`` candidates are spread over a
        thread pool. The result equals running ``identify_text`` on each
        candidate in turn and concatenating.
        """
        candidates = list(candidates)
        eligible = self.eligible_patterns()
        with PerformanceLogger(
            "Multi-candidate identification",
            logger,
            candidates=len(candidates),
            patterns=len(eligible),
        ):
            per_candidate = map_candidates(
                functools.partial(self._scan, eligible),
                candidates,
                max_workers=self.max_workers,
                parallel_threshold=self.parallel_threshold,
            )
        return [match for matches in per_candidate for match in matches]

    def extract(self, data: bytes) -> list:
        """Printable candidates of ``data`` under this identifier's extraction policy."""
        return extract_strings(
            data,
            min_length=self.min_string_length,
            keep_trailing=self.keep_trailing,
            as_bytes=self.binary,
        )

    def identify_file(self, path: str) -> list[M]:
        """Extract printable strings from the file at ``path`` and identify each.

        Raises:
            FileScanError: If no file access capability is configured or the
                           file cannot be read (missing, directory, permission).
        """
        if self._file_access is None:
            raise FileScanError(path, "file access is not available")
        data = read_file(self._file_access, path)
        candidates = self.extract(data)
        logger.debug("Scanning file", path=path, size=len(data), candidates=len(candidates))
        return self.identify_many(candidates)


class Identifier(BaseIdentifier[str, Match]):
    """Identify text, or the printable strings of a file.

    Usage::

        identifier = Identifier()
        matches = identifier.identify("UC11L3JDgDQMyH8iolKkVZ4w")
        matches[0].pattern.name    # "YouTube Channel ID"

        ctf = Identifier(IdentifyOptions(boundaryless=True, min_rarity=0.6))
        ctf.first_match("abcthm{kgh}jk").pattern.name   # "TryHackMe Flag Format"
    """

    binary = False

    def _make_match(self, text: str, pattern: Pattern) -> Match:
        return Match(text, pattern)

    def is_file(self, text: str) -> bool:
        """True if ``text`` would be scanned as a file by ``identify()``."""
        return self.file_support and self._file_access.is_file(text)  # type: ignore[union-attr]

    def identify(self, text: str) -> list[Match]:
        """Identify ``text``, or the file it names when file support is on.

        With ``options.file_support`` and a file access capability, a ``text``
        naming a regular file is read, its printable strings extracted, and
        each string identified. Otherwise ``text`` is the only candidate.

        Raises:
            FileScanError: If the named file cannot be read.
        """
        if self.is_file(text):
            return self.identify_file(text)
        return self.identify_text(text)
