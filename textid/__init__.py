"""textid — identify what a string is.

Classifies text or bytes against a catalog of named, tagged, rarity-scored
regular expressions (IP addresses, wallet addresses, API keys, CTF flags, ...)
and reports every pattern that matches, or the most specific one.

Quick use::

    import textid

    textid.what_is("UC11L3JDgDQMyH8iolKkVZ4w")[0].pattern.name
    # 'YouTube Channel ID'

    opts = textid.IdentifyOptions(boundaryless=True, min_rarity=0.6)
    textid.first_match("abcthm{kgh}jk", opts).pattern.name
    # 'TryHackMe Flag Format'
"""

from __future__ import annotations

from typing import Optional

from textid.catalog.loader import CatalogLoadError
from textid.catalog.registry import PatternCatalog, get_default_catalog
from textid.identifier.bytes import BytesIdentifier
from textid.identifier.engine import Identifier
from textid.identifier.files import FileScanError
from textid.models.match import ByteMatch, Match
from textid.models.options import IdentifyOptions
from textid.models.pattern import Pattern

__version__ = "0.1.0"

__all__ = [
    "ByteMatch",
    "BytesIdentifier",
    "CatalogLoadError",
    "FileScanError",
    "IdentifyOptions",
    "Identifier",
    "Match",
    "Pattern",
    "PatternCatalog",
    "first_match",
    "get_default_catalog",
    "what_is",
]


def what_is(text: str, options: Optional[IdentifyOptions] = None) -> list[Match]:
    """Identify ``text`` with the bundled catalog (see Identifier.identify)."""
    return Identifier(options).identify(text)


def first_match(text: str, options: Optional[IdentifyOptions] = None) -> Optional[Match]:
    """Most specific match for ``text`` with the bundled catalog, or None."""
    return Identifier(options).first_match(text)
