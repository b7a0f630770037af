"""Byte-oriented identifier.

Same contract as ``Identifier`` but over raw ``bytes`` using the catalog's
byte-compiled tables, for input that is not valid text (memory dumps, packet
captures, arbitrary binaries). No decoding happens anywhere, so invalid
encodings cannot fail a candidate.
"""

from __future__ import annotations

from textid.identifier.engine import BaseIdentifier
from textid.models.match import ByteMatch
from textid.models.pattern import Pattern


class BytesIdentifier(BaseIdentifier[bytes, ByteMatch]):
    """Identify byte strings.

    Usage::

        identifier = BytesIdentifier()
        identifier.identify(b"https://swanandx.github.io")[0].pattern.name
        # "Uniform Resource Locator (URL)"

    ``identify()`` never probes the filesystem: its input is already data.
    Use ``identify_file()`` to scan the printable byte runs of a file.
    """

    binary = True

    def _make_match(self, text: bytes, pattern: Pattern) -> ByteMatch:
        return ByteMatch(bytes(text), pattern)

    def identify(self, data: bytes) -> list[ByteMatch]:
        """Every eligible pattern matching ``data``, in priority order."""
        return self.identify_text(data)
