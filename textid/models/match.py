"""Match records produced by the identifiers.

One Match per successful regex test. Matches are never de-duplicated: a
candidate satisfying five patterns yields five Matches, in catalog order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from textid.models.pattern import Pattern


@dataclass(frozen=True)
class Match:
    """A text candidate and the pattern it satisfied.

    ``text`` is the whole candidate that was tested, not the matched span.
    """

    text: str
    pattern: Pattern

    def as_dict(self) -> dict[str, Any]:
        return {"text": self.text, "data": self.pattern.as_dict()}


@dataclass(frozen=True)
class ByteMatch:
    """A byte candidate and the pattern it satisfied."""

    text: bytes
    pattern: Pattern

    def as_dict(self) -> dict[str, Any]:
        return {"text": self.text, "data": self.pattern.as_dict()}
