"""Pattern record — one named, tagged regular expression from the catalog.

Patterns are frozen dataclasses. They are built once by the catalog loader and
shared by reference across identifiers and worker threads; a Match holding a
Pattern is equivalent to holding a copy of its metadata.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from textid.catalog.boundary import strip_anchors


@dataclass(frozen=True)
class Pattern:
    """A single catalog entry.

    Fields:
        name:         Display name (e.g. ``"YouTube Channel ID"``).
        regex:        Regex as authored, anchors included.
        boundaryless: ``regex`` with structural ``^``/``$`` removed.
        rarity:       Specificity score in [0, 1]; higher is more specific.
        tags:         De-duplicated tags in authored order.
        plural_name:  Renderer hint: ``name`` is already plural.
        description:  Optional human description.
        url:          Optional reference URL (renderers append the match).
        exploit:      Optional note on how the identified value can be abused.
    """

    name: str
    regex: str
    boundaryless: str
    rarity: float
    tags: tuple[str, ...] = ()
    plural_name: bool = False
    description: Optional[str] = None
    url: Optional[str] = None
    exploit: Optional[str] = field(default=None, compare=False)

    @classmethod
    def create(
        cls,
        name: str,
        regex: str,
        rarity: float,
        tags: Iterable[str] = (),
        plural_name: bool = False,
        description: Optional[str] = None,
        url: Optional[str] = None,
        exploit: Optional[str] = None,
    ) -> "Pattern":
        """Build a Pattern, deriving ``boundaryless`` from ``regex``."""
        return cls(
            name=name,
            regex=regex,
            boundaryless=strip_anchors(regex),
            rarity=float(rarity),
            tags=tuple(dict.fromkeys(tags)),
            plural_name=plural_name,
            description=description,
            url=url,
            exploit=exploit,
        )

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def as_dict(self) -> dict[str, Any]:
        """Plain mapping of all metadata, for renderers and serializers."""
        return {
            "name": self.name,
            "regex": self.regex,
            "boundaryless": self.boundaryless,
            "plural_name": self.plural_name,
            "description": self.description,
            "rarity": self.rarity,
            "url": self.url,
            "exploit": self.exploit,
            "tags": list(self.tags),
        }
