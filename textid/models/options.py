"""Per-query identification options.

``IdentifyOptions`` is an immutable value object. Construct it with keyword
arguments and derive variants with ``replace()``::

    opts = IdentifyOptions(min_rarity=0.6, boundaryless=True)
    strict = opts.replace(exclude_tags={"Phone Number"})
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable

from textid.constants import MAX_RARITY, MIN_RARITY

if TYPE_CHECKING:
    from textid.config import IdentifyConfig


@dataclass(frozen=True)
class IdentifyOptions:
    """Filter and mode settings for one identification query.

    Fields:
        min_rarity:   Keep patterns with rarity >= this value.
        max_rarity:   Keep patterns with rarity <= this value.
        include_tags: Keep only patterns carrying every one of these tags.
                      Empty means no restriction.
        exclude_tags: Drop patterns carrying any of these tags.
        boundaryless: Match the anchor-stripped regex variants.
        file_support: Treat a query naming a regular file as that file's contents.

    Raises:
        ValueError: If a rarity bound is outside [0, 1] or min_rarity > max_rarity.
    """

    min_rarity: float = MIN_RARITY
    max_rarity: float = MAX_RARITY
    include_tags: frozenset[str] = field(default_factory=frozenset)
    exclude_tags: frozenset[str] = field(default_factory=frozenset)
    boundaryless: bool = False
    file_support: bool = False

    def __post_init__(self) -> None:
        # Normalise any iterable of tags (list, set, tuple) to a frozenset.
        # A bare string would be split into characters, so reject it.
        for name in ("include_tags", "exclude_tags"):
            value = getattr(self, name)
            if isinstance(value, (str, bytes)):
                raise ValueError(f"{name} must be a collection of tags, not a string")
            object.__setattr__(self, name, frozenset(value))

        for name in ("min_rarity", "max_rarity"):
            value = float(getattr(self, name))
            if not MIN_RARITY <= value <= MAX_RARITY:
                raise ValueError(
                    f"{name} must be between {MIN_RARITY} and {MAX_RARITY}, got {value}"
                )
            object.__setattr__(self, name, value)

        if self.min_rarity > self.max_rarity:
            raise ValueError(
                f"min_rarity ({self.min_rarity}) is greater than max_rarity ({self.max_rarity})"
            )

    def replace(self, **changes: Any) -> "IdentifyOptions":
        """Return a new, validated IdentifyOptions with ``changes`` applied."""
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_config(cls, config: "IdentifyConfig") -> "IdentifyOptions":
        """Build options from the ``identify:`` section of the config file."""
        return cls(
            min_rarity=config.min_rarity,
            max_rarity=config.max_rarity,
            include_tags=_tags(config.include_tags),
            exclude_tags=_tags(config.exclude_tags),
            boundaryless=config.boundaryless,
            file_support=config.file_support,
        )


def _tags(values: Iterable[str]) -> frozenset[str]:
    return frozenset(str(v) for v in values)
