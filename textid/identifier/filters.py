"""Rarity and tag filter applied to every pattern before it is matched."""

from __future__ import annotations

from textid.models.options import IdentifyOptions
from textid.models.pattern import Pattern


def is_eligible(options: IdentifyOptions, pattern: Pattern) -> bool:
    """True if ``pattern`` passes the rarity window and tag filters of ``options``.

    Tag semantics:
      - include_tags: the pattern must carry EVERY requested tag.
      - exclude_tags: the pattern is rejected if it carries ANY listed tag.
    Empty sets impose no restriction. Pure function, no side effects.
    """
    if pattern.rarity < options.min_rarity:
        return False
    if pattern.rarity > options.max_rarity:
        return False

    if options.include_tags and not options.include_tags.issubset(pattern.tags):
        return False
    if options.exclude_tags and not options.exclude_tags.isdisjoint(pattern.tags):
        return False

    return True
