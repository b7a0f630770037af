"""textid models package.

Defines the value objects shared by the catalog and the identifiers:

  - pattern.py — Pattern (one catalog entry and its derived boundaryless regex)
  - match.py   — Match / ByteMatch (one successful regex test)
  - options.py — IdentifyOptions (per-query rarity/tag filter and mode flags)
"""
