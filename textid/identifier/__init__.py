"""textid identifier package.

The matching side of the library: filters.py (rarity/tag predicate),
strings.py (printable-string extraction), files.py (file access capability),
pool.py (thread fan-out), engine.py (text Identifier) and bytes.py
(BytesIdentifier).
"""
