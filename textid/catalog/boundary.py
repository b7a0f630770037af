"""Boundary transform — derives the boundaryless variant of a catalog regex.

Catalog regexes are authored for whole-string matching (``^...$``). Stripping
the anchors lets the same pattern find an identifier embedded in a longer
string (``xx thm{flag} yy``). The transform is a character-level scanner, not a
regex substitution, so it can tell structural anchors apart from literal
``^``/``$`` characters.

Removed: ``^`` and ``$`` outside any character class, escape or quoted span.
Kept verbatim:
  - escaped anchors (``\\^``, ``\\$``); an escape consumes exactly one
    following character, so ``\\\\^`` is an escaped backslash plus an anchor
  - anchors inside ``[...]`` (``[^a-z]``, ``[$%&]``), including a literal
    ``]`` placed first in the class and POSIX classes such as ``[:alpha:]``
  - anything inside a ``\\Q...\\E`` literal span
"""

from __future__ import annotations

_ANCHORS = frozenset("^$")


def strip_anchors(regex: str) -> str:
    """Return ``regex`` with structural ``^`` and ``$`` anchors removed."""
    out: list[str] = []
    n = len(regex)
    i = 0
    in_class = False
    # Index at which a ']' is still literal (right after '[' or '[^').
    class_body_start = -1

    while i < n:
        ch = regex[i]

        if ch == "\\":
            if regex.startswith("\\Q", i):
                end = regex.find("\\E", i + 2)
                stop = n if end == -1 else end + 2
                out.append(regex[i:stop])
                i = stop
                continue
            out.append(regex[i:i + 2])
            i += 2
            continue

        if in_class:
            if regex.startswith("[:", i):
                end = regex.find(":]", i + 2)
                if end != -1:
                    out.append(regex[i:end + 2])
                    i = end + 2
                    continue
            if ch == "]" and i != class_body_start:
                in_class = False
            out.append(ch)
            i += 1
            continue

        if ch == "[":
            in_class = True
            out.append(ch)
            i += 1
            if i < n and regex[i] == "^":
                out.append("^")
                i += 1
            class_body_start = i
            continue

        if ch not in _ANCHORS:
            out.append(ch)
        i += 1

    return "".join(out)
