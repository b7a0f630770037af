"""Printable-string extraction from binary blobs.

Equivalent in spirit to ``strings(1)``: the blob is scanned left to right and
every run of printable ASCII graphic bytes (``!`` through ``~``; whitespace
ends a run) at least ``min_length`` long becomes a candidate.

End-of-scan policy:
  - ``keep_trailing=False`` (default): the final run obeys the same length
    threshold as every other run.
  - ``keep_trailing=True``: the final buffer is emitted unconditionally, even
    when it is shorter than ``min_length`` or empty. Kept for compatibility
    with result sets produced by older extraction.
"""

from __future__ import annotations

from typing import Union

from textid.constants import ASCII_GRAPHIC_FIRST, ASCII_GRAPHIC_LAST, MIN_STRING_LENGTH


def is_ascii_graphic(byte: int) -> bool:
    return ASCII_GRAPHIC_FIRST <= byte <= ASCII_GRAPHIC_LAST


def extract_strings(
    data: bytes,
    min_length: int = MIN_STRING_LENGTH,
    keep_trailing: bool = False,
    as_bytes: bool = False,
) -> list[Union[str, bytes]]:
    """Return the printable runs of ``data`` in order of appearance.

    Args:
        data:          Raw bytes (e.g. file contents).
        min_length:    Shortest run kept.
        keep_trailing: Emit the final buffer regardless of its length.
        as_bytes:      Return ``bytes`` runs instead of ``str``.

    Returns:
        A new list on every call; the same input always yields the same list.
    """
    if min_length < 1:
        raise ValueError(f"min_length must be at least 1, got {min_length}")

    runs: list[bytes] = []
    buffer = bytearray()

    for byte in data:
        if is_ascii_graphic(byte):
            buffer.append(byte)
        elif buffer:
            if len(buffer) >= min_length:
                runs.append(bytes(buffer))
            buffer.clear()

    if keep_trailing or len(buffer) >= min_length:
        runs.append(bytes(buffer))

    if as_bytes:
        return list(runs)
    # Runs only contain bytes 0x21-0x7E, so ASCII decoding cannot fail.
    return [run.decode("ascii") for run in runs]
