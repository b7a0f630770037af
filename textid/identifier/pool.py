"""Thread fan-out for multi-candidate identification.

Provides ``map_candidates()``: apply a per-candidate scan function to many
candidates, sequentially for short lists and on a ThreadPoolExecutor otherwise.

Each worker runs the full filtered-pattern loop for one candidate and returns
its local match list. Results are collected per candidate and returned in
candidate index order, so the merged output is deterministic regardless of
which worker finishes first. The only shared inputs are the catalog tables,
which are immutable.
"""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, Sequence, TypeVar

from textid.constants import DEFAULT_MAX_WORKERS, PARALLEL_MIN_CANDIDATES
from textid.utils.logger import get_logger

logger = get_logger(__name__)

C = TypeVar("C")
R = TypeVar("R")


def resolve_max_workers(max_workers: Optional[int], candidates: int) -> int:
    """Worker count for ``candidates`` items: never more threads than items."""
    if max_workers is None:
        max_workers = min(DEFAULT_MAX_WORKERS, (os.cpu_count() or 1) + 4)
    if max_workers < 1:
        raise ValueError(f"max_workers must be at least 1, got {max_workers}")
    return max(1, min(max_workers, candidates))


def map_candidates(
    scan: Callable[[C], list[R]],
    candidates: Sequence[C],
    max_workers: Optional[int] = None,
    parallel_threshold: int = PARALLEL_MIN_CANDIDATES,
) -> list[list[R]]:
    """Run ``scan`` over every candidate; one result list per candidate, in order.

    Args:
        scan:               Per-candidate function (must be thread-safe).
        candidates:         Candidate strings or byte runs.
        max_workers:        Thread cap (None → DEFAULT_MAX_WORKERS / cpu bound).
        parallel_threshold: Lists shorter than this run on the calling thread.

    Raises:
        Any exception raised by ``scan`` for any candidate.
    """
    if len(candidates) < parallel_threshold:
        return [scan(candidate) for candidate in candidates]

    workers = resolve_max_workers(max_workers, len(candidates))
    if workers == 1:
        return [scan(candidate) for candidate in candidates]

    logger.debug("Matching candidates in parallel", candidates=len(candidates), workers=workers)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="textid-match") as executor:
        # executor.map yields in submission order, not completion order.
        return list(executor.map(scan, candidates))
