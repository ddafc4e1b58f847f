"""Split identifier lists into fixed-size batches, one per worker."""

from __future__ import annotations

from typing import Sequence

DEFAULT_BATCH_SIZE = 1000


def partition(identifiers: Sequence[int], batch_size: int = DEFAULT_BATCH_SIZE) -> list[list[int]]:
    """Return consecutive batches of ``batch_size``; the last one holds the remainder."""

    if batch_size < 1:
        raise ValueError("batch_size must be >= 1")
    ids = list(identifiers)
    return [ids[start : start + batch_size] for start in range(0, len(ids), batch_size)]


__all__ = ["DEFAULT_BATCH_SIZE", "partition"]
