"""Batched concurrency primitive for the ingestion pipeline.

``run_in_batches`` splits a work list into consecutive groups of
``batch_size`` and runs each group with ``asyncio.gather``.  The next group
only starts once every task of the current one has settled, so at most
``batch_size`` workers are ever in flight and groups never overlap.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Sequence, TypeVar

from src.utils.logging import get_logger

_T = TypeVar("_T")
_R = TypeVar("_R")

_logger = get_logger(__name__)


async def run_in_batches(
    items: Sequence[_T],
    worker: Callable[[_T], Awaitable[_R]],
    batch_size: int = 5,
) -> list[_R | BaseException]:
    """Apply *worker* to every item, ``batch_size`` at a time.

    Parameters
    ----------
    items:
        Work items, processed in order.
    worker:
        Async callable invoked once per item.
    batch_size:
        Maximum number of concurrent workers.  Must be at least 1.

    Returns
    -------
    list[_R | BaseException]
        One entry per item, in input order.  A worker that raised is
        represented by its exception; it never aborts the other workers.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")

    results: list[_R | BaseException] = []
    total_batches = (len(items) + batch_size - 1) // batch_size
    for start in range(0, len(items), batch_size):
        batch = items[start : start + batch_size]
        batch_results = await asyncio.gather(
            *(worker(item) for item in batch),
            return_exceptions=True,
        )
        for result in batch_results:
            # Cancellation and interpreter exits are not worker failures.
            if isinstance(result, BaseException) and not isinstance(result, Exception):
                raise result
        results.extend(batch_results)
        _logger.debug(
            "batch_complete",
            batch=start // batch_size + 1,
            total_batches=total_batches,
            size=len(batch),
        )
    return results
