"""Unit tests for the batched concurrency helper."""

from __future__ import annotations

import asyncio

import pytest

from src.utils.concurrency import run_in_batches


@pytest.mark.asyncio
async def test_results_in_input_order() -> None:
    async def double(x: int) -> int:
        await asyncio.sleep(0.001 * (10 - x))
        return x * 2

    assert await run_in_batches(list(range(10)), double, batch_size=3) == [x * 2 for x in range(10)]


@pytest.mark.asyncio
async def test_exceptions_are_returned_not_raised() -> None:
    async def worker(x: int) -> int:
        if x == 2:
            raise ValueError("bad item")
        return x

    results = await run_in_batches([1, 2, 3], worker, batch_size=5)

    assert results[0] == 1
    assert isinstance(results[1], ValueError)
    assert results[2] == 3


@pytest.mark.asyncio
async def test_concurrency_bounded_by_batch_size() -> None:
    in_flight = 0
    peak = 0

    async def worker(_: int) -> None:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.001)
        in_flight -= 1

    await run_in_batches(list(range(11)), worker, batch_size=4)

    assert peak == 4


@pytest.mark.asyncio
async def test_next_batch_waits_for_slowest_item() -> None:
    log: list[str] = []

    async def worker(x: int) -> None:
        log.append(f"start-{x}")
        await asyncio.sleep(0.02 if x == 0 else 0)
        log.append(f"end-{x}")

    await run_in_batches([0, 1, 2], worker, batch_size=2)

    assert log.index("end-0") < log.index("start-2")


@pytest.mark.asyncio
async def test_empty_input() -> None:
    async def worker(x: int) -> int:
        return x

    assert await run_in_batches([], worker) == []


@pytest.mark.asyncio
async def test_invalid_batch_size() -> None:
    async def worker(x: int) -> int:
        return x

    with pytest.raises(ValueError):
        await run_in_batches([1], worker, batch_size=0)
