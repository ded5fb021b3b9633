"""Tests for chunked() and run_in_waves()."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from hotelstock.core.services import batching
from hotelstock.core.services.batching import chunked, run_in_waves


class TestChunked:
    def test_chunks_cover_input_in_order(self):
        items = list(range(7))
        chunks = chunked(items, 3)
        assert chunks == [[0, 1, 2], [3, 4, 5], [6]]
        assert [x for chunk in chunks for x in chunk] == items

    def test_no_chunk_exceeds_size(self):
        for size in (1, 2, 5, 50):
            assert all(len(chunk) <= size for chunk in chunked(list(range(123)), size))

    def test_exact_multiple(self):
        assert chunked(["a", "b", "c", "d"], 2) == [["a", "b"], ["c", "d"]]

    def test_empty_input_yields_no_chunks(self):
        assert chunked([], 50) == []

    @pytest.mark.parametrize("size", [0, -1])
    def test_non_positive_size_rejected(self, size):
        with pytest.raises(ValueError, match="chunk size must be positive"):
            chunked([1, 2, 3], size)


class TestRunInWaves:
    async def test_results_keep_input_order(self):
        async def double(x: int) -> int:
            # Later items finish first inside a wave
            await asyncio.sleep(0.001 * (10 - x))
            return x * 2

        results = await run_in_waves(list(range(10)), double, wave_size=4)
        assert results == [x * 2 for x in range(10)]

    async def test_wave_concurrency_bounded(self):
        active = 0
        peak = 0

        async def worker(x: int) -> int:
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0)
            active -= 1
            return x

        await run_in_waves(list(range(12)), worker, wave_size=5)
        assert peak == 5

    async def test_sleeps_between_waves_not_after(self):
        async def identity(x: int) -> int:
            return x

        with patch.object(batching.asyncio, "sleep", new=AsyncMock()) as sleep:
            await run_in_waves(list(range(7)), identity, wave_size=3, delay=0.5)

        assert sleep.await_count == 2
        sleep.assert_awaited_with(0.5)

    async def test_zero_delay_never_sleeps(self):
        async def identity(x: int) -> int:
            return x

        with patch.object(batching.asyncio, "sleep", new=AsyncMock()) as sleep:
            await run_in_waves(list(range(7)), identity, wave_size=3, delay=0)

        sleep.assert_not_awaited()

    async def test_empty_input(self):
        worker = AsyncMock()
        assert await run_in_waves([], worker, wave_size=3) == []
        worker.assert_not_awaited()

    async def test_worker_exception_propagates(self):
        async def boom(x: int) -> int:
            raise RuntimeError("backend down")

        with pytest.raises(RuntimeError, match="backend down"):
            await run_in_waves([1], boom, wave_size=1)
