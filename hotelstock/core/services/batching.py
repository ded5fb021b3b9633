"""
Bounded-size batching helpers.

Backend queries are limited in how many identifiers they accept and in how
many can be in flight at once, so large catalogs are processed in waves:
every item of a wave runs concurrently, waves run one after another with a
pacing delay in between.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from hotelstock.config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def chunked(items: Sequence[T], size: int) -> list[list[T]]:
    """
    Split items into ordered chunks of at most `size` elements.

    The concatenation of the chunks equals the input; an empty input yields
    no chunks.
    """
    if size <= 0:
        raise ValueError(f"chunk size must be positive, got {size}")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


async def run_in_waves(
    items: Sequence[T],
    worker: Callable[[T], Awaitable[R]],
    wave_size: int,
    delay: float = 0.0,
    label: str = "wave",
) -> list[R]:
    """
    Run `worker` over items in waves of `wave_size`.

    Workers inside a wave are awaited together; the next wave starts `delay`
    seconds after the previous one finished. Results keep the input order.
    Worker exceptions propagate; callers that need soft failures handle them
    inside the worker.
    """
    waves = chunked(items, wave_size)
    results: list[R] = []

    for index, wave in enumerate(waves):
        logger.debug(
            f"{label}_started",
            wave=index + 1,
            waves=len(waves),
            size=len(wave),
        )
        results.extend(await asyncio.gather(*(worker(item) for item in wave)))

        if delay > 0 and index < len(waves) - 1:
            await asyncio.sleep(delay)

    return results
