import asyncio
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")


def chunk(items: Sequence[T], size: int) -> List[List[T]]:
    """Splits items into consecutive groups of at most `size` elements."""
    if size < 1:
        raise ValueError(f"Batch size must be positive, got {size}")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


async def run_in_batches(
    items: Sequence[T],
    size: int,
    func: Callable[[T], Awaitable[R]],
    check: Optional[Callable[[List[T], List[R]], None]] = None,
) -> List[R]:
    """Runs `func` over items, one batch at a time, concurrently within a batch.

    Results come back in input order. Every call of a batch finishes before
    the first error of that batch, in input order, is raised. `check` sees each
    finished batch and may raise to stop before the next batch is started.
    """
    results: List[R] = []
    for batch in chunk(items, size):
        batch_results = await asyncio.gather(*(func(item) for item in batch), return_exceptions=True)
        for result in batch_results:
            if isinstance(result, BaseException):
                raise result
        if check is not None:
            check(batch, batch_results)
        results.extend(batch_results)
    return results
