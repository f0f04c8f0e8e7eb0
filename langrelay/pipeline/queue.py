# SPDX-FileCopyrightText: 2025 RealTimeX
# SPDX-License-Identifier: MPL-2.0

import asyncio
import logging
from typing import Awaitable, Callable, Sequence, TypeVar

from langrelay.logger import global_logger
from langrelay.pipeline.cancel import CancelToken, RunInterrupted
from langrelay.pipeline.retry import FixedDelay, RetryExhaustedError, RetryPolicy

T = TypeVar("T")
R = TypeVar("R")


class _NotRun:
    def __repr__(self):
        return "NOT_RUN"

    def __bool__(self):
        return False


# Placeholder left in result slots whose item was never completed
NOT_RUN = _NotRun()


async def _gather_all(coros) -> None:
    tasks = [asyncio.create_task(c) for c in coros]
    try:
        await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def run_queue(
        items: Sequence[T],
        worker_count: int,
        task: Callable[[T], Awaitable[R]],
        *,
        start_delay: float = 0,
        retry_policy: RetryPolicy | None = None,
        cancel: CancelToken | None = None,
        fatal_errors: tuple[type[BaseException], ...] = (),
        logger: logging.Logger = global_logger,
) -> list[R]:
    """
    Apply `task` to every item with bounded concurrency.

    worker_count == 0 starts one lane per item at once. Otherwise exactly
    `worker_count` lanes pull from a shared cursor, lane k starting after
    k * start_delay seconds. A failing item is retried by its lane until it
    succeeds, the retry policy gives up, or the run is cancelled.

    Exceptions listed in `fatal_errors` are never retried and propagate at once.

    results[i] always belongs to items[i]; items that never completed are NOT_RUN.
    """
    cancel = cancel or CancelToken()
    retry_policy = retry_policy or FixedDelay(10)
    results: list = [NOT_RUN] * len(items)

    async def run_item(i: int):
        attempt = 0
        while not cancel.cancelled:
            try:
                results[i] = await task(items[i])
                if attempt > 0:
                    logger.debug(f"Queue item {i} succeeded after {attempt} retries")
                return
            except RunInterrupted:
                return
            except fatal_errors:
                raise
            except Exception as e:
                attempt += 1
                delay = retry_policy.delay(attempt)
                if delay is None:
                    raise RetryExhaustedError(f"Queue item {i} failed after {attempt} attempts: {e!r}",
                                              attempts=attempt) from e
                logger.warning(f"Queue item {i} failed: {e!r}; retry {attempt} in {delay}s")
                if await cancel.sleep(delay):
                    return

    if not worker_count:
        await _gather_all(run_item(i) for i in range(len(items)))
        return results

    cursor = iter(range(len(items)))

    async def worker(worker_index: int):
        if start_delay and worker_index and await cancel.sleep(worker_index * start_delay):
            return
        while not cancel.cancelled:
            i = next(cursor, None)
            if i is None:
                return
            await run_item(i)

    await _gather_all(worker(k) for k in range(worker_count))
    return results
