"""Structured fan-out helpers for the review pipeline."""

import asyncio
from collections.abc import Coroutine
from typing import Any


async def gather_all(*coros: Coroutine[Any, Any, Any]) -> list[Any]:
    """Run coroutines concurrently and return their results in argument order.

    Unlike ``asyncio.gather``, nothing is left running when this returns or
    raises: on the first failure the remaining coroutines are cancelled and
    awaited, then that first exception is re-raised on its own.

    Args:
        *coros: Coroutines to run

    Returns:
        Results in the order the coroutines were given

    Raises:
        Exception: The first exception raised by any coroutine
    """
    try:
        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(coro) for coro in coros]
    except ExceptionGroup as failures:
        raise failures.exceptions[0] from None
    return [task.result() for task in tasks]
