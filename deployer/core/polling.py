"""Fixed-interval polling with an attempt budget."""

import asyncio
from typing import Awaitable, Callable, TypeVar

from deployer.core.exceptions import PollTimeoutError
from deployer.utils.logging import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


async def poll_until(
    fetch: Callable[[], Awaitable[T]],
    is_done: Callable[[T], bool],
    interval: float,
    max_attempts: int,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Call `fetch` until `is_done` accepts its result.

    Sleeps `interval` seconds between attempts, never after the last one.
    Worst case is `max_attempts` fetches and `max_attempts - 1` sleeps.

    Raises:
        PollTimeoutError: After `max_attempts` fetches without a done result
    """
    for attempt in range(1, max_attempts + 1):
        result = await fetch()
        if is_done(result):
            logger.debug("poll.done", attempt=attempt)
            return result
        logger.debug("poll.pending", attempt=attempt, max_attempts=max_attempts)
        if attempt < max_attempts:
            await sleep(interval)
    raise PollTimeoutError(max_attempts)
