"""Retry and backoff utilities.

Exponential backoff is shared by outbound HTTP retries and by the process
supervisor when it restarts crashed workers.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Default retry configuration
DEFAULT_ATTEMPTS = 2
DEFAULT_BASE_DELAY = 0.2  # seconds


def calculate_delay(
    attempt: int,
    base_delay: float = DEFAULT_BASE_DELAY,
    max_delay: float | None = None,
) -> float:
    """Calculate exponential backoff delay for a given attempt.

    Args:
        attempt: Zero-indexed attempt number
        base_delay: Base delay in seconds
        max_delay: Optional upper bound for the returned delay

    Returns:
        Delay in seconds (base_delay * 2^attempt), capped at max_delay
    """
    delay = base_delay * (2**attempt)
    if max_delay is not None:
        return min(delay, max_delay)
    return delay


async def with_retry(
    fn: Callable[[], Awaitable[T]],
    attempts: int = DEFAULT_ATTEMPTS,
    exceptions: tuple[type[Exception], ...] = (Exception,),
    base_delay: float = DEFAULT_BASE_DELAY,
) -> T:
    """Execute async function with exponential backoff retry.

    Args:
        fn: Async function to execute (typically a lambda or partial)
        attempts: Maximum number of attempts
        exceptions: Tuple of exception types to catch and retry
        base_delay: Base delay in seconds for exponential backoff

    Returns:
        Result from successful function execution

    Raises:
        The last exception if all attempts fail

    Example:
        response = await with_retry(
            lambda: client.get(url),
            attempts=3,
            exceptions=(httpx.TransportError,),
        )
    """
    last_error: Exception | None = None

    for attempt in range(attempts):
        try:
            return await fn()
        except exceptions as e:
            last_error = e
            if attempt < attempts - 1:
                delay = calculate_delay(attempt, base_delay)
                logger.debug(
                    "Attempt %d/%d failed (%s), retrying in %.2fs",
                    attempt + 1,
                    attempts,
                    type(e).__name__,
                    delay,
                )
                await asyncio.sleep(delay)

    raise last_error  # type: ignore[misc]
