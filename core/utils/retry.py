"""Bounded retry and timeout helpers for calls to external collaborators."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def retry_async(
    func: Callable[[], Awaitable[T]],
    max_retries: int = 2,
    initial_delay: float = 0.5,
    backoff_factor: float = 2.0,
    timeout: Optional[float] = None,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    operation: str = "call",
) -> T:
    """Await ``func`` with a per-attempt timeout, retrying with exponential backoff.

    Args:
        func: Zero-argument coroutine factory, called once per attempt
        max_retries: Retries after the first attempt
        initial_delay: Initial delay in seconds
        backoff_factor: Multiplier for delay after each retry
        timeout: Per-attempt timeout in seconds (None disables it)
        retry_on: Exception types that trigger a retry; others propagate at once
        operation: Name used in log messages

    Returns:
        The result of the first successful attempt
    """
    delay = initial_delay
    last_exception: Optional[BaseException] = None

    for attempt in range(max_retries + 1):
        try:
            if timeout is not None:
                return await asyncio.wait_for(func(), timeout=timeout)
            return await func()
        except retry_on as e:
            last_exception = e
            if attempt < max_retries:
                logger.warning(
                    f"{operation}: attempt {attempt + 1} failed: {e!r}. "
                    f"Retrying in {delay}s..."
                )
                await asyncio.sleep(delay)
                delay *= backoff_factor
            else:
                logger.error(f"{operation}: all {max_retries + 1} attempts failed")

    raise last_exception

