"""
Async Utility Functions

Retry and timeout helpers for the external scorer, plus a bridge for
running a coroutine from synchronous grading code.
"""

import asyncio
from typing import Callable, Any, Awaitable
from functools import wraps
import random

from ..core.exceptions import ScorerError, RateLimitError, ScorerResponseError
from .logging import get_logger

logger = get_logger(__name__)


def retry_with_backoff(max_retries: int = 3, base_delay: float = 1.0,
                       max_delay: float = 30.0, backoff_factor: float = 2.0,
                       jitter: bool = True):
    """
    Decorator for retry logic with exponential backoff.

    The wrapped coroutine may override ``max_retries`` per call through a
    ``retries`` attribute on its first positional argument (the client).

    Args:
        max_retries: Maximum number of retry attempts
        base_delay: Base delay in seconds
        max_delay: Maximum delay in seconds
        backoff_factor: Multiplier for exponential backoff
        jitter: Add random jitter to prevent thundering herd
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            retries = getattr(args[0], 'retries', max_retries) if args else max_retries

            for attempt in range(retries + 1):
                try:
                    return await func(*args, **kwargs)
                except ScorerResponseError:
                    # A malformed reply will not improve on retry
                    raise
                except (RateLimitError, ScorerError, asyncio.TimeoutError) as e:
                    if attempt == retries:
                        logger.error(f"Function {func.__name__} failed after {retries} retries: {str(e)}")
                        raise

                    delay = min(base_delay * (backoff_factor ** attempt), max_delay)

                    if jitter:
                        delay = delay * (0.5 + random.random() * 0.5)

                    if isinstance(e, RateLimitError) and e.retry_after:
                        delay = min(max(delay, e.retry_after), max_delay)

                    logger.warning(
                        f"Function {func.__name__} failed (attempt {attempt + 1}/{retries + 1}), "
                        f"retrying in {delay:.2f}s: {str(e)}"
                    )
                    await asyncio.sleep(delay)

        return wrapper
    return decorator


async def timeout_after(coro: Awaitable, timeout: float,
                        timeout_message: str = "Operation timed out") -> Any:
    """
    Execute coroutine with timeout.

    Args:
        coro: Coroutine to execute
        timeout: Timeout in seconds
        timeout_message: Message to include in timeout exception

    Returns:
        Result of coroutine

    Raises:
        asyncio.TimeoutError: If operation times out
    """
    try:
        return await asyncio.wait_for(coro, timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Timeout after {timeout}s: {timeout_message}")
        raise asyncio.TimeoutError(timeout_message)


def in_event_loop() -> bool:
    """Whether the current thread is running an event loop."""
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


def run_sync(coro: Awaitable) -> Any:
    """
    Run a coroutine to completion from synchronous code.

    Callers inside a running loop should check in_event_loop() before
    building the coroutine.

    Raises:
        RuntimeError: If called while an event loop is already running
    """
    if not in_event_loop():
        return asyncio.run(coro)

    # Close the coroutine so it is not reported as never awaited
    coro.close()
    raise RuntimeError("run_sync() cannot be used inside a running event loop; await the async API instead")
