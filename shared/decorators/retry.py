# shared/decorators/retry.py
import asyncio
import logging
import functools
import random
import time
from typing import Callable, Optional, Sequence

logger = logging.getLogger(__name__)

def retry(
    max_attempts: int = 3,
    delay: float = 1.0,
    backoff: float = 2.0,
    max_delay: float = 30.0,
    jitter: bool = True,
    exceptions: Optional[Sequence[type]] = None
):
    """
    Retry decorator with exponential backoff

    Args:
        max_attempts: Maximum number of attempts
        delay: Initial delay in seconds
        backoff: Multiplier applied to the delay after each attempt
        max_delay: Upper bound for a single delay
        jitter: Scale each delay by a random factor in [0.5, 1.0)
        exceptions: Retry only these exception types and their subclasses (default: all)
    """
    retry_on = tuple(exceptions) if exceptions else (Exception,)

    def _next_delay(attempt: int) -> float:
        current_delay = min(delay * (backoff ** attempt), max_delay)
        if jitter:
            current_delay *= (0.5 + random.random() * 0.5)
        return current_delay

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            for attempt in range(max_attempts):
                try:
                    return await func(*args, **kwargs)
                except retry_on as e:
                    if attempt == max_attempts - 1:
                        logger.error(f"❌ All {max_attempts} retry attempts failed for {func.__name__}")
                        raise

                    current_delay = _next_delay(attempt)
                    logger.warning(f"🔄 Retry {attempt + 1}/{max_attempts} for {func.__name__} "
                                   f"after {current_delay:.2f}s - Error: {e}")
                    await asyncio.sleep(current_delay)

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            for attempt in range(max_attempts):
                try:
                    return func(*args, **kwargs)
                except retry_on as e:
                    if attempt == max_attempts - 1:
                        logger.error(f"❌ All {max_attempts} retry attempts failed for {func.__name__}")
                        raise

                    current_delay = _next_delay(attempt)
                    logger.warning(f"🔄 Retry {attempt + 1}/{max_attempts} for {func.__name__} "
                                   f"after {current_delay:.2f}s - Error: {e}")
                    time.sleep(current_delay)

        # Return appropriate wrapper
        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        else:
            return sync_wrapper

    return decorator
