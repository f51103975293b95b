import time
import functools
import logging
from typing import Callable, Optional


def time_execution(func: Optional[Callable] = None, *, level: int = logging.DEBUG):
    """
    Decorator to measure execution time of a function.
    Logs the execution time with the function's qualified name.
    Works bare (@time_execution) or with a log level (@time_execution(level=logging.INFO)).
    """

    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - start_time) * 1000
                logger = logging.getLogger(fn.__module__)
                logger.log(level, f"⏱️ {fn.__qualname__} executed in {elapsed_ms:.2f} ms")

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator


class Stopwatch:
    """Restartable millisecond stopwatch for per-stage frame timing"""

    def __init__(self):
        self._start = time.perf_counter()

    def restart(self) -> None:
        self._start = time.perf_counter()

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self._start) * 1000

    def lap(self) -> float:
        """Return elapsed milliseconds and restart"""
        elapsed = self.elapsed_ms
        self.restart()
        return elapsed
