import time
import functools
import inspect
from .logger import logger


def log_timing(func):
    """Decorator to log function execution time under the function's qualified name"""
    name = func.__qualname__

    def _completed(start):
        duration = (time.perf_counter() - start) * 1000
        logger.debug(f"{name} completed", function=name, duration_ms=round(duration, 2))

    def _failed(start, error):
        duration = (time.perf_counter() - start) * 1000
        logger.error(
            f"{name} failed",
            function=name,
            duration_ms=round(duration, 2),
            error_type=type(error).__name__,
            error=str(error),
        )

    @functools.wraps(func)
    async def async_wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            _failed(start, e)
            raise
        _completed(start)
        return result

    @functools.wraps(func)
    def sync_wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            _failed(start, e)
            raise
        _completed(start)
        return result

    if inspect.iscoroutinefunction(func):
        return async_wrapper
    return sync_wrapper
