"""Decorators and helpers for consistent error handling and logging."""
from __future__ import annotations

import functools
import time
from typing import Any, Callable, Optional, TypeVar

from loguru import logger

T = TypeVar('T')


def handle_exceptions(
    logger_instance=logger,
    default_return: Optional[Any] = None,
    reraise: bool = False,
    message: Optional[str] = None
):
    """Log any exception raised by the wrapped callable.

    Args:
        logger_instance: Logger used for the error line
        default_return: Value returned when an exception was swallowed
        reraise: Re-raise after logging instead of returning ``default_return``
        message: Prefix for the log line (defaults to the function name)
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                error_msg = message or f"Error in {func.__name__}"
                logger_instance.opt(exception=e).error(f"{error_msg}: {e}")
                if reraise:
                    raise
                return default_return
        return wrapper
    return decorator


def log_execution_time(logger_instance=logger, level: str = "DEBUG"):
    """Log how long the wrapped callable took."""
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                elapsed = time.perf_counter() - start_time
                logger_instance.log(level.upper(), f"{func.__name__} executed in {elapsed * 1000:.1f}ms")
        return wrapper
    return decorator


def retry_on_failure(max_retries: int = 3, delay: float = 0.5, exceptions: tuple = (Exception,)):
    """Retry the wrapped callable when it raises one of ``exceptions``.

    The last exception is re-raised once all attempts are used up.
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            last_exception = None
            for attempt in range(1, max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    last_exception = e
                    if attempt < max_retries:
                        logger.warning(f"{func.__name__} failed (attempt {attempt}/{max_retries}): {e}")
                        time.sleep(delay)
                    else:
                        logger.error(f"{func.__name__} failed after {max_retries} attempts: {e}")
            raise last_exception
        return wrapper
    return decorator
