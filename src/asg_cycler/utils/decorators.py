"""Decorator utilities for cross-cutting concerns."""
import time
import logging
import functools
from typing import Any, Callable, TypeVar, cast

logger = logging.getLogger(__name__)

F = TypeVar('F', bound=Callable[..., Any])

def log_execution_time(func: F) -> F:
    """Decorator to log how long a group operation took.

    The ``group`` keyword argument, when present, is included in the message
    so runs over several groups can be told apart in the log.

    Args:
        func: The function to decorate

    Returns:
        Decorated function that logs execution time
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        label = func.__name__
        if kwargs.get('group'):
            label = f"{label} {kwargs['group']}"

        start_time = time.time()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            duration = time.time() - start_time
            logger.error(f"{label} failed after {duration:.2f}s: {str(e)}")
            raise
        logger.info(f"{label} completed in {time.time() - start_time:.2f}s")
        return result
    return cast(F, wrapper)
