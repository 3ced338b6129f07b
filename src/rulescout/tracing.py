"""
Performance tracing decorator for the expensive entry points
(corpus loading and discovery).
"""

import time
import functools
from typing import Callable, Any
from rulescout.logging_config import logger


def trace(func: Callable) -> Callable:
    """
    Decorator that logs function entry, exit, and execution time.

    Usage:
        @trace
        def my_function(arg1, arg2):
            ...

    Logs:
        - Entry with function name
        - Exit with function name and execution duration
        - Any exceptions raised during execution (re-raised unchanged)
    """
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        func_name = func.__qualname__

        logger.debug(f"TRACE_ENTER: {func_name}")

        start_time = time.perf_counter()

        try:
            result = func(*args, **kwargs)
        except Exception as e:
            duration = time.perf_counter() - start_time
            logger.error(
                f"TRACE_EXIT: {func_name} failed after {duration:.4f}s with {type(e).__name__}: {str(e)}"
            )
            raise

        duration = time.perf_counter() - start_time
        logger.info(f"TRACE_EXIT: {func_name} completed in {duration:.4f}s")
        return result

    return wrapper
