"""
Best-effort execution helpers.

Wraps coroutine functions whose failure must degrade to a default value
instead of propagating.
"""

import functools
from typing import Any, Awaitable, Callable

from loguru import logger

resilience_log = logger.bind(module="BestEffort")


def best_effort(fallback: Callable[..., Any]):
    """
    Decorate a coroutine function so any exception returns a fallback value.

    Args:
        fallback: Called with the same arguments as the wrapped function
            when it raises; its return value is returned instead

    Returns:
        Decorator
    """

    def decorator(func: Callable[..., Awaitable[Any]]):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                value = fallback(*args, **kwargs)
                resilience_log.warning(
                    f"{func.__qualname__} failed, falling back to {value!r}: {e}"
                )
                return value

        wrapper.fallback = fallback
        return wrapper

    return decorator
