"""Retry helpers with exponential backoff.

``retry_with_backoff`` is the async wrapper used by the workflow: no jitter,
delays of ``initial_delay * 2**attempt`` and a classified ``AppError`` on
failure. ``retry`` is the blocking decorator used around table calls.
"""
from __future__ import annotations

import asyncio
import functools
import logging
import random
import time
from typing import Any, Awaitable, Callable, TypeVar

from cvjob.errors import AppError, classify_error, is_retryable

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 3
DEFAULT_INITIAL_DELAY = 1.0


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    *,
    max_retries: int = DEFAULT_MAX_RETRIES,
    initial_delay: float = DEFAULT_INITIAL_DELAY,
    should_retry: Callable[[BaseException], bool] = is_retryable,
    on_retry: Callable[[BaseException, int], None] | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> T:
    """Run ``operation`` up to ``max_retries + 1`` times.

    ``on_retry(error, attempt_number)`` fires before each wait; its own
    failures are logged and never change the outcome. The caller always
    receives an ``AppError`` carrying ``retryable`` and ``attempts``.
    """
    for attempt in range(max_retries + 1):
        try:
            return await operation()
        except Exception as exc:
            retryable = should_retry(exc)
            if not retryable or attempt == max_retries:
                if retryable:
                    logger.error(
                        "Operation failed after %d attempts: %s", attempt + 1, exc
                    )
                error = classify_error(exc, attempts=attempt + 1, retryable=retryable)
                if error is exc:
                    raise error
                raise error from exc

            delay = initial_delay * (2 ** attempt)
            logger.warning(
                "Attempt %d/%d failed (%s), retrying in %.1fs",
                attempt + 1,
                max_retries + 1,
                exc,
                delay,
            )
            if on_retry is not None:
                try:
                    on_retry(exc, attempt + 1)
                except Exception as hook_exc:
                    logger.error("on_retry hook failed: %s", hook_exc)
            await sleep(delay)

    raise AppError("Operation failed", attempts=max_retries + 1)  # pragma: no cover


def retry(
    *,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    jitter: bool = True,
    should_retry: Callable[[BaseException], bool] = is_retryable,
) -> Callable:
    """Decorator for blocking table calls; the last raw exception is re-raised."""

    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            attempt = 1
            while True:
                try:
                    return fn(*args, **kwargs)
                except Exception as exc:
                    if attempt >= max_attempts or not should_retry(exc):
                        if attempt > 1:
                            logger.error(
                                "%s failed after %d attempts: %s",
                                fn.__qualname__, attempt, exc,
                            )
                        raise
                    delay = min(base_delay * (2 ** (attempt - 1)), max_delay)
                    if jitter:
                        delay *= 0.5 + random.random()
                    logger.warning(
                        "%s attempt %d/%d failed (%s), retrying in %.1fs",
                        fn.__qualname__, attempt, max_attempts, exc, delay,
                    )
                    time.sleep(delay)
                    attempt += 1

        return wrapper

    return decorator
