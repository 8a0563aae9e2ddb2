"""
Retry logic with exponential backoff for LLM calls.
"""

import logging
import time
from collections.abc import Callable
from functools import wraps
from typing import TypeVar

from ack_api_extractor.exceptions import RetryableError

T = TypeVar("T")

logger = logging.getLogger(__name__)


def retry_with_backoff(
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    backoff_factor: float = 2.0,
    max_delay: float = 60.0,
    retryable_exceptions: tuple[type[Exception], ...] = (Exception,),
    fatal_exceptions: tuple[type[Exception], ...] = (),
    on_retry: Callable[[Exception, int, int], None] | None = None,
):
    """
    Decorator to retry a function with exponential backoff.

    Args:
        max_attempts: Maximum number of attempts (default: 3)
        initial_delay: Initial delay in seconds (default: 1.0)
        backoff_factor: Multiplier for delay after each failure (default: 2.0)
        max_delay: Maximum delay between retries (default: 60.0)
        retryable_exceptions: Tuple of exception types to retry (default: all)
        fatal_exceptions: Exception types re-raised at once, even if retryable
        on_retry: Optional callback called on each retry: (error, attempt, max_attempts)

    Returns:
        Decorated function with retry logic

    Raises:
        RetryableError: When every attempt failed
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            delay = initial_delay
            last_exception = None

            for attempt in range(1, max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except fatal_exceptions:
                    raise
                except retryable_exceptions as e:
                    last_exception = e

                    if attempt == max_attempts:
                        break

                    if on_retry is not None:
                        on_retry(e, attempt, max_attempts)

                    time.sleep(min(delay, max_delay))
                    delay *= backoff_factor

            assert last_exception is not None
            raise RetryableError(last_exception, max_attempts, max_attempts)

        return wrapper

    return decorator


def log_retry(error: Exception, attempt: int, max_attempts: int) -> None:
    """``on_retry`` callback that logs the failed attempt."""
    logger.warning(f"Attempt {attempt}/{max_attempts} failed: {error}. Retrying...")


def is_retryable_error(error: Exception) -> bool:
    """
    Determine if an error should be retried.

    Retryable errors include:
    - Network and timeout errors
    - Rate limiting and throttling (429, ThrottlingException)
    - Server errors (500-599) and overloaded models
    """
    error_msg = str(error).lower()

    if any(
        keyword in error_msg
        for keyword in ["connection", "timeout", "timed out", "network", "unreachable"]
    ):
        return True

    if any(
        keyword in error_msg
        for keyword in ["rate limit", "429", "throttl", "too many requests"]
    ):
        return True

    if any(
        keyword in error_msg
        for keyword in [
            "500",
            "502",
            "503",
            "504",
            "server error",
            "internal error",
            "serviceunavailable",
            "service unavailable",
        ]
    ):
        return True

    if "overloaded" in error_msg or "capacity" in error_msg:
        return True

    return False


class RetryStrategy:
    """Preset retry parameters for ``retry_with_backoff``."""

    LLM_API = {
        "max_attempts": 4,
        "initial_delay": 2.0,
        "backoff_factor": 2.0,
        "max_delay": 60.0,
    }
