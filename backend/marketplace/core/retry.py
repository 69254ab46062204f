"""Retry utilities for reaching the document store at startup."""

from pymongo.errors import ConnectionFailure
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)


def with_retry(max_attempts: int = 3, min_wait: int = 1, max_wait: int = 10):
    """Create a retry decorator for store connectivity checks.

    Only connection-level failures are retried. Request handlers never retry;
    this is meant for the startup ping.

    Args:
        max_attempts: Maximum number of attempts
        min_wait: Minimum wait time between attempts (seconds)
        max_wait: Maximum wait time between attempts (seconds)

    Returns:
        A tenacity retry decorator
    """
    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=1, min=min_wait, max=max_wait),
        retry=retry_if_exception_type(ConnectionFailure),
        reraise=True,
    )
