"""
Retry utilities for store operations.

This module provides retry functionality with exponential backoff driven by
RetryConfig, plus time and memory helpers shared by the sync engine and
generator.
"""

import resource
import sys
from datetime import datetime, timezone
from functools import wraps
from typing import Optional, Tuple, Type

from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .audit.logger import CatalogSyncLogger
from .config.models import RetryConfig
from .exceptions import StoreOperationError, StoreUnavailableError


def utc_now() -> datetime:
    """Current UTC time truncated to milliseconds, the precision stores keep."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def peak_memory_mb() -> float:
    """Peak resident set size of this process in megabytes."""
    peak = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # ru_maxrss is in bytes on macOS and kilobytes elsewhere
    if sys.platform == "darwin":
        return peak / (1024 * 1024)
    return peak / 1024


def retryable_errors(retry_config: RetryConfig) -> Tuple[Type[Exception], ...]:
    """Exception types that trigger another attempt under this configuration."""
    if retry_config.retry_on_operation_errors:
        return (StoreUnavailableError, StoreOperationError)
    return (StoreUnavailableError,)


def retry_with_logging(
    retry_config: RetryConfig, logger: Optional[CatalogSyncLogger] = None
):
    """
    Decorator for retrying store operations with logging.

    Attempts are spaced with exponential backoff starting at
    retry_delay_seconds and capped at max_delay_seconds. When the attempts are
    exhausted the last error is raised unchanged.

    Args:
        retry_config: RetryConfig object with retry settings
        logger: Optional logger for logging attempts

    Returns:
        Decorated function with retry logic and logging
    """

    def decorator(func):
        def log_before_sleep(retry_state):
            if logger:
                logger.warning(
                    f"{func.__name__} failed on attempt {retry_state.attempt_number}/"
                    f"{retry_config.max_attempts}: {retry_state.outcome.exception()}; "
                    f"retrying in {retry_state.next_action.sleep:.1f}s"
                )

        @wraps(func)
        def wrapper(*args, **kwargs):
            retrying = Retrying(
                stop=stop_after_attempt(retry_config.max_attempts),
                wait=wait_exponential(
                    multiplier=retry_config.retry_delay_seconds,
                    max=retry_config.max_delay_seconds,
                ),
                retry=retry_if_exception_type(retryable_errors(retry_config)),
                before_sleep=log_before_sleep,
                reraise=True,
            )
            return retrying(func, *args, **kwargs)

        return wrapper

    return decorator
