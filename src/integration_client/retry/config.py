"""
Configuration utilities for integration_client.retry
"""
import random
import time
from email.utils import parsedate_to_datetime
from typing import Optional

from ..errors import InvalidConfiguration
from ..types import Response
from .types import BackoffStrategy, RetryConfig


DEFAULT_RETRY_CONFIG = RetryConfig()


def calculate_delay(attempt: int, config: RetryConfig) -> float:
    """
    Calculate delay based on strategy.

    Args:
        attempt: Number of failed attempts so far, minus one (0-indexed)
        config: Retry configuration

    Returns:
        Delay in seconds
    """
    base = config.base_delay_seconds
    max_delay = config.max_delay_seconds
    jitter = config.jitter_factor

    if config.backoff_strategy == BackoffStrategy.LINEAR:
        base_delay = base + config.linear_increment_seconds * attempt
    elif config.backoff_strategy == BackoffStrategy.EXPONENTIAL:
        base_delay = base * (2 ** attempt)
    else:  # CONSTANT (default)
        base_delay = base
    base_delay = min(max_delay, base_delay)

    if jitter:
        jitter_amount = random.random() * jitter * base_delay
        base_delay = base_delay * (1 - jitter / 2) + jitter_amount

    return max(0.0, min(base_delay, max_delay))


def is_retryable_status(status: int, config: RetryConfig) -> bool:
    """
    Check if an HTTP status code should trigger a retry.

    With no explicit status list only server errors (5xx) are retried.
    """
    if config.retry_on_status is not None:
        return status in config.retry_on_status
    return 500 <= status < 600


def should_retry_response(response: Response, config: RetryConfig) -> bool:
    """Default retry predicate: transport failures and retryable statuses."""
    if response.ok:
        return False
    if response.is_transport_error or response.status is None:
        return config.retry_on_transport_error
    return is_retryable_status(response.status, config)


def parse_retry_after(value: Optional[str]) -> float:
    """
    Parse Retry-After header value.

    The Retry-After header can contain either:
    - A number of seconds to wait
    - An HTTP-date indicating when to retry

    Returns:
        Wait time in seconds, or 0 if parsing fails
    """
    if not value:
        return 0

    try:
        return max(0.0, float(value))
    except ValueError:
        pass

    try:
        dt = parsedate_to_datetime(value)
        return max(0, dt.timestamp() - time.time())
    except (ValueError, TypeError):
        pass

    return 0


def validate_retry_config(config: RetryConfig) -> RetryConfig:
    """Reject configurations that cannot make progress."""
    if config.max_attempts < 1:
        raise InvalidConfiguration(f"max_attempts must be at least 1, got {config.max_attempts}")
    if config.base_delay_seconds < 0 or config.max_delay_seconds < 0:
        raise InvalidConfiguration("Retry delays must be non-negative")
    if not 0 <= config.jitter_factor <= 1:
        raise InvalidConfiguration(f"jitter_factor must be within [0, 1], got {config.jitter_factor}")
    return config


def sync_sleep(seconds: float) -> None:
    """Sleep for a specified duration."""
    time.sleep(seconds)
