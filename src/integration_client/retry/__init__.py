"""
Retry support for integration_client.
"""
from .types import (
    BackoffStrategy,
    RetryConfig,
    RetryEvent,
    RetryEventListener,
    RetryResult,
    ShouldRetry,
)
from .config import (
    DEFAULT_RETRY_CONFIG,
    calculate_delay,
    is_retryable_status,
    parse_retry_after,
    should_retry_response,
    sync_sleep,
    validate_retry_config,
)
from .executor import RetryExecutor

__all__ = [
    # Types
    "BackoffStrategy",
    "RetryConfig",
    "RetryEvent",
    "RetryEventListener",
    "RetryResult",
    "ShouldRetry",
    # Config
    "DEFAULT_RETRY_CONFIG",
    "calculate_delay",
    "is_retryable_status",
    "parse_retry_after",
    "should_retry_response",
    "sync_sleep",
    "validate_retry_config",
    # Executor
    "RetryExecutor",
]
