"""
Type definitions for integration_client.retry
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Literal, Optional

from ..types import Response


class BackoffStrategy(str, Enum):
    """Backoff strategy type"""
    CONSTANT = "constant"
    LINEAR = "linear"
    EXPONENTIAL = "exponential"


@dataclass
class RetryConfig:
    """Retry configuration"""

    max_attempts: int = 3
    """Total number of attempts, including the first. Default: 3"""

    base_delay_seconds: float = 1.0
    """Delay before the first retry (seconds). Default: 1.0"""

    max_delay_seconds: float = 30.0
    """Maximum delay between attempts (seconds). Default: 30.0"""

    jitter_factor: float = 0.0
    """Jitter factor (0-1). Default: 0, no jitter"""

    backoff_strategy: BackoffStrategy = BackoffStrategy.CONSTANT
    """Backoff strategy. Default: constant"""

    linear_increment_seconds: float = 1.0
    """Linear increment for linear backoff (seconds). Default: 1.0"""

    retry_on_status: Optional[list[int]] = None
    """Status codes that trigger a retry. None means any 5xx"""

    retry_on_transport_error: bool = True
    """Whether a transport failure (no response) triggers a retry"""

    respect_retry_after: bool = True
    """Whether to honour a Retry-After response header. Default: True"""


@dataclass
class RetryResult:
    """Result of a retried send"""

    response: Response
    """The last response received"""

    attempts: int
    """Number of attempts made"""

    total_time_seconds: float
    """Total time spent including delays (seconds)"""

    delay_time_seconds: float
    """Time spent sleeping between attempts (seconds)"""

    @property
    def ok(self) -> bool:
        return self.response.ok


# Event types
EventType = Literal[
    "attempt:start",
    "attempt:success",
    "attempt:fail",
    "retry:wait",
    "retry:abort",
]


@dataclass
class RetryEvent:
    """Event emitted by the retry executor"""

    type: EventType
    attempt: int
    data: dict[str, Any] = field(default_factory=dict)


# Event listener type
RetryEventListener = Callable[[RetryEvent], None]

# Custom predicate: (response, attempt number) -> retry?
ShouldRetry = Callable[[Response, int], bool]
