"""
Retry executor for integration_client
"""
import logging
import time
from typing import Callable, Optional

from ..types import Response
from .config import (
    DEFAULT_RETRY_CONFIG,
    calculate_delay,
    parse_retry_after,
    should_retry_response,
    sync_sleep,
    validate_retry_config,
)
from .types import (
    RetryConfig,
    RetryEvent,
    RetryEventListener,
    RetryResult,
    ShouldRetry,
)

logger = logging.getLogger("integration_client.retry")


class RetryExecutor:
    """
    Retry Executor

    Re-sends a request until it succeeds, the retry predicate declines, or
    the attempt budget runs out. Never sleeps after the final attempt.
    """

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        sleep: Callable[[float], None] = sync_sleep,
    ):
        self._config = validate_retry_config(config or DEFAULT_RETRY_CONFIG)
        self._sleep = sleep
        self._listeners: list[RetryEventListener] = []

    def _emit(self, event: RetryEvent) -> None:
        """Emit an event to all listeners."""
        for listener in self._listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(f"RetryExecutor: listener failed on {event.type}")

    def _next_delay(self, attempt: int, response: Response) -> float:
        delay = calculate_delay(attempt - 1, self._config)
        if self._config.respect_retry_after:
            retry_after = parse_retry_after(response.headers.get("retry-after"))
            if retry_after > delay:
                delay = min(retry_after, self._config.max_delay_seconds)
        return delay

    def run(
        self,
        send: Callable[[], Response],
        should_retry: Optional[ShouldRetry] = None,
    ) -> RetryResult:
        """
        Call ``send`` with retry logic.

        Args:
            send: Performs one attempt and returns its Response
            should_retry: Custom predicate replacing the default policy

        Returns:
            RetryResult wrapping the last response
        """
        max_attempts = self._config.max_attempts
        start_time = time.monotonic()
        delay_time = 0.0
        attempt = 0

        while True:
            attempt += 1
            self._emit(RetryEvent(type="attempt:start", attempt=attempt))

            response = send()

            if response.ok:
                self._emit(RetryEvent(
                    type="attempt:success",
                    attempt=attempt,
                    data={"status": response.status},
                ))
                break

            if should_retry is not None:
                retryable = should_retry(response, attempt)
            else:
                retryable = should_retry_response(response, self._config)
            will_retry = retryable and attempt < max_attempts

            self._emit(RetryEvent(
                type="attempt:fail",
                attempt=attempt,
                data={
                    "status": response.status,
                    "error": response.error,
                    "will_retry": will_retry,
                },
            ))
            logger.debug(
                f"RetryExecutor.run: attempt {attempt}/{max_attempts} failed "
                f"(status={response.status}, error={response.error}), will_retry={will_retry}"
            )

            if not will_retry:
                if not retryable:
                    self._emit(RetryEvent(
                        type="retry:abort",
                        attempt=attempt,
                        data={"status": response.status},
                    ))
                break

            delay = self._next_delay(attempt, response)
            delay_time += delay
            self._emit(RetryEvent(
                type="retry:wait",
                attempt=attempt,
                data={"delay_seconds": delay},
            ))
            self._sleep(delay)

        return RetryResult(
            response=response,
            attempts=attempt,
            total_time_seconds=time.monotonic() - start_time,
            delay_time_seconds=delay_time,
        )

    def on(self, listener: RetryEventListener) -> Callable[[], None]:
        """
        Add an event listener.

        Returns:
            Function to remove the listener
        """
        self._listeners.append(listener)
        return lambda: self.off(listener)

    def off(self, listener: RetryEventListener) -> None:
        """Remove an event listener."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def config(self) -> RetryConfig:
        """Get the current configuration."""
        return self._config
