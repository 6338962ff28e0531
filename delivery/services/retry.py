"""Bounded retry with linear backoff for channel attempts.

After failed attempt n the controller waits n * base_delay before the next
one. Waits go through a threading.Event when one is supplied, so a caller
can abort a retry loop that is stuck waiting.
"""

import threading
import time
from collections.abc import Callable

import structlog

from delivery.constants import DEFAULT_MAX_ATTEMPTS, DEFAULT_RETRY_BASE_DELAY
from delivery.schemas import DeliveryOutcome

logger = structlog.get_logger(__name__)


class RetryController:
    """Run a delivery operation up to max_attempts times."""

    def __init__(
        self,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        base_delay: float = DEFAULT_RETRY_BASE_DELAY,
        sleep: Callable[[float], None] | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        """Initialize retry controller.

        Args:
            max_attempts: Total attempts including the first one.
            base_delay: Seconds to wait after the first failure.
            sleep: Wait function, defaults to time.sleep.
            cancel_event: When set, waits abort and the loop stops.

        Raises:
            ValueError: If max_attempts is less than 1 or base_delay negative.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if base_delay < 0:
            raise ValueError("base_delay must not be negative")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self._sleep = sleep or time.sleep
        self._cancel_event = cancel_event
        self.attempts_made = 0

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after the given failed attempt (1-based)."""
        return attempt * self.base_delay

    def run(self, operation: Callable[[], DeliveryOutcome]) -> DeliveryOutcome:
        """Call operation until it succeeds or attempts are exhausted.

        Non-retryable failures (config, resolution) are returned at once.

        Args:
            operation: Zero-argument callable returning a DeliveryOutcome.

        Returns:
            The first successful outcome, or the last failure unchanged.
        """
        self.attempts_made = 0
        outcome: DeliveryOutcome | None = None

        for attempt in range(1, self.max_attempts + 1):
            self.attempts_made = attempt
            outcome = operation()

            if outcome.success:
                if attempt > 1:
                    logger.info("retry_succeeded", attempt=attempt)
                return outcome

            if not outcome.retryable:
                logger.info(
                    "retry_skipped_non_retryable",
                    attempt=attempt,
                    error_kind=outcome.error_kind,
                    error=outcome.error_message,
                )
                return outcome

            if attempt == self.max_attempts:
                break

            delay = self.delay_for(attempt)
            logger.warning(
                "retry_attempt_failed",
                attempt=attempt,
                max_attempts=self.max_attempts,
                delay_seconds=delay,
                error=outcome.error_message,
            )
            if self._wait(delay):
                logger.warning("retry_cancelled", attempt=attempt)
                return outcome

        logger.error(
            "retry_exhausted",
            attempts=self.attempts_made,
            error=outcome.error_message,
        )
        return outcome

    def _wait(self, delay: float) -> bool:
        """Wait between attempts; returns True if the wait was cancelled."""
        if self._cancel_event is not None:
            return self._cancel_event.wait(delay)
        self._sleep(delay)
        return False


def with_retry(
    operation: Callable[[], DeliveryOutcome],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    base_delay: float = DEFAULT_RETRY_BASE_DELAY,
    sleep: Callable[[float], None] | None = None,
    cancel_event: threading.Event | None = None,
) -> DeliveryOutcome:
    """Run operation under a fresh RetryController."""
    controller = RetryController(
        max_attempts=max_attempts,
        base_delay=base_delay,
        sleep=sleep,
        cancel_event=cancel_event,
    )
    return controller.run(operation)
