"""Bounded fixed-delay retry for data store operations.

RetryExecutor runs a zero-argument operation up to a fixed number of
attempts, sleeping a fixed interval between failures. Attempts are strictly
sequential. Success means the operation returned without raising; the
returned value is never inspected, so `0`, `False`, `""` and `None` are all
successful results.
"""

import time
import traceback
from typing import Callable, Optional, TypeVar

from storeclient.exceptions import PermanentStoreError, RetryExhaustedError
from storeclient.logging import get_module_logger

logger = get_module_logger()

T = TypeVar("T")

MAX_ATTEMPTS = 5
DEFAULT_DELAY_SECONDS = 1.0


def capture_call_site(skip: int = 1) -> str:
    """Format the current stack, dropping the innermost `skip` frames.

    Args:
        skip: Number of innermost frames to leave out (this function's caller
            frames that are part of the client plumbing)

    Returns:
        The formatted stack as a single string
    """
    frames = traceback.extract_stack()[: -(skip + 1)]
    return "".join(traceback.format_list(frames))


class RetryExecutor:
    """Run operations with a fixed attempt budget and a fixed delay.

    Args:
        max_attempts: Total attempts per operation (including the first one)
        delay: Default delay in seconds between failed attempts
        sleep: Sleep function, injectable for tests

    Example:
        retry = RetryExecutor(delay=0.5)
        entry = retry.execute(lambda: store.get("player_1"), operation_name="get")
    """

    def __init__(
        self,
        max_attempts: int = MAX_ATTEMPTS,
        delay: float = DEFAULT_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self.max_attempts = max_attempts
        self.delay = delay
        self._sleep = sleep

    def execute(
        self,
        operation: Callable[[], T],
        *,
        delay: Optional[float] = None,
        operation_name: str = "operation",
        call_site: Optional[str] = None,
    ) -> T:
        """Run `operation` until it succeeds or the budget is exhausted.

        Args:
            operation: Zero-argument callable performing one attempt
            delay: Per-call override of the delay between attempts
            operation_name: Name used in logs and in the terminal error
            call_site: Formatted stack of the requesting caller. Captured here
                when not provided.

        Returns:
            Whatever the first successful attempt returned

        Raises:
            PermanentStoreError: Raised by an attempt; never retried
            RetryExhaustedError: Every attempt failed
        """
        wait = self.delay if delay is None else delay
        if call_site is None:
            call_site = capture_call_site()

        last_error: Optional[Exception] = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                result = operation()
            except PermanentStoreError:
                logger.warning(
                    "datastore_permanent_error",
                    operation=operation_name,
                    attempt=attempt,
                )
                raise
            except Exception as e:  # pylint: disable=broad-except
                last_error = e
                if attempt < self.max_attempts:
                    logger.warning(
                        "datastore_retry",
                        operation=operation_name,
                        attempt=attempt,
                        max_attempts=self.max_attempts,
                        error=str(e),
                        delay=wait,
                    )
                    self._sleep(wait)
                continue

            if attempt > 1:
                logger.info(
                    "datastore_retry_success",
                    operation=operation_name,
                    attempt=attempt,
                )
            return result

        logger.error(
            "datastore_retry_exhausted",
            operation=operation_name,
            attempts=self.max_attempts,
            error=str(last_error),
        )
        raise RetryExhaustedError(
            operation_name,
            self.max_attempts,
            last_error=last_error,
            call_site=call_site,
        ) from last_error
