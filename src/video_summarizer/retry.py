import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class RetryError(Exception):
    """Raised when every attempt of a retried operation has failed."""

    def __init__(self, attempts: int, last_error: BaseException):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Failed after {attempts} attempts. {last_error}")


def exponential_backoff(attempt: int) -> float:
    """Delay before the next try, given the 1-based attempt that just failed."""
    return float(2**attempt)


def always_retry(exc: BaseException) -> bool:
    return True


async def retry_async(
    operation: Callable[[], Awaitable[Any]],
    total_attempts: int = 3,
    delay_for: Callable[[int], float] = exponential_backoff,
    is_retryable: Callable[[BaseException], bool] = always_retry,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    description: str = "operation",
    timeout_seconds: Optional[float] = None,
):
    """
    Await ``operation()`` until it succeeds or the attempts run out.

    Args:
        operation: Zero-argument callable returning a fresh awaitable per attempt.
        total_attempts: Total number of attempts (3 means 1 initial + 2 retries).
        delay_for: Maps the 1-based number of the failed attempt to a delay in seconds.
        is_retryable: Failures for which this returns False are re-raised at once.
        sleep: Coroutine used to wait between attempts.
        description: Used in log lines only.
        timeout_seconds: Per-attempt timeout; a timeout counts as a failed attempt.

    Returns:
        Whatever the first successful attempt returned.

    Raises:
        RetryError: wrapping the last failure once all attempts are used.
    """
    num_attempts_to_make = max(1, total_attempts)
    last_error: Optional[BaseException] = None

    for attempt in range(1, num_attempts_to_make + 1):
        try:
            if timeout_seconds:
                return await asyncio.wait_for(operation(), timeout=timeout_seconds)
            return await operation()
        except Exception as e:
            last_error = e
            if isinstance(e, asyncio.TimeoutError) and timeout_seconds:
                # wait_for raises with an empty message
                last_error = asyncio.TimeoutError(
                    f"{description} timed out after {timeout_seconds} seconds"
                )
            logger.warning(
                f"Attempt {attempt}/{num_attempts_to_make} of {description} failed: {last_error}"
            )
            if not is_retryable(last_error):
                logger.error(f"Not retrying {description}: {last_error}")
                raise

            if attempt < num_attempts_to_make:
                delay = delay_for(attempt)
                logger.info(f"Retrying {description} in {delay} seconds...")
                await sleep(delay)

    logger.error(
        f"{description} failed after {num_attempts_to_make} attempts: {last_error}"
    )
    raise RetryError(num_attempts_to_make, last_error)
