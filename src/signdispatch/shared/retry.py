"""Retry utilities with exponential backoff."""

import time
import random
from typing import Callable, TypeVar, Optional, Type, Tuple

from signdispatch.shared.logging import get_logger

T = TypeVar('T')

logger = get_logger(__name__)


class RetryStrategy:
    """
    Configurable retry strategy.

    Only exceptions listed in ``retry_on`` are retried; anything else
    propagates on the first failure.
    """

    def __init__(
        self,
        max_attempts: int = 5,
        backoff_seconds: float = 2.0,
        exponential: bool = True,
        jitter: bool = True,
        max_backoff: float = 60.0,
        retry_on: Tuple[Type[Exception], ...] = (Exception,),
        sleep: Callable[[float], None] = time.sleep
    ):
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got: {max_attempts}")

        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds
        self.exponential = exponential
        self.jitter = jitter
        self.max_backoff = max_backoff
        self.retry_on = retry_on
        self._sleep = sleep

    def execute(
        self,
        func: Callable[..., T],
        *args,
        **kwargs
    ) -> T:
        """Execute a function with retry logic."""
        return self.execute_within(None, func, *args, **kwargs)

    def execute_within(
        self,
        budget: Optional[float],
        func: Callable[..., T],
        *args,
        **kwargs
    ) -> T:
        """
        Execute a function with retry logic, sleeping at most ``budget`` seconds.

        Backoff waits are shortened to fit the remaining budget. Once it is
        used up the next retryable failure is raised.

        Args:
            budget: Total backoff seconds allowed, None for no limit
            func: Function to execute
            *args: Positional arguments for the function
            **kwargs: Keyword arguments for the function

        Returns:
            Function result

        Raises:
            Last exception if all attempts fail
        """
        last_exception: Optional[Exception] = None
        remaining = budget

        for attempt in range(1, self.max_attempts + 1):
            try:
                return func(*args, **kwargs)
            except self.retry_on as e:
                last_exception = e

                if attempt == self.max_attempts:
                    raise

                wait_time = self._calculate_backoff(attempt)
                if remaining is not None:
                    if remaining <= 0:
                        logger.warning(
                            f"Attempt {attempt}/{self.max_attempts} failed: {e} "
                            f"(no time left to retry)"
                        )
                        raise
                    wait_time = min(wait_time, remaining)
                    remaining -= wait_time

                logger.warning(
                    f"Attempt {attempt}/{self.max_attempts} failed: {e} "
                    f"(retrying in {wait_time:.1f}s)"
                )
                self._sleep(wait_time)

        if last_exception:
            raise last_exception
        raise RuntimeError("Retry logic failed unexpectedly")

    def _calculate_backoff(self, attempt: int) -> float:
        """Calculate backoff time for given attempt number."""
        if self.exponential:
            wait_time = self.backoff_seconds * (2 ** (attempt - 1))
        else:
            wait_time = self.backoff_seconds * attempt

        # Cap at max_backoff
        wait_time = min(wait_time, self.max_backoff)

        if self.jitter:
            wait_time = wait_time * (0.5 + random.random())

        return wait_time
