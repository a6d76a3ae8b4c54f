"""Fixed-delay retry policy.

Wraps tenacity so the resolvers share one explicit, injectable policy instead
of hand-written sleep loops. Tests pass a no-op ``sleep`` to avoid waiting.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field

from loguru import logger
from tenacity import (
    RetryCallState,
    RetryError,
    Retrying,
    retry_if_not_result,
    stop_after_attempt,
    wait_fixed,
)

from clusterboot.constants import TAG_RETRY_ATTEMPTS, TAG_RETRY_DELAY_SECONDS
from clusterboot.errors import RetryExhausted

log = logger.bind(component="retry")


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Retry a call until its result satisfies a predicate.

    Only results are retried. An exception raised by the call propagates
    immediately, unwrapped.

    Args:
        max_attempts: Total number of calls, including the first.
        delay: Seconds slept between attempts.
        sleep: Blocking sleep function. Default: time.sleep
    """

    max_attempts: int = TAG_RETRY_ATTEMPTS
    delay: float = TAG_RETRY_DELAY_SECONDS
    sleep: Callable[[float], None] = field(default=time.sleep, compare=False)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.delay < 0:
            raise ValueError(f"delay must be >= 0, got {self.delay}")

    def call[T](
        self,
        fn: Callable[[], T],
        *,
        until: Callable[[T], bool],
        description: str = "operation",
    ) -> T:
        """Call ``fn`` until ``until(result)`` is true.

        Raises:
            RetryExhausted: If the last attempt still fails the predicate.
        """

        def _before_sleep(state: RetryCallState) -> None:
            log.warning(
                "{description} not ready (attempt {attempt}/{total}), retrying in {delay}s",
                description=description,
                attempt=state.attempt_number,
                total=self.max_attempts,
                delay=self.delay,
            )

        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_fixed(self.delay),
            retry=retry_if_not_result(until),
            sleep=self.sleep,
            before_sleep=_before_sleep,
        )

        try:
            return retrying(fn)
        except RetryError as e:
            raise RetryExhausted(
                description,
                e.last_attempt.attempt_number,
                e.last_attempt.result(),
            ) from e
