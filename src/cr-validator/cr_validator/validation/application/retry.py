"""RetryPolicy: bounded exponential backoff with a per-attempt time budget."""

import asyncio
from collections.abc import Awaitable, Callable

from cr_validator.config.domain.execution import RetryConfig
from cr_validator.core.errors import ValidatorError
from cr_validator.validation.application.errors import StageTimeoutError
from cr_validator.validation.domain.observer import ValidationObserver


class RetryPolicy:
    """Runs one external call, retrying only errors flagged retriable.

    The delay before attempt n+1 is initial_backoff_seconds * multiplier^(n-1).
    Each attempt is bounded by asyncio.timeout; an expired attempt becomes a
    retriable StageTimeoutError. Non-retriable errors and the error of the
    last attempt propagate unchanged.
    """

    def __init__(
        self,
        config: RetryConfig,
        validation_id: str,
        observer: ValidationObserver,
    ) -> None:
        self._config = config
        self._validation_id = validation_id
        self._observer = observer

    async def call[T](
        self,
        operation: str,
        fn: Callable[[], Awaitable[T]],
        timeout_seconds: float,
    ) -> T:
        max_attempts = self._config.max_attempts
        for attempt in range(1, max_attempts + 1):
            error: ValidatorError
            try:
                async with asyncio.timeout(timeout_seconds):
                    return await fn()
            except TimeoutError as exc:
                error = StageTimeoutError(
                    operation=operation, timeout_seconds=timeout_seconds
                )
                error.__cause__ = exc
            except ValidatorError as exc:
                error = exc

            if not error.retriable or attempt == max_attempts:
                raise error

            backoff = self._config.backoff_after(attempt)
            self._observer.validation_retry(
                validation_id=self._validation_id,
                operation=operation,
                attempt=attempt,
                reason=str(error),
                backoff_seconds=backoff,
            )
            await asyncio.sleep(backoff)

        raise AssertionError("unreachable")  # pragma: no cover
