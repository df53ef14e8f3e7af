"""Tests for RetryPolicy backoff, time budgets and retry events."""

import asyncio
from unittest.mock import AsyncMock, call, patch

import pytest

from cr_validator.config.domain.execution import RetryConfig
from cr_validator.embedding.infrastructure.errors import EmbeddingFailure
from cr_validator.validation.application.errors import StageTimeoutError
from cr_validator.validation.application.retry import RetryPolicy
from tests.validation.fake_observer import FakeValidationObserver

SLEEP = "cr_validator.validation.application.retry.asyncio.sleep"


def _make_policy(
    max_attempts: int = 3, initial: int = 1, multiplier: int = 2
) -> tuple[RetryPolicy, FakeValidationObserver]:
    observer = FakeValidationObserver()
    policy = RetryPolicy(
        config=RetryConfig(
            max_attempts=max_attempts,
            initial_backoff_seconds=initial,
            backoff_multiplier=multiplier,
        ),
        validation_id="val-1",
        observer=observer,
    )
    return policy, observer


def _flaky(errors: list[Exception], value: str = "ok") -> AsyncMock:
    return AsyncMock(side_effect=[*errors, value])


class TestRetryPolicy:
    async def test_success_needs_no_retry(self) -> None:
        policy, observer = _make_policy()

        assert await policy.call("embed", _flaky([]), timeout_seconds=1) == "ok"
        assert observer.retries == []

    @patch(SLEEP, new_callable=AsyncMock)
    async def test_retriable_error_is_retried_with_exponential_backoff(
        self, mock_sleep: AsyncMock
    ) -> None:
        policy, observer = _make_policy(max_attempts=3, initial=1, multiplier=2)
        fn = _flaky(
            [
                EmbeddingFailure(reason="rate limited", retriable=True),
                EmbeddingFailure(reason="rate limited", retriable=True),
            ]
        )

        result = await policy.call("embed", fn, timeout_seconds=1)

        assert result == "ok"
        assert mock_sleep.call_args_list == [call(1.0), call(2.0)]
        assert [r.attempt for r in observer.retries] == [1, 2]
        assert [r.backoff_seconds for r in observer.retries] == [1.0, 2.0]
        assert observer.retries[0].operation == "embed"

    @patch(SLEEP, new_callable=AsyncMock)
    async def test_non_retriable_error_propagates_immediately(
        self, mock_sleep: AsyncMock
    ) -> None:
        policy, observer = _make_policy()
        fn = _flaky([EmbeddingFailure(reason="bad input", retriable=False)])

        with pytest.raises(EmbeddingFailure):
            await policy.call("embed", fn, timeout_seconds=1)

        assert fn.await_count == 1
        mock_sleep.assert_not_called()
        assert observer.retries == []

    @patch(SLEEP, new_callable=AsyncMock)
    async def test_last_error_propagates_after_max_attempts(
        self, mock_sleep: AsyncMock
    ) -> None:
        policy, observer = _make_policy(max_attempts=3)
        error = EmbeddingFailure(reason="rate limited", retriable=True)
        fn = AsyncMock(side_effect=error)

        with pytest.raises(EmbeddingFailure) as exc_info:
            await policy.call("embed", fn, timeout_seconds=1)

        assert exc_info.value is error
        assert fn.await_count == 3
        assert len(observer.retries) == 2

    async def test_single_attempt_never_retries(self) -> None:
        policy, observer = _make_policy(max_attempts=1)
        fn = AsyncMock(side_effect=EmbeddingFailure(reason="x", retriable=True))

        with pytest.raises(EmbeddingFailure):
            await policy.call("embed", fn, timeout_seconds=1)

        assert observer.retries == []

    async def test_unexpected_exceptions_are_not_caught(self) -> None:
        policy, observer = _make_policy()
        fn = AsyncMock(side_effect=RuntimeError("bug"))

        with pytest.raises(RuntimeError):
            await policy.call("embed", fn, timeout_seconds=1)

        assert fn.await_count == 1


class TestTimeBudget:
    async def test_slow_attempt_becomes_stage_timeout(self) -> None:
        policy, _ = _make_policy(max_attempts=1)

        async def _slow() -> str:
            await asyncio.sleep(1)
            return "late"

        with pytest.raises(StageTimeoutError) as exc_info:
            await policy.call("retrieve", _slow, timeout_seconds=0.01)

        assert exc_info.value.retriable is True
        assert exc_info.value.operation == "retrieve"
        assert isinstance(exc_info.value.__cause__, TimeoutError)

    async def test_timed_out_attempt_is_retried(self) -> None:
        policy, observer = _make_policy(max_attempts=2, initial=0)
        attempts: list[int] = []

        async def _slow_then_fast() -> str:
            attempts.append(1)
            if len(attempts) == 1:
                await asyncio.sleep(1)
            return "ok"

        result = await policy.call("retrieve", _slow_then_fast, timeout_seconds=0.05)

        assert result == "ok"
        assert len(attempts) == 2
        assert "retrieve" in observer.retries[0].reason
