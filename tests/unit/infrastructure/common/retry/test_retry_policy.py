import warnings

import pytest

from diff_submitter.core.application.ports.common.exceptions import ReviewServiceError
from diff_submitter.infrastructure.common.retry.retry_policy import RetryPolicy


def _flaky(failures: list[Exception], value: str = "ok"):
    calls = {"count": 0}

    async def fn():
        calls["count"] += 1
        if failures:
            raise failures.pop(0)
        return value

    return fn, calls


class TestRetryPolicy:
    @pytest.mark.asyncio
    async def test_retries_retryable_errors_until_success(self):
        fn, calls = _flaky([ReviewServiceError(method="m", message="down", retryable=True)])

        assert await RetryPolicy(max_attempts=3, initial_wait=0, max_wait=0).run(fn) == "ok"
        assert calls["count"] == 2

    @pytest.mark.asyncio
    async def test_non_retryable_error_propagates_immediately(self):
        fn, calls = _flaky([ReviewServiceError(method="m", message="bad", error_code="ERR")])

        with pytest.raises(ReviewServiceError, match="bad"):
            await RetryPolicy(max_attempts=3, initial_wait=0, max_wait=0).run(fn)
        assert calls["count"] == 1

    @pytest.mark.asyncio
    async def test_exhausted_attempts_reraise_last_error(self):
        errors = [ReviewServiceError(method="m", message=f"down {i}", retryable=True) for i in range(3)]
        fn, calls = _flaky(errors)

        with pytest.raises(ReviewServiceError, match="down 1"):
            await RetryPolicy(max_attempts=2, initial_wait=0, max_wait=0).run(fn)
        assert calls["count"] == 2

    @pytest.mark.asyncio
    async def test_default_policy_fails_fast(self):
        fn, calls = _flaky([ReviewServiceError(method="m", message="down", retryable=True)])

        with pytest.raises(ReviewServiceError):
            await RetryPolicy().run(fn)
        assert calls["count"] == 1

    @pytest.mark.asyncio
    async def test_other_exceptions_are_not_retried(self):
        fn, calls = _flaky([KeyError("x")])

        with pytest.raises(KeyError):
            await RetryPolicy(max_attempts=3, initial_wait=0).run(fn)
        assert calls["count"] == 1

    @pytest.mark.asyncio
    async def test_awaits_coroutines_returned_by_plain_callables(self):
        fn, calls = _flaky([ReviewServiceError(method="m", message="down", retryable=True)], value="sent")

        result = await RetryPolicy(max_attempts=2, initial_wait=0, max_wait=0).run(lambda: fn())

        assert result == "sent"
        assert calls["count"] == 2

    @pytest.mark.asyncio
    async def test_backoff_configuration_is_not_deprecated(self):
        fn, calls = _flaky([ReviewServiceError(method="m", message="down", retryable=True)])

        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            assert await RetryPolicy(max_attempts=2, initial_wait=0, max_wait=0).run(fn) == "ok"
        assert calls["count"] == 2
