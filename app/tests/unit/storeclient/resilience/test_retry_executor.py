"""Unit tests for RetryExecutor."""

from unittest.mock import MagicMock, call

import pytest

from storeclient.exceptions import (
    RetryExhaustedError,
    TransientBackendError,
    UnsupportedOperationError,
    ValidationError,
)
from storeclient.resilience.retry import (
    MAX_ATTEMPTS,
    RetryExecutor,
    capture_call_site,
)

pytestmark = pytest.mark.unit


class TestRetryBudget:
    def test_default_budget_is_five_attempts(self):
        assert MAX_ATTEMPTS == 5
        assert RetryExecutor().max_attempts == 5

    def test_always_failing_operation_is_attempted_exactly_five_times(self, retry):
        operation = MagicMock(side_effect=TransientBackendError("throttled"))

        with pytest.raises(RetryExhaustedError) as exc_info:
            retry.execute(operation, operation_name="get")

        assert operation.call_count == 5
        assert exc_info.value.attempts == 5
        assert exc_info.value.operation == "get"

    def test_succeeds_on_third_attempt_without_a_fourth(self, retry):
        operation = MagicMock(
            side_effect=[
                TransientBackendError("throttled"),
                TimeoutError("slow network"),
                "third",
            ]
        )

        assert retry.execute(operation) == "third"
        assert operation.call_count == 3

    def test_first_success_returns_immediately(self, retry, sleep_spy):
        operation = MagicMock(return_value={"coins": 10})

        assert retry.execute(operation) == {"coins": 10}
        operation.assert_called_once_with()
        sleep_spy.assert_not_called()

    @pytest.mark.parametrize("value", [0, False, "", None, [], {}])
    def test_falsy_result_is_a_success(self, retry, value):
        operation = MagicMock(return_value=value)

        assert retry.execute(operation) == value
        assert operation.call_count == 1

    def test_generic_exceptions_are_retried(self, retry):
        operation = MagicMock(side_effect=[ValueError("bad transform"), 42])

        assert retry.execute(operation) == 42
        assert operation.call_count == 2


class TestRetryDelay:
    def test_sleeps_fixed_delay_between_failed_attempts(self, retry, sleep_spy):
        operation = MagicMock(side_effect=TransientBackendError("down"))

        with pytest.raises(RetryExhaustedError):
            retry.execute(operation)

        # No sleep after the final attempt
        assert sleep_spy.call_args_list == [call(1.0)] * 4

    def test_per_call_delay_overrides_default(self, retry, sleep_spy):
        operation = MagicMock(side_effect=[TransientBackendError("down"), "ok"])

        retry.execute(operation, delay=0.25)

        sleep_spy.assert_called_once_with(0.25)

    def test_constructor_rejects_invalid_values(self):
        with pytest.raises(ValueError):
            RetryExecutor(max_attempts=0)
        with pytest.raises(ValueError):
            RetryExecutor(delay=-1)


class TestPermanentErrors:
    @pytest.mark.parametrize(
        "error",
        [ValidationError("wrong shape"), UnsupportedOperationError("nope")],
    )
    def test_permanent_errors_are_not_retried(self, retry, sleep_spy, error):
        operation = MagicMock(side_effect=error)

        with pytest.raises(type(error)):
            retry.execute(operation)

        assert operation.call_count == 1
        sleep_spy.assert_not_called()


class TestRetryExhaustedError:
    def test_carries_last_error_and_chains_it(self, retry):
        last = TransientBackendError("final failure")
        operation = MagicMock(
            side_effect=[TransientBackendError("first")] * 4 + [last]
        )

        with pytest.raises(RetryExhaustedError) as exc_info:
            retry.execute(operation, operation_name="set")

        error = exc_info.value
        assert error.last_error is last
        assert error.__cause__ is last
        assert "set failed after 5 attempts" in str(error)
        assert "final failure" in str(error)

    def test_captures_the_requesting_call_site(self, retry):
        operation = MagicMock(side_effect=TransientBackendError("down"))

        with pytest.raises(RetryExhaustedError) as exc_info:
            retry.execute(operation)

        assert "test_captures_the_requesting_call_site" in exc_info.value.call_site
        assert "Requested at:" in str(exc_info.value)

    def test_uses_call_site_given_by_caller(self, retry):
        operation = MagicMock(side_effect=TransientBackendError("down"))

        with pytest.raises(RetryExhaustedError) as exc_info:
            retry.execute(operation, call_site="caller.py line 1")

        assert exc_info.value.call_site == "caller.py line 1"

    def test_is_distinct_from_backend_errors(self):
        error = RetryExhaustedError("get", 5, TransientBackendError("x"))
        assert not isinstance(error, TransientBackendError)


class TestCaptureCallSite:
    def test_includes_caller_and_drops_helper_frame(self):
        def helper():
            return capture_call_site()

        site = helper()

        assert "test_includes_caller_and_drops_helper_frame" in site
        assert "in helper" not in site
        assert "capture_call_site" not in site
