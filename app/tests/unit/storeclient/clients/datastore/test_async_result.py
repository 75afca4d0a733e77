"""Unit tests for AsyncResult."""

import threading
from concurrent.futures import Future, InvalidStateError, TimeoutError
from unittest.mock import MagicMock

import pytest

from storeclient.clients.datastore.async_result import AsyncResult, AsyncResultState
from storeclient.exceptions import RetryExhaustedError, ValidationError
from storeclient.operations.status import OperationStatus

pytestmark = pytest.mark.unit


class TestAsyncResultState:
    def test_pending_until_settled(self):
        future = Future()
        result = AsyncResult(future)

        assert result.state == AsyncResultState.PENDING
        assert not result.done()

        future.set_result("v1")

        assert result.state == AsyncResultState.FULFILLED
        assert result.done()

    def test_settles_only_once(self):
        future = Future()
        result = AsyncResult(future)
        future.set_result(1)

        with pytest.raises(InvalidStateError):
            future.set_result(2)
        assert result.unwrap() == 1

    def test_rejected_state(self):
        result = AsyncResult.rejected(ValidationError("bad"))

        assert result.state == AsyncResultState.REJECTED
        assert isinstance(result.error(), ValidationError)

    def test_repr_shows_state(self):
        assert "fulfilled" in repr(AsyncResult.fulfilled(1))


class TestUnwrapAndWait:
    def test_unwrap_returns_value(self):
        assert AsyncResult.fulfilled({"coins": 3}).unwrap() == {"coins": 3}

    def test_unwrap_raises_rejection(self):
        with pytest.raises(ValidationError):
            AsyncResult.rejected(ValidationError("bad")).unwrap()

    def test_unwrap_times_out_while_pending(self):
        with pytest.raises(TimeoutError):
            AsyncResult(Future()).unwrap(timeout=0.01)

    def test_wait_returns_success_result_for_falsy_value(self):
        outcome = AsyncResult.fulfilled(0).wait()

        assert outcome.is_success
        assert outcome.data == 0

    def test_wait_classifies_rejection(self):
        error = RetryExhaustedError("set", 5)

        outcome = AsyncResult.rejected(error).wait()

        assert outcome.status == OperationStatus.PERMANENT_ERROR
        assert outcome.error_code == "RETRY_EXHAUSTED"
        assert outcome.error is error

    def test_submit_runs_on_executor(self, executor):
        seen = {}

        def work():
            seen["thread"] = threading.current_thread().name
            return "done"

        assert AsyncResult.submit(executor, work).unwrap(timeout=5) == "done"
        assert seen["thread"].startswith("test-datastore")


class TestContinuations:
    def test_then_maps_value(self):
        result = AsyncResult.fulfilled(2).then(lambda v: v * 10)
        assert result.unwrap() == 20

    def test_then_runs_after_pending_result_settles(self):
        future = Future()
        chained = AsyncResult(future).then(lambda v: v + 1)

        assert chained.state == AsyncResultState.PENDING
        future.set_result(1)
        assert chained.unwrap(timeout=1) == 2

    def test_then_skips_on_rejection(self):
        on_success = MagicMock()

        chained = AsyncResult.rejected(ValidationError("bad")).then(on_success)

        on_success.assert_not_called()
        with pytest.raises(ValidationError):
            chained.unwrap()

    def test_then_rejects_when_continuation_raises(self):
        def explode(_):
            raise KeyError("missing")

        with pytest.raises(KeyError):
            AsyncResult.fulfilled(1).then(explode).unwrap()

    def test_catch_recovers_from_rejection(self):
        result = AsyncResult.rejected(ValidationError("bad")).catch(lambda e: "fallback")
        assert result.unwrap() == "fallback"

    def test_catch_passes_value_through(self):
        on_failure = MagicMock()

        result = AsyncResult.fulfilled("ok").catch(on_failure)

        assert result.unwrap() == "ok"
        on_failure.assert_not_called()

    def test_add_done_callback_receives_result(self):
        callback = MagicMock()
        result = AsyncResult.fulfilled("v")

        result.add_done_callback(callback)

        callback.assert_called_once_with(result)
