"""Single-assignment asynchronous result for data store operations.

AsyncResult wraps a `concurrent.futures.Future`. It starts pending and
settles exactly once, either fulfilled with a value or rejected with an
exception. Callers block with `unwrap()` (value or raise), inspect a
uniform `OperationResult` with `wait()`, or chain continuations with
`then()` and `catch()`. There is no cancellation.

Example:
    result = client.set("player_1", {"coins": 10})
    result.then(lambda version: logger.info("saved", version=version))
    version = result.unwrap()
"""

from concurrent.futures import Executor, Future
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

from storeclient.operations.classifiers import classify_store_error
from storeclient.operations.result import OperationResult

T = TypeVar("T")
R = TypeVar("R")


class AsyncResultState(Enum):
    """Lifecycle of an AsyncResult."""

    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


def _settle(target: Future, fn: Callable[[], Any]) -> None:
    try:
        target.set_result(fn())
    except Exception as e:  # pylint: disable=broad-except
        target.set_exception(e)


class AsyncResult(Generic[T]):
    """Pending, fulfilled or rejected outcome of one store operation.

    Args:
        future: The future this result settles from
    """

    def __init__(self, future: "Future[T]") -> None:
        self._future = future

    @classmethod
    def submit(cls, executor: Executor, fn: Callable[[], T]) -> "AsyncResult[T]":
        """Run `fn` on `executor` and return its result."""
        return cls(executor.submit(fn))

    @classmethod
    def fulfilled(cls, value: T) -> "AsyncResult[T]":
        future: "Future[T]" = Future()
        future.set_result(value)
        return cls(future)

    @classmethod
    def rejected(cls, error: BaseException) -> "AsyncResult[Any]":
        future: Future = Future()
        future.set_exception(error)
        return cls(future)

    @property
    def state(self) -> AsyncResultState:
        if not self._future.done():
            return AsyncResultState.PENDING
        if self._future.exception() is not None:
            return AsyncResultState.REJECTED
        return AsyncResultState.FULFILLED

    def done(self) -> bool:
        return self._future.done()

    def unwrap(self, timeout: Optional[float] = None) -> T:
        """Block until settled and return the value.

        Args:
            timeout: Seconds to wait; None waits indefinitely

        Returns:
            The fulfilled value

        Raises:
            Exception: The rejection error
            concurrent.futures.TimeoutError: Still pending after `timeout`
        """
        return self._future.result(timeout=timeout)

    def error(self, timeout: Optional[float] = None) -> Optional[BaseException]:
        """Block until settled and return the rejection error, or None."""
        return self._future.exception(timeout=timeout)

    def wait(self, timeout: Optional[float] = None) -> OperationResult:
        """Block until settled and describe the outcome as an OperationResult.

        Never raises for a rejected result; the error is classified instead.
        """
        error = self._future.exception(timeout=timeout)
        if error is not None:
            return classify_store_error(error)
        return OperationResult.success(data=self._future.result())

    def add_done_callback(self, fn: Callable[["AsyncResult[T]"], Any]) -> None:
        """Call `fn(self)` once settled (immediately if already settled)."""
        self._future.add_done_callback(lambda _: fn(self))

    def then(self, on_success: Callable[[T], R]) -> "AsyncResult[R]":
        """Chain a continuation on the fulfilled value.

        A rejection passes through untouched; an exception raised by
        `on_success` rejects the returned result.
        """
        chained: "Future[R]" = Future()

        def _on_done(source: Future) -> None:
            error = source.exception()
            if error is not None:
                chained.set_exception(error)
                return
            _settle(chained, lambda: on_success(source.result()))

        self._future.add_done_callback(_on_done)
        return AsyncResult(chained)

    def catch(
        self, on_failure: Callable[[BaseException], R]
    ) -> "AsyncResult[Any]":
        """Chain a continuation on the rejection error.

        A fulfilled value passes through untouched; the value returned by
        `on_failure` fulfils the returned result.
        """
        chained: Future = Future()

        def _on_done(source: Future) -> None:
            error = source.exception()
            if error is None:
                chained.set_result(source.result())
                return
            _settle(chained, lambda: on_failure(error))

        self._future.add_done_callback(_on_done)
        return AsyncResult(chained)

    def __repr__(self) -> str:
        return f"<AsyncResult state={self.state.value}>"
