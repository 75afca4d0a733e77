"""Worker pool running data store operations off the caller's thread.

A single module-scoped `ThreadPoolExecutor` is created lazily and shared by
every StoreClient that does not bring its own executor. structlog context
variables are copied into each submitted task so logs emitted during
retries carry the caller's correlation id.
"""

import atexit
import contextvars
from concurrent.futures import Executor, ThreadPoolExecutor
from threading import Lock, local
from typing import Callable, Optional, TypeVar

from storeclient.clients.datastore.async_result import AsyncResult
from storeclient.configuration import settings
from storeclient.logging import get_module_logger

logger = get_module_logger()

T = TypeVar("T")

_EXECUTOR: Optional[ThreadPoolExecutor] = None
_executor_lock = Lock()
_worker_state = local()


def get_executor(max_workers: Optional[int] = None) -> ThreadPoolExecutor:
    """Return the shared executor, creating it on first use.

    Args:
        max_workers: Worker threads; defaults to DATASTORE_MAX_WORKERS.
            Ignored once the executor exists.
    """
    global _EXECUTOR
    with _executor_lock:
        if _EXECUTOR is None:
            workers = max_workers or settings.datastore.max_workers
            _EXECUTOR = ThreadPoolExecutor(
                max_workers=workers, thread_name_prefix="datastore"
            )
            logger.debug("created_datastore_executor", max_workers=workers)
        return _EXECUTOR


def shutdown_executor(wait: bool = True) -> None:
    """Shut down the shared executor.

    Idempotent. A later `get_executor()` call creates a fresh executor.

    Args:
        wait: If True, wait for in-flight operations to complete.
    """
    global _EXECUTOR
    with _executor_lock:
        if _EXECUTOR is None:
            return
        try:
            _EXECUTOR.shutdown(wait=wait)
            logger.debug("datastore_executor_shut_down", wait=wait)
        finally:
            _EXECUTOR = None


@atexit.register
def _atexit_shutdown() -> None:
    """Let in-flight operations finish at process exit."""
    shutdown_executor(wait=True)


def in_worker_thread() -> bool:
    """Return True when called from a thread that runs store operations."""
    return getattr(_worker_state, "active", False)


def submit_operation(executor: Executor, fn: Callable[[], T]) -> AsyncResult[T]:
    """Run `fn` on `executor` inside a copy of the caller's context.

    A thread that has run a store operation is marked as a worker for the
    rest of its life. Operations requested from a worker (inside an `update`
    transform, or a `then`/`catch` continuation settled there) run inline on
    that thread, since waiting on the pool from within it can exhaust the
    pool and never return.
    """
    if in_worker_thread():
        try:
            return AsyncResult.fulfilled(fn())
        except Exception as e:  # pylint: disable=broad-except
            return AsyncResult.rejected(e)

    ctx = contextvars.copy_context()

    def _task() -> T:
        _worker_state.active = True
        return ctx.run(fn)

    return AsyncResult.submit(executor, _task)
