"""One-time backend access probe.

Before the first store is opened on a backend, the client asks the backend
whether the environment can reach the service. A failing probe is reported
as a `CapabilityWarning` and logged; it never stops the client, because the
probe is best-effort and real operations will surface the problem through
the retry machinery anyway.

Probed backends are recorded by `id()`, so unhashable backends (plain
dataclasses) qualify. The record holds a weak reference where the backend
supports one, and the backend itself otherwise so its id is never reused.
"""

import warnings
import weakref
from threading import Lock
from typing import Any, Dict

from storeclient.exceptions import CapabilityWarning
from storeclient.logging import get_module_logger

logger = get_module_logger()

_probed_backends: Dict[int, Any] = {}
_probe_lock = Lock()


def _already_probed(backend: object) -> bool:
    entry = _probed_backends.get(id(backend))
    if isinstance(entry, weakref.ref):
        return entry() is backend
    return entry is not None and entry is backend


def _remember(backend: object) -> None:
    key = id(backend)

    def _forget(ref: "weakref.ref[object]") -> None:
        # Runs during garbage collection; must not take the lock
        if _probed_backends.get(key) is ref:
            _probed_backends.pop(key, None)

    try:
        entry: Any = weakref.ref(backend, _forget)
    except TypeError:
        entry = backend
    _probed_backends[key] = entry


def ensure_backend_access(backend: object) -> bool:
    """Probe `backend` once; later calls for the same backend return True.

    Args:
        backend: Object exposing `check_access() -> bool`

    Returns:
        True if access was confirmed now or probed before, False if the probe
        failed (a CapabilityWarning has been emitted)
    """
    try:
        with _probe_lock:
            if _already_probed(backend):
                return True
            _remember(backend)
        has_access = bool(backend.check_access())  # type: ignore[attr-defined]
        reason = "backend reported no access"
    except Exception as e:  # pylint: disable=broad-except
        has_access = False
        reason = f"{type(e).__name__}: {e}"

    if has_access:
        logger.debug("datastore_capability_check_passed")
        return True

    logger.warning("datastore_capability_check_failed", reason=reason)
    warnings.warn(
        f"Data store backend is not reachable from this environment ({reason})",
        CapabilityWarning,
        stacklevel=3,
    )
    return False


def reset_capability_checks() -> None:
    """Forget every probed backend.

    WARNING: This is intended for testing only.
    """
    with _probe_lock:
        _probed_backends.clear()
