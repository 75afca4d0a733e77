"""Unit tests for the backend access probe."""

from unittest.mock import MagicMock

import pytest

from storeclient.clients.datastore.capability import ensure_backend_access
from storeclient.exceptions import CapabilityWarning

pytestmark = pytest.mark.unit


class SlottedBackend:
    """Backend that supports neither hashing by identity nor weak references."""

    __slots__ = ("calls",)
    __hash__ = None

    def __init__(self):
        self.calls = 0

    def check_access(self):
        self.calls += 1
        return True


class TestEnsureBackendAccess:
    def test_slotted_backend_is_probed_once(self):
        backend = SlottedBackend()

        assert ensure_backend_access(backend) is True
        assert ensure_backend_access(backend) is True
        assert backend.calls == 1

    def test_distinct_backends_are_probed_separately(self):
        first, second = SlottedBackend(), SlottedBackend()

        ensure_backend_access(first)
        ensure_backend_access(second)

        assert (first.calls, second.calls) == (1, 1)

    def test_failed_probe_warns_and_returns_false(self):
        backend = MagicMock()
        backend.check_access.return_value = False

        with pytest.warns(CapabilityWarning, match="no access"):
            assert ensure_backend_access(backend) is False

    def test_backend_without_check_access_only_warns(self):
        with pytest.warns(CapabilityWarning, match="AttributeError"):
            assert ensure_backend_access(object()) is False
