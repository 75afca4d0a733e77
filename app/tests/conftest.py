"""Shared fixtures for store client tests."""

from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest

from storeclient.clients.datastore.capability import reset_capability_checks
from storeclient.clients.datastore.client import StoreClient
from storeclient.clients.datastore.memory import InMemoryDataStore
from storeclient.configuration import StoreSettings
from storeclient.resilience.retry import RetryExecutor


@pytest.fixture(autouse=True)
def _reset_capability_checks():
    """Every test starts with no backend probed."""
    reset_capability_checks()
    yield
    reset_capability_checks()


@pytest.fixture
def executor():
    """Dedicated worker pool so tests never share the module-level one."""
    pool = ThreadPoolExecutor(max_workers=4, thread_name_prefix="test-datastore")
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture
def store_settings():
    """Settings with no retry delay and the access probe disabled."""
    return StoreSettings(retry_delay_seconds=0, capability_check=False)


@pytest.fixture
def sleep_spy():
    return MagicMock()


@pytest.fixture
def retry(sleep_spy):
    """RetryExecutor that records sleeps instead of sleeping."""
    return RetryExecutor(delay=1.0, sleep=sleep_spy)


@pytest.fixture
def memory_store():
    return InMemoryDataStore("PlayerData", "global")


@pytest.fixture
def store_backend(memory_store):
    """Backend double opening `memory_store`."""
    backend = MagicMock()
    backend.open_store.return_value = memory_store
    backend.check_access.return_value = True
    return backend


@pytest.fixture
def make_client(store_backend, executor, store_settings):
    """Factory fixture for StoreClient instances.

    Usage:
        def test_something(make_client):
            client = make_client()
            client.set("player_1", 10).unwrap()
    """

    def _factory(
        backend=None,
        name: str = "PlayerData",
        scope=None,
        options=None,
        settings_override=None,
    ) -> StoreClient:
        return StoreClient.new(
            name,
            scope,
            options,
            backend=backend or store_backend,
            executor=executor,
            retry_delay=0,
            store_settings=settings_override or store_settings,
        )

    return _factory
