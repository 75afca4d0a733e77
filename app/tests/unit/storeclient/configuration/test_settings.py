"""Unit tests for store client settings."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from storeclient.configuration import Settings, StoreSettings


@pytest.mark.unit
class TestStoreSettings:
    """Test StoreSettings configuration."""

    def test_default_values(self):
        """Test StoreSettings with default values."""
        settings = StoreSettings()

        assert settings.default_scope == "global"
        assert settings.retry_delay_seconds == 1.0
        assert settings.max_workers == 8
        assert settings.list_page_size == 50
        assert settings.capability_check is True

    def test_environment_overrides(self, monkeypatch):
        """Test StoreSettings read from DATASTORE_* variables."""
        monkeypatch.setenv("DATASTORE_DEFAULT_SCOPE", "season_2")
        monkeypatch.setenv("DATASTORE_RETRY_DELAY_SECONDS", "0.25")
        monkeypatch.setenv("DATASTORE_MAX_WORKERS", "2")
        monkeypatch.setenv("DATASTORE_LIST_PAGE_SIZE", "10")
        monkeypatch.setenv("DATASTORE_CAPABILITY_CHECK", "false")

        settings = StoreSettings()

        assert settings.default_scope == "season_2"
        assert settings.retry_delay_seconds == 0.25
        assert settings.max_workers == 2
        assert settings.list_page_size == 10
        assert settings.capability_check is False

    def test_field_names_are_accepted(self):
        """Test StoreSettings populated by field name."""
        settings = StoreSettings(retry_delay_seconds=0, capability_check=False)

        assert settings.retry_delay_seconds == 0
        assert settings.capability_check is False

    @pytest.mark.parametrize(
        "overrides",
        [
            {"retry_delay_seconds": -1},
            {"max_workers": 0},
            {"list_page_size": 0},
        ],
    )
    def test_invalid_values_are_rejected(self, overrides):
        """Test StoreSettings validators."""
        with pytest.raises(PydanticValidationError):
            StoreSettings(**overrides)


@pytest.mark.unit
class TestSettings:
    """Test the aggregated Settings."""

    def test_datastore_section_is_created(self):
        """Test Settings instantiates the datastore section."""
        settings = Settings()

        assert isinstance(settings.datastore, StoreSettings)

    def test_datastore_section_can_be_overridden(self):
        """Test Settings accepts an explicit datastore section."""
        section = StoreSettings(default_scope="qa")

        settings = Settings(datastore=section)

        assert settings.datastore.default_scope == "qa"

    def test_is_production_without_prefix(self, monkeypatch):
        """Test is_production when PREFIX is empty."""
        monkeypatch.delenv("PREFIX", raising=False)

        assert Settings().is_production is True

    def test_is_not_production_with_prefix(self, monkeypatch):
        """Test is_production when PREFIX is set."""
        monkeypatch.setenv("PREFIX", "dev-")

        assert Settings().is_production is False
