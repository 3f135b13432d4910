"""Tests for configuration management."""

from pathlib import Path

import pytest

from grocery_budget.config import DEFAULT_PRICES_URL, DEFAULT_PRODUCT_URL, ConfigManager


@pytest.fixture
def config_file(tmp_path):
    """Create a temporary config file."""
    config_path = tmp_path / "config.toml"
    config_path.write_text("""
[data]
storage_dir = "/custom/data"
backend = "sqlite"

[defaults]
category = "Produce"
unit = "kg"
currency = "ILS"

[budget]
alert_threshold = 90.0

[forecast]
horizon_days = 10
reminder_days = 3

[lookup]
timeout = 5.0
country_code = "IL"

[logging]
level = "INFO"
""")
    return config_path


class TestConfigManager:
    """Tests for ConfigManager."""

    def test_load_config_file(self, config_file):
        """Load configuration from file."""
        manager = ConfigManager(config_path=config_file)

        assert manager.data.storage_dir == Path("/custom/data")
        assert manager.data.backend == "sqlite"

    def test_defaults_config(self, config_file):
        manager = ConfigManager(config_path=config_file)

        assert manager.defaults.category == "Produce"
        assert manager.defaults.unit == "kg"
        assert manager.defaults.currency == "ILS"

    def test_budget_and_forecast_config(self, config_file):
        manager = ConfigManager(config_path=config_file)

        assert manager.budget.alert_threshold == 90.0
        assert manager.forecast.horizon_days == 10
        assert manager.forecast.reminder_days == 3
        assert manager.forecast.min_history == 2

    def test_lookup_config(self, config_file):
        manager = ConfigManager(config_path=config_file)

        assert manager.lookup.timeout == 5.0
        assert manager.lookup.country_code == "IL"
        assert manager.lookup.product_url == DEFAULT_PRODUCT_URL
        assert manager.lookup.prices_url == DEFAULT_PRICES_URL

    def test_logging_config(self, config_file):
        assert ConfigManager(config_path=config_file).logging.level == "INFO"

    def test_missing_config_uses_defaults(self, tmp_path):
        """Missing config file uses default values."""
        manager = ConfigManager(config_path=tmp_path / "nonexistent.toml")

        assert manager.data.backend == "json"
        assert manager.defaults.category == "Other"
        assert manager.budget.alert_threshold == 80.0
        assert manager.forecast.horizon_days == 7
        assert manager.lookup.country_code is None
        assert manager.logging.level == "WARNING"

    def test_get_by_path(self, config_file):
        """Get config value by dot-notation path."""
        manager = ConfigManager(config_path=config_file)

        assert manager.get("defaults.category") == "Produce"
        assert manager.get("forecast.horizon_days") == 10

    def test_get_with_default(self, config_file):
        """Get returns default for missing path."""
        manager = ConfigManager(config_path=config_file)

        assert manager.get("nonexistent.key", "default") == "default"
        assert manager.get("nonexistent", None) is None

    def test_get_none_value_returns_default(self, tmp_path):
        manager = ConfigManager(config_path=tmp_path / "nonexistent.toml")
        assert manager.get("lookup.country_code", "US") == "US"

    def test_partial_config(self, tmp_path):
        """Config file with only some sections."""
        config_path = tmp_path / "partial.toml"
        config_path.write_text("""
[forecast]
horizon_days = 14
""")
        manager = ConfigManager(config_path=config_path)

        assert manager.forecast.horizon_days == 14
        assert manager.forecast.reminder_days == 2
        assert manager.defaults.category == "Other"
        assert manager.data.storage_dir == Path("~/grocery-budget/data").expanduser()


class TestConfigDiscovery:
    """Tests for config file discovery."""

    def test_finds_local_config(self, tmp_path, monkeypatch):
        """Finds config.toml in current directory."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config.toml").write_text('[defaults]\ncategory = "Pantry"\n')

        assert ConfigManager().defaults.category == "Pantry"

    def test_prefers_explicit_path(self, tmp_path, monkeypatch):
        """Explicit path takes precedence over discovery."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config.toml").write_text('[defaults]\ncategory = "Pantry"\n')
        explicit_config = tmp_path / "explicit.toml"
        explicit_config.write_text('[defaults]\ncategory = "Frozen"\n')

        assert ConfigManager(config_path=explicit_config).defaults.category == "Frozen"

    def test_no_config_uses_default_path(self, tmp_path, monkeypatch):
        """When no config file exists anywhere, returns default home config path."""
        empty_dir = tmp_path / "empty"
        empty_dir.mkdir()
        monkeypatch.chdir(empty_dir)
        monkeypatch.setenv("HOME", str(tmp_path / "home"))

        manager = ConfigManager()
        expected = Path.home() / ".config" / "grocery-budget" / "config.toml"
        assert manager.config_path == expected
        assert manager.defaults.category == "Other"
