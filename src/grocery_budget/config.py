"""Configuration management for Grocery Budget."""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

DEFAULT_PRODUCT_URL = "https://world.openfoodfacts.org/api/v2/product"
DEFAULT_PRICES_URL = "https://prices.openfoodfacts.org/api/v1"


@dataclass
class DataConfig:
    """Data storage configuration."""

    storage_dir: Path
    backend: str = "json"


@dataclass
class DefaultsConfig:
    """Default values configuration."""

    category: str = "Other"
    unit: str = "each"
    currency: str = "USD"


@dataclass
class BudgetConfig:
    """Budget configuration."""

    alert_threshold: float = 80.0


@dataclass
class ForecastConfig:
    """Replenishment forecast configuration."""

    horizon_days: int = 7
    reminder_days: int = 2
    min_history: int = 2


@dataclass
class LookupConfig:
    """Barcode product and price lookup configuration."""

    product_url: str = DEFAULT_PRODUCT_URL
    prices_url: str = DEFAULT_PRICES_URL
    timeout: float = 10.0
    user_agent: str = "grocery-budget/0.1"
    country_code: str | None = None


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "WARNING"


@dataclass
class Config:
    """Complete application configuration."""

    data: DataConfig
    defaults: DefaultsConfig
    budget: BudgetConfig
    forecast: ForecastConfig
    lookup: LookupConfig
    logging: LoggingConfig


class ConfigManager:
    """Manages application configuration from TOML files."""

    def __init__(self, config_path: Path | None = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional explicit path to config file.
                        If not provided, searches standard locations.
        """
        self.config_path = config_path or self._find_config()
        self._config = self._load_config()

    @property
    def data(self) -> DataConfig:
        """Get data configuration."""
        return self._config.data

    @property
    def defaults(self) -> DefaultsConfig:
        """Get defaults configuration."""
        return self._config.defaults

    @property
    def budget(self) -> BudgetConfig:
        """Get budget configuration."""
        return self._config.budget

    @property
    def forecast(self) -> ForecastConfig:
        """Get forecast configuration."""
        return self._config.forecast

    @property
    def lookup(self) -> LookupConfig:
        """Get lookup configuration."""
        return self._config.lookup

    @property
    def logging(self) -> LoggingConfig:
        """Get logging configuration."""
        return self._config.logging

    def _find_config(self) -> Path:
        """Find config file in standard locations."""
        locations = [
            Path.cwd() / "config.toml",
            Path.home() / ".config" / "grocery-budget" / "config.toml",
            Path.home() / ".grocery-budget" / "config.toml",
        ]

        for loc in locations:
            if loc.exists():
                return loc

        # Return default location if none found
        return Path.home() / ".config" / "grocery-budget" / "config.toml"

    def _load_config(self) -> Config:
        """Load configuration from TOML file."""
        if not self.config_path.exists():
            return self._default_config()

        with open(self.config_path, "rb") as f:
            data = tomllib.load(f)

        data_section = data.get("data", {})
        defaults = data.get("defaults", {})
        forecast = data.get("forecast", {})
        lookup = data.get("lookup", {})

        return Config(
            data=DataConfig(
                storage_dir=Path(
                    data_section.get("storage_dir", "~/grocery-budget/data")
                ).expanduser(),
                backend=data_section.get("backend", "json"),
            ),
            defaults=DefaultsConfig(
                category=defaults.get("category", "Other"),
                unit=defaults.get("unit", "each"),
                currency=defaults.get("currency", "USD"),
            ),
            budget=BudgetConfig(
                alert_threshold=data.get("budget", {}).get("alert_threshold", 80.0),
            ),
            forecast=ForecastConfig(
                horizon_days=forecast.get("horizon_days", 7),
                reminder_days=forecast.get("reminder_days", 2),
                min_history=forecast.get("min_history", 2),
            ),
            lookup=LookupConfig(
                product_url=lookup.get("product_url", DEFAULT_PRODUCT_URL),
                prices_url=lookup.get("prices_url", DEFAULT_PRICES_URL),
                timeout=lookup.get("timeout", 10.0),
                user_agent=lookup.get("user_agent", "grocery-budget/0.1"),
                country_code=lookup.get("country_code"),
            ),
            logging=LoggingConfig(
                level=data.get("logging", {}).get("level", "WARNING"),
            ),
        )

    def _default_config(self) -> Config:
        """Return default configuration."""
        return Config(
            data=DataConfig(storage_dir=Path.home() / "grocery-budget" / "data"),
            defaults=DefaultsConfig(),
            budget=BudgetConfig(),
            forecast=ForecastConfig(),
            lookup=LookupConfig(),
            logging=LoggingConfig(),
        )

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get config value by dot-notation path.

        Args:
            key_path: Dot-separated path like 'data.storage_dir'
            default: Default value if path not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split(".")
        value: Any = self._config

        for key in keys:
            if hasattr(value, key):
                value = getattr(value, key)
            elif isinstance(value, dict):
                value = value.get(key)
                if value is None:
                    return default
            else:
                return default

        return value if value is not None else default
