"""Configuration loader and scan criteria for the property scanner."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml
from dotenv import load_dotenv

from .exceptions import ConfigurationError
from .models.listing import MarketDescriptor

DEFAULT_INSURANCE_MONTHLY = 150.0

# camelCase keys sent by the web UI, mapped to dataclass fields
_FIELD_ALIASES = {
    "maxPrice": "max_price",
    "minRentRatio": "min_rent_ratio",
    "minCashFlow": "min_cash_flow",
    "targetMarkets": "target_markets",
    "targetCities": "target_markets",
    "target_cities": "target_markets",
    "downPaymentPercent": "down_payment_percent",
    "interestRate": "interest_rate",
    "propertyTaxRate": "property_tax_rate",
    "maintenancePercent": "maintenance_percent",
    "vacancyRate": "vacancy_rate",
    "propertyManagementPercent": "property_management_percent",
    "insuranceMonthly": "insurance_monthly",
}

_PERCENT_FIELDS = (
    "min_rent_ratio",
    "down_payment_percent",
    "interest_rate",
    "property_tax_rate",
    "maintenance_percent",
    "vacancy_rate",
    "property_management_percent",
)


@dataclass(frozen=True)
class Configuration:
    """
    Investment criteria for one scan.

    All percentages are on a 0-100 scale and interest_rate is an annual
    nominal rate.
    """

    max_price: float
    min_rent_ratio: float
    min_cash_flow: float
    target_markets: Tuple[MarketDescriptor, ...]
    down_payment_percent: float
    interest_rate: float
    property_tax_rate: float
    maintenance_percent: float
    vacancy_rate: float
    property_management_percent: float
    insurance_monthly: float = DEFAULT_INSURANCE_MONTHLY

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "Configuration":
        """
        Build and validate a Configuration from a raw mapping.

        Accepts snake_case keys (YAML file) or camelCase keys (web UI).

        Raises:
            ConfigurationError: If a field is missing, non-numeric or out of range
        """
        if not isinstance(data, Mapping):
            raise ConfigurationError("Scan configuration is missing or not a mapping")

        values: Dict[str, Any] = {}
        for key, value in data.items():
            values[_FIELD_ALIASES.get(key, key)] = value

        numeric = {}
        for name in ("max_price", "min_cash_flow") + _PERCENT_FIELDS:
            numeric[name] = _require_number(values, name)

        insurance = values.get("insurance_monthly")
        if insurance is None:
            numeric["insurance_monthly"] = DEFAULT_INSURANCE_MONTHLY
        else:
            numeric["insurance_monthly"] = _require_number(values, "insurance_monthly")

        config = cls(target_markets=_parse_markets(values.get("target_markets")), **numeric)
        config.validate()
        return config

    def validate(self) -> None:
        """Check value ranges."""
        if self.max_price <= 0:
            raise ConfigurationError(f"max_price must be positive, got {self.max_price}")
        for name in _PERCENT_FIELDS:
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ConfigurationError(f"{name} must be between 0 and 100, got {value}")
        if self.insurance_monthly < 0:
            raise ConfigurationError("insurance_monthly must not be negative")
        if not self.target_markets:
            raise ConfigurationError("At least one target market must be configured")


def _require_number(values: Dict[str, Any], name: str) -> float:
    if values.get(name) is None:
        raise ConfigurationError(f"Missing required scan setting: {name}")
    value = values[name]
    if isinstance(value, bool):
        raise ConfigurationError(f"Scan setting {name} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Scan setting {name} must be a number, got {value!r}")


def _parse_markets(raw: Any) -> Tuple[MarketDescriptor, ...]:
    if raw is None:
        raise ConfigurationError("Missing required scan setting: target_markets")
    if not isinstance(raw, (list, tuple)):
        raise ConfigurationError("target_markets must be a list of \"City, Region\" strings")

    markets = []
    for entry in raw:
        market = MarketDescriptor.parse(entry)
        if not market.city:
            raise ConfigurationError(f"Invalid market descriptor: {entry!r}")
        markets.append(market)
    return tuple(markets)


def load_config(config_path: str = "./config/config.yaml") -> Dict[str, Any]:
    """
    Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        Dictionary containing the raw configuration sections

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigurationError: If config is invalid
    """
    # Load environment variables from .env file
    load_dotenv()

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}\n"
            f"Copy config/config.example.yaml to config/config.yaml and customize it."
        )

    with open(config_file, "r") as f:
        config = yaml.safe_load(f)

    _validate_config(config)

    return config


def _validate_config(config: Any) -> None:
    """Validate configuration structure."""
    if not isinstance(config, dict):
        raise ConfigurationError("Configuration file must contain a mapping")

    if "criteria" not in config:
        raise ConfigurationError("Missing required config section: criteria")

    for section in ("provider", "email"):
        if config.get(section) is not None and not isinstance(config[section], dict):
            raise ConfigurationError(f"Config section {section} must be a mapping")

    # Fail early on bad criteria instead of at scan time
    Configuration.from_dict(config["criteria"])


def get_env(key: str, default: str = None, required: bool = False) -> str:
    """
    Get environment variable with optional default and required check.

    Args:
        key: Environment variable name
        default: Default value if not set
        required: If True, raise error when not set

    Returns:
        Environment variable value

    Raises:
        ConfigurationError: If required and not set
    """
    value = os.getenv(key, default)
    if required and not value:
        raise ConfigurationError(f"Required environment variable not set: {key}")
    return value
