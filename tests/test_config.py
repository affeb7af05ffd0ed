"""Tests for configuration loading and validation."""

import pytest
import yaml

from property_scanner.config import Configuration, get_env, load_config
from property_scanner.exceptions import ConfigurationError


class TestConfiguration:
    def test_from_snake_case(self, criteria):
        config = Configuration.from_dict(criteria)

        assert config.max_price == 300000
        assert config.interest_rate == 6
        assert config.target_markets[0].city == "Cleveland"
        assert config.target_markets[0].region == "OH"

    def test_from_camel_case(self):
        config = Configuration.from_dict(
            {
                "maxPrice": 250000,
                "minRentRatio": 1,
                "minCashFlow": 150,
                "targetCities": ["Memphis, TN", "Toledo, OH"],
                "downPaymentPercent": 25,
                "interestRate": 7.25,
                "propertyTaxRate": 1.5,
                "maintenancePercent": 1,
                "vacancyRate": 5,
                "propertyManagementPercent": 8,
            }
        )

        assert config.down_payment_percent == 25
        assert [m.city for m in config.target_markets] == ["Memphis", "Toledo"]
        assert config.insurance_monthly == 150

    def test_insurance_null_uses_default(self, criteria):
        criteria["insurance_monthly"] = None
        assert Configuration.from_dict(criteria).insurance_monthly == 150

    def test_numeric_strings_accepted(self, criteria):
        criteria["max_price"] = "275000"
        assert Configuration.from_dict(criteria).max_price == 275000

    def test_missing_configuration(self):
        with pytest.raises(ConfigurationError, match="missing"):
            Configuration.from_dict(None)

    def test_missing_field(self, criteria):
        del criteria["interest_rate"]
        with pytest.raises(ConfigurationError, match="interest_rate"):
            Configuration.from_dict(criteria)

    def test_non_numeric_field(self, criteria):
        criteria["vacancy_rate"] = "lots"
        with pytest.raises(ConfigurationError, match="vacancy_rate"):
            Configuration.from_dict(criteria)

    def test_percent_out_of_range(self, criteria):
        criteria["down_payment_percent"] = 120
        with pytest.raises(ConfigurationError, match="between 0 and 100"):
            Configuration.from_dict(criteria)

    def test_max_price_must_be_positive(self, criteria):
        criteria["max_price"] = 0
        with pytest.raises(ConfigurationError, match="max_price"):
            Configuration.from_dict(criteria)

    def test_markets_required(self, criteria):
        criteria["target_markets"] = []
        with pytest.raises(ConfigurationError, match="market"):
            Configuration.from_dict(criteria)

    def test_markets_must_be_a_list(self, criteria):
        criteria["target_markets"] = "Cleveland, OH"
        with pytest.raises(ConfigurationError, match="list"):
            Configuration.from_dict(criteria)

    def test_blank_market_rejected(self, criteria):
        criteria["target_markets"] = ["Cleveland, OH", ", TX"]
        with pytest.raises(ConfigurationError, match="Invalid market"):
            Configuration.from_dict(criteria)

    def test_configuration_error_is_value_error(self):
        assert issubclass(ConfigurationError, ValueError)


class TestLoadConfig:
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_missing_criteria_section(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"provider": {"name": "rentcast"}}))
        with pytest.raises(ConfigurationError, match="criteria"):
            load_config(str(path))

    def test_invalid_criteria_fail_early(self, tmp_path, criteria):
        criteria["vacancy_rate"] = -5
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"criteria": criteria}))
        with pytest.raises(ConfigurationError):
            load_config(str(path))

    def test_valid_file(self, tmp_path, criteria):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"criteria": criteria, "email": {"enabled": False}}))

        config = load_config(str(path))
        assert config["criteria"]["max_price"] == 300000
        assert config["email"]["enabled"] is False


class TestGetEnv:
    def test_default(self, monkeypatch):
        monkeypatch.delenv("PS_TEST_VAR", raising=False)
        assert get_env("PS_TEST_VAR", "fallback") == "fallback"

    def test_required_missing(self, monkeypatch):
        monkeypatch.delenv("PS_TEST_VAR", raising=False)
        with pytest.raises(ConfigurationError, match="PS_TEST_VAR"):
            get_env("PS_TEST_VAR", required=True)
