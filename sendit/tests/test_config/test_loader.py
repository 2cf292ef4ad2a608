"""Tests for config loading, resort lookup, and get/set."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from sendit.config.defaults import DEFAULT_RESORTS
from sendit.config.loader import (
    config_hash,
    get_config_value,
    load_config,
    resort_by_name,
    resort_by_slug,
    set_config_value,
)
from sendit.config.schema import AppConfig, PrecipitationUnit


class TestLoadConfig:
    def test_load_from_yaml(self, config_yaml_path: Path):
        config = load_config(config_yaml_path)
        assert config.weather.forecast_days == 3
        assert config.weather.max_retries == 0
        assert config.storage.db_path.endswith("sendit.db")

    def test_default_resorts_injected(self, config_yaml_path: Path):
        config = load_config(config_yaml_path)
        assert len(config.resorts) == len(DEFAULT_RESORTS)
        assert config.resorts[0].slug == "palisades-tahoe"

    def test_explicit_resorts_not_overridden(self, tmp_path: Path):
        data = {"resorts": [{"name": "Home Hill", "slug": "home", "lat": 45.0, "lng": -110.0}]}
        path = tmp_path / "custom.yaml"
        with open(path, "w") as f:
            yaml.dump(data, f)
        config = load_config(path)
        assert len(config.resorts) == 1
        assert config.resorts[0].slug == "home"

    def test_empty_yaml_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        config = load_config(path)
        assert config.weather.refresh_interval_minutes == 10
        assert config.weather.precipitation_unit == PrecipitationUnit.INCH
        assert len(config.resorts) == len(DEFAULT_RESORTS)

    def test_missing_file_uses_defaults(self, tmp_path: Path):
        config = load_config(tmp_path / "nope.yaml")
        assert config.storage.db_path == "data/sendit.db"

    def test_unknown_key_rejected(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("weather:\n  colour: blue\n")
        with pytest.raises(ValidationError):
            load_config(path)


class TestConfigHash:
    def test_deterministic(self, default_config: AppConfig):
        assert config_hash(default_config) == config_hash(default_config)
        assert len(config_hash(default_config)) == 16

    def test_changes_with_config(self, default_config: AppConfig):
        changed = set_config_value(default_config, "weather.forecast_days", "5")
        assert config_hash(changed) != config_hash(default_config)


class TestResortLookup:
    def test_by_name_case_insensitive(self, default_config: AppConfig):
        resort = resort_by_name(default_config, "  palisades TAHOE ")
        assert resort is not None
        assert resort.slug == "palisades-tahoe"

    def test_by_name_accepts_slug(self, default_config: AppConfig):
        resort = resort_by_name(default_config, "Jackson-Hole")
        assert resort is not None
        assert resort.name == "Jackson Hole"

    def test_by_slug(self, default_config: AppConfig):
        resort = resort_by_slug(default_config, "vail")
        assert resort is not None
        assert resort.name == "Vail"
        assert resort_by_slug(default_config, "Vail") is None

    def test_unknown(self, default_config: AppConfig):
        assert resort_by_name(default_config, "Whistler") is None


class TestGetSetValue:
    def test_get_nested(self, default_config: AppConfig):
        assert get_config_value(default_config, "weather.forecast_days") == 3

    def test_get_list_item(self, default_config: AppConfig):
        assert get_config_value(default_config, "resorts.0.slug") == "palisades-tahoe"

    def test_get_missing_key(self, default_config: AppConfig):
        with pytest.raises(KeyError):
            get_config_value(default_config, "weather.nope")

    def test_set_coerces_int(self, default_config: AppConfig):
        updated = set_config_value(default_config, "weather.max_retries", "5")
        assert updated.weather.max_retries == 5
        assert default_config.weather.max_retries == 3

    def test_set_coerces_float(self, default_config: AppConfig):
        updated = set_config_value(default_config, "weather.timeout", "12.5")
        assert updated.weather.timeout == 12.5

    def test_set_enum(self, default_config: AppConfig):
        updated = set_config_value(default_config, "weather.precipitation_unit", "mm")
        assert updated.weather.precipitation_unit == PrecipitationUnit.MM

    def test_set_revalidates(self, default_config: AppConfig):
        with pytest.raises(ValidationError):
            set_config_value(default_config, "weather.forecast_days", "30")
