"""Shared test fixtures."""

import sqlite3
from collections.abc import Callable, Iterator
from datetime import datetime, timedelta
from pathlib import Path

import pytest
import yaml

from sendit.config.defaults import DEFAULT_RESORTS
from sendit.config.schema import AppConfig
from sendit.storage.database import connect, run_migrations

SERIES_START = datetime(2026, 2, 11, 0, 0)


def build_payload(
    hours: int = 72,
    start: datetime = SERIES_START,
    timezone: str = "GMT",
    utc_offset_seconds: int = 0,
    current_code: int = 3,
    current_temperature: float = 28.0,
    current_windspeed: float = 8.0,
    winddirection: float = 270.0,
    snowfall: float | list | None = 0.0,
    apparent_temperature: float | list | None = 25.0,
    visibility: float | list | None = 12000.0,
    snow_depth: float | list | None = 3.0,
    temperature: float | list | None = 28.0,
    windspeed: float | list | None = 8.0,
    weathercode: int | list | None = 3,
) -> dict:
    """Build an Open-Meteo style response body with ``hours`` hourly samples.

    Scalar series arguments are repeated; lists are used as given.
    """

    def series(value):
        return list(value) if isinstance(value, list) else [value] * hours

    return {
        "latitude": 39.2,
        "longitude": -120.24,
        "timezone": timezone,
        "utc_offset_seconds": utc_offset_seconds,
        "current_weather": {
            "temperature": current_temperature,
            "windspeed": current_windspeed,
            "winddirection": winddirection,
            "weathercode": current_code,
            "time": start.strftime("%Y-%m-%dT%H:%M"),
        },
        "hourly": {
            "time": [
                (start + timedelta(hours=i)).strftime("%Y-%m-%dT%H:%M")
                for i in range(hours)
            ],
            "temperature_2m": series(temperature),
            "apparent_temperature": series(apparent_temperature),
            "precipitation": series(0.0),
            "rain": series(0.0),
            "snowfall": series(snowfall),
            "snow_depth": series(snow_depth),
            "visibility": series(visibility),
            "windspeed_10m": series(windspeed),
            "weathercode": series(weathercode),
        },
    }


@pytest.fixture
def forecast_payload() -> Callable[..., dict]:
    """Factory for Open-Meteo response bodies."""
    return build_payload


@pytest.fixture
def store(tmp_path: Path) -> Iterator[sqlite3.Connection]:
    """A migrated SQLite document store in a temp directory."""
    conn = connect(tmp_path / "test.db")
    run_migrations(conn)
    yield conn
    conn.close()


@pytest.fixture
def default_config() -> AppConfig:
    """Return default AppConfig with default resorts."""
    return AppConfig(resorts=DEFAULT_RESORTS)


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "weather": {"forecast_days": 3, "max_retries": 0},
        "storage": {"db_path": str(tmp_path / "sendit.db")},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
