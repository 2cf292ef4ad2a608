"""Pydantic v2 configuration schema with strict validation."""

from enum import StrEnum

from pydantic import BaseModel, Field


class TemperatureUnit(StrEnum):
    FAHRENHEIT = "fahrenheit"
    CELSIUS = "celsius"


class WindspeedUnit(StrEnum):
    MPH = "mph"
    KMH = "kmh"
    MS = "ms"
    KN = "kn"


class PrecipitationUnit(StrEnum):
    INCH = "inch"
    MM = "mm"


class ResortConfig(BaseModel):
    model_config = {"extra": "forbid"}

    name: str
    slug: str
    lat: float = Field(ge=-90.0, le=90.0)
    lng: float = Field(ge=-180.0, le=180.0)


class WeatherConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = "https://api.open-meteo.com/v1/forecast"
    timeout: float = Field(default=30.0, gt=0.0)
    max_retries: int = Field(default=3, ge=0)
    retry_base_delay: float = Field(default=2.0, ge=0.0)
    forecast_days: int = Field(default=3, ge=1, le=16)
    refresh_interval_minutes: int = Field(default=10, ge=1)
    temperature_unit: TemperatureUnit = TemperatureUnit.FAHRENHEIT
    windspeed_unit: WindspeedUnit = WindspeedUnit.MPH
    precipitation_unit: PrecipitationUnit = PrecipitationUnit.INCH


class StorageConfig(BaseModel):
    model_config = {"extra": "forbid"}

    db_path: str = "data/sendit.db"


class AppConfig(BaseModel):
    model_config = {"extra": "forbid"}

    weather: WeatherConfig = WeatherConfig()
    storage: StorageConfig = StorageConfig()
    resorts: list[ResortConfig] = []
