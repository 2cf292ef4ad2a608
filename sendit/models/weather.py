"""Open-Meteo forecast models: raw response and normalized snapshot."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class CurrentWeather:
    temperature: float
    windspeed: float
    winddirection: float
    weathercode: int
    time: str


@dataclass(frozen=True)
class HourlySeries:
    """Parallel hourly arrays, time ascending. Values may be None."""

    time: tuple[datetime, ...]
    temperature_2m: tuple[float | None, ...]
    apparent_temperature: tuple[float | None, ...]
    precipitation: tuple[float | None, ...]
    rain: tuple[float | None, ...]
    snowfall: tuple[float | None, ...]
    snow_depth: tuple[float | None, ...]
    visibility: tuple[float | None, ...]
    windspeed_10m: tuple[float | None, ...]
    weathercode: tuple[int | None, ...]

    def __len__(self) -> int:
        return len(self.time)


@dataclass(frozen=True)
class RawForecast:
    latitude: float
    longitude: float
    timezone: str
    current: CurrentWeather
    hourly: HourlySeries


@dataclass(frozen=True)
class HourlyForecast:
    time: datetime
    temperature: int
    weather_code: int
    wind_speed: int
    snowfall: float


@dataclass(frozen=True)
class WeatherSnapshot:
    temperature: int
    feels_like: int
    wind_speed: int
    wind_direction: float
    weather_code: int
    visibility: float
    is_snowing: bool
    is_raining: bool
    snowfall_last_24h: float
    snowfall_next_48h: float
    snow_depth: float
    hourly_forecast: tuple[HourlyForecast, ...]
    last_updated: datetime
