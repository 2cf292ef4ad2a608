"""Weather normalizer: raw Open-Meteo forecast -> WeatherSnapshot.

All index-derived fields are anchored on one current-hour index: the last
hourly sample at or before ``now``, falling back to the first sample.
Aggregation windows are clamped to the available series, never padded.
"""

import logging
from collections.abc import Sequence
from dataclasses import fields
from datetime import UTC, datetime

from sendit.models.common import round_half_up, round_int
from sendit.models.weather import (
    HourlyForecast,
    HourlySeries,
    RawForecast,
    WeatherSnapshot,
)
from sendit.weather.codes import is_raining, is_snowing

logger = logging.getLogger(__name__)

TRAILING_SNOW_HOURS = 24
LEADING_SNOW_HOURS = 48
HOURLY_WINDOW = 12
DEFAULT_VISIBILITY_M = 10000.0
DEFAULT_SNOW_DEPTH = 0.0


class MalformedForecastError(ValueError):
    """The raw forecast violates the fetch contract (empty or ragged hourly data)."""


def normalize(raw: RawForecast, now: datetime) -> WeatherSnapshot:
    """Normalize a raw forecast relative to ``now``.

    Raises:
        MalformedForecastError: if the hourly series is empty or its
            parallel arrays differ in length.
    """
    hourly = raw.hourly
    validate_hourly(hourly)
    now = _aware(now)

    idx = current_hour_index(hourly.time, now)
    logger.debug("Current-hour index %d of %d hourly samples", idx, len(hourly))

    snowfall_last_24h = _sum_present(
        hourly.snowfall[max(0, idx - TRAILING_SNOW_HOURS) : idx + 1]
    )
    snowfall_next_48h = _sum_present(
        hourly.snowfall[idx : idx + LEADING_SNOW_HOURS]
    )

    code = raw.current.weathercode
    feels_like = hourly.apparent_temperature[idx]
    if feels_like is None:
        feels_like = raw.current.temperature
    visibility = hourly.visibility[idx]
    snow_depth = hourly.snow_depth[idx]

    return WeatherSnapshot(
        temperature=round_int(raw.current.temperature),
        feels_like=round_int(feels_like),
        wind_speed=round_int(raw.current.windspeed),
        wind_direction=raw.current.winddirection % 360,
        weather_code=code,
        visibility=DEFAULT_VISIBILITY_M if visibility is None else visibility,
        is_snowing=is_snowing(code),
        is_raining=is_raining(code),
        snowfall_last_24h=round_half_up(snowfall_last_24h, 1),
        snowfall_next_48h=round_half_up(snowfall_next_48h, 1),
        snow_depth=round_half_up(
            DEFAULT_SNOW_DEPTH if snow_depth is None else snow_depth, 1
        ),
        hourly_forecast=tuple(hourly_window(hourly, idx)),
        last_updated=now,
    )


def validate_hourly(hourly: HourlySeries) -> None:
    if len(hourly.time) == 0:
        raise MalformedForecastError("Hourly series is empty")
    lengths = {f.name: len(getattr(hourly, f.name)) for f in fields(hourly)}
    if len(set(lengths.values())) != 1:
        raise MalformedForecastError(f"Hourly series lengths differ: {lengths}")


def current_hour_index(times: Sequence[datetime], now: datetime) -> int:
    """Index of the last sample at or before ``now``; 0 when none qualifies."""
    now = _aware(now)
    first_future = next(
        (i for i, t in enumerate(times) if _aware(t) >= now), -1
    )
    return max(0, first_future - 1)


def hourly_window(hourly: HourlySeries, idx: int, size: int = HOURLY_WINDOW):
    """Yield up to ``size`` hourly records starting at ``idx``."""
    end = min(idx + size, len(hourly))
    for i in range(idx, end):
        yield HourlyForecast(
            time=hourly.time[i],
            temperature=round_int(hourly.temperature_2m[i] or 0),
            weather_code=hourly.weathercode[i] or 0,
            wind_speed=round_int(hourly.windspeed_10m[i] or 0),
            snowfall=hourly.snowfall[i] or 0.0,
        )


def _sum_present(values: Sequence[float | None]) -> float:
    return sum((v or 0.0) for v in values)


def _aware(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt
