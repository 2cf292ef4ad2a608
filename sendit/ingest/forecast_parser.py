"""Forecast parser: Open-Meteo JSON -> RawForecast."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sendit.ingest.open_meteo_client import HOURLY_FIELDS
from sendit.models.weather import CurrentWeather, HourlySeries, RawForecast
from sendit.weather.normalizer import MalformedForecastError

logger = logging.getLogger(__name__)

# Hourly series holding integer codes; all others are floats
INT_SERIES = frozenset({"weathercode"})


def parse_forecast(raw: dict) -> RawForecast:
    """Build a RawForecast from an Open-Meteo response body.

    Hourly timestamps are local to the location (``timezone=auto``) and are
    made timezone-aware in the response's IANA ``timezone``, so offsets
    follow DST changes inside the window. ``utc_offset_seconds`` is used
    only when the zone name is unknown.

    Raises:
        MalformedForecastError: if ``current_weather`` or any hourly series
            is missing or not a list, the hourly series differ in length,
            or a sample is not numeric.
    """
    current = raw.get("current_weather")
    hourly = raw.get("hourly")
    if not isinstance(current, dict):
        raise MalformedForecastError("Response has no current_weather block")
    if not isinstance(hourly, dict):
        raise MalformedForecastError("Response has no hourly block")

    names = ("time", *HOURLY_FIELDS)
    missing = [name for name in names if name not in hourly]
    if missing:
        raise MalformedForecastError(f"Hourly series missing: {', '.join(missing)}")

    not_lists = [name for name in names if not isinstance(hourly[name], list)]
    if not_lists:
        raise MalformedForecastError(f"Hourly series not a list: {', '.join(not_lists)}")

    lengths = {len(hourly[name]) for name in names}
    if len(lengths) != 1:
        raise MalformedForecastError(
            f"Hourly series lengths differ: {sorted(lengths)}"
        )

    tz = _location_tz(raw.get("timezone"), raw.get("utc_offset_seconds"))
    try:
        times = tuple(_parse_time(t, tz) for t in hourly["time"])
        current_weather = CurrentWeather(
            temperature=float(current["temperature"]),
            windspeed=float(current["windspeed"]),
            winddirection=float(current.get("winddirection") or 0.0),
            weathercode=int(current["weathercode"]),
            time=str(current.get("time", "")),
        )
        values = {
            name: _samples(hourly[name], int if name in INT_SERIES else float)
            for name in HOURLY_FIELDS
        }
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedForecastError(f"Unparseable forecast field: {e}") from e

    series = HourlySeries(time=times, **values)
    logger.debug("Parsed %d hourly samples (tz=%s)", len(series), tz)

    return RawForecast(
        latitude=float(raw.get("latitude", 0.0)),
        longitude=float(raw.get("longitude", 0.0)),
        timezone=str(raw.get("timezone", "GMT")),
        current=current_weather,
        hourly=series,
    )


def _samples(values: list, convert: Callable[[object], float | int]) -> tuple:
    # null samples stay None; the normalizer applies the defaults
    return tuple(None if v is None else convert(v) for v in values)


def _location_tz(name: str | None, offset_seconds: int | None) -> tzinfo:
    if name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, TypeError, ValueError):
            logger.warning("Unknown timezone %r, using fixed UTC offset", name)
    if not offset_seconds:
        return UTC
    return timezone(timedelta(seconds=int(offset_seconds)))


def _parse_time(value: str, tz: tzinfo) -> datetime:
    # Open-Meteo times look like "2026-02-11T06:00" in location-local time
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz)
    return dt
