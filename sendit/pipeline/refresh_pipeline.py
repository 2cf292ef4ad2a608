"""Refresh pipeline: fetch -> parse -> normalize -> score.

The snapshot and its score are published together or not at all. A failed
refresh keeps the last-known-good snapshot and records the error.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime

from sendit.ingest.forecast_parser import parse_forecast
from sendit.ingest.open_meteo_client import OpenMeteoClient, UpstreamFetchError
from sendit.ingest.staleness import is_snapshot_stale
from sendit.models.common import utc_now
from sendit.models.send_it import SendItResult
from sendit.models.weather import WeatherSnapshot
from sendit.scoring.scorer import score
from sendit.weather.normalizer import MalformedForecastError, normalize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeatherState:
    snapshot: WeatherSnapshot | None = None
    result: SendItResult | None = None
    error: str | None = None
    refreshes: int = 0

    @property
    def available(self) -> bool:
        return self.snapshot is not None

    def is_stale(self, max_age_minutes: int, now: datetime | None = None) -> bool:
        """True when the last refresh failed or the snapshot is too old."""
        if self.error is not None:
            return True
        last = self.snapshot.last_updated if self.snapshot else None
        return is_snapshot_stale(last, max_age_minutes, now)


def score_forecast(
    raw: dict, now: datetime | None = None
) -> tuple[WeatherSnapshot, SendItResult]:
    """Run the synchronous part of the pipeline on a fetched response body."""
    forecast = parse_forecast(raw)
    snapshot = normalize(forecast, now or utc_now())
    return snapshot, score(snapshot)


def refresh_weather(
    state: WeatherState,
    client: OpenMeteoClient,
    lat: float,
    lng: float,
    now: datetime | None = None,
) -> WeatherState:
    """Run one full refresh and return the next state."""
    try:
        raw = client.get_forecast(lat, lng)
        snapshot, result = score_forecast(raw, now)
    except (UpstreamFetchError, MalformedForecastError) as e:
        return _failed(state, e, lat, lng)
    return _succeeded(state, snapshot, result)


class RefreshCoordinator:
    """Serializes refreshes for one location.

    A new request cancels the one in flight; a refresh that finishes after
    being superseded is dropped (last request wins).
    """

    def __init__(
        self,
        client: OpenMeteoClient,
        lat: float,
        lng: float,
        state: WeatherState | None = None,
        on_update: Callable[[WeatherState], None] | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.client = client
        self.lat = lat
        self.lng = lng
        self.state = state or WeatherState()
        self.on_update = on_update
        self._clock = clock
        self._generation = 0
        self._task: asyncio.Task | None = None

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    async def refresh(self) -> WeatherState:
        """Start a refresh, cancelling any in flight, and wait for it.

        Returns the published state, or the current state when this
        request was itself superseded before completing.
        """
        self.cancel()
        self._generation += 1
        generation = self._generation
        task = asyncio.create_task(self._run(generation))
        self._task = task
        try:
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if generation != self._generation and not (current and current.cancelling()):
                return self.state
            raise

    def cancel(self) -> None:
        if self.in_flight:
            assert self._task is not None
            logger.debug("Cancelling in-flight refresh for %.4f,%.4f", self.lat, self.lng)
            self._task.cancel()

    def close(self) -> None:
        """Tear down: cancel in-flight work and ignore anything still running."""
        self.cancel()
        self._generation += 1

    async def _run(self, generation: int) -> WeatherState:
        try:
            raw = await asyncio.to_thread(self.client.get_forecast, self.lat, self.lng)
            snapshot, result = score_forecast(raw, self._clock())
        except (UpstreamFetchError, MalformedForecastError) as e:
            next_state = _failed(self.state, e, self.lat, self.lng)
        else:
            next_state = _succeeded(self.state, snapshot, result)

        if generation != self._generation:
            logger.debug("Dropping superseded refresh (generation %d)", generation)
            return self.state

        self.state = next_state
        if self.on_update is not None:
            self.on_update(next_state)
        return next_state


def _succeeded(
    state: WeatherState, snapshot: WeatherSnapshot, result: SendItResult
) -> WeatherState:
    logger.info(
        "Weather refreshed: score %d (%s), %.1f\" last 24h",
        result.score, result.label, snapshot.snowfall_last_24h,
    )
    return WeatherState(
        snapshot=snapshot, result=result, error=None, refreshes=state.refreshes + 1
    )


def _failed(state: WeatherState, error: Exception, lat: float, lng: float) -> WeatherState:
    if isinstance(error, MalformedForecastError):
        logger.error("Malformed forecast for %.4f,%.4f: %s", lat, lng, error)
    else:
        logger.warning("Weather unavailable for %.4f,%.4f: %s", lat, lng, error)
    return replace(state, error=f"Weather unavailable: {error}")
