"""Tests for the refresh pipeline and the refresh coordinator."""

import asyncio
import threading
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

from sendit.ingest.open_meteo_client import OpenMeteoClient, UpstreamFetchError
from sendit.pipeline.refresh_pipeline import (
    RefreshCoordinator,
    WeatherState,
    refresh_weather,
    score_forecast,
)

NOW = datetime(2026, 2, 12, 10, 30, tzinfo=UTC)
LAT, LNG = 39.1968, -120.2354


def _client(*responses) -> MagicMock:
    client = MagicMock(spec=OpenMeteoClient)
    client.get_forecast.side_effect = list(responses)
    return client


class TestScoreForecast:
    def test_powder_day(self, forecast_payload):
        # 8 x 1.0" in the 24h leading up to hour 34
        snow = [0.0] * 72
        for i in range(27, 35):
            snow[i] = 1.0
        payload = forecast_payload(
            current_code=75,
            current_windspeed=8.0,
            snowfall=snow,
            visibility=12000.0,
            apparent_temperature=25.0,
        )
        snapshot, result = score_forecast(payload, NOW)
        assert snapshot.snowfall_last_24h == 8.0
        assert snapshot.is_snowing is True
        assert result.score >= 9
        assert result.label in ("SEND IT!", "EPIC DAY")

    def test_rain_storm(self, forecast_payload):
        payload = forecast_payload(
            current_code=65,
            current_windspeed=35.0,
            snowfall=0.0,
            visibility=500.0,
            apparent_temperature=38.0,
        )
        _, result = score_forecast(payload, NOW)
        assert result.score == 1
        assert result.label == "Stay in bed"

    def test_short_series(self, forecast_payload):
        snapshot, _ = score_forecast(forecast_payload(hours=44), NOW)
        assert len(snapshot.hourly_forecast) == 10


class TestRefreshWeather:
    def test_success_replaces_state(self, forecast_payload):
        client = _client(forecast_payload())
        state = refresh_weather(WeatherState(), client, LAT, LNG, now=NOW)

        client.get_forecast.assert_called_once_with(LAT, LNG)
        assert state.available
        assert state.result is not None
        assert state.error is None
        assert state.refreshes == 1

    def test_fetch_error_keeps_last_good_snapshot(self, forecast_payload):
        client = _client(forecast_payload(), UpstreamFetchError("HTTP 502"))
        first = refresh_weather(WeatherState(), client, LAT, LNG, now=NOW)
        second = refresh_weather(first, client, LAT, LNG, now=NOW)

        assert second.snapshot == first.snapshot
        assert second.result == first.result
        assert second.error is not None and "unavailable" in second.error
        assert second.is_stale(10, now=NOW)

    def test_malformed_forecast_aborts(self, forecast_payload):
        bad = forecast_payload()
        bad["hourly"]["time"] = []
        for key in bad["hourly"]:
            bad["hourly"][key] = []
        client = _client(forecast_payload(), bad)
        first = refresh_weather(WeatherState(), client, LAT, LNG, now=NOW)
        second = refresh_weather(first, client, LAT, LNG, now=NOW)

        assert second.snapshot == first.snapshot
        assert second.error is not None

    def test_null_series_is_malformed(self, forecast_payload):
        bad = forecast_payload()
        bad["hourly"]["snowfall"] = None
        non_numeric = forecast_payload()
        non_numeric["hourly"]["snowfall"][5] = "n/a"
        client = _client(forecast_payload(), bad, non_numeric)
        state = refresh_weather(WeatherState(), client, LAT, LNG, now=NOW)
        for _ in range(2):
            state = refresh_weather(state, client, LAT, LNG, now=NOW)
            assert state.available
            assert state.error is not None
            assert state.refreshes == 1

    def test_error_without_prior_snapshot(self):
        client = _client(UpstreamFetchError("timeout"))
        state = refresh_weather(WeatherState(), client, LAT, LNG, now=NOW)
        assert not state.available
        assert state.error is not None

    def test_success_clears_error(self, forecast_payload):
        client = _client(UpstreamFetchError("timeout"), forecast_payload())
        failed = refresh_weather(WeatherState(), client, LAT, LNG, now=NOW)
        ok = refresh_weather(failed, client, LAT, LNG, now=NOW)
        assert ok.error is None
        assert not ok.is_stale(10, now=NOW + timedelta(minutes=5))


class TestRefreshCoordinator:
    def test_refresh_publishes(self, forecast_payload):
        updates: list[WeatherState] = []
        client = _client(forecast_payload())
        coord = RefreshCoordinator(client, LAT, LNG, on_update=updates.append, clock=lambda: NOW)

        state = asyncio.run(coord.refresh())
        assert state.available
        assert coord.state is state
        assert updates == [state]

    def test_newer_request_wins(self, forecast_payload):
        release = threading.Event()
        slow = forecast_payload(current_temperature=10.0)
        fast = forecast_payload(current_temperature=20.0)
        calls = iter([slow, fast])

        def get_forecast(lat, lng):
            body = next(calls)
            if body is slow:
                release.wait(timeout=5)
            return body

        client = MagicMock(spec=OpenMeteoClient)
        client.get_forecast.side_effect = get_forecast
        updates: list[WeatherState] = []
        coord = RefreshCoordinator(client, LAT, LNG, on_update=updates.append, clock=lambda: NOW)

        async def scenario():
            first = asyncio.create_task(coord.refresh())
            await asyncio.sleep(0.05)
            assert coord.in_flight
            second = await coord.refresh()
            release.set()
            return await first, second

        first, second = asyncio.run(scenario())
        assert second.snapshot is not None
        assert second.snapshot.temperature == 20
        assert not first.available or first.snapshot.temperature == 20
        assert coord.state.snapshot.temperature == 20
        assert len(updates) == 1

    def test_close_cancels_in_flight(self, forecast_payload):
        release = threading.Event()

        def get_forecast(lat, lng):
            release.wait(timeout=5)
            return forecast_payload()

        client = MagicMock(spec=OpenMeteoClient)
        client.get_forecast.side_effect = get_forecast
        updates: list[WeatherState] = []
        coord = RefreshCoordinator(client, LAT, LNG, on_update=updates.append, clock=lambda: NOW)

        async def scenario():
            pending = asyncio.create_task(coord.refresh())
            await asyncio.sleep(0.05)
            coord.close()
            result = await pending
            release.set()
            return result

        result = asyncio.run(scenario())
        assert not result.available
        assert not coord.state.available
        assert updates == []

    def test_failure_retains_state(self, forecast_payload):
        client = _client(forecast_payload(), UpstreamFetchError("HTTP 503"))
        coord = RefreshCoordinator(client, LAT, LNG, clock=lambda: NOW)

        async def scenario():
            good = await coord.refresh()
            bad = await coord.refresh()
            return good, bad

        good, bad = asyncio.run(scenario())
        assert bad.snapshot == good.snapshot
        assert bad.error is not None
