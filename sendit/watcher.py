"""Weather watcher: refreshes one location on a fixed interval.

A manual refresh can be requested with SIGUSR1; it cancels any refresh in
flight and the latest request wins.

Usage:
    python -m sendit watch --resort "Palisades Tahoe"
    python -m sendit watch --lat 39.2 --lng -120.2 --interval 300
"""

import asyncio
import json
import logging
import os
import signal
from pathlib import Path

from sendit.config.loader import config_hash
from sendit.config.schema import AppConfig
from sendit.ingest.open_meteo_client import OpenMeteoClient
from sendit.models.common import utc_now_iso
from sendit.pipeline.refresh_pipeline import RefreshCoordinator, WeatherState
from sendit.reporting.formatters import format_state_text

logger = logging.getLogger(__name__)

MAX_BACKOFF = 3600  # 1 hour max backoff after repeated failures
STATE_DIR = Path("data")
STATE_FILE = STATE_DIR / "watch_state.json"


def client_from_config(config: AppConfig) -> OpenMeteoClient:
    w = config.weather
    return OpenMeteoClient(
        base_url=w.base_url,
        timeout=w.timeout,
        max_retries=w.max_retries,
        retry_base_delay=w.retry_base_delay,
        forecast_days=w.forecast_days,
        temperature_unit=w.temperature_unit.value,
        windspeed_unit=w.windspeed_unit.value,
        precipitation_unit=w.precipitation_unit.value,
    )


class WeatherWatcher:
    """Runs refreshes in a loop with failure backoff and signal handling."""

    def __init__(
        self,
        config: AppConfig,
        lat: float,
        lng: float,
        title: str = "",
        interval: int | None = None,
        client: OpenMeteoClient | None = None,
    ):
        self.config = config
        self.lat = lat
        self.lng = lng
        self.title = title
        self.interval = interval or config.weather.refresh_interval_minutes * 60
        self.client = client or client_from_config(config)
        self.coordinator = RefreshCoordinator(
            self.client, lat, lng, on_update=self._on_update
        )
        self._running = False
        self._stop: asyncio.Event | None = None
        self._consecutive_failures = 0
        self._total_refreshes = 0
        self._total_failures = 0
        self._started_at: str | None = None
        self._manual_refreshes: set[asyncio.Task] = set()

    def start(self) -> None:
        """Run until SIGINT/SIGTERM."""
        try:
            asyncio.run(self.run())
        except KeyboardInterrupt:
            logger.info("Watcher interrupted by keyboard")

    async def run(self, max_cycles: int | None = None) -> None:
        self._stop = asyncio.Event()
        self._running = True
        self._started_at = utc_now_iso()
        self._setup_signals()
        logger.info(
            "Watcher started: %.4f,%.4f every %ds pid=%d",
            self.lat, self.lng, self.interval, os.getpid(),
        )
        try:
            await self._loop(max_cycles)
        finally:
            self.coordinator.close()
            self._cleanup()

    def stop(self) -> None:
        self._running = False
        if self._stop is not None:
            self._stop.set()

    def request_refresh(self) -> None:
        """Trigger an out-of-band refresh; supersedes one in flight."""
        logger.info("Manual refresh requested")
        task = asyncio.get_running_loop().create_task(self.coordinator.refresh())
        self._manual_refreshes.add(task)
        task.add_done_callback(self._manual_refresh_done)

    def _manual_refresh_done(self, task: asyncio.Task) -> None:
        self._manual_refreshes.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Manual refresh crashed", exc_info=error)
            return
        self._save_state(task.result())

    async def _loop(self, max_cycles: int | None) -> None:
        cycles = 0
        while self._running:
            self._total_refreshes += 1
            cycles += 1
            try:
                state = await self.coordinator.refresh()
                ok = state.error is None
            except Exception:
                logger.exception("Refresh #%d crashed", self._total_refreshes)
                state = self.coordinator.state
                ok = False

            if ok:
                self._consecutive_failures = 0
                wait = self.interval
            else:
                self._total_failures += 1
                self._consecutive_failures += 1
                wait = min(self.interval * (2**self._consecutive_failures), MAX_BACKOFF)
                logger.warning(
                    "Refresh failed (%d consecutive), backing off %ds",
                    self._consecutive_failures, wait,
                )

            self._save_state(state)

            if max_cycles is not None and cycles >= max_cycles:
                break

            assert self._stop is not None
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=wait)
            except TimeoutError:
                pass

    def _on_update(self, state: WeatherState) -> None:
        print(format_state_text(state, self.title))

    def _setup_signals(self) -> None:
        loop = asyncio.get_running_loop()
        try:
            loop.add_signal_handler(signal.SIGTERM, self.stop)
            loop.add_signal_handler(signal.SIGINT, self.stop)
            loop.add_signal_handler(signal.SIGUSR1, self.request_refresh)
        except (NotImplementedError, RuntimeError):
            logger.debug("Signal handlers unavailable in this event loop")

    def _save_state(self, state: WeatherState) -> None:
        """Persist the last outcome for status reporting."""
        data = {
            "pid": os.getpid(),
            "started_at": self._started_at,
            "lat": self.lat,
            "lng": self.lng,
            "interval": self.interval,
            "config_hash": config_hash(self.config),
            "total_refreshes": self._total_refreshes,
            "total_failures": self._total_failures,
            "consecutive_failures": self._consecutive_failures,
            "score": state.result.score if state.result else None,
            "label": state.result.label if state.result else None,
            "error": state.error,
            "last_update": utc_now_iso(),
        }
        STATE_DIR.mkdir(parents=True, exist_ok=True)
        STATE_FILE.write_text(json.dumps(data, indent=2))

    def _cleanup(self) -> None:
        self._running = False
        logger.info(
            "Watcher stopped: %d refreshes (%d failed)",
            self._total_refreshes, self._total_failures,
        )
