"""Health checker: DB connectivity and Open-Meteo reachability."""

import logging
import sqlite3

import httpx

from sendit.models.reporting import HealthStatus
from sendit.storage import trip_repo, user_repo

logger = logging.getLogger(__name__)


class HealthChecker:
    def __init__(self, conn: sqlite3.Connection, weather_url: str, timeout: float = 10.0):
        self.conn = conn
        self.weather_url = weather_url
        self.timeout = timeout

    def check(self) -> HealthStatus:
        db_ok = self._check_db()
        return HealthStatus(
            db_connected=db_ok,
            weather_api_reachable=self._check_weather_api(),
            trip_count=trip_repo.count_trips(self.conn) if db_ok else 0,
            user_count=user_repo.count_users(self.conn) if db_ok else 0,
        )

    def _check_db(self) -> bool:
        try:
            self.conn.execute("SELECT 1")
            return True
        except sqlite3.Error:
            logger.exception("Database health check failed")
            return False

    def _check_weather_api(self) -> bool:
        # A one-day forecast for 0,0 is the cheapest valid request
        try:
            resp = httpx.get(
                self.weather_url,
                params={"latitude": "0", "longitude": "0", "forecast_days": "1"},
                headers={"User-Agent": "sendit-health/0.1.0"},
                timeout=self.timeout,
            )
            return resp.status_code == 200
        except httpx.HTTPError as e:
            logger.warning("Open-Meteo health check failed: %s", e)
            return False
