"""Open-Meteo forecast API client with retry and rate limit handling."""

import logging
import time

import httpx

logger = logging.getLogger(__name__)

OPEN_METEO_BASE_URL = "https://api.open-meteo.com/v1/forecast"
DEFAULT_USER_AGENT = "sendit/0.1.0"
HOURLY_FIELDS = (
    "temperature_2m",
    "apparent_temperature",
    "precipitation",
    "rain",
    "snowfall",
    "snow_depth",
    "visibility",
    "windspeed_10m",
    "weathercode",
)


class UpstreamFetchError(RuntimeError):
    """The forecast could not be retrieved (non-2xx or network failure)."""


class OpenMeteoClient:
    def __init__(
        self,
        base_url: str = OPEN_METEO_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30.0,
        max_retries: int = 3,
        retry_base_delay: float = 2.0,
        forecast_days: int = 3,
        temperature_unit: str = "fahrenheit",
        windspeed_unit: str = "mph",
        precipitation_unit: str = "inch",
    ):
        self.base_url = base_url
        self.user_agent = user_agent
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay
        self.forecast_days = forecast_days
        self.temperature_unit = temperature_unit
        self.windspeed_unit = windspeed_unit
        self.precipitation_unit = precipitation_unit

    def build_params(self, lat: float, lng: float) -> dict[str, str]:
        return {
            "latitude": str(lat),
            "longitude": str(lng),
            "hourly": ",".join(HOURLY_FIELDS),
            "current_weather": "true",
            "temperature_unit": self.temperature_unit,
            "windspeed_unit": self.windspeed_unit,
            "precipitation_unit": self.precipitation_unit,
            "timezone": "auto",
            "forecast_days": str(self.forecast_days),
        }

    def get_forecast(self, lat: float, lng: float) -> dict:
        """Fetch the hourly forecast plus current conditions for a location.

        Retries on 503/429 and transport errors with exponential backoff.

        Raises:
            UpstreamFetchError: on any non-2xx response or network failure
                once retries are exhausted.
        """
        params = self.build_params(lat, lng)
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}

        for attempt in range(self.max_retries + 1):
            try:
                resp = httpx.get(
                    self.base_url, params=params, headers=headers, timeout=self.timeout
                )
                if resp.status_code in (503, 429) and attempt < self.max_retries:
                    delay = self.retry_base_delay * (2**attempt)
                    logger.warning(
                        "Open-Meteo returned %d for %.4f,%.4f, retrying in %.1fs "
                        "(attempt %d/%d)",
                        resp.status_code, lat, lng, delay, attempt + 1, self.max_retries,
                    )
                    time.sleep(delay)
                    continue
                resp.raise_for_status()
                return resp.json()
            except httpx.HTTPStatusError as e:
                raise UpstreamFetchError(
                    f"Open-Meteo returned {e.response.status_code} for {lat},{lng}"
                ) from e
            except httpx.RequestError as e:
                if attempt < self.max_retries:
                    delay = self.retry_base_delay * (2**attempt)
                    logger.warning(
                        "Open-Meteo request error, retrying in %.1fs: %s", delay, e
                    )
                    time.sleep(delay)
                    continue
                raise UpstreamFetchError(f"Open-Meteo request failed: {e}") from e
            except ValueError as e:
                raise UpstreamFetchError(f"Open-Meteo returned invalid JSON: {e}") from e

        raise UpstreamFetchError("Open-Meteo retries exhausted")
