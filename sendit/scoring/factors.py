"""Send-It scoring factors, evaluated in order by the scorer.

Each factor picks at most one tier: the first matching condition wins,
so overlapping thresholds (wind > 30 vs > 20) resolve to the steepest one.
"""

from collections.abc import Callable

from sendit.models.send_it import ScoreFactor
from sendit.models.weather import WeatherSnapshot


def fresh_snow(s: WeatherSnapshot) -> ScoreFactor:
    inches = s.snowfall_last_24h
    if inches > 12:
        return ScoreFactor("fresh_snow", 3.0, f'{inches}" in 24h > 12"')
    if inches > 6:
        return ScoreFactor("fresh_snow", 2.0, f'{inches}" in 24h > 6"')
    if inches > 2:
        return ScoreFactor("fresh_snow", 1.0, f'{inches}" in 24h > 2"')
    return ScoreFactor("fresh_snow", 0.0, f'{inches}" in 24h')


def wind(s: WeatherSnapshot) -> ScoreFactor:
    mph = s.wind_speed
    if mph < 10:
        return ScoreFactor("wind", 1.0, f"{mph} mph < 10")
    if mph > 30:
        return ScoreFactor("wind", -2.0, f"{mph} mph > 30")
    if mph > 20:
        return ScoreFactor("wind", -1.0, f"{mph} mph > 20")
    return ScoreFactor("wind", 0.0, f"{mph} mph")


def visibility(s: WeatherSnapshot) -> ScoreFactor:
    meters = s.visibility
    if meters > 10000:
        return ScoreFactor("visibility", 1.0, f"{meters:.0f} m > 10000")
    if meters < 1000:
        return ScoreFactor("visibility", -2.0, f"{meters:.0f} m < 1000")
    return ScoreFactor("visibility", 0.0, f"{meters:.0f} m")


def temperature(s: WeatherSnapshot) -> ScoreFactor:
    f = s.feels_like
    if 20 <= f <= 32:
        return ScoreFactor("temperature", 1.0, f"feels like {f}°F in 20-32")
    if f < 5 or f > 40:
        return ScoreFactor("temperature", -1.0, f"feels like {f}°F outside 5-40")
    return ScoreFactor("temperature", 0.0, f"feels like {f}°F")


def snowing(s: WeatherSnapshot) -> ScoreFactor:
    if s.is_snowing:
        return ScoreFactor("snowing", 0.5, f"snowing (code {s.weather_code})")
    return ScoreFactor("snowing", 0.0, "not snowing")


def raining(s: WeatherSnapshot) -> ScoreFactor:
    if s.is_raining:
        return ScoreFactor("raining", -3.0, f"raining (code {s.weather_code})")
    return ScoreFactor("raining", 0.0, "not raining")


FACTORS: tuple[Callable[[WeatherSnapshot], ScoreFactor], ...] = (
    fresh_snow,
    wind,
    visibility,
    temperature,
    snowing,
    raining,
)
