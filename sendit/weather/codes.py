"""WMO weather code classification and display helpers."""

SNOW_CODES: frozenset[int] = frozenset({71, 73, 75, 77, 85, 86})
RAIN_CODES: frozenset[int] = frozenset({51, 53, 55, 61, 63, 65, 80, 81, 82})

DEFAULT_ICON = "🌤️"
DEFAULT_DESCRIPTION = "Unknown"

_ICONS: dict[int, str] = {
    0: "☀️",
    1: "🌤️",
    2: "⛅",
    3: "☁️",
    45: "🌫️",
    48: "🌫️",
    51: "🌧️",
    53: "🌧️",
    55: "🌧️",
    61: "🌧️",
    63: "🌧️",
    65: "🌧️",
    71: "🌨️",
    73: "🌨️",
    75: "❄️",
    77: "🌨️",
    80: "🌧️",
    81: "🌧️",
    82: "🌧️",
    85: "🌨️",
    86: "❄️",
    95: "⛈️",
    96: "⛈️",
    99: "⛈️",
}

_DESCRIPTIONS: dict[int, str] = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Foggy",
    48: "Rime fog",
    51: "Light drizzle",
    53: "Drizzle",
    55: "Dense drizzle",
    61: "Light rain",
    63: "Rain",
    65: "Heavy rain",
    71: "Light snow",
    73: "Snow",
    75: "Heavy snow",
    77: "Snow grains",
    80: "Rain showers",
    81: "Rain showers",
    82: "Heavy showers",
    85: "Snow showers",
    86: "Heavy snow",
    95: "Thunderstorm",
    96: "Thunderstorm",
    99: "Thunderstorm",
}

COMPASS_POINTS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")


def is_snowing(code: int) -> bool:
    return code in SNOW_CODES


def is_raining(code: int) -> bool:
    return code in RAIN_CODES


def weather_icon(code: int) -> str:
    return _ICONS.get(code, DEFAULT_ICON)


def weather_description(code: int) -> str:
    return _DESCRIPTIONS.get(code, DEFAULT_DESCRIPTION)


def wind_direction(degrees: float) -> str:
    """Map a bearing in degrees to the nearest of 8 compass points."""
    index = int((degrees % 360) / 45 + 0.5) % 8
    return COMPASS_POINTS[index]
