"""Tests for WMO code classification and display helpers."""

import pytest

from sendit.weather.codes import (
    RAIN_CODES,
    SNOW_CODES,
    is_raining,
    is_snowing,
    weather_description,
    weather_icon,
    wind_direction,
)


class TestClassification:
    def test_sets_disjoint(self):
        assert SNOW_CODES.isdisjoint(RAIN_CODES)

    def test_never_both_for_any_code(self):
        for code in range(0, 100):
            assert not (is_snowing(code) and is_raining(code))

    @pytest.mark.parametrize("code", [0, 1, 2, 3, 45, 48, 95, 96, 99])
    def test_non_precip_codes(self, code: int):
        assert is_snowing(code) is False
        assert is_raining(code) is False


class TestDisplay:
    def test_description(self):
        assert weather_description(75) == "Heavy snow"
        assert weather_description(42) == "Unknown"

    def test_icon_fallback(self):
        assert weather_icon(75) == "❄️"
        assert weather_icon(42) == "🌤️"

    @pytest.mark.parametrize(
        ("degrees", "expected"),
        [(0, "N"), (44, "NE"), (90, "E"), (200, "S"), (270, "W"), (337.5, "N"), (360, "N")],
    )
    def test_wind_direction(self, degrees: float, expected: str):
        assert wind_direction(degrees) == expected
