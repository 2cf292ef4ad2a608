"""Output formatters for weather reports."""

import json
from datetime import datetime

from sendit.ingest.staleness import snapshot_age_minutes
from sendit.models.send_it import SendItResult
from sendit.models.weather import WeatherSnapshot
from sendit.pipeline.refresh_pipeline import WeatherState
from sendit.weather.codes import weather_description, weather_icon, wind_direction


def format_report_text(
    snapshot: WeatherSnapshot, result: SendItResult, title: str = ""
) -> str:
    """Plain text report: hero line, send-it meter, snow report, hourly strip."""
    s = snapshot
    header = f"=== {title} ===" if title else "=== Mountain Report ==="
    lines = [
        header,
        f"{weather_icon(s.weather_code)} {weather_description(s.weather_code)} | "
        f"{s.temperature}°F (feels {s.feels_like}°F) | "
        f"Wind {s.wind_speed} mph {wind_direction(s.wind_direction)}",
        f"Send It: {result.score}/10 {result.label} [{result.color_tier.value}]",
        f"Snow: {s.snowfall_last_24h}\" last 24h | {s.snowfall_next_48h}\" next 48h | "
        f"Base {s.snow_depth}",
        f"Visibility: {s.visibility / 1000:.1f} km",
    ]
    applied = [f for f in result.factors if f.adjustment]
    if applied:
        lines.append(
            "Factors: "
            + ", ".join(f"{f.name} {f.adjustment:+g}" for f in applied)
        )
    if s.hourly_forecast:
        lines.append(
            "Next hours: "
            + "  ".join(
                f"{h.time:%H}h {weather_icon(h.weather_code)} {h.temperature}°"
                for h in s.hourly_forecast
            )
        )
    lines.append(f"Updated: {s.last_updated:%Y-%m-%d %H:%M %Z}")
    return "\n".join(lines)


def report_dict(snapshot: WeatherSnapshot, result: SendItResult) -> dict:
    s = snapshot
    return {
        "weather": {
            "temperature": s.temperature,
            "feels_like": s.feels_like,
            "wind_speed": s.wind_speed,
            "wind_direction": s.wind_direction,
            "wind_compass": wind_direction(s.wind_direction),
            "weather_code": s.weather_code,
            "description": weather_description(s.weather_code),
            "visibility": s.visibility,
            "is_snowing": s.is_snowing,
            "is_raining": s.is_raining,
            "snowfall_last_24h": s.snowfall_last_24h,
            "snowfall_next_48h": s.snowfall_next_48h,
            "snow_depth": s.snow_depth,
            "hourly_forecast": [
                {
                    "time": h.time.isoformat(),
                    "temperature": h.temperature,
                    "weather_code": h.weather_code,
                    "wind_speed": h.wind_speed,
                    "snowfall": h.snowfall,
                }
                for h in s.hourly_forecast
            ],
            "last_updated": s.last_updated.isoformat(),
        },
        "send_it": {
            "score": result.score,
            "label": result.label,
            "color_tier": result.color_tier.value,
            "raw_score": result.raw_score,
            "factors": [
                {"name": f.name, "adjustment": f.adjustment, "detail": f.detail}
                for f in result.factors
            ],
        },
    }


def format_report_json(snapshot: WeatherSnapshot, result: SendItResult) -> str:
    """JSON report for programmatic consumption."""
    return json.dumps(report_dict(snapshot, result), indent=2, ensure_ascii=False)


def format_state_text(
    state: WeatherState, title: str = "", now: datetime | None = None
) -> str:
    """Render a refresh state, flagging a retained snapshot as stale."""
    if state.snapshot is None or state.result is None:
        return state.error or "Weather unavailable: no data yet"
    text = format_report_text(state.snapshot, state.result, title)
    if state.error is not None:
        age = snapshot_age_minutes(state.snapshot.last_updated, now)
        text += f"\n(stale: last good update {age:.0f} min ago; {state.error})"
    return text
