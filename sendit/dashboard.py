"""SendIt dashboard API: read-only JSON for trips, resorts and weather."""

import os
from pathlib import Path

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from sendit.config.loader import load_config, resort_by_name, resort_by_slug
from sendit.models.trip import Trip
from sendit.pipeline.refresh_pipeline import WeatherState, refresh_weather
from sendit.reporting.formatters import report_dict
from sendit.storage import trip_repo, user_repo
from sendit.storage.database import open_store
from sendit.watcher import client_from_config

CONFIG_PATH = Path(os.environ.get("SENDIT_CONFIG", "config/sendit.yaml"))

app = FastAPI(title="SendIt Dashboard", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)

def _weather(lat: float, lng: float) -> dict:
    config = load_config(CONFIG_PATH)
    state = refresh_weather(WeatherState(), client_from_config(config), lat, lng)
    if state.snapshot is None or state.result is None:
        raise HTTPException(status_code=502, detail=state.error or "Weather unavailable")
    return report_dict(state.snapshot, state.result)

def _trip_json(trip: Trip) -> dict:
    return {
        "id": trip.id,
        "name": trip.name,
        "resort": trip.resort,
        "location": {"lat": trip.location.lat, "lng": trip.location.lng},
        "start_date": trip.start_date,
        "end_date": trip.end_date,
        "invite_code": trip.invite_code,
        "created_by": trip.created_by,
        "members": trip.members,
    }

# ── Data endpoints ──────────────────────────────────────────────

@app.get("/api/resorts")
def get_resorts():
    config = load_config(CONFIG_PATH)
    return [r.model_dump() for r in config.resorts]

@app.get("/api/resorts/{slug}")
def get_resort(slug: str):
    resort = resort_by_slug(load_config(CONFIG_PATH), slug)
    if resort is None:
        raise HTTPException(status_code=404, detail=f"Unknown resort: {slug}")
    return resort.model_dump()


@app.get("/api/weather")
def get_weather(lat: float | None = None, lng: float | None = None, resort: str | None = None):
    """Weather and Send-It score by coordinates or resort name."""
    if resort is not None:
        r = resort_by_name(load_config(CONFIG_PATH), resort)
        if r is None:
            raise HTTPException(status_code=404, detail=f"Unknown resort: {resort}")
        return _weather(r.lat, r.lng)
    if lat is None or lng is None:
        raise HTTPException(status_code=422, detail="Provide lat and lng, or resort")
    return _weather(lat, lng)

@app.get("/api/trips/{trip_id}")
def get_trip(trip_id: str):
    config = load_config(CONFIG_PATH)
    with open_store(config.storage.db_path) as conn:
        try:
            trip = trip_repo.require_trip(conn, trip_id)
        except trip_repo.TripNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
    return _trip_json(trip)

@app.get("/api/trips/{trip_id}/weather")
def get_trip_weather(trip_id: str):
    config = load_config(CONFIG_PATH)
    with open_store(config.storage.db_path) as conn:
        try:
            trip = trip_repo.require_trip(conn, trip_id)
        except trip_repo.TripNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
    return {"trip_id": trip.id, "resort": trip.resort, **_weather(trip.location.lat, trip.location.lng)}

@app.get("/api/users/{uid}/trips")
def get_user_trips(uid: str):
    config = load_config(CONFIG_PATH)
    with open_store(config.storage.db_path) as conn:
        profile = user_repo.get_user(conn, uid)
        trips = trip_repo.get_user_trips(conn, uid)
    return {
        "uid": uid,
        "current_trip": profile.current_trip if profile else None,
        "trips": [_trip_json(t) for t in trips],
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8777)
