"""FastAPI Web application — behavior log queries and stateless lookahead."""

from __future__ import annotations

import os

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query

from smart_indicator import __version__
from smart_indicator.behavior.storage import BehaviorLogStorage
from smart_indicator.geo.models import GeoPoint
from smart_indicator.lookahead.engine import LookaheadEngine
from smart_indicator.lookahead.models import Maneuver, WarningState
from smart_indicator.web.schemas import (
    EvaluateRequest,
    EvaluateResponse,
    EventOut,
    HealthResponse,
    LocationRecord,
    LocationsResponse,
    Point,
    WarningsResponse,
    WarningStateModel,
)

load_dotenv()  # loads .env from project root; must run before env vars are consumed

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = FastAPI(title="Smart Indicator", version=__version__)

_DEFAULT_DB = os.environ.get("SMART_INDICATOR_DB", "indicator.db")

_lookahead = LookaheadEngine()


def _storage(db_path: str | None = None) -> BehaviorLogStorage:
    return BehaviorLogStorage(db_path or _DEFAULT_DB)


def _point_out(point: GeoPoint | None) -> Point | None:
    if point is None:
        return None
    return Point(latitude=point.latitude, longitude=point.longitude)


def _point_in(point: Point | None) -> GeoPoint | None:
    if point is None:
        return None
    return GeoPoint(point.latitude, point.longitude)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


@app.get("/api/locations", response_model=LocationsResponse)
def list_locations(
    limit: int | None = Query(default=None, ge=1),
    db: str | None = None,
) -> LocationsResponse:
    """Return logged positions and behavior events, newest first."""
    storage = _storage(db)
    try:
        rows = storage.get_all(limit=limit)
    finally:
        storage.close()
    return LocationsResponse(locations=[LocationRecord(**r) for r in rows])


@app.get("/api/warnings", response_model=WarningsResponse)
def list_warnings(db: str | None = None) -> WarningsResponse:
    """Return every location where a turn-signal warning was raised."""
    storage = _storage(db)
    try:
        rows = storage.get_warning_locations()
        count = storage.get_warning_location_count()
    finally:
        storage.close()
    return WarningsResponse(count=count, warnings=[LocationRecord(**r) for r in rows])


@app.get("/api/warnings/area", response_model=WarningsResponse)
def list_warnings_in_area(
    min_lat: float,
    max_lat: float,
    min_lng: float,
    max_lng: float,
    db: str | None = None,
) -> WarningsResponse:
    """Return warning locations inside a latitude/longitude bounding box."""
    if min_lat > max_lat or min_lng > max_lng:
        raise HTTPException(status_code=422, detail="Bounding box minimum exceeds maximum")

    storage = _storage(db)
    try:
        rows = storage.get_warning_locations_in_area(min_lat, max_lat, min_lng, max_lng)
    finally:
        storage.close()
    return WarningsResponse(count=len(rows), warnings=[LocationRecord(**r) for r in rows])


@app.post("/api/evaluate", response_model=EvaluateResponse)
def evaluate(req: EvaluateRequest) -> EvaluateResponse:
    """Run one lookahead cycle; the caller carries the warning state between calls."""
    state = WarningState(
        active_text=req.warning_state.active_text,
        warned_location=_point_in(req.warning_state.warned_location),
    )
    maneuvers = [Maneuver(GeoPoint(m.latitude, m.longitude), m.code) for m in req.maneuvers]

    outcome = _lookahead.evaluate(
        GeoPoint(req.location.latitude, req.location.longitude),
        req.heading,
        req.speed_kmh,
        maneuvers,
        state,
        req.indicator_on,
    )

    return EvaluateResponse(
        future_direction=outcome.result.future_direction.value,
        future_distance_m=outcome.result.future_distance_m,
        warning_state=WarningStateModel(
            active_text=outcome.warning_state.active_text,
            warned_location=_point_out(outcome.warning_state.warned_location),
        ),
        warning_triggered=outcome.warning_triggered,
        events=[
            EventOut(
                tag=e.tag,
                direction=e.direction,
                speed_kmh=e.speed_kmh,
                distance_to_turn=e.distance_to_turn,
                indicator_on=e.indicator_on,
                warning_location=_point_out(e.warning_location),
            )
            for e in outcome.events
        ],
    )
