"""Pydantic request/response schemas for the Web API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str
    version: str


class Point(BaseModel):
    latitude: float
    longitude: float


class LocationRecord(BaseModel):
    id: int
    latitude: float
    longitude: float
    timestamp: int
    tag: str | None = None
    direction: str | None = None
    speed: float | None = None
    distance_to_turn: int | None = None
    indicator_on: bool | None = None
    warning_latitude: float | None = None
    warning_longitude: float | None = None
    is_warning_location: bool = False


class LocationsResponse(BaseModel):
    locations: list[LocationRecord]


class WarningsResponse(BaseModel):
    count: int
    warnings: list[LocationRecord]


class ManeuverIn(BaseModel):
    latitude: float
    longitude: float
    code: str


class WarningStateModel(BaseModel):
    active_text: str = ""
    warned_location: Point | None = None


class EvaluateRequest(BaseModel):
    location: Point
    heading: float
    speed_kmh: float = Field(ge=0.0)
    maneuvers: list[ManeuverIn] = Field(default_factory=list)
    warning_state: WarningStateModel = Field(default_factory=WarningStateModel)
    indicator_on: bool = False


class EventOut(BaseModel):
    tag: str
    direction: str
    speed_kmh: float
    distance_to_turn: int
    indicator_on: bool
    warning_location: Point | None = None


class EvaluateResponse(BaseModel):
    future_direction: str
    future_distance_m: int
    warning_state: WarningStateModel
    warning_triggered: bool
    events: list[EventOut]
