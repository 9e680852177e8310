from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Weekday = Literal[
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"
]


class Coordinate(BaseModel):
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class StopRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str | int
    # Missing coordinates are reported by the stop set as ``invalid_stop``.
    lat: float | None = None
    lng: float | None = None
    sequence: int | None = Field(default=None, ge=0)


class RouteSequenceRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    stops: list[StopRequest] = Field(min_length=1, max_length=100)
    optimize: bool = False
    origin: Coordinate | str | None = None
    destination: Coordinate | str | None = None
    provider: Literal["google", "azure_maps"] | None = None
    technician_id: str | None = Field(default=None, max_length=100)
    weekday: Weekday | None = None


class SequencedStopResponse(BaseModel):
    id: str | int
    sequence: int
    latitude: float
    longitude: float
    minutes_to_next_stop: float | None
    miles_to_next_stop: float | None


class RouteSummaryResponse(BaseModel):
    distance_miles: float
    duration_minutes: float
    leg_count: int
    expected_leg_count: int
    partial: bool


class RouteSequenceResponse(BaseModel):
    provider: str
    optimized: bool
    technician_id: str | None = None
    weekday: Weekday | None = None
    stops: list[SequencedStopResponse]
    reordered_stop_ids: list[str | int] | None
    summary: RouteSummaryResponse
    polyline: str | None = None
    route_geojson: dict[str, Any] | None = None


class AzureMapsRouteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    features: list[dict[str, Any]] = Field(min_length=2, max_length=150)
    travel_mode: str | None = Field(default=None, alias="travelMode")
    optimize_waypoint_order: bool | None = Field(default=None, alias="optimizeWaypointOrder")
    optimize_route: str | None = Field(default=None, alias="optimizeRoute")
    route_output_options: list[str] | None = Field(default=None, alias="routeOutputOptions")
