from __future__ import annotations

import pytest
from django.test import Client

from pool_routes.services.types import DirectionsRoute, RouteLeg, StopSet


@pytest.fixture
def api_client() -> Client:
    return Client()


@pytest.fixture(autouse=True)
def directions_settings(settings):
    settings.DIRECTIONS_PROVIDER = "google"
    settings.DIRECTIONS_RETRY_COUNT = 2
    settings.DIRECTIONS_TIMEOUT_SECONDS = 5.0
    settings.GOOGLE_MAPS_API_KEY = "test-google-key"
    settings.GOOGLE_DIRECTIONS_BASE_URL = "https://maps.example.test/directions"
    settings.AZURE_MAPS_SUBSCRIPTION_KEY = "test-azure-key"
    settings.AZURE_MAPS_BASE_URL = "https://atlas.example.test"
    settings.AZURE_MAPS_API_VERSION = "2025-01-01"
    return settings


class FakeDirectionsClient:
    """Records calls and replays a canned route or error."""

    def __init__(
        self,
        legs: list[RouteLeg] | None = None,
        waypoint_order: list[int] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.legs = legs or []
        self.waypoint_order = waypoint_order
        self.error = error
        self.calls: list[dict] = []

    def route(self, origin, destination, waypoints, optimize):
        self.calls.append(
            {
                "origin": origin,
                "destination": destination,
                "waypoints": list(waypoints),
                "optimize": optimize,
            }
        )
        if self.error is not None:
            raise self.error
        return DirectionsRoute(
            legs=list(self.legs),
            waypoint_order=self.waypoint_order if optimize else None,
        )


@pytest.fixture
def abcd_stops() -> StopSet:
    return StopSet.from_ordered_list(
        [
            {"id": "A", "lat": 10, "lng": 10, "sequence": 1},
            {"id": "B", "lat": 20, "lng": 10, "sequence": 2},
            {"id": "C", "lat": 30, "lng": 10, "sequence": 3},
            {"id": "D", "lat": 40, "lng": 10, "sequence": 4},
        ]
    )


@pytest.fixture
def make_client():
    return FakeDirectionsClient
