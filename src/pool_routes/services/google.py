from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from django.conf import settings

from pool_routes.exceptions import DirectionsRejectedError, ProviderNotConfiguredError
from pool_routes.services.geo import format_lat_lng, format_location
from pool_routes.services.http import request_json
from pool_routes.services.types import DirectionsRoute, GeoPoint, Location, RouteLeg

logger = logging.getLogger(__name__)


class GoogleDirectionsClient:
    """Google Directions web service client."""

    name = "google"

    def __init__(self) -> None:
        self.base_url = settings.GOOGLE_DIRECTIONS_BASE_URL.rstrip("/")
        self.api_key = settings.GOOGLE_MAPS_API_KEY
        self.timeout = settings.DIRECTIONS_TIMEOUT_SECONDS
        if not self.api_key:
            raise ProviderNotConfiguredError("GOOGLE_MAPS_API_KEY is not configured")

    def route(
        self,
        origin: Location,
        destination: Location,
        waypoints: Sequence[GeoPoint],
        optimize: bool,
    ) -> DirectionsRoute:
        params = {
            "origin": format_location(origin),
            "destination": format_location(destination),
            "mode": "driving",
            "key": self.api_key,
        }
        if waypoints:
            points = [format_lat_lng(point) for point in waypoints]
            if optimize:
                points.insert(0, "optimize:true")
            params["waypoints"] = "|".join(points)

        logger.debug(
            "Requesting Google directions with %d waypoints (optimize=%s)",
            len(waypoints),
            optimize,
        )
        payload = request_json(
            "GET",
            f"{self.base_url}/json",
            provider="Google Directions",
            params=params,
            timeout=self.timeout,
        )
        return self._parse_response(payload, optimize)

    @staticmethod
    def _parse_response(payload: Any, optimize: bool) -> DirectionsRoute:
        status = payload.get("status") if isinstance(payload, dict) else None
        if status != "OK":
            message = payload.get("error_message") if isinstance(payload, dict) else None
            raise DirectionsRejectedError(
                f"Directions request failed: {message or status or 'no status'}",
                status=status,
            )

        routes = payload.get("routes") or []
        if not routes:
            raise DirectionsRejectedError("Directions request returned no routes", status=status)

        first = routes[0]
        legs = [
            RouteLeg(
                distance_meters=float((leg.get("distance") or {}).get("value") or 0.0),
                duration_seconds=float((leg.get("duration") or {}).get("value") or 0.0),
            )
            for leg in first.get("legs") or []
        ]

        waypoint_order = None
        if optimize and first.get("waypoint_order") is not None:
            waypoint_order = [int(index) for index in first["waypoint_order"]]

        return DirectionsRoute(
            legs=legs,
            waypoint_order=waypoint_order,
            polyline=(first.get("overview_polyline") or {}).get("points"),
        )
