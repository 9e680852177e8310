from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from django.conf import settings

from pool_routes.exceptions import DirectionsRejectedError, ProviderNotConfiguredError
from pool_routes.services.geo import parse_location
from pool_routes.services.http import request_json
from pool_routes.services.types import DirectionsRoute, GeoPoint, Location, RouteLeg

logger = logging.getLogger(__name__)

DEFAULT_TRAVEL_MODE = "driving"
DEFAULT_OPTIMIZE_ROUTE = "fastestWithoutTraffic"
DEFAULT_ROUTE_OUTPUT_OPTIONS = ("routePath", "itinerary")


class AzureMapsDirectionsClient:
    """Azure Maps route directions client.

    The subscription key only ever comes from server settings; browser callers
    go through the proxy view, which calls :meth:`post_features`.
    """

    name = "azure_maps"

    def __init__(self) -> None:
        self.base_url = settings.AZURE_MAPS_BASE_URL.rstrip("/")
        self.api_version = settings.AZURE_MAPS_API_VERSION
        self.subscription_key = settings.AZURE_MAPS_SUBSCRIPTION_KEY
        self.timeout = settings.DIRECTIONS_TIMEOUT_SECONDS
        if not self.subscription_key:
            raise ProviderNotConfiguredError("AZURE_MAPS_SUBSCRIPTION_KEY is not configured")

    def route(
        self,
        origin: Location,
        destination: Location,
        waypoints: Sequence[GeoPoint],
        optimize: bool,
    ) -> DirectionsRoute:
        points = [parse_location(origin), *waypoints, parse_location(destination)]
        body = build_request_body(
            [_point_feature(point, index) for index, point in enumerate(points)],
            optimize_waypoint_order=optimize,
        )
        logger.debug(
            "Requesting Azure Maps directions with %d waypoints (optimize=%s)",
            len(waypoints),
            optimize,
        )
        payload = self.post_features(body)
        return self._parse_response(payload, optimize)

    def post_features(self, body: dict[str, Any]) -> Any:
        return request_json(
            "POST",
            f"{self.base_url}/route/directions",
            provider="Azure Maps",
            params={
                "api-version": self.api_version,
                "subscription-key": self.subscription_key,
            },
            json=body,
            headers={
                "Content-Type": "application/geo+json",
                "Accept-Language": "en-US",
            },
            timeout=self.timeout,
        )

    @staticmethod
    def _parse_response(payload: Any, optimize: bool) -> DirectionsRoute:
        features = payload.get("features") if isinstance(payload, dict) else None
        # Itinerary output adds ManeuverPoint features; only waypoints are route stops.
        points = [
            feature
            for feature in features or []
            if (feature.get("geometry") or {}).get("type") == "Point"
            and _is_waypoint(feature.get("properties") or {})
        ]
        if not points:
            raise DirectionsRejectedError(
                "No features found in Azure Maps response", status="NO_FEATURES"
            )

        def visit_index(feature: dict[str, Any]) -> int:
            order = (feature.get("properties") or {}).get("order") or {}
            if optimize:
                return order.get("optimizedIndex", order.get("inputIndex", 0))
            return order.get("inputIndex", 0)

        points.sort(key=visit_index)

        # Point features carry distance and duration accumulated from the origin.
        legs = []
        for current, following in zip(points, points[1:]):
            current_props = current.get("properties") or {}
            following_props = following.get("properties") or {}
            legs.append(
                RouteLeg(
                    distance_meters=max(
                        0.0,
                        float(following_props.get("distanceInMeters") or 0.0)
                        - float(current_props.get("distanceInMeters") or 0.0),
                    ),
                    duration_seconds=max(
                        0.0,
                        float(following_props.get("durationInSeconds") or 0.0)
                        - float(current_props.get("durationInSeconds") or 0.0),
                    ),
                )
            )

        waypoint_order = None
        middle = points[1:-1]
        if optimize and (not middle or (middle[0].get("properties") or {}).get("order")):
            waypoint_order = [
                int(((feature.get("properties") or {}).get("order") or {}).get("inputIndex", 0)) - 1
                for feature in middle
            ]

        return DirectionsRoute(
            legs=legs,
            waypoint_order=waypoint_order,
            path=_route_path(features or []),
        )


def build_request_body(
    features: list[dict[str, Any]],
    *,
    travel_mode: str | None = None,
    optimize_waypoint_order: bool = False,
    optimize_route: str | None = None,
    route_output_options: Sequence[str] | None = None,
) -> dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": features,
        "travelMode": travel_mode or DEFAULT_TRAVEL_MODE,
        "optimizeWaypointOrder": bool(optimize_waypoint_order),
        "optimizeRoute": optimize_route or DEFAULT_OPTIMIZE_ROUTE,
        "routeOutputOptions": list(route_output_options or DEFAULT_ROUTE_OUTPUT_OPTIONS),
    }


def _is_waypoint(properties: dict[str, Any]) -> bool:
    if "type" in properties:
        return properties["type"] == "Waypoint"
    return "order" in properties


def _point_feature(point: GeoPoint, index: int) -> dict[str, Any]:
    return {
        "type": "Feature",
        "geometry": {
            "type": "Point",
            "coordinates": [point.longitude, point.latitude],
        },
        "properties": {"pointIndex": index},
    }


def _route_path(features: list[dict[str, Any]]) -> list[tuple[float, float]]:
    for feature in features:
        geometry = feature.get("geometry") or {}
        if geometry.get("type") == "LineString":
            return [tuple(coord[:2]) for coord in geometry.get("coordinates", [])]
        if geometry.get("type") == "MultiLineString":
            return [
                tuple(coord[:2])
                for line in geometry.get("coordinates", [])
                for coord in line
            ]
    return []
