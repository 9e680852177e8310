from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from django.conf import settings

from pool_routes.exceptions import DirectionsError, DirectionsTransportError
from pool_routes.schemas import (
    Coordinate,
    RouteSequenceRequest,
    RouteSequenceResponse,
    RouteSummaryResponse,
    SequencedStopResponse,
)
from pool_routes.services.directions import DirectionsClient, get_directions_client
from pool_routes.services.sequencer import compute_route
from pool_routes.services.types import GeoPoint, Location, RouteResult, RoutingContext, StopSet

logger = logging.getLogger(__name__)


class RouteSequencingService:
    def __init__(
        self,
        client_factory: Callable[[str | None], DirectionsClient] | None = None,
        retry_count: int | None = None,
    ) -> None:
        self.client_factory = client_factory or get_directions_client
        self.retry_count = (
            settings.DIRECTIONS_RETRY_COUNT if retry_count is None else retry_count
        )

    def sequence(
        self,
        request: RouteSequenceRequest,
        cancel_event: threading.Event | None = None,
    ) -> RouteSequenceResponse:
        context = RoutingContext(
            optimize=request.optimize,
            origin=_to_location(request.origin),
            destination=_to_location(request.destination),
            technician_id=request.technician_id,
            weekday=request.weekday,
            provider=request.provider or settings.DIRECTIONS_PROVIDER,
        )
        stop_set = StopSet.from_ordered_list(
            stop.model_dump(exclude_none=True) for stop in request.stops
        )

        result = self.compute(stop_set, context, cancel_event=cancel_event)
        if result.is_partial:
            logger.warning(
                "Directions returned %d of %d legs for technician %s",
                len(result.legs),
                result.expected_leg_count,
                context.technician_id or "-",
            )
        return self._build_response(result, context)

    def compute(
        self,
        stop_set: StopSet,
        context: RoutingContext,
        cancel_event: threading.Event | None = None,
    ) -> RouteResult:
        client = self.client_factory(context.provider)
        for attempt in range(self.retry_count + 1):
            try:
                return compute_route(
                    stop_set,
                    client,
                    context.optimize,
                    origin=context.origin,
                    destination=context.destination,
                    cancel_event=cancel_event,
                )
            except DirectionsError as exc:
                cancelled = cancel_event is not None and cancel_event.is_set()
                if not exc.retryable or cancelled or attempt >= self.retry_count:
                    raise
                logger.warning(
                    "Directions %s error on attempt %d, retrying: %s",
                    exc.kind,
                    attempt + 1,
                    exc,
                )
                time.sleep(0.3 * (attempt + 1))

        raise DirectionsTransportError("Directions request failed")

    @staticmethod
    def _build_response(result: RouteResult, context: RoutingContext) -> RouteSequenceResponse:
        stops = []
        for stop in result.stop_set:
            leg = result.leg_after(stop.id)
            stops.append(
                SequencedStopResponse(
                    id=stop.id,
                    sequence=stop.sequence,
                    latitude=round(stop.coordinates.latitude, 6),
                    longitude=round(stop.coordinates.longitude, 6),
                    minutes_to_next_stop=round(leg.duration_minutes, 2) if leg else None,
                    miles_to_next_stop=round(leg.distance_miles, 3) if leg else None,
                )
            )

        summary = RouteSummaryResponse(
            distance_miles=round(result.total_distance_miles, 3),
            duration_minutes=round(result.total_duration_minutes, 2),
            leg_count=len(result.legs),
            expected_leg_count=result.expected_leg_count,
            partial=result.is_partial,
        )

        route_geojson = None
        if len(result.path) >= 2:
            route_geojson = {"type": "LineString", "coordinates": result.path}

        return RouteSequenceResponse(
            provider=context.provider,
            optimized=result.reordered_stop_ids is not None,
            technician_id=context.technician_id,
            weekday=context.weekday,
            stops=stops,
            reordered_stop_ids=result.reordered_stop_ids,
            summary=summary,
            polyline=result.polyline,
            route_geojson=route_geojson,
        )


def _to_location(value: Coordinate | str | None) -> Location | None:
    if isinstance(value, Coordinate):
        return GeoPoint(latitude=value.latitude, longitude=value.longitude)
    return value
