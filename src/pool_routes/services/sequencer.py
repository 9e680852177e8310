from __future__ import annotations

import threading
from collections.abc import Sequence
from typing import TYPE_CHECKING

from pool_routes.exceptions import (
    DirectionsCancelledError,
    PermutationMismatchError,
    ReconciliationError,
)
from pool_routes.services.types import (
    METERS_TO_MILES,
    SECONDS_PER_MINUTE,
    Location,
    RouteLeg,
    RouteResult,
    Stop,
    StopId,
    StopSet,
)

if TYPE_CHECKING:
    from pool_routes.services.directions import DirectionsClient


def compute_route(
    stop_set: StopSet,
    client: DirectionsClient,
    optimize: bool = False,
    *,
    origin: Location | None = None,
    destination: Location | None = None,
    cancel_event: threading.Event | None = None,
) -> RouteResult:
    """Route ``stop_set`` through ``client`` and reconcile any optimized order.

    By default the first and last stops are the fixed endpoints and the stops
    in between are the waypoints. An ``origin`` or ``destination`` override
    (such as a technician's home) turns the first or last stop into a waypoint
    instead. ``stop_set`` is never modified; a reordered set is returned on the
    result.
    """
    stops = list(stop_set)
    head: list[Stop] = [] if origin is not None else stops[:1]
    tail: list[Stop] = [] if destination is not None else stops[len(head) :][-1:]
    movable = stops[len(head) : len(stops) - len(tail)]

    point_count = len(stops) + (origin is not None) + (destination is not None)
    if not stops or point_count < 2:
        return RouteResult(stop_set=stop_set)

    route_origin = origin if origin is not None else head[0].coordinates
    route_destination = destination if destination is not None else tail[0].coordinates
    waypoints = [stop.coordinates for stop in movable]

    _raise_if_cancelled(cancel_event)
    directions = client.route(route_origin, route_destination, waypoints, optimize)
    _raise_if_cancelled(cancel_event)

    legs = tuple(directions.legs)
    total_miles, total_minutes = aggregate_legs(legs)

    result_stop_set = stop_set
    reordered_stop_ids = None
    if optimize and directions.waypoint_order is not None:
        reordered_stop_ids = _reconstruct_order(head, movable, tail, directions.waypoint_order)
        try:
            result_stop_set = stop_set.apply_order(reordered_stop_ids)
        except PermutationMismatchError as exc:
            raise ReconciliationError(str(exc)) from exc

    return RouteResult(
        stop_set=result_stop_set,
        legs=legs,
        total_distance_miles=total_miles,
        total_duration_minutes=total_minutes,
        reordered_stop_ids=reordered_stop_ids,
        expected_leg_count=point_count - 1,
        leg_offset=1 if origin is not None else 0,
        polyline=directions.polyline,
        path=list(directions.path),
    )


def _reconstruct_order(
    head: list[Stop],
    movable: list[Stop],
    tail: list[Stop],
    waypoint_order: Sequence[int],
) -> list[StopId]:
    # The permutation indexes the waypoints as sent, not the full stop list.
    if sorted(waypoint_order) != list(range(len(movable))):
        raise ReconciliationError(
            f"Waypoint order {list(waypoint_order)!r} is not a permutation of "
            f"{len(movable)} waypoints"
        )
    return (
        [stop.id for stop in head]
        + [movable[index].id for index in waypoint_order]
        + [stop.id for stop in tail]
    )


def _raise_if_cancelled(cancel_event: threading.Event | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise DirectionsCancelledError("Route computation was cancelled")


def aggregate_legs(legs: Sequence[RouteLeg]) -> tuple[float, float]:
    """Return total miles and minutes for ``legs``."""
    return (
        sum(leg.distance_meters for leg in legs) * METERS_TO_MILES,
        sum(leg.duration_seconds for leg in legs) / SECONDS_PER_MINUTE,
    )
