from __future__ import annotations

import math

from pool_routes.exceptions import InvalidLocationError
from pool_routes.services.types import GeoPoint, Location


def parse_location(location: Location) -> GeoPoint:
    """Resolve a ``GeoPoint`` or a ``"lat,lng"`` string to coordinates."""
    if isinstance(location, GeoPoint):
        return location

    parts = [part.strip() for part in str(location).split(",")]
    if len(parts) != 2:
        raise InvalidLocationError(f'Invalid coordinate string "{location}"')

    try:
        latitude = float(parts[0])
        longitude = float(parts[1])
    except ValueError as exc:
        raise InvalidLocationError(f'Invalid coordinate string "{location}"') from exc

    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise InvalidLocationError(f'Invalid coordinate string "{location}"')

    return GeoPoint(latitude=latitude, longitude=longitude)


def format_location(location: Location) -> str:
    if isinstance(location, GeoPoint):
        return format_lat_lng(location)
    return location.strip()


def format_lat_lng(point: GeoPoint) -> str:
    return f"{point.latitude:.6f},{point.longitude:.6f}"
