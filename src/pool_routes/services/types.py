from __future__ import annotations

import math
from collections.abc import Hashable, Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any, Union

from pool_routes.exceptions import InvalidStopError, PermutationMismatchError

METERS_TO_MILES = 0.000621371
SECONDS_PER_MINUTE = 60.0

StopId = Hashable


@dataclass(slots=True, frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


Location = Union[GeoPoint, str]


@dataclass(slots=True, frozen=True)
class Stop:
    id: StopId
    coordinates: GeoPoint
    sequence: int


class StopSet:
    """Stops for one technician and day, ordered by ``sequence``.

    Instances are immutable: :meth:`apply_order` returns a new set, so a failed
    reorder never leaves a half-renumbered list behind.
    """

    __slots__ = ("_stops",)

    def __init__(self, stops: Iterable[Stop] = ()) -> None:
        ordered = sorted(stops, key=lambda stop: stop.sequence)
        ids = [stop.id for stop in ordered]
        if len(set(ids)) != len(ids):
            raise InvalidStopError("Stop ids must be unique")
        if [stop.sequence for stop in ordered] != list(range(1, len(ordered) + 1)):
            raise InvalidStopError("Stop sequences must run contiguously from 1")
        self._stops: tuple[Stop, ...] = tuple(ordered)

    @classmethod
    def from_ordered_list(cls, items: Iterable[Mapping[str, Any] | Stop]) -> StopSet:
        keyed: list[tuple[float, int, StopId, GeoPoint]] = []
        for position, item in enumerate(items, start=1):
            if isinstance(item, Stop):
                keyed.append((item.sequence, position, item.id, item.coordinates))
                continue

            stop_id = item.get("id")
            if stop_id is None or stop_id == "":
                raise InvalidStopError(f"Stop at position {position} has no id")
            coordinates = _coordinates_from_item(item, stop_id)
            sequence = item.get("sequence")
            if sequence is not None:
                if isinstance(sequence, float) and not sequence.is_integer():
                    raise InvalidStopError(f"Stop {stop_id!r} has an invalid sequence")
                try:
                    sequence = int(sequence)
                except (TypeError, ValueError) as exc:
                    raise InvalidStopError(f"Stop {stop_id!r} has an invalid sequence") from exc
            keyed.append(
                (position if sequence is None else sequence, position, stop_id, coordinates)
            )

        keyed.sort(key=lambda entry: (entry[0], entry[1]))
        return cls(
            Stop(id=stop_id, coordinates=coordinates, sequence=index)
            for index, (_, _, stop_id, coordinates) in enumerate(keyed, start=1)
        )

    @property
    def stops(self) -> tuple[Stop, ...]:
        return self._stops

    def size(self) -> int:
        return len(self._stops)

    def __len__(self) -> int:
        return len(self._stops)

    def __iter__(self) -> Iterator[Stop]:
        return iter(self._stops)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StopSet):
            return NotImplemented
        return self._stops == other._stops

    def __repr__(self) -> str:
        return f"StopSet({list(self._stops)!r})"

    def ids(self) -> list[StopId]:
        return [stop.id for stop in self._stops]

    def first(self) -> Stop:
        if not self._stops:
            raise IndexError("StopSet is empty")
        return self._stops[0]

    def last(self) -> Stop:
        if not self._stops:
            raise IndexError("StopSet is empty")
        return self._stops[-1]

    def middle(self) -> list[Stop]:
        return list(self._stops[1:-1])

    def apply_order(self, new_id_order: Sequence[StopId]) -> StopSet:
        by_id = {stop.id: stop for stop in self._stops}
        if len(new_id_order) != len(by_id) or set(new_id_order) != set(by_id):
            raise PermutationMismatchError(
                f"Expected a permutation of {len(by_id)} stop ids, got {list(new_id_order)!r}"
            )

        return StopSet(
            replace(by_id[stop_id], sequence=index)
            for index, stop_id in enumerate(new_id_order, start=1)
        )


@dataclass(slots=True, frozen=True)
class RouteLeg:
    distance_meters: float = 0.0
    duration_seconds: float = 0.0

    @property
    def distance_miles(self) -> float:
        return self.distance_meters * METERS_TO_MILES

    @property
    def duration_minutes(self) -> float:
        return self.duration_seconds / SECONDS_PER_MINUTE


@dataclass(slots=True, frozen=True)
class DirectionsRoute:
    legs: list[RouteLeg]
    waypoint_order: list[int] | None = None
    polyline: str | None = None
    path: list[tuple[float, float]] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class RouteResult:
    stop_set: StopSet
    legs: tuple[RouteLeg, ...] = ()
    total_distance_miles: float = 0.0
    total_duration_minutes: float = 0.0
    reordered_stop_ids: list[StopId] | None = None
    expected_leg_count: int = 0
    leg_offset: int = 0
    polyline: str | None = None
    path: list[tuple[float, float]] = field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        return len(self.legs) < self.expected_leg_count

    def leg_after(self, stop_id: StopId) -> RouteLeg | None:
        """Return the leg leaving ``stop_id``, or ``None`` when there is none."""
        for index, stop in enumerate(self.stop_set):
            if stop.id == stop_id:
                leg_index = index + self.leg_offset
                if leg_index < len(self.legs):
                    return self.legs[leg_index]
                return None
        raise KeyError(stop_id)


@dataclass(slots=True, frozen=True)
class RoutingContext:
    optimize: bool = False
    origin: Location | None = None
    destination: Location | None = None
    technician_id: str | None = None
    weekday: str | None = None
    provider: str | None = None


def _coordinates_from_item(item: Mapping[str, Any], stop_id: StopId) -> GeoPoint:
    latitude = item.get("lat", item.get("latitude"))
    longitude = item.get("lng", item.get("longitude"))
    if latitude is None or longitude is None:
        raise InvalidStopError(f"Stop {stop_id!r} has no coordinates")

    try:
        latitude = float(latitude)
        longitude = float(longitude)
    except (TypeError, ValueError) as exc:
        raise InvalidStopError(f"Stop {stop_id!r} has invalid coordinates") from exc

    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise InvalidStopError(f"Stop {stop_id!r} has invalid coordinates")
    if not (-90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0):
        raise InvalidStopError(f"Stop {stop_id!r} coordinates are out of range")

    return GeoPoint(latitude=latitude, longitude=longitude)
