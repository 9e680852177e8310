from __future__ import annotations

import httpx
import pytest

from pool_routes.exceptions import (
    DirectionsRejectedError,
    DirectionsTimeoutError,
    DirectionsTransportError,
    ProviderNotConfiguredError,
)
from pool_routes.services.google import GoogleDirectionsClient
from pool_routes.services.types import GeoPoint

URL = "https://maps.example.test/directions/json"


def _response(payload: dict, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json=payload, request=httpx.Request("GET", URL))


def _ok_payload(waypoint_order: list[int] | None = None) -> dict:
    route = {
        "legs": [
            {"distance": {"value": 1609}, "duration": {"value": 300}},
            {"distance": {"value": 3218}, "duration": {"value": 540}},
            {"duration": {"value": 60}},
        ],
        "overview_polyline": {"points": "_p~iF~ps|U_ulLnnqC"},
    }
    if waypoint_order is not None:
        route["waypoint_order"] = waypoint_order
    return {"status": "OK", "routes": [route]}


def test_route_builds_request_and_parses_legs(mocker) -> None:
    request = mocker.patch(
        "pool_routes.services.http.httpx.request",
        return_value=_response(_ok_payload(waypoint_order=[1, 0])),
    )

    route = GoogleDirectionsClient().route(
        GeoPoint(latitude=26.1, longitude=-80.1),
        "123 Palm Ave, Miami, FL",
        [GeoPoint(latitude=26.2, longitude=-80.2), GeoPoint(latitude=26.3, longitude=-80.3)],
        optimize=True,
    )

    method, url = request.call_args.args
    params = request.call_args.kwargs["params"]
    assert (method, url) == ("GET", URL)
    assert params["origin"] == "26.100000,-80.100000"
    assert params["destination"] == "123 Palm Ave, Miami, FL"
    assert params["waypoints"] == "optimize:true|26.200000,-80.200000|26.300000,-80.300000"
    assert params["mode"] == "driving"
    assert params["key"] == "test-google-key"
    assert request.call_args.kwargs["timeout"] == 5.0

    assert [leg.distance_meters for leg in route.legs] == [1609, 3218, 0]
    assert [leg.duration_seconds for leg in route.legs] == [300, 540, 60]
    assert route.waypoint_order == [1, 0]
    assert route.polyline == "_p~iF~ps|U_ulLnnqC"


def test_route_without_optimize_ignores_waypoint_order(mocker) -> None:
    request = mocker.patch(
        "pool_routes.services.http.httpx.request",
        return_value=_response(_ok_payload(waypoint_order=[0])),
    )

    route = GoogleDirectionsClient().route(
        GeoPoint(latitude=1.0, longitude=1.0),
        GeoPoint(latitude=2.0, longitude=2.0),
        [GeoPoint(latitude=1.5, longitude=1.5)],
        optimize=False,
    )

    assert request.call_args.kwargs["params"]["waypoints"] == "1.500000,1.500000"
    assert route.waypoint_order is None


def test_route_omits_waypoints_when_empty(mocker) -> None:
    request = mocker.patch(
        "pool_routes.services.http.httpx.request",
        return_value=_response(_ok_payload(waypoint_order=[])),
    )

    route = GoogleDirectionsClient().route(
        GeoPoint(latitude=1.0, longitude=1.0),
        GeoPoint(latitude=2.0, longitude=2.0),
        [],
        optimize=True,
    )

    assert "waypoints" not in request.call_args.kwargs["params"]
    assert route.waypoint_order == []


@pytest.mark.parametrize("status", ["ZERO_RESULTS", "NOT_FOUND", "REQUEST_DENIED"])
def test_non_ok_status_is_rejection(mocker, status: str) -> None:
    mocker.patch(
        "pool_routes.services.http.httpx.request",
        return_value=_response({"status": status, "routes": []}),
    )

    with pytest.raises(DirectionsRejectedError) as excinfo:
        GoogleDirectionsClient().route(
            GeoPoint(latitude=1.0, longitude=1.0), GeoPoint(latitude=2.0, longitude=2.0), [], False
        )

    assert excinfo.value.status == status
    assert excinfo.value.kind == "reason"


def test_connection_failure_is_transport_error(mocker) -> None:
    mocker.patch(
        "pool_routes.services.http.httpx.request",
        side_effect=httpx.ConnectError("connection refused"),
    )

    with pytest.raises(DirectionsTransportError):
        GoogleDirectionsClient().route(
            GeoPoint(latitude=1.0, longitude=1.0), GeoPoint(latitude=2.0, longitude=2.0), [], False
        )


def test_timeout_is_timeout_error(mocker) -> None:
    mocker.patch(
        "pool_routes.services.http.httpx.request",
        side_effect=httpx.ReadTimeout("timed out"),
    )

    with pytest.raises(DirectionsTimeoutError) as excinfo:
        GoogleDirectionsClient().route(
            GeoPoint(latitude=1.0, longitude=1.0), GeoPoint(latitude=2.0, longitude=2.0), [], False
        )

    assert not isinstance(excinfo.value, DirectionsTransportError)


def test_server_error_is_transport_error(mocker) -> None:
    mocker.patch(
        "pool_routes.services.http.httpx.request",
        return_value=_response({"error_message": "backend unavailable"}, status_code=503),
    )

    with pytest.raises(DirectionsTransportError, match="backend unavailable"):
        GoogleDirectionsClient().route(
            GeoPoint(latitude=1.0, longitude=1.0), GeoPoint(latitude=2.0, longitude=2.0), [], False
        )


def test_missing_api_key_is_not_configured(settings) -> None:
    settings.GOOGLE_MAPS_API_KEY = ""

    with pytest.raises(ProviderNotConfiguredError):
        GoogleDirectionsClient()
