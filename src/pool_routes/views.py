from __future__ import annotations

import json
from typing import Any

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST
from pydantic import ValidationError

from pool_routes.exceptions import (
    DirectionsRejectedError,
    DirectionsTimeoutError,
    DirectionsTransportError,
    InvalidLocationError,
    InvalidStopError,
    PermutationMismatchError,
    ProviderNotConfiguredError,
    ReconciliationError,
)
from pool_routes.schemas import AzureMapsRouteRequest, RouteSequenceRequest
from pool_routes.services.azure_maps import AzureMapsDirectionsClient, build_request_body
from pool_routes.services.service import RouteSequencingService

_sequencing_service: RouteSequencingService | None = None


def get_sequencing_service() -> RouteSequencingService:
    global _sequencing_service
    if _sequencing_service is None:
        _sequencing_service = RouteSequencingService()
    return _sequencing_service


@require_GET
def health_view(_: HttpRequest) -> HttpResponse:
    return JsonResponse(
        {
            "status": "ok",
            "directions_provider": settings.DIRECTIONS_PROVIDER,
        }
    )


@csrf_exempt
@require_POST
def route_sequence_view(request: HttpRequest) -> HttpResponse:
    payload = _parse_json_payload(request)
    if isinstance(payload, JsonResponse):
        return payload

    try:
        sequence_request = RouteSequenceRequest.model_validate(payload)
    except ValidationError as exc:
        return _validation_error_response(exc)

    service = get_sequencing_service()
    try:
        response = service.sequence(sequence_request)
    except InvalidStopError as exc:
        return _error_response("invalid_stop", str(exc), status=400)
    except InvalidLocationError as exc:
        return _error_response("invalid_location", str(exc), status=400)
    except ProviderNotConfiguredError as exc:
        return _error_response("not_configured", str(exc), status=500)
    except DirectionsRejectedError as exc:
        return _error_response("no_route", str(exc), status=422)
    except DirectionsTimeoutError as exc:
        return _error_response("upstream_timeout", str(exc), status=504)
    except DirectionsTransportError as exc:
        return _error_response("upstream_error", str(exc), status=502)
    except (ReconciliationError, PermutationMismatchError) as exc:
        return _error_response("reconciliation_error", str(exc), status=500)

    return JsonResponse(response.model_dump(mode="json"), status=200)


@csrf_exempt
@require_POST
def azure_maps_proxy_view(request: HttpRequest) -> HttpResponse:
    payload = _parse_json_payload(request)
    if isinstance(payload, JsonResponse):
        return payload

    try:
        proxy_request = AzureMapsRouteRequest.model_validate(payload)
    except ValidationError as exc:
        return _validation_error_response(exc)

    try:
        client = AzureMapsDirectionsClient()
    except ProviderNotConfiguredError as exc:
        return _error_response("not_configured", str(exc), status=500)

    body = build_request_body(
        proxy_request.features,
        travel_mode=proxy_request.travel_mode,
        optimize_waypoint_order=bool(proxy_request.optimize_waypoint_order),
        optimize_route=proxy_request.optimize_route,
        route_output_options=proxy_request.route_output_options,
    )
    try:
        data = client.post_features(body)
    except DirectionsRejectedError as exc:
        status = int(exc.status) if exc.status and exc.status.isdigit() else 422
        return _error_response("upstream_rejected", str(exc), status=status)
    except DirectionsTimeoutError as exc:
        return _error_response("upstream_timeout", str(exc), status=504)
    except DirectionsTransportError as exc:
        return _error_response("upstream_error", str(exc), status=502)

    return JsonResponse(data, status=200, safe=False)


def _parse_json_payload(request: HttpRequest) -> dict[str, Any] | JsonResponse:
    if not request.body:
        return {}

    try:
        payload = json.loads(request.body)
    except json.JSONDecodeError:
        return _error_response("invalid_json", "Request body must be valid JSON", status=400)

    if not isinstance(payload, dict):
        return _error_response("invalid_json", "JSON body must be an object", status=400)

    return payload


def _validation_error_response(exc: ValidationError) -> JsonResponse:
    return JsonResponse(
        {
            "error": {
                "code": "validation_error",
                "message": "Invalid request payload",
                "details": exc.errors(include_url=False, include_context=False),
            }
        },
        status=400,
    )


def _error_response(code: str, message: str, status: int) -> JsonResponse:
    return JsonResponse({"error": {"code": code, "message": message}}, status=status)
