from __future__ import annotations

import logging
from typing import Any

import httpx

from pool_routes.exceptions import (
    DirectionsRejectedError,
    DirectionsTimeoutError,
    DirectionsTransportError,
)

logger = logging.getLogger(__name__)


def request_json(method: str, url: str, *, provider: str, **kwargs: Any) -> Any:
    """Send one request and decode its JSON body.

    HTTP 4xx answers become ``DirectionsRejectedError``; 5xx answers and
    connection failures become ``DirectionsTransportError``.
    """
    try:
        response = httpx.request(method, url, **kwargs)
        response.raise_for_status()
        return response.json()
    except httpx.TimeoutException as exc:
        raise DirectionsTimeoutError(f"{provider} request timed out") from exc
    except httpx.HTTPStatusError as exc:
        status_code = exc.response.status_code
        message = _error_message(exc.response) or exc.response.reason_phrase
        logger.debug("%s answered HTTP %s: %s", provider, status_code, message)
        if status_code >= 500:
            raise DirectionsTransportError(
                f"{provider} request failed: {message}"
            ) from exc
        raise DirectionsRejectedError(
            f"{provider} request failed: {message}", status=str(status_code)
        ) from exc
    except httpx.HTTPError as exc:
        raise DirectionsTransportError(f"{provider} request failed") from exc
    except ValueError as exc:
        raise DirectionsTransportError(f"{provider} returned invalid JSON") from exc


def _error_message(response: httpx.Response) -> str | None:
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None

    error = payload.get("error")
    if isinstance(error, dict):
        return error.get("message")
    if isinstance(error, str):
        return error
    return payload.get("error_message")
