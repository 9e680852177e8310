from __future__ import annotations

from typing import ClassVar


class RoutePlannerError(Exception):
    """Base exception for route sequencing errors."""


class InvalidStopError(RoutePlannerError):
    """Raised when a stop lacks an id or usable coordinates."""


class InvalidLocationError(RoutePlannerError):
    """Raised when an origin or destination cannot be interpreted."""


class ProviderNotConfiguredError(RoutePlannerError):
    """Raised when a directions provider is unknown or missing credentials."""


class DirectionsError(RoutePlannerError):
    """Raised when the directions provider cannot produce a route."""

    kind: ClassVar[str] = "transport"
    retryable: ClassVar[bool] = False


class DirectionsTransportError(DirectionsError):
    """Raised when the provider could not be reached."""

    kind = "transport"
    retryable = True


class DirectionsCancelledError(DirectionsTransportError):
    """Raised when the caller cancelled the request."""


class DirectionsTimeoutError(DirectionsError):
    """Raised when the provider did not answer within the deadline."""

    kind = "timeout"
    retryable = True


class DirectionsRejectedError(DirectionsError):
    """Raised when the provider answered but found no usable route."""

    kind = "reason"
    retryable = False

    def __init__(self, message: str, status: str | None = None) -> None:
        super().__init__(message)
        self.status = status


class PermutationMismatchError(RoutePlannerError):
    """Raised when a new stop order is not a permutation of the current ids."""


class ReconciliationError(RoutePlannerError):
    """Raised when a provider waypoint order does not match the stop set."""
