from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from django.conf import settings

from pool_routes.exceptions import ProviderNotConfiguredError
from pool_routes.services.azure_maps import AzureMapsDirectionsClient
from pool_routes.services.google import GoogleDirectionsClient
from pool_routes.services.types import DirectionsRoute, GeoPoint, Location


class DirectionsClient(Protocol):
    """A driving-directions provider.

    ``route`` returns the legs between consecutive points. When ``optimize`` is
    true the provider may reorder ``waypoints`` (never the endpoints) and
    reports the order as 0-based indices into ``waypoints`` as sent.
    """

    def route(
        self,
        origin: Location,
        destination: Location,
        waypoints: Sequence[GeoPoint],
        optimize: bool,
    ) -> DirectionsRoute: ...


PROVIDERS: dict[str, type] = {
    GoogleDirectionsClient.name: GoogleDirectionsClient,
    AzureMapsDirectionsClient.name: AzureMapsDirectionsClient,
}


def get_directions_client(provider: str | None = None) -> DirectionsClient:
    name = provider or settings.DIRECTIONS_PROVIDER
    try:
        client_class = PROVIDERS[name]
    except KeyError as exc:
        raise ProviderNotConfiguredError(f"Unknown directions provider {name!r}") from exc
    return client_class()
