from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from django.core.management.base import BaseCommand, CommandError
from pydantic import ValidationError

from pool_routes.exceptions import RoutePlannerError
from pool_routes.schemas import RouteSequenceRequest
from pool_routes.services.service import RouteSequencingService


class Command(BaseCommand):
    help = "Sequence a day's stops through the configured directions provider."

    def add_arguments(self, parser: Any) -> None:
        parser.add_argument(
            "--stops-file",
            required=True,
            help="JSON file holding a list of {id, lat, lng, sequence?} stops",
        )
        parser.add_argument(
            "--optimize",
            action="store_true",
            help="Let the provider reorder the stops between the endpoints",
        )
        parser.add_argument(
            "--provider",
            choices=["google", "azure_maps"],
            default=None,
            help="Directions provider (defaults to DIRECTIONS_PROVIDER)",
        )
        parser.add_argument("--origin", default=None, help="Route start, overriding the first stop")
        parser.add_argument(
            "--destination", default=None, help="Route end, overriding the last stop"
        )

    def handle(self, *_: Any, **options: Any) -> None:
        stops_path = Path(options["stops_file"])
        try:
            stops = json.loads(stops_path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise CommandError(f"Cannot read {stops_path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise CommandError(f"{stops_path} is not valid JSON: {exc}") from exc

        payload: dict[str, Any] = {"stops": stops, "optimize": bool(options["optimize"])}
        for key in ("provider", "origin", "destination"):
            if options[key]:
                payload[key] = options[key]

        try:
            request = RouteSequenceRequest.model_validate(payload)
        except ValidationError as exc:
            raise CommandError(f"Invalid stops file: {exc}") from exc

        try:
            response = RouteSequencingService().sequence(request)
        except RoutePlannerError as exc:
            raise CommandError(str(exc)) from exc

        summary = response.summary
        self.stdout.write(json.dumps(response.model_dump(mode="json"), indent=2))
        self.stdout.write(
            self.style.SUCCESS(
                f"Sequenced {len(response.stops)} stops: "
                f"{summary.distance_miles} mi, {summary.duration_minutes} min"
            )
        )
        if summary.partial:
            self.stdout.write(
                self.style.WARNING(
                    f"Provider returned {summary.leg_count} of {summary.expected_leg_count} legs"
                )
            )
