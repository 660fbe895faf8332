"""Dataset import with geocoding fill-in for waypoints that lack coordinates."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from pydantic import ValidationError

from ...models.domain import Coordinate
from ...schemas.dataset import OPRDataset, Waypoint
from ..editing.errors import InvalidDatasetFormat
from ..geocoding.models import GeocodingResult

logger = logging.getLogger(__name__)


class Geocoder(Protocol):
    def search(
        self, api_key: str, query: str, proximity: Optional[Coordinate] = None
    ) -> list[GeocodingResult]: ...


@dataclass(slots=True)
class ImportSummary:
    dataset: OPRDataset
    enriched_count: int

    @property
    def message(self) -> str:
        if self.enriched_count > 0:
            return f"JSON imported with {self.enriched_count} waypoint(s) geocoded"
        return "JSON imported successfully"


def parse_dataset(raw_text: str) -> OPRDataset:
    try:
        return OPRDataset.model_validate_json(raw_text)
    except ValidationError as exc:
        raise InvalidDatasetFormat(f"{exc.error_count()} validation error(s): {exc.errors()[0]['msg']}") from exc


def waypoint_query(waypoint: Waypoint) -> str:
    return f"{waypoint.street} {waypoint.destination}".strip()


def enrich_missing_coordinates(
    dataset: OPRDataset, geocoder: Geocoder, api_key: str | None
) -> tuple[OPRDataset, int]:
    """Geocode every waypoint with a zero latitude or longitude, one at a time.

    The first (highest ranked) match wins. Lookups are biased towards the
    dataset's city coordinates. Without an API key nothing is looked up.
    """
    if not api_key:
        return dataset, 0

    proximity = Coordinate(latitude=dataset.latitude, longitude=dataset.longitude)
    enriched = 0
    routes = []
    for route in dataset.routes:
        waypoints = []
        for waypoint in route.waypoints:
            query = waypoint_query(waypoint)
            if waypoint.has_missing_coordinates() and query:
                results = geocoder.search(api_key, query, proximity)
                if results:
                    best = results[0]
                    waypoint = waypoint.model_copy(update={"latitude": best.latitude, "longitude": best.longitude})
                    enriched += 1
                else:
                    logger.info(f"No geocoding match for waypoint '{query}' on route {route.route_code}")
            waypoints.append(waypoint)
        routes.append(route.model_copy(update={"waypoints": tuple(waypoints)}))

    return dataset.model_copy(update={"routes": tuple(routes)}), enriched


def import_dataset(raw_text: str, geocoder: Geocoder, api_key: str | None) -> ImportSummary:
    """Parse and enrich an import document. Raises InvalidDatasetFormat before any lookup."""
    dataset = parse_dataset(raw_text)
    dataset, enriched = enrich_missing_coordinates(dataset, geocoder, api_key)
    logger.info(f"Imported dataset for {dataset.city}: {len(dataset.routes)} route(s), {enriched} waypoint(s) geocoded")
    return ImportSummary(dataset=dataset, enriched_count=enriched)
