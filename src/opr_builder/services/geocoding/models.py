"""Geocoding domain models."""

from __future__ import annotations

from dataclasses import dataclass

from ...models.domain import Coordinate


@dataclass(frozen=True, slots=True)
class GeocodingResult:
    display_name: str
    short_label: str
    longitude: float
    latitude: float

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(latitude=self.latitude, longitude=self.longitude)
