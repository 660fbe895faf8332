"""Pydantic models for the route dataset and its JSON exchange format."""

from __future__ import annotations

from typing import Any, Literal, Tuple

from pydantic import BaseModel, ConfigDict, Field

IslandGroup = Literal["Luzon", "Visayas", "Mindanao"]
CityType = Literal["highly_urbanized_city", "component_city", "municipality"]
SubLocalityType = Literal["barangay", "district"]

POSTAL_CODE_MAX_LENGTH = 4

CITY_FIELDS = (
    "island_group",
    "region",
    "region_code",
    "province",
    "province_code",
    "city",
    "city_type",
    "postal_code",
    "latitude",
    "longitude",
)
ROUTE_FIELDS = ("route_code", "name")
WAYPOINT_FIELDS = (
    "sequence",
    "sub_locality",
    "sub_locality_type",
    "street",
    "destination",
    "latitude",
    "longitude",
)


def coerce_coordinate(value: Any) -> float:
    """Coerce form input to a float, treating blank or unparsable input as 0."""

    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return 0.0


class Waypoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    sequence: int
    sub_locality: str
    sub_locality_type: SubLocalityType
    street: str
    destination: str
    latitude: float
    longitude: float

    def has_missing_coordinates(self) -> bool:
        return self.latitude == 0 or self.longitude == 0


class Route(BaseModel):
    model_config = ConfigDict(frozen=True)

    route_code: str
    name: str
    waypoints: Tuple[Waypoint, ...] = ()


class OPRDataset(BaseModel):
    """City attributes plus its ordered routes. Every edit yields a new instance."""

    model_config = ConfigDict(frozen=True)

    country: Literal["Philippines"] = "Philippines"
    country_code: Literal["PH"] = "PH"
    island_group: IslandGroup
    region: str
    region_code: str
    province: str
    province_code: str
    city: str
    city_type: CityType
    postal_code: str = Field(..., description="Postal code, at most four characters when edited from the form.")
    latitude: float = 0.0
    longitude: float = 0.0
    routes: Tuple[Route, ...] = ()


DEFAULT_OPR_DATA = OPRDataset(
    island_group="Visayas",
    region="Region 06",
    region_code="06",
    province="Iloilo",
    province_code="XX",
    city="Iloilo City",
    city_type="municipality",
    postal_code="0000",
    latitude=10.7202,
    longitude=122.5621,
    routes=(),
)
