"""Editing request/response schemas."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .dataset import CityType, IslandGroup, OPRDataset, Route, SubLocalityType, Waypoint, coerce_coordinate


def _coerce_optional_coordinate(value: Any) -> Optional[float]:
    return None if value is None else coerce_coordinate(value)


class FieldPatch(BaseModel):
    """Partial update: omitted fields keep their value, explicit nulls are rejected."""

    @model_validator(mode="before")
    @classmethod
    def _reject_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            nulls = sorted(key for key, value in data.items() if value is None)
            if nulls:
                raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
        return data


class CityUpdate(FieldPatch):
    island_group: Optional[IslandGroup] = None
    region: Optional[str] = None
    region_code: Optional[str] = None
    province: Optional[str] = None
    province_code: Optional[str] = None
    city: Optional[str] = None
    city_type: Optional[CityType] = None
    postal_code: Optional[str] = Field(default=None, description="Truncated to four characters.")
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _coerce_coordinates(cls, value: Any) -> Optional[float]:
        return _coerce_optional_coordinate(value)


class RouteUpdate(FieldPatch):
    route_code: Optional[str] = None
    name: Optional[str] = None


class WaypointUpdate(FieldPatch):
    sequence: Optional[int] = Field(
        default=None,
        description="Free label; editing it does not reorder or renumber the route.",
    )
    sub_locality: Optional[str] = None
    sub_locality_type: Optional[SubLocalityType] = None
    street: Optional[str] = None
    destination: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _coerce_coordinates(cls, value: Any) -> Optional[float]:
        return _coerce_optional_coordinate(value)


class MoveRequest(BaseModel):
    latitude: float
    longitude: float


class SelectionModel(BaseModel):
    route_index: Optional[int] = None
    waypoint_index: Optional[int] = None


class RouteResponse(BaseModel):
    index: int
    route: Route
    selection: SelectionModel


class WaypointResponse(BaseModel):
    index: int
    waypoint: Waypoint
    selection: SelectionModel


class AddWaypointResponse(BaseModel):
    added: bool
    index: Optional[int] = None
    waypoints: list[Waypoint]
    selection: SelectionModel
    message: Optional[str] = None


class EditorStateResponse(BaseModel):
    dataset: OPRDataset
    selection: SelectionModel


class ImportRequest(BaseModel):
    text: str = Field(..., description="Dataset document as pasted by the user.")


class ImportResponse(BaseModel):
    enriched_count: int
    message: str
    dataset: OPRDataset
    selection: SelectionModel


class ApiKeyUpdate(BaseModel):
    api_key: str


class SettingsResponse(BaseModel):
    api_key_configured: bool
    api_key_preview: Optional[str] = None
    directions_configured: bool
    max_waypoints_per_route: int
