"""Map view request/response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class MarkerModel(BaseModel):
    marker_id: str
    latitude: float
    longitude: float
    label: str
    color: str
    draggable: bool = True


class CameraModel(BaseModel):
    latitude: float
    longitude: float
    zoom: float


class CoordinateModel(BaseModel):
    latitude: float
    longitude: float


class RouteLineModel(BaseModel):
    coordinates: List[tuple[float, float]] = Field(default_factory=list, description="(lat, lon) pairs.")
    distance_m: Optional[float] = None
    duration_s: Optional[float] = None


class MapViewResponse(BaseModel):
    markers: List[MarkerModel]
    city_marker: Optional[MarkerModel] = None
    set_city_mode: bool
    camera: Optional[CameraModel] = None
    map_center: CoordinateModel
    route_line: RouteLineModel


class DragEndEvent(BaseModel):
    marker_id: str
    latitude: float
    longitude: float


class MarkerClickEvent(BaseModel):
    marker_id: str


class CameraPanEvent(BaseModel):
    latitude: float
    longitude: float


class SetCityModeRequest(BaseModel):
    enabled: Optional[bool] = Field(default=None, description="Omit to toggle.")


class SearchResultModel(BaseModel):
    display_name: str
    short_label: str
    latitude: float
    longitude: float


class SearchResponse(BaseModel):
    request_id: int
    query: str
    stale: bool
    skipped: bool
    results: List[SearchResultModel]


class SearchSelectRequest(BaseModel):
    index: int = Field(..., ge=0)
