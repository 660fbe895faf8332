"""Domain value objects shared by the editing and map layers."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class Coordinate:
    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class Selection:
    """Active route and waypoint, both addressed by position.

    The waypoint index is only meaningful relative to the selected route.
    """

    route_index: Optional[int] = None
    waypoint_index: Optional[int] = None


@dataclass(frozen=True, slots=True)
class MapMarker:
    """A draggable marker as the map widget should render it."""

    marker_id: str
    latitude: float
    longitude: float
    label: str
    color: str
    draggable: bool = True


@dataclass(frozen=True, slots=True)
class CameraTarget:
    latitude: float
    longitude: float
    zoom: float
