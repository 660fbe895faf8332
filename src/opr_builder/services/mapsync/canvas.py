"""Map canvas port and an in-memory implementation that records what to draw."""

from __future__ import annotations

from typing import Protocol, Sequence

from ...models.domain import CameraTarget, MapMarker


class MapCanvas(Protocol):
    def place_markers(self, markers: Sequence[MapMarker]) -> None: ...

    def show_city_marker(self, marker: MapMarker | None) -> None: ...

    def draw_route_line(self, coordinates: Sequence[tuple[float, float]]) -> None: ...

    def clear_route_line(self) -> None: ...

    def fly_to(self, target: CameraTarget) -> None: ...


class ViewStateCanvas:
    """Keeps the latest map projection so a browser client can render it."""

    def __init__(self) -> None:
        self.markers: list[MapMarker] = []
        self.city_marker: MapMarker | None = None
        self.route_line: list[tuple[float, float]] = []
        self.camera: CameraTarget | None = None
        self.camera_history: list[CameraTarget] = []

    def place_markers(self, markers: Sequence[MapMarker]) -> None:
        self.markers = list(markers)

    def show_city_marker(self, marker: MapMarker | None) -> None:
        self.city_marker = marker

    def draw_route_line(self, coordinates: Sequence[tuple[float, float]]) -> None:
        self.route_line = list(coordinates)

    def clear_route_line(self) -> None:
        self.route_line = []

    def fly_to(self, target: CameraTarget) -> None:
        self.camera = target
        self.camera_history.append(target)
