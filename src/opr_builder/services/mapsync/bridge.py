"""Keeps the map projection in step with the editor store.

The bridge listens to store commits and redraws markers, moves the camera
and refreshes the route line. In the other direction it turns map gestures
(marker drags, marker clicks, camera pans, search picks) into store calls.
"""

from __future__ import annotations

import logging
import re
import threading
from concurrent.futures import Executor, Future
from typing import Optional, Protocol, Sequence

import httpx

from ...config import settings
from ...models.domain import CameraTarget, Coordinate, MapMarker
from ..editing.store import EditorSnapshot, EditorStore
from ..geocoding.models import GeocodingResult
from ..routing.models import RouteGeometry
from .canvas import MapCanvas

logger = logging.getLogger(__name__)

CITY_MARKER_ID = "city"
WAYPOINT_MARKER_PREFIX = "waypoint-"
SELECTED_WAYPOINT_COLOR = "#3b82f6"
WAYPOINT_COLOR = "#10b981"
CITY_MARKER_COLOR = "#ef4444"

_WAYPOINT_MARKER_RE = re.compile(rf"^{WAYPOINT_MARKER_PREFIX}(\d+)$")


class DirectionsProvider(Protocol):
    def route(self, coordinates: Sequence[tuple[float, float]]) -> RouteGeometry: ...


def waypoint_marker_id(index: int) -> str:
    return f"{WAYPOINT_MARKER_PREFIX}{index}"


def parse_waypoint_marker_id(marker_id: str) -> Optional[int]:
    match = _WAYPOINT_MARKER_RE.match(marker_id)
    return int(match.group(1)) if match else None


class MapSyncBridge:
    def __init__(
        self,
        store: EditorStore,
        canvas: MapCanvas,
        directions: DirectionsProvider | None = None,
        city_zoom: float | None = None,
        waypoint_zoom: float | None = None,
        executor: Executor | None = None,
    ) -> None:
        """``executor`` runs directions lookups off the editing path; without one they run inline."""
        self.store = store
        self.canvas = canvas
        self.directions = directions
        self.city_zoom = city_zoom if city_zoom is not None else settings.city_zoom
        self.waypoint_zoom = waypoint_zoom if waypoint_zoom is not None else settings.waypoint_zoom
        self.set_city_mode = False
        dataset = store.dataset
        self.map_center = Coordinate(latitude=dataset.latitude, longitude=dataset.longitude)
        self.executor = executor
        self.route_geometry: RouteGeometry | None = None
        self._line_key: tuple[tuple[float, float], ...] | None = None
        self._line_request_id = 0
        self._line_lock = threading.Lock()
        self._pending_line: Future | None = None

        store.subscribe(self._on_store_change)
        self.canvas.fly_to(CameraTarget(dataset.latitude, dataset.longitude, self.city_zoom))
        self.render_markers()
        self.refresh_route_line()

    # ------------------------------------------------------------ projections

    def build_waypoint_markers(self) -> list[MapMarker]:
        selected = self.store.selection.waypoint_index
        return [
            MapMarker(
                marker_id=waypoint_marker_id(index),
                latitude=waypoint.latitude,
                longitude=waypoint.longitude,
                label=str(waypoint.sequence),
                color=SELECTED_WAYPOINT_COLOR if index == selected else WAYPOINT_COLOR,
            )
            for index, waypoint in enumerate(self.store.current_waypoints)
        ]

    def build_city_marker(self) -> MapMarker | None:
        if not self.set_city_mode:
            return None
        dataset = self.store.dataset
        return MapMarker(
            marker_id=CITY_MARKER_ID,
            latitude=dataset.latitude,
            longitude=dataset.longitude,
            label="",
            color=CITY_MARKER_COLOR,
        )

    def render_markers(self) -> None:
        self.canvas.place_markers(self.build_waypoint_markers())
        self.canvas.show_city_marker(self.build_city_marker())

    def refresh_route_line(self, force: bool = False) -> None:
        """Re-request the route line when the active route's coordinates changed.

        Directions failures never propagate; the line is cleared instead.
        With an executor the lookup runs in the background and only the
        newest request may draw.
        """
        key = tuple((waypoint.latitude, waypoint.longitude) for waypoint in self.store.current_waypoints)
        if not force and key == self._line_key:
            return
        self._line_key = key
        with self._line_lock:
            self._line_request_id += 1
            request_id = self._line_request_id

        if len(key) < 2 or self.directions is None:
            self._apply_route_line(request_id, None)
            return

        if self.executor is None:
            self._apply_route_line(request_id, self._fetch_route_line(key))
        else:
            self._pending_line = self.executor.submit(self._fetch_and_apply, request_id, key)

    def wait_for_route_line(self, timeout: float | None = None) -> None:
        """Block until the last submitted route-line lookup has been applied."""
        pending = self._pending_line
        if pending is not None:
            pending.result(timeout=timeout)

    def _fetch_route_line(self, key: tuple[tuple[float, float], ...]) -> RouteGeometry | None:
        try:
            return self.directions.route(key)
        except (httpx.HTTPError, ConnectionError, ValueError) as exc:
            logger.warning(f"Route line unavailable for {len(key)} waypoint(s): {exc}")
        except Exception as exc:
            logger.error(f"Route line unavailable for {len(key)} waypoint(s), unexpected directions error: {exc!r}")
        return None

    def _fetch_and_apply(self, request_id: int, key: tuple[tuple[float, float], ...]) -> None:
        if request_id != self._line_request_id:
            return
        self._apply_route_line(request_id, self._fetch_route_line(key))

    def _apply_route_line(self, request_id: int, geometry: RouteGeometry | None) -> None:
        with self._line_lock:
            if request_id != self._line_request_id:
                logger.debug(f"Discarding stale route line (request {request_id})")
                return
            self.route_geometry = geometry
            if geometry is None:
                self.canvas.clear_route_line()
            else:
                self.canvas.draw_route_line(geometry.coordinates)

    # ------------------------------------------------------- store -> map sync

    def _on_store_change(self, previous: EditorSnapshot, current: EditorSnapshot) -> None:
        old, new = previous.dataset, current.dataset
        if (old.latitude, old.longitude) != (new.latitude, new.longitude):
            self.map_center = Coordinate(latitude=new.latitude, longitude=new.longitude)
            self.canvas.fly_to(CameraTarget(new.latitude, new.longitude, self.city_zoom))

        waypoint_index = current.selection.waypoint_index
        if waypoint_index is not None and waypoint_index != previous.selection.waypoint_index:
            waypoints = self.store.current_waypoints
            if waypoint_index < len(waypoints):
                target = waypoints[waypoint_index]
                self.canvas.fly_to(CameraTarget(target.latitude, target.longitude, self.waypoint_zoom))

        self.render_markers()
        self.refresh_route_line()

    # ------------------------------------------------------ map -> store sync

    def handle_drag_end(self, marker_id: str, latitude: float, longitude: float) -> bool:
        """Apply a finished marker drag.

        Returns False for unknown markers and for the city marker outside
        set-city mode.
        """
        if marker_id == CITY_MARKER_ID:
            if not self.set_city_mode:
                logger.warning("Ignoring city marker drag outside set-city mode")
                return False
            self.set_city_mode = False
            self.store.move_city(latitude, longitude)
            return True

        index = parse_waypoint_marker_id(marker_id)
        if index is None:
            logger.warning(f"Ignoring drag end for unknown marker '{marker_id}'")
            return False
        self.store.move_waypoint(index, latitude, longitude)
        return True

    def handle_marker_click(self, marker_id: str) -> bool:
        index = parse_waypoint_marker_id(marker_id)
        if index is None:
            return False
        self.store.select_waypoint(index)
        return True

    def toggle_set_city_mode(self, enabled: bool | None = None) -> bool:
        self.set_city_mode = (not self.set_city_mode) if enabled is None else enabled
        self.render_markers()
        return self.set_city_mode

    def handle_camera_pan(self, latitude: float, longitude: float) -> Coordinate:
        self.map_center = Coordinate(latitude=latitude, longitude=longitude)
        return self.map_center

    def focus_search_result(self, result: GeocodingResult) -> CameraTarget:
        """Recenter on a search pick. The dataset is not touched."""
        target = CameraTarget(result.latitude, result.longitude, self.waypoint_zoom)
        self.map_center = result.coordinate
        self.canvas.fly_to(target)
        return target
