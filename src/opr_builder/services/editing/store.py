"""Editor store: the canonical dataset and selection with write-through persistence."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from pydantic import ValidationError

from ...config import settings
from ...models.domain import Selection
from ...persistence.storage import (
    API_KEY_KEY,
    DATASET_KEY,
    SELECTED_ROUTE_KEY,
    SELECTED_WAYPOINT_KEY,
    KeyValueStorage,
)
from ...schemas.dataset import DEFAULT_OPR_DATA, OPRDataset, Route, Waypoint
from . import mutators
from . import selection as transitions
from .errors import IndexOutOfRange, NoRouteSelected

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EditorSnapshot:
    dataset: OPRDataset
    selection: Selection


Listener = Callable[[EditorSnapshot, EditorSnapshot], None]


def _as_index(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value


class EditorStore:
    """Holds the single editing session state.

    State is read from ``storage`` once on construction and written back after
    every change. Listeners receive ``(previous, current)`` snapshots after
    each commit.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        max_waypoints_per_route: int | None = None,
        fallback_api_key: str | None = None,
    ) -> None:
        self.storage = storage
        self.max_waypoints_per_route = max_waypoints_per_route or settings.max_waypoints_per_route
        self._listeners: list[Listener] = []
        self._dataset = self._load_dataset()
        self._selection = self._load_selection(self._dataset)
        stored_key = storage.get(API_KEY_KEY)
        self._api_key: str = stored_key if isinstance(stored_key, str) and stored_key else (fallback_api_key or "")

    # ------------------------------------------------------------------ loading

    def _load_dataset(self) -> OPRDataset:
        raw = self.storage.get(DATASET_KEY)
        if raw is None:
            return DEFAULT_OPR_DATA
        try:
            return OPRDataset.model_validate(raw)
        except ValidationError as exc:
            logger.warning(f"Persisted dataset is invalid, falling back to default: {exc.error_count()} error(s)")
            return DEFAULT_OPR_DATA

    def _load_selection(self, dataset: OPRDataset) -> Selection:
        route_index = _as_index(self.storage.get(SELECTED_ROUTE_KEY))
        waypoint_index = _as_index(self.storage.get(SELECTED_WAYPOINT_KEY))
        if route_index is None or route_index >= len(dataset.routes):
            return transitions.EMPTY_SELECTION
        if waypoint_index is not None and waypoint_index >= len(dataset.routes[route_index].waypoints):
            waypoint_index = None
        return Selection(route_index=route_index, waypoint_index=waypoint_index)

    # --------------------------------------------------------------- accessors

    @property
    def dataset(self) -> OPRDataset:
        return self._dataset

    @property
    def selection(self) -> Selection:
        return self._selection

    @property
    def api_key(self) -> str:
        return self._api_key

    def snapshot(self) -> EditorSnapshot:
        return EditorSnapshot(dataset=self._dataset, selection=self._selection)

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    @property
    def active_route(self) -> Route | None:
        index = self._selection.route_index
        if index is None or index >= len(self._dataset.routes):
            return None
        return self._dataset.routes[index]

    @property
    def current_waypoints(self) -> tuple[Waypoint, ...]:
        route = self.active_route
        return route.waypoints if route is not None else ()

    # ------------------------------------------------------------------ commit

    def _commit(self, dataset: OPRDataset | None = None, selection: Selection | None = None) -> None:
        previous = self.snapshot()
        if dataset is not None:
            self._dataset = dataset
            self.storage.set(DATASET_KEY, dataset.model_dump(mode="json"))
        if selection is not None and selection != previous.selection:
            self._selection = selection
            if selection.route_index != previous.selection.route_index:
                self.storage.set(SELECTED_ROUTE_KEY, selection.route_index)
            if selection.waypoint_index != previous.selection.waypoint_index:
                self.storage.set(SELECTED_WAYPOINT_KEY, selection.waypoint_index)
        current = self.snapshot()
        for listener in self._listeners:
            listener(previous, current)

    def _require_selected_route(self) -> int:
        index = self._selection.route_index
        if index is None:
            raise NoRouteSelected()
        if index >= len(self._dataset.routes):
            raise IndexOutOfRange("route", index, len(self._dataset.routes))
        return index

    # ------------------------------------------------------------------ routes

    def add_route(self) -> int:
        new_index = len(self._dataset.routes)
        dataset = mutators.add_route(self._dataset)
        self._commit(dataset, transitions.select_route(self._selection, new_index))
        return new_index

    def delete_route(self, index: int) -> None:
        dataset = mutators.delete_route(self._dataset, index)
        self._commit(dataset, transitions.route_deleted(self._selection, index))

    def update_route(self, index: int, **fields: Any) -> Route:
        if not 0 <= index < len(self._dataset.routes):
            raise IndexOutOfRange("route", index, len(self._dataset.routes))
        dataset = self._dataset
        for field, value in fields.items():
            dataset = mutators.update_route_field(dataset, index, field, value)
        self._commit(dataset)
        return self._dataset.routes[index]

    def select_route(self, index: Optional[int]) -> Selection:
        if index is not None and not 0 <= index < len(self._dataset.routes):
            raise IndexOutOfRange("route", index, len(self._dataset.routes))
        self._commit(selection=transitions.select_route(self._selection, index))
        return self._selection

    # --------------------------------------------------------------- waypoints

    def add_waypoint(self, center_lat: float, center_lng: float) -> Optional[int]:
        """Append a waypoint to the selected route and select it.

        Returns the new waypoint's index, or None when the route already holds
        the maximum number of waypoints.
        """

        route_index = self._require_selected_route()
        waypoints = self._dataset.routes[route_index].waypoints
        if len(waypoints) >= self.max_waypoints_per_route:
            logger.info(
                f"Route {route_index} already has {len(waypoints)} waypoints; "
                f"limit is {self.max_waypoints_per_route}"
            )
            return None
        updated = mutators.add_waypoint(waypoints, center_lat, center_lng)
        dataset = mutators.replace_route_waypoints(self._dataset, route_index, updated)
        new_index = len(updated) - 1
        self._commit(dataset, transitions.select_waypoint(self._selection, new_index))
        return new_index

    def delete_waypoint(self, index: int) -> None:
        route_index = self._require_selected_route()
        updated = mutators.delete_waypoint(self._dataset.routes[route_index].waypoints, index)
        dataset = mutators.replace_route_waypoints(self._dataset, route_index, updated)
        self._commit(dataset, transitions.waypoint_deleted(self._selection, index))

    def update_waypoint(self, index: int, **fields: Any) -> Waypoint:
        route_index = self._require_selected_route()
        waypoints = self._dataset.routes[route_index].waypoints
        if not 0 <= index < len(waypoints):
            raise IndexOutOfRange("waypoint", index, len(waypoints))
        for field, value in fields.items():
            waypoints = mutators.update_waypoint_field(waypoints, index, field, value)
        dataset = mutators.replace_route_waypoints(self._dataset, route_index, waypoints)
        self._commit(dataset)
        return waypoints[index]

    def move_waypoint(self, index: int, lat: float, lng: float) -> Waypoint:
        route_index = self._require_selected_route()
        updated = mutators.move_waypoint(self._dataset.routes[route_index].waypoints, index, lat, lng)
        dataset = mutators.replace_route_waypoints(self._dataset, route_index, updated)
        self._commit(dataset)
        return updated[index]

    def select_waypoint(self, index: Optional[int]) -> Selection:
        if index is not None and self._selection.route_index is not None:
            waypoints = self.current_waypoints
            if not 0 <= index < len(waypoints):
                raise IndexOutOfRange("waypoint", index, len(waypoints))
        self._commit(selection=transitions.select_waypoint(self._selection, index))
        return self._selection

    # -------------------------------------------------------------------- city

    def update_city(self, **fields: Any) -> OPRDataset:
        dataset = self._dataset
        for field, value in fields.items():
            dataset = mutators.update_city_field(dataset, field, value)
        self._commit(dataset)
        return self._dataset

    def move_city(self, lat: float, lng: float) -> OPRDataset:
        self._commit(mutators.move_city(self._dataset, lat, lng))
        return self._dataset

    # ----------------------------------------------------------------- dataset

    def replace_dataset(self, dataset: OPRDataset) -> None:
        """Swap in a whole new dataset. The selection is left as it was."""

        self._commit(dataset)

    def set_api_key(self, api_key: str) -> None:
        self._api_key = api_key.strip()
        self.storage.set(API_KEY_KEY, self._api_key)
