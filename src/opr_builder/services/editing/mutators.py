"""Pure edit functions over dataset snapshots.

Every function takes a snapshot (the dataset or a route's waypoint tuple)
and returns a new one. Nothing is modified in place. Routes and waypoints
are addressed by position; an index that does not exist raises
``IndexOutOfRange``.
"""

from __future__ import annotations

from typing import Any, Sequence

from ...schemas.dataset import (
    CITY_FIELDS,
    POSTAL_CODE_MAX_LENGTH,
    ROUTE_FIELDS,
    WAYPOINT_FIELDS,
    OPRDataset,
    Route,
    Waypoint,
    coerce_coordinate,
)
from .errors import IndexOutOfRange

_COORDINATE_FIELDS = ("latitude", "longitude")


def _require_index(items: Sequence[Any], index: int, kind: str) -> None:
    if index < 0 or index >= len(items):
        raise IndexOutOfRange(kind, index, len(items))


def _require_field(field: str, allowed: Sequence[str], kind: str) -> None:
    if field not in allowed:
        raise ValueError(f"Unknown {kind} field '{field}'. Expected one of: {', '.join(allowed)}")


def _require_value(field: str, value: Any, kind: str) -> None:
    if value is None:
        raise ValueError(f"{kind.capitalize()} field '{field}' cannot be null")


def renumber(waypoints: Sequence[Waypoint]) -> tuple[Waypoint, ...]:
    """Rewrite ``sequence`` so that it equals each waypoint's 1-based position."""

    return tuple(
        waypoint if waypoint.sequence == position else waypoint.model_copy(update={"sequence": position})
        for position, waypoint in enumerate(waypoints, start=1)
    )


def add_route(dataset: OPRDataset) -> OPRDataset:
    position = len(dataset.routes) + 1
    new_route = Route(route_code=f"{position:02d}", name=f"Route {position}", waypoints=())
    return dataset.model_copy(update={"routes": (*dataset.routes, new_route)})


def delete_route(dataset: OPRDataset, index: int) -> OPRDataset:
    _require_index(dataset.routes, index, "route")
    routes = dataset.routes[:index] + dataset.routes[index + 1 :]
    return dataset.model_copy(update={"routes": routes})


def update_route_field(dataset: OPRDataset, index: int, field: str, value: Any) -> OPRDataset:
    _require_field(field, ROUTE_FIELDS, "route")
    _require_value(field, value, "route")
    _require_index(dataset.routes, index, "route")
    routes = list(dataset.routes)
    routes[index] = routes[index].model_copy(update={field: str(value)})
    return dataset.model_copy(update={"routes": tuple(routes)})


def replace_route_waypoints(dataset: OPRDataset, route_index: int, waypoints: Sequence[Waypoint]) -> OPRDataset:
    _require_index(dataset.routes, route_index, "route")
    routes = list(dataset.routes)
    routes[route_index] = routes[route_index].model_copy(update={"waypoints": tuple(waypoints)})
    return dataset.model_copy(update={"routes": tuple(routes)})


def add_waypoint(waypoints: Sequence[Waypoint], center_lat: float, center_lng: float) -> tuple[Waypoint, ...]:
    """Append a waypoint placed at the given center with placeholder labels.

    The per-route waypoint ceiling is enforced by the caller, not here.
    """

    new_waypoint = Waypoint(
        sequence=len(waypoints) + 1,
        sub_locality="Barangay TBD",
        sub_locality_type="barangay",
        street="Main St",
        destination="Terminal",
        latitude=center_lat,
        longitude=center_lng,
    )
    return renumber((*waypoints, new_waypoint))


def delete_waypoint(waypoints: Sequence[Waypoint], index: int) -> tuple[Waypoint, ...]:
    _require_index(waypoints, index, "waypoint")
    remaining = tuple(waypoints[:index]) + tuple(waypoints[index + 1 :])
    return renumber(remaining)


def update_waypoint_field(waypoints: Sequence[Waypoint], index: int, field: str, value: Any) -> tuple[Waypoint, ...]:
    """Replace a single field. Never renumbers, even when ``field`` is ``sequence``."""

    _require_field(field, WAYPOINT_FIELDS, "waypoint")
    _require_index(waypoints, index, "waypoint")
    if field in _COORDINATE_FIELDS:
        value = coerce_coordinate(value)
    else:
        _require_value(field, value, "waypoint")
    current = waypoints[index]
    updated = Waypoint.model_validate({**current.model_dump(), field: value})
    result = list(waypoints)
    result[index] = updated
    return tuple(result)


def move_waypoint(waypoints: Sequence[Waypoint], index: int, lat: float, lng: float) -> tuple[Waypoint, ...]:
    _require_index(waypoints, index, "waypoint")
    result = list(waypoints)
    result[index] = result[index].model_copy(update={"latitude": float(lat), "longitude": float(lng)})
    return tuple(result)


def update_city_field(dataset: OPRDataset, field: str, value: Any) -> OPRDataset:
    _require_field(field, CITY_FIELDS, "city")
    if field in _COORDINATE_FIELDS:
        value = coerce_coordinate(value)
        return OPRDataset.model_validate({**dict(dataset), field: value})
    _require_value(field, value, "city")
    if field == "postal_code":
        value = str(value)[:POSTAL_CODE_MAX_LENGTH]
    return OPRDataset.model_validate({**dict(dataset), field: value})


def move_city(dataset: OPRDataset, lat: float, lng: float) -> OPRDataset:
    return dataset.model_copy(update={"latitude": float(lat), "longitude": float(lng)})
