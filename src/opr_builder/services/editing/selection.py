"""Selection transitions.

Selections are addressed by position. Deleting an entity that sits before
the selected one leaves the numeric selection unchanged, so it may then
point at a different route or waypoint.
"""

from __future__ import annotations

from typing import Optional

from ...models.domain import Selection

EMPTY_SELECTION = Selection()


def select_route(selection: Selection, route_index: Optional[int]) -> Selection:
    # Waypoint selection has no meaning across routes.
    return Selection(route_index=route_index, waypoint_index=None)


def select_waypoint(selection: Selection, waypoint_index: Optional[int]) -> Selection:
    if selection.route_index is None:
        return selection
    return Selection(route_index=selection.route_index, waypoint_index=waypoint_index)


def route_deleted(selection: Selection, deleted_index: int) -> Selection:
    if selection.route_index == deleted_index:
        return EMPTY_SELECTION
    return selection


def waypoint_deleted(selection: Selection, deleted_index: int) -> Selection:
    if selection.route_index is not None and selection.waypoint_index == deleted_index:
        return Selection(route_index=selection.route_index, waypoint_index=None)
    return selection
