"""Waypoint endpoints, scoped to the currently selected route."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...schemas.editing import (
    AddWaypointResponse,
    MoveRequest,
    SelectionModel,
    WaypointResponse,
    WaypointUpdate,
)
from ...services.editing.errors import EditorError
from ...services.session import EditorSession
from ..deps import get_session, selection_model, to_http_exception

router = APIRouter(prefix="/waypoints", tags=["waypoints"])


def _waypoint_response(session: EditorSession, index: int) -> WaypointResponse:
    store = session.store
    return WaypointResponse(
        index=index,
        waypoint=store.current_waypoints[index],
        selection=selection_model(store.selection),
    )


@router.post("", response_model=AddWaypointResponse, status_code=status.HTTP_200_OK)
def add_waypoint(session: EditorSession = Depends(get_session)) -> AddWaypointResponse:
    """Append a waypoint at the current map center and select it.

    A full route is not an error: the response reports ``added: false``.
    """
    try:
        index = session.add_waypoint_at_map_center()
    except EditorError as exc:
        raise to_http_exception(exc) from exc

    store = session.store
    message = None
    if index is None:
        message = f"Routes hold at most {store.max_waypoints_per_route} waypoints."
    return AddWaypointResponse(
        added=index is not None,
        index=index,
        waypoints=list(store.current_waypoints),
        selection=selection_model(store.selection),
        message=message,
    )


@router.patch("/{index}", response_model=WaypointResponse, status_code=status.HTTP_200_OK)
def update_waypoint(
    index: int, payload: WaypointUpdate, session: EditorSession = Depends(get_session)
) -> WaypointResponse:
    try:
        session.store.update_waypoint(index, **payload.model_dump(exclude_unset=True))
    except EditorError as exc:
        raise to_http_exception(exc) from exc
    return _waypoint_response(session, index)


@router.post("/{index}/move", response_model=WaypointResponse, status_code=status.HTTP_200_OK)
def move_waypoint(index: int, payload: MoveRequest, session: EditorSession = Depends(get_session)) -> WaypointResponse:
    try:
        session.store.move_waypoint(index, payload.latitude, payload.longitude)
    except EditorError as exc:
        raise to_http_exception(exc) from exc
    return _waypoint_response(session, index)


@router.delete("/{index}", response_model=SelectionModel, status_code=status.HTTP_200_OK)
def delete_waypoint(index: int, session: EditorSession = Depends(get_session)) -> SelectionModel:
    try:
        session.store.delete_waypoint(index)
    except EditorError as exc:
        raise to_http_exception(exc) from exc
    return selection_model(session.store.selection)


@router.post("/deselect", response_model=SelectionModel, status_code=status.HTTP_200_OK)
def deselect_waypoint(session: EditorSession = Depends(get_session)) -> SelectionModel:
    return selection_model(session.store.select_waypoint(None))


@router.post("/{index}/select", response_model=SelectionModel, status_code=status.HTTP_200_OK)
def select_waypoint(index: int, session: EditorSession = Depends(get_session)) -> SelectionModel:
    """Select a waypoint of the active route. Without an active route this is a no-op."""
    try:
        selection = session.store.select_waypoint(index)
    except EditorError as exc:
        raise to_http_exception(exc) from exc
    return selection_model(selection)
