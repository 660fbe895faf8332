"""Shared helpers for the API routers."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from ..models.domain import Selection
from ..schemas.editing import SelectionModel
from ..services.editing.errors import EditorError, IndexOutOfRange, InvalidDatasetFormat, NoRouteSelected
from ..services.session import EditorSession


def get_session(request: Request) -> EditorSession:
    return request.app.state.session


def selection_model(selection: Selection) -> SelectionModel:
    return SelectionModel(route_index=selection.route_index, waypoint_index=selection.waypoint_index)


def to_http_exception(exc: EditorError) -> HTTPException:
    if isinstance(exc, InvalidDatasetFormat):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.user_message)
    if isinstance(exc, NoRouteSelected):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, IndexOutOfRange):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
