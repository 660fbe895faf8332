"""Route endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from ...schemas.editing import RouteResponse, RouteUpdate, SelectionModel
from ...services.editing.errors import EditorError
from ...services.session import EditorSession
from ..deps import get_session, selection_model, to_http_exception

router = APIRouter(prefix="/routes", tags=["routes"])


def _route_response(session: EditorSession, index: int) -> RouteResponse:
    store = session.store
    return RouteResponse(index=index, route=store.dataset.routes[index], selection=selection_model(store.selection))


@router.post("", response_model=RouteResponse, status_code=status.HTTP_201_CREATED)
def add_route(session: EditorSession = Depends(get_session)) -> RouteResponse:
    """Append a route with a suggested code and select it."""
    index = session.store.add_route()
    return _route_response(session, index)


@router.patch("/{index}", response_model=RouteResponse, status_code=status.HTTP_200_OK)
def update_route(index: int, payload: RouteUpdate, session: EditorSession = Depends(get_session)) -> RouteResponse:
    try:
        session.store.update_route(index, **payload.model_dump(exclude_unset=True))
    except EditorError as exc:
        raise to_http_exception(exc) from exc
    return _route_response(session, index)


@router.delete("/{index}", response_model=SelectionModel, status_code=status.HTTP_200_OK)
def delete_route(index: int, session: EditorSession = Depends(get_session)) -> SelectionModel:
    try:
        session.store.delete_route(index)
    except EditorError as exc:
        raise to_http_exception(exc) from exc
    return selection_model(session.store.selection)


@router.post("/deselect", response_model=SelectionModel, status_code=status.HTTP_200_OK)
def deselect_route(session: EditorSession = Depends(get_session)) -> SelectionModel:
    return selection_model(session.store.select_route(None))


@router.post("/{index}/select", response_model=SelectionModel, status_code=status.HTTP_200_OK)
def select_route(index: int, session: EditorSession = Depends(get_session)) -> SelectionModel:
    try:
        selection = session.store.select_route(index)
    except EditorError as exc:
        raise to_http_exception(exc) from exc
    return selection_model(selection)


@router.get("/{index}", response_model=RouteResponse, status_code=status.HTTP_200_OK)
def get_route(index: int, session: EditorSession = Depends(get_session)) -> RouteResponse:
    if not 0 <= index < len(session.store.dataset.routes):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Route {index} not found")
    return _route_response(session, index)
