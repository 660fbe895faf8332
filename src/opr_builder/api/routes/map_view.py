"""Map view endpoints: projection, gestures and place search."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...schemas.map import (
    CameraModel,
    CameraPanEvent,
    CoordinateModel,
    DragEndEvent,
    MapViewResponse,
    MarkerClickEvent,
    MarkerModel,
    RouteLineModel,
    SearchResponse,
    SearchResultModel,
    SearchSelectRequest,
    SetCityModeRequest,
)
from ...services.editing.errors import EditorError
from ...services.mapsync.canvas import ViewStateCanvas
from ...services.session import EditorSession
from ..deps import get_session, to_http_exception

router = APIRouter(prefix="/map", tags=["map"])


def _marker_model(marker) -> MarkerModel:
    return MarkerModel(
        marker_id=marker.marker_id,
        latitude=marker.latitude,
        longitude=marker.longitude,
        label=marker.label,
        color=marker.color,
        draggable=marker.draggable,
    )


def _map_view(session: EditorSession) -> MapViewResponse:
    bridge = session.bridge
    canvas = bridge.canvas
    if not isinstance(canvas, ViewStateCanvas):
        raise HTTPException(
            status_code=status.HTTP_501_NOT_IMPLEMENTED,
            detail="The active map canvas does not expose a view state.",
        )

    geometry = bridge.route_geometry
    return MapViewResponse(
        markers=[_marker_model(marker) for marker in canvas.markers],
        city_marker=_marker_model(canvas.city_marker) if canvas.city_marker else None,
        set_city_mode=bridge.set_city_mode,
        camera=(
            CameraModel(latitude=canvas.camera.latitude, longitude=canvas.camera.longitude, zoom=canvas.camera.zoom)
            if canvas.camera
            else None
        ),
        map_center=CoordinateModel(latitude=bridge.map_center.latitude, longitude=bridge.map_center.longitude),
        route_line=RouteLineModel(
            coordinates=canvas.route_line,
            distance_m=geometry.distance_m if geometry else None,
            duration_s=geometry.duration_s if geometry else None,
        ),
    )


@router.get("", response_model=MapViewResponse, status_code=status.HTTP_200_OK)
def get_map_view(session: EditorSession = Depends(get_session)) -> MapViewResponse:
    return _map_view(session)


@router.post("/drag-end", response_model=MapViewResponse, status_code=status.HTTP_200_OK)
def drag_end(payload: DragEndEvent, session: EditorSession = Depends(get_session)) -> MapViewResponse:
    try:
        handled = session.bridge.handle_drag_end(payload.marker_id, payload.latitude, payload.longitude)
    except EditorError as exc:
        raise to_http_exception(exc) from exc
    if not handled:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Marker '{payload.marker_id}' is unknown or not draggable right now",
        )
    return _map_view(session)


@router.post("/marker-click", response_model=MapViewResponse, status_code=status.HTTP_200_OK)
def marker_click(payload: MarkerClickEvent, session: EditorSession = Depends(get_session)) -> MapViewResponse:
    try:
        handled = session.bridge.handle_marker_click(payload.marker_id)
    except EditorError as exc:
        raise to_http_exception(exc) from exc
    if not handled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown marker '{payload.marker_id}'")
    return _map_view(session)


@router.post("/camera", response_model=CoordinateModel, status_code=status.HTTP_200_OK)
def camera_pan(payload: CameraPanEvent, session: EditorSession = Depends(get_session)) -> CoordinateModel:
    center = session.bridge.handle_camera_pan(payload.latitude, payload.longitude)
    return CoordinateModel(latitude=center.latitude, longitude=center.longitude)


@router.post("/set-city-mode", response_model=MapViewResponse, status_code=status.HTTP_200_OK)
def set_city_mode(payload: SetCityModeRequest, session: EditorSession = Depends(get_session)) -> MapViewResponse:
    session.bridge.toggle_set_city_mode(payload.enabled)
    return _map_view(session)


@router.get("/search", response_model=SearchResponse, status_code=status.HTTP_200_OK)
async def search(
    q: str = Query(default="", description="Free-text place query"),
    session: EditorSession = Depends(get_session),
) -> SearchResponse:
    """Debounced place search; superseded requests come back flagged ``stale``."""
    outcome = await session.search(q)
    return SearchResponse(
        request_id=outcome.request_id,
        query=outcome.query,
        stale=outcome.stale,
        skipped=outcome.skipped,
        results=[
            SearchResultModel(
                display_name=result.display_name,
                short_label=result.short_label,
                latitude=result.latitude,
                longitude=result.longitude,
            )
            for result in outcome.results
        ],
    )


@router.post("/search/select", response_model=CameraModel, status_code=status.HTTP_200_OK)
def select_search_result(payload: SearchSelectRequest, session: EditorSession = Depends(get_session)) -> CameraModel:
    try:
        target = session.select_search_result(payload.index)
    except IndexError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return CameraModel(latitude=target.latitude, longitude=target.longitude, zoom=target.zoom)
