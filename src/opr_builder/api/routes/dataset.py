"""Dataset endpoints: city form, selection, JSON import and export."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response

from ...schemas.editing import (
    CityUpdate,
    EditorStateResponse,
    ImportRequest,
    ImportResponse,
    SelectionModel,
)
from ...services.editing.errors import EditorError
from ...services.exchange import export_dataset, export_filename
from ...services.session import EditorSession
from ..deps import get_session, selection_model, to_http_exception

router = APIRouter(tags=["dataset"])


@router.get("/dataset", response_model=EditorStateResponse, status_code=status.HTTP_200_OK)
def get_dataset(session: EditorSession = Depends(get_session)) -> EditorStateResponse:
    store = session.store
    return EditorStateResponse(dataset=store.dataset, selection=selection_model(store.selection))


@router.patch("/dataset/city", response_model=EditorStateResponse, status_code=status.HTTP_200_OK)
def update_city(payload: CityUpdate, session: EditorSession = Depends(get_session)) -> EditorStateResponse:
    store = session.store
    store.update_city(**payload.model_dump(exclude_unset=True))
    return EditorStateResponse(dataset=store.dataset, selection=selection_model(store.selection))


@router.get("/selection", response_model=SelectionModel, status_code=status.HTTP_200_OK)
def get_selection(session: EditorSession = Depends(get_session)) -> SelectionModel:
    return selection_model(session.store.selection)


@router.get("/dataset/export", status_code=status.HTTP_200_OK)
def export(session: EditorSession = Depends(get_session)) -> Response:
    """Pretty-printed dataset document offered as a file download."""
    dataset = session.store.dataset
    return Response(
        content=export_dataset(dataset),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(dataset)}"'},
    )


@router.post("/dataset/import", response_model=ImportResponse, status_code=status.HTTP_200_OK)
def import_json(payload: ImportRequest, session: EditorSession = Depends(get_session)) -> ImportResponse:
    """Replace the dataset with the pasted document.

    Waypoints with a zero coordinate are geocoded one by one before the
    swap. Nothing changes when the document cannot be parsed.
    """
    try:
        summary = session.import_json(payload.text)
    except EditorError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:
        logging.exception(f"Error importing dataset: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to import dataset: {str(exc)}",
        ) from exc

    return ImportResponse(
        enriched_count=summary.enriched_count,
        message=summary.message,
        dataset=session.store.dataset,
        selection=selection_model(session.store.selection),
    )
