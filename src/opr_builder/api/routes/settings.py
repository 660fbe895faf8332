"""Settings endpoints for the geocoding/map credential."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...schemas.editing import ApiKeyUpdate, SettingsResponse
from ...services.session import EditorSession
from ..deps import get_session

router = APIRouter(prefix="/settings", tags=["settings"])


def _mask(api_key: str) -> str | None:
    if not api_key:
        return None
    if len(api_key) <= 8:
        return "*" * len(api_key)
    return f"{api_key[:4]}...{api_key[-4:]}"


def _settings_response(session: EditorSession) -> SettingsResponse:
    api_key = session.store.api_key
    return SettingsResponse(
        api_key_configured=bool(api_key),
        api_key_preview=_mask(api_key),
        directions_configured=session.bridge.directions is not None,
        max_waypoints_per_route=session.store.max_waypoints_per_route,
    )


@router.get("", response_model=SettingsResponse, status_code=status.HTTP_200_OK)
def get_settings(session: EditorSession = Depends(get_session)) -> SettingsResponse:
    return _settings_response(session)


@router.put("/api-key", response_model=SettingsResponse, status_code=status.HTTP_200_OK)
def set_api_key(payload: ApiKeyUpdate, session: EditorSession = Depends(get_session)) -> SettingsResponse:
    session.store.set_api_key(payload.api_key)
    return _settings_response(session)
