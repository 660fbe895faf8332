"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...services.session import EditorSession
from ..deps import get_session

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


def _get_osrm_health_check():
    """Lazy import to avoid startup failures."""
    from ...services.routing.osrm_client import check_health as osrm_health_check
    return osrm_health_check


@router.get("/health/osrm", status_code=status.HTTP_200_OK)
def health_osrm() -> dict:
    """Check OSRM service health."""
    osrm_health_check = _get_osrm_health_check()
    return {"service": "osrm", "healthy": osrm_health_check()}


@router.get("/health/geocoding", status_code=status.HTTP_200_OK)
def health_geocoding(session: EditorSession = Depends(get_session)) -> dict:
    """Report whether place search and import geocoding are enabled."""
    from ...services.geocoding.client import check_health as geocoding_health_check

    configured = geocoding_health_check(session.store.api_key)
    return {
        "service": "geocoding",
        "configured": configured,
        "message": "Geocoding enabled." if configured else "No API key configured; search and import geocoding are disabled.",
    }
