"""HTTP client for the Mapbox place-search (forward geocoding) service."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from ...config import settings
from ...models.domain import Coordinate
from .models import GeocodingResult

logger = logging.getLogger(__name__)


class GeocodingClient:
    """Text query in, ranked coordinates out.

    ``search`` never raises: transport, HTTP and payload errors are logged
    and reported as an empty result list.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        limit: int | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.geocoding_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.geocoding_timeout_seconds
        self.limit = limit or settings.geocoding_result_limit
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=5.0),
            transport=self._transport,
        )

    def search(
        self,
        api_key: str,
        query: str,
        proximity: Coordinate | None = None,
    ) -> list[GeocodingResult]:
        if not api_key or not query.strip():
            return []

        url = f"{self.base_url}/{quote(query, safe='')}.json"
        params: dict[str, Any] = {"access_token": api_key, "limit": self.limit}
        if proximity is not None:
            params["proximity"] = f"{proximity.longitude},{proximity.latitude}"

        client = self._get_client()
        try:
            response = client.get(url, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(f"Geocoding request for '{query}' failed with HTTP {exc.response.status_code}")
            return []
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(f"Geocoding request for '{query}' failed: {exc}")
            return []
        finally:
            client.close()

        return self._parse_features(payload)[: self.limit]

    @staticmethod
    def _parse_features(payload: Any) -> list[GeocodingResult]:
        if not isinstance(payload, dict):
            return []
        features = payload.get("features") or []
        if not isinstance(features, list):
            return []

        results: list[GeocodingResult] = []
        for feature in features:
            try:
                longitude, latitude = feature["center"][:2]
                results.append(
                    GeocodingResult(
                        display_name=str(feature.get("place_name", "")),
                        short_label=str(feature.get("text", "")),
                        longitude=float(longitude),
                        latitude=float(latitude),
                    )
                )
            except (KeyError, TypeError, ValueError) as exc:
                logger.debug(f"Skipping malformed geocoding feature: {exc}")
                continue
        return results


def check_health(api_key: str | None) -> bool:
    """Return True when a geocoding credential is available."""
    return bool(api_key and api_key.strip())
