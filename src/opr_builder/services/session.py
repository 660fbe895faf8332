"""Wires the store, map bridge and external clients into one editing session."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from ..config import settings
from ..models.domain import CameraTarget, Coordinate
from ..persistence.storage import FileStorage, KeyValueStorage
from .editing.store import EditorStore
from .exchange.importer import Geocoder, ImportSummary, import_dataset
from .geocoding.client import GeocodingClient
from .geocoding.search import SearchDebouncer, SearchOutcome
from .mapsync.bridge import DirectionsProvider, MapSyncBridge
from .mapsync.canvas import MapCanvas, ViewStateCanvas
from .routing.osrm_client import OSRMClient

logger = logging.getLogger(__name__)


class EditorSession:
    def __init__(
        self,
        store: EditorStore,
        bridge: MapSyncBridge,
        geocoder: Geocoder,
        search: SearchDebouncer,
    ) -> None:
        self.store = store
        self.bridge = bridge
        self.geocoder = geocoder
        self.search_box = search

    @classmethod
    def create(
        cls,
        storage: KeyValueStorage | None = None,
        geocoder: Geocoder | None = None,
        directions: DirectionsProvider | None = None,
        canvas: MapCanvas | None = None,
    ) -> "EditorSession":
        store = EditorStore(storage or FileStorage(), fallback_api_key=settings.mapbox_api_key)
        if directions is None and settings.osrm_base_url:
            directions = OSRMClient()
        # Directions lookups never hold up an edit; they are applied when they arrive.
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="route-line") if directions is not None else None
        bridge = MapSyncBridge(store, canvas or ViewStateCanvas(), directions=directions, executor=executor)
        geocoder = geocoder or GeocodingClient()
        return cls(store=store, bridge=bridge, geocoder=geocoder, search=SearchDebouncer(geocoder.search))

    @property
    def city_coordinate(self) -> Coordinate:
        dataset = self.store.dataset
        return Coordinate(latitude=dataset.latitude, longitude=dataset.longitude)

    def add_waypoint_at_map_center(self) -> Optional[int]:
        center = self.bridge.map_center
        return self.store.add_waypoint(center.latitude, center.longitude)

    def import_json(self, raw_text: str) -> ImportSummary:
        """Import a dataset document, replacing the current one only on success."""
        summary = import_dataset(raw_text, self.geocoder, self.store.api_key)
        self.store.replace_dataset(summary.dataset)
        return summary

    async def search(self, query: str) -> SearchOutcome:
        return await self.search_box.submit(self.store.api_key, query, self.city_coordinate)

    def select_search_result(self, index: int) -> CameraTarget:
        latest = self.search_box.latest
        results = latest.results if latest is not None else ()
        if not 0 <= index < len(results):
            raise IndexError(f"search result index {index} out of range")
        target = self.bridge.focus_search_result(results[index])
        self.search_box.clear()
        return target
