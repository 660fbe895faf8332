"""Debounced free-text place search for the map search box."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from ...config import settings
from ...models.domain import Coordinate
from .models import GeocodingResult

logger = logging.getLogger(__name__)

SearchFunction = Callable[[str, str, Optional[Coordinate]], list[GeocodingResult]]


@dataclass(frozen=True, slots=True)
class SearchOutcome:
    request_id: int
    query: str
    results: tuple[GeocodingResult, ...] = ()
    stale: bool = False
    skipped: bool = False


class SearchDebouncer:
    """Runs place searches after a quiet period, keeping only the newest answer.

    Every submitted keystroke gets a monotonically increasing request id. A
    request that is superseded while waiting out the quiet period, or while
    its lookup is in flight, comes back with ``stale=True`` and never replaces
    ``latest``. Queries shorter than ``min_query_length`` clear the results
    without calling the search service.
    """

    def __init__(
        self,
        search: SearchFunction,
        quiet_seconds: float | None = None,
        min_query_length: int | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._search = search
        self.quiet_seconds = quiet_seconds if quiet_seconds is not None else settings.search_debounce_seconds
        self.min_query_length = min_query_length or settings.search_min_query_length
        self._sleep = sleep
        self._latest_request_id = 0
        self.latest: SearchOutcome | None = None

    @property
    def latest_request_id(self) -> int:
        return self._latest_request_id

    def _is_current(self, request_id: int) -> bool:
        return request_id == self._latest_request_id

    async def submit(self, api_key: str, query: str, proximity: Coordinate | None = None) -> SearchOutcome:
        self._latest_request_id += 1
        request_id = self._latest_request_id

        if len(query) < self.min_query_length or not api_key:
            outcome = SearchOutcome(request_id=request_id, query=query, skipped=True)
            self.latest = outcome
            return outcome

        await self._sleep(self.quiet_seconds)
        if not self._is_current(request_id):
            return SearchOutcome(request_id=request_id, query=query, stale=True)

        results = await asyncio.to_thread(self._search, api_key, query, proximity)
        if not self._is_current(request_id):
            logger.debug(f"Discarding stale search results for '{query}' (request {request_id})")
            return SearchOutcome(request_id=request_id, query=query, stale=True)

        outcome = SearchOutcome(request_id=request_id, query=query, results=tuple(results))
        self.latest = outcome
        return outcome

    def clear(self) -> None:
        """Forget the published results and invalidate anything in flight."""
        self._latest_request_id += 1
        self.latest = None
